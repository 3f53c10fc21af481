# huntbot/database/models/inbox.py
from __future__ import annotations

import enum
from datetime import datetime

from sqlalchemy import Boolean, DateTime, Enum, ForeignKey, Index, String
from sqlalchemy.orm import Mapped, mapped_column

from huntbot.database.base import Base


class InboxMessageType(str, enum.Enum):
    DROP = "drop"
    CONTEST_WARNING = "contest_warning"
    CONTEST_ALERT = "contest_alert"
    CONTEST_CAPTURE = "contest_capture"
    CONTEST_CAPTURED = "contest_captured"


CONTEST_MESSAGE_TYPES = frozenset(
    {
        InboxMessageType.CONTEST_WARNING,
        InboxMessageType.CONTEST_ALERT,
        InboxMessageType.CONTEST_CAPTURE,
        InboxMessageType.CONTEST_CAPTURED,
    }
)


class InboxMessage(Base):
    """
    One-way notification. Append-only apart from the `read` marker.
    """
    __tablename__ = "inbox_messages"
    __table_args__ = (
        # alert cooldown lookup: latest (recipient, sender, type)
        Index("ix_inbox_pair_type_time", "recipient_id", "sender_id", "type", "created_at"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)

    recipient_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), index=True)
    sender_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), index=True)
    post_id: Mapped[int | None] = mapped_column(
        ForeignKey("posts.id", ondelete="CASCADE"),
        nullable=True,
    )

    type: Mapped[InboxMessageType] = mapped_column(
        Enum(InboxMessageType, native_enum=False),
        default=InboxMessageType.DROP,
    )
    message: Mapped[str | None] = mapped_column(String(512), nullable=True)

    read: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    # set explicitly from the engine clock, not server_default
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=False), index=True)
