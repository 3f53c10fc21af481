# huntbot/database/models/contest.py
from __future__ import annotations

import enum
from datetime import datetime

from sqlalchemy import (
    Boolean,
    DateTime,
    Enum,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column

from huntbot.database.base import Base


class ContestRole(str, enum.Enum):
    HUNTER = "hunter"
    GHOST = "ghost"


class ContestWeek(Base):
    """
    One row per weekly window (unique starts_at). Created lazily, never updated.
    """
    __tablename__ = "contest_weeks"
    __table_args__ = (
        UniqueConstraint("starts_at", name="uq_contest_weeks_starts_at"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)

    starts_at: Mapped[datetime] = mapped_column(DateTime(timezone=False))
    ends_at: Mapped[datetime] = mapped_column(DateTime(timezone=False))
    challenge: Mapped[str] = mapped_column(String(256))

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=False))


class ContestAssignment(Base):
    """
    One row per (contest, user). Role never changes once written;
    the row is deleted when the user opts out.
    """
    __tablename__ = "contest_assignments"
    __table_args__ = (
        UniqueConstraint("contest_id", "user_id", name="uq_contest_assignments_contest_user"),
        Index("ix_contest_assignments_contest_role", "contest_id", "role"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)

    contest_id: Mapped[int] = mapped_column(ForeignKey("contest_weeks.id", ondelete="CASCADE"), index=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), index=True)

    role: Mapped[ContestRole] = mapped_column(Enum(ContestRole, native_enum=False))

    # hunter only
    captures: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    # ghost only: true until captured, then latched false for the week
    survived: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    camping_violation: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    last_lat: Mapped[float | None] = mapped_column(Float, nullable=True)
    last_lng: Mapped[float | None] = mapped_column(Float, nullable=True)
    last_move_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=False), nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=False))

    @property
    def is_hunter(self) -> bool:
        return self.role == ContestRole.HUNTER

    @property
    def is_active_ghost(self) -> bool:
        return self.role == ContestRole.GHOST and bool(self.survived)


class ContestCapture(Base):
    """
    Immutable capture ledger.
    """
    __tablename__ = "contest_captures"
    __table_args__ = (
        Index("ix_contest_captures_contest_hunter", "contest_id", "hunter_id"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)

    contest_id: Mapped[int] = mapped_column(ForeignKey("contest_weeks.id", ondelete="CASCADE"), index=True)
    hunter_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), index=True)
    ghost_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), index=True)

    # evidence reference
    post_id: Mapped[int | None] = mapped_column(ForeignKey("posts.id", ondelete="SET NULL"), nullable=True)
    challenge: Mapped[str] = mapped_column(String(256))

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=False))
