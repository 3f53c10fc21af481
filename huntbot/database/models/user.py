# huntbot/database/models/user.py
from __future__ import annotations

from datetime import datetime

from sqlalchemy import BigInteger, Boolean, DateTime, Float, String, func
from sqlalchemy.orm import Mapped, mapped_column

from huntbot.database.base import Base


def format_display_name(username: str | None, first_name: str | None, last_name: str | None) -> str:
    if username:
        return f"@{username}"
    name = " ".join([p for p in [first_name, last_name] if p])
    return name.strip() or "User"


class User(Base):
    """
    User directory row. The contest engine only reads the eligibility flag
    (`contest_opt_out`) and, when seeding a new assignment, the last reported location.
    """
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(primary_key=True)
    telegram_id: Mapped[int] = mapped_column(BigInteger, unique=True, index=True)

    username: Mapped[str | None] = mapped_column(String(64), nullable=True, index=True)
    first_name: Mapped[str | None] = mapped_column(String(128), nullable=True)
    last_name: Mapped[str | None] = mapped_column(String(128), nullable=True)

    # opt-out mode: excluded from the contest entirely while set
    contest_opt_out: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False, index=True)

    location_lat: Mapped[float | None] = mapped_column(Float, nullable=True)
    location_lng: Mapped[float | None] = mapped_column(Float, nullable=True)
    location_updated_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=False), nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=False), server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=False),
        server_default=func.now(),
        onupdate=func.now(),
    )

    @property
    def display_name(self) -> str:
        return format_display_name(self.username, self.first_name, self.last_name)
