# huntbot/database/repo/users.py
from __future__ import annotations

from datetime import datetime
from typing import Optional

from aiogram.types import TelegramObject
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from huntbot.database.models.user import User


def _extract_from_user(event: TelegramObject):
    """
    Best-effort extract aiogram `from_user` from different update types.
    Works for Message, edited (live location) Message, CallbackQuery, etc.
    """
    u = getattr(event, "from_user", None)
    if u:
        return u

    for attr in ("message", "edited_message", "callback_query"):
        nested = getattr(event, attr, None)
        if nested and getattr(nested, "from_user", None):
            return nested.from_user

    return None


async def upsert_user_from_event(session: AsyncSession, event: TelegramObject) -> Optional[User]:
    tg = _extract_from_user(event)
    if tg is None:
        return None

    res = await session.execute(select(User).where(User.telegram_id == tg.id))
    user = res.scalar_one_or_none()

    if user is None:
        user = User(
            telegram_id=tg.id,
            username=tg.username,
            first_name=tg.first_name,
            last_name=tg.last_name,
        )
        session.add(user)
        await session.flush()  # ensures `user.id` exists before handlers use it
        return user

    # Keep DB fresh
    user.username = tg.username
    user.first_name = tg.first_name
    user.last_name = tg.last_name
    return user


async def get_user_by_username(session: AsyncSession, username: str) -> Optional[User]:
    name = username.strip().lstrip("@")
    if not name:
        return None
    res = await session.execute(select(User).where(func.lower(User.username) == name.lower()))
    return res.scalars().first()


async def get_users_by_ids(session: AsyncSession, user_ids: list[int]) -> dict[int, User]:
    if not user_ids:
        return {}
    res = await session.execute(select(User).where(User.id.in_(user_ids)))
    return {u.id: u for u in res.scalars().all()}


async def list_eligible_users(session: AsyncSession) -> list[User]:
    """Everyone not in opt-out mode, ordered by id (stable input for the partition shuffle)."""
    res = await session.execute(
        select(User).where(User.contest_opt_out.is_(False)).order_by(User.id.asc())
    )
    return list(res.scalars().all())


async def list_opted_out_ids(session: AsyncSession) -> set[int]:
    res = await session.execute(select(User.id).where(User.contest_opt_out.is_(True)))
    return {int(x) for x in res.scalars().all()}


async def set_location(
    session: AsyncSession,
    user: User,
    *,
    lat: float,
    lng: float,
    at: datetime,
) -> None:
    user.location_lat = lat
    user.location_lng = lng
    user.location_updated_at = at
    await session.flush()


async def set_opt_out(session: AsyncSession, user: User, opted_out: bool) -> bool:
    """Returns True if the flag changed."""
    if bool(user.contest_opt_out) == opted_out:
        return False
    user.contest_opt_out = opted_out
    await session.flush()
    return True
