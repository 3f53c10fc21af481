# huntbot/handlers/user/location.py
from __future__ import annotations

import logging

from aiogram import F, Router
from aiogram.types import Message
from sqlalchemy.ext.asyncio import AsyncSession

from huntbot.database.models import ContestRole, User
from huntbot.database.repo.users import set_location
from huntbot.services.contest import ContestEngine

log = logging.getLogger(__name__)
router = Router()


async def _apply_location(message: Message, session: AsyncSession, db_user: User, contest: ContestEngine):
    loc = message.location
    await set_location(session, db_user, lat=loc.latitude, lng=loc.longitude, at=contest.clock())
    return await contest.update_location(db_user.id, loc.latitude, loc.longitude)


@router.message(F.location)
async def location_shared(
    message: Message,
    session: AsyncSession,
    db_user: User,
    contest: ContestEngine,
) -> None:
    outcome = await _apply_location(message, session, db_user, contest)

    if not outcome.participant:
        await message.answer("📍 Location saved. You are not in this week's contest.")
        return

    if outcome.role == ContestRole.GHOST:
        if outcome.camping_cleared:
            text = "👻 Nice move! Your camping flag is cleared."
        elif outcome.camping_flagged:
            text = "⚠️ Camping flagged. Move at least a block to clear it."
        else:
            text = "👻 Location updated. Stay hidden!"
    else:
        text = (
            f"🎯 Location updated. {len(outcome.alerts)} ghost(s) nearby!"
            if outcome.alerts
            else "🎯 Location updated. No new ghosts nearby."
        )

    # live location: share once, the edits below keep streaming
    await message.answer(text)


@router.edited_message(F.location)
async def live_location_moved(
    message: Message,
    session: AsyncSession,
    db_user: User,
    contest: ContestEngine,
) -> None:
    # edits of a live location are silent; alerts go out as notifications
    outcome = await _apply_location(message, session, db_user, contest)
    log.debug(
        "Live location: user_id=%s participant=%s alerts=%s",
        db_user.id,
        outcome.participant,
        len(outcome.alerts),
    )
