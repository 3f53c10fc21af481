# huntbot/handlers/user/posts.py
from __future__ import annotations

import html
import logging

from aiogram import F, Router
from aiogram.types import Message
from sqlalchemy.ext.asyncio import AsyncSession

from huntbot.database.models import User
from huntbot.database.repo.users import get_user_by_username
from huntbot.services.contest import (
    ChallengeMismatchError,
    ContestEngine,
    ContestError,
    NotAHunterError,
    NotAnActiveGhostError,
)
from huntbot.services.posts import PostService
from huntbot.utils.capture_parser import parse_post_caption
from huntbot.utils.reply import reply_safe

log = logging.getLogger(__name__)
router = Router()

REJECTION_TEXT: dict[str, str] = {
    ChallengeMismatchError.reason: "❌ <b>Wrong challenge.</b> Check /contest for this week's challenge.",
    NotAHunterError.reason: "❌ <b>Only hunters can capture.</b> You are not a hunter this week.",
    NotAnActiveGhostError.reason: "❌ <b>Not an active ghost.</b> That person is not a ghost or was already caught.",
}


@router.message(F.photo)
async def photo_drop(
    message: Message,
    session: AsyncSession,
    db_user: User,
    contest: ContestEngine,
) -> None:
    if message.chat.type != "private":
        return

    try:
        parsed = parse_post_caption(message.caption)
    except ValueError as e:
        await reply_safe(message, f"⚠️ {html.escape(str(e))}")
        return

    recipient: User | None = None
    if parsed.recipient_username:
        recipient = await get_user_by_username(session, parsed.recipient_username)
        if recipient is None:
            await reply_safe(message, f"⚠️ @{html.escape(parsed.recipient_username)} has not started the bot yet.")
            return

    try:
        res = await PostService.create_post(
            session,
            contest,
            author_id=db_user.id,
            image_file_id=message.photo[-1].file_id,
            recipient_id=recipient.id if recipient else None,
            caption=parsed.text or None,
            capture=parsed.capture,
            claimed_challenge=parsed.claimed_challenge,
        )
    except ContestError as e:
        await reply_safe(message, REJECTION_TEXT.get(e.reason, "❌ Capture rejected."))
        return

    if res.capture is not None:
        await reply_safe(
            message,
            "📸 <b>Capture confirmed!</b>\n"
            f"• Ghost: <b>{html.escape(recipient.display_name)}</b>\n"
            f"• Your captures this week: <b>{res.capture.hunter.captures}</b>",
        )
        return

    who = f" for {html.escape(recipient.display_name)}" if recipient else ""
    await reply_safe(message, f"📷 Drop posted{who}.")
