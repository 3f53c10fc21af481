# huntbot/handlers/user/inbox.py
from __future__ import annotations

import html

from aiogram import F, Router
from aiogram.filters import Command
from aiogram.types import Message
from sqlalchemy.ext.asyncio import AsyncSession

from huntbot.database.models import CONTEST_MESSAGE_TYPES, User
from huntbot.database.repo.inbox_repo import list_recent, mark_read
from huntbot.keyboards.main import BTN_INBOX
from huntbot.utils.reply import reply_safe

router = Router()


@router.message(F.text == BTN_INBOX)
@router.message(Command("inbox"))
async def inbox_cmd(message: Message, session: AsyncSession, db_user: User) -> None:
    rows = await list_recent(session, recipient_id=db_user.id, types=CONTEST_MESSAGE_TYPES, limit=10)
    if not rows:
        await reply_safe(message, "📬 No contest messages yet.")
        return

    lines = ["📬 <b>Contest inbox</b>", ""]
    for row in rows:
        marker = "•" if row.read else "🆕"
        lines.append(f"{marker} <i>{row.created_at:%a %H:%M}</i> {html.escape(row.message or row.type.value)}")

    await mark_read(session, recipient_id=db_user.id, message_ids=[r.id for r in rows if not r.read])
    await reply_safe(message, "\n".join(lines))
