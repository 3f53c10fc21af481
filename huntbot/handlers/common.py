# huntbot/handlers/common.py
from __future__ import annotations

from aiogram import Router
from aiogram.filters import Command, CommandStart
from aiogram.types import Message

from huntbot.utils.reply import reply_safe

router = Router(name="common")


@router.message(CommandStart())
async def cmd_start(message: Message) -> None:
    await reply_safe(
        message,
        "👋 Welcome to <b>Hunters vs Ghosts</b>!\n\n"
        "Every week (Sunday 20:00 UTC) everyone is split into hunters and ghosts.\n"
        "Use /help to see commands.",
    )


@router.message(Command("help"))
async def cmd_help(message: Message) -> None:
    await reply_safe(
        message,
        "📌 Available commands:\n"
        "/contest — this week's challenge + your role\n"
        "/hunters — capture leaderboard\n"
        "/inbox — contest alerts and warnings\n"
        "/optout — leave the contest\n"
        "/optin — join again\n\n"
        "Share your (live) location to play.\n"
        "Hunters capture with a photo captioned <code>#capture @ghost | challenge</code>.",
    )
