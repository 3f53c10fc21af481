# huntbot/utils/reply.py
from __future__ import annotations

from aiogram.types import Message

from huntbot.keyboards.main import main_menu_kb


async def reply_safe(message: Message, text: str, **kwargs) -> None:
    """
    Reply helper:
    - menu keyboard only in private chats
    - HTML by default
    """
    if message.chat.type == "private":
        kwargs.setdefault("reply_markup", main_menu_kb())
    else:
        kwargs.setdefault("reply_markup", None)
    kwargs.setdefault("parse_mode", "HTML")

    await message.answer(text, **kwargs)
