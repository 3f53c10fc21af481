# huntbot/services/contest/notifications.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Protocol

from aiogram import Bot
from aiogram.exceptions import TelegramAPIError
from sqlalchemy.ext.asyncio import AsyncSession

from huntbot.database.models import InboxMessageType
from huntbot.database.repo import inbox_repo
from huntbot.database.repo.users import get_users_by_ids

log = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class Notification:
    recipient_id: int
    sender_id: int
    type: InboxMessageType
    created_at: datetime
    message: str | None = None
    post_id: int | None = None


class NotificationSink(Protocol):
    async def send(self, notification: Notification) -> None: ...

    async def latest(
        self, *, recipient_id: int, sender_id: int, type: InboxMessageType
    ) -> datetime | None: ...


class InboxNotificationSink:
    """
    Writes notifications to the inbox table. Telegram delivery is deferred to
    `push_pending()`, which the request layer calls after its commit.
    """

    def __init__(self, session: AsyncSession) -> None:
        self.session = session
        self.pending: list[Notification] = []

    async def send(self, notification: Notification) -> None:
        await inbox_repo.add_message(
            self.session,
            recipient_id=notification.recipient_id,
            sender_id=notification.sender_id,
            type=notification.type,
            created_at=notification.created_at,
            message=notification.message,
            post_id=notification.post_id,
        )
        self.pending.append(notification)

    async def latest(
        self, *, recipient_id: int, sender_id: int, type: InboxMessageType
    ) -> datetime | None:
        return await inbox_repo.latest_created_at(
            self.session,
            recipient_id=recipient_id,
            sender_id=sender_id,
            type=type,
        )

    async def push_pending(self, bot: Bot) -> int:
        """Best-effort Telegram push of everything sent so far. Returns delivered count."""
        batch, self.pending = self.pending, []
        if not batch:
            return 0

        users = await get_users_by_ids(self.session, sorted({n.recipient_id for n in batch}))
        delivered = 0
        for n in batch:
            user = users.get(n.recipient_id)
            if user is None or not n.message:
                continue
            try:
                await bot.send_message(user.telegram_id, n.message)
                delivered += 1
            except TelegramAPIError:
                log.warning("Failed to push %s to user_id=%s", n.type.value, n.recipient_id, exc_info=True)
        return delivered
