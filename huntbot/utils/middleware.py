# huntbot/utils/middleware.py
from __future__ import annotations

import logging
from typing import Any, Awaitable, Callable, Dict

from aiogram import BaseMiddleware
from aiogram.types import TelegramObject

from huntbot.config.settings import Settings
from huntbot.database.repo.users import upsert_user_from_event
from huntbot.database.session import Database
from huntbot.services.contest import ContestEngine, InboxNotificationSink, SqlContestStore

log = logging.getLogger(__name__)


class DbSessionMiddleware(BaseMiddleware):
    """
    Creates a DB session per update and injects it into handler data as `session`.

    Also upserts the current Telegram user (if present) as `db_user` and builds a
    request-scoped `contest` engine over the same session.
    Commits on success, then pushes queued contest notifications; rolls back on error.
    """

    def __init__(self, db: Database, settings: Settings) -> None:
        self.db = db
        self.rules = settings.contest_rules()

    async def __call__(
        self,
        handler: Callable[[TelegramObject, Dict[str, Any]], Awaitable[Any]],
        event: TelegramObject,
        data: Dict[str, Any],
    ) -> Any:
        async with self.db.SessionLocal() as session:
            data["session"] = session

            db_user = await upsert_user_from_event(session, event)
            if db_user is not None:
                data["db_user"] = db_user

            sink = InboxNotificationSink(session)
            data["contest"] = ContestEngine(SqlContestStore(session), sink, rules=self.rules)

            try:
                result = await handler(event, data)
                await session.commit()
            except Exception:
                await session.rollback()
                raise

            bot = data.get("bot")
            if bot is not None and sink.pending:
                await sink.push_pending(bot)
            return result
