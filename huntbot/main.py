# huntbot/main.py
import asyncio
import logging

from aiogram import Bot, Dispatcher
from aiogram.client.default import DefaultBotProperties
from aiogram.enums import ParseMode

from huntbot.config import Settings
from huntbot.database.session import Database
from huntbot.handlers.router import router as handlers_router
from huntbot.utils.middleware import DbSessionMiddleware


def setup_logging(is_dev: bool) -> None:
    """
    Clean production logging:
    - app logs: INFO (or DEBUG in dev)
    - SQLAlchemy logs: WARNING+ (no query/pool spam)
    """
    app_level = logging.DEBUG if is_dev else logging.INFO

    logging.basicConfig(
        level=app_level,
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    )

    for name in (
        "sqlalchemy",
        "sqlalchemy.engine",
        "sqlalchemy.pool",
        "sqlalchemy.orm",
        "aiosqlite",
    ):
        logging.getLogger(name).setLevel(logging.WARNING)


async def main() -> None:
    settings = Settings.load()
    setup_logging(settings.is_dev)
    log = logging.getLogger("huntbot")

    db = Database(settings.database_url)
    await db.init_models()
    log.info("DB initialized")

    bot = Bot(
        token=settings.bot_token,
        default=DefaultBotProperties(parse_mode=ParseMode.HTML),
    )

    dp = Dispatcher()
    dp.workflow_data["settings"] = settings
    dp.workflow_data["db"] = db

    # DB session + contest engine per update
    dp.update.middleware(DbSessionMiddleware(db, settings))

    dp.include_router(handlers_router)

    try:
        await dp.start_polling(bot)
    except (asyncio.CancelledError, KeyboardInterrupt):
        pass
    except Exception:
        log.exception("Bot crashed")
        raise
    finally:
        try:
            await db.close()
        except Exception:
            log.exception("Failed to close DB")

        try:
            await bot.session.close()
        except Exception:
            log.exception("Failed to close bot session")


def run() -> None:
    asyncio.run(main())


if __name__ == "__main__":
    run()
