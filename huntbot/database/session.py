# huntbot/database/session.py
from __future__ import annotations

from sqlalchemy import event, text
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from huntbot.database.base import Base


def _apply_sqlite_pragmas(dbapi_connection, *, in_memory: bool) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON;")
    if not in_memory:
        cursor.execute("PRAGMA journal_mode=WAL;")
        cursor.execute("PRAGMA synchronous=NORMAL;")
    cursor.execute("PRAGMA busy_timeout=5000;")  # 5s
    cursor.close()


class Database:
    def __init__(self, database_url: str) -> None:
        self.database_url = database_url
        is_sqlite = database_url.startswith("sqlite")
        in_memory = is_sqlite and (":memory:" in database_url or database_url.endswith("://"))

        if in_memory:
            # single shared connection, otherwise every checkout sees an empty DB
            self.engine: AsyncEngine = create_async_engine(
                database_url,
                echo=False,
                poolclass=StaticPool,
            )
        else:
            self.engine = create_async_engine(
                database_url,
                echo=False,
                pool_pre_ping=True,
                connect_args={"timeout": 30} if is_sqlite else {},
            )

        if is_sqlite:
            @event.listens_for(self.engine.sync_engine, "connect")
            def _on_connect(dbapi_connection, _connection_record) -> None:  # type: ignore[no-redef]
                # driver-level autocommit; BEGIN is emitted below so SAVEPOINTs behave
                dbapi_connection.isolation_level = None
                _apply_sqlite_pragmas(dbapi_connection, in_memory=in_memory)

            @event.listens_for(self.engine.sync_engine, "begin")
            def _on_begin(conn) -> None:  # type: ignore[no-redef]
                conn.exec_driver_sql("BEGIN")

        self.SessionLocal = async_sessionmaker(
            bind=self.engine,
            expire_on_commit=False,
            autoflush=False,
            class_=AsyncSession,
        )

    async def init_models(self) -> None:
        # register every table on Base.metadata
        import huntbot.database.models  # noqa: F401

        async with self.engine.begin() as conn:
            await conn.execute(text("SELECT 1"))
            await conn.run_sync(Base.metadata.create_all)

    async def close(self) -> None:
        await self.engine.dispose()
