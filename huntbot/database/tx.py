# huntbot/database/tx.py
from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator

from sqlalchemy.ext.asyncio import AsyncSession


@asynccontextmanager
async def transactional(session: AsyncSession) -> AsyncIterator[None]:
    """
    Unit of work for engine writes.

    - Inside an open transaction: SAVEPOINT, so a failure only undoes this block
    - Otherwise: a fresh transaction committed on exit
    """
    if session.in_transaction():
        async with session.begin_nested():
            yield
    else:
        async with session.begin():
            yield
