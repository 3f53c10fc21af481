from __future__ import annotations

from itertools import count
from random import Random

import pytest

from helpers import CHALLENGE, MONDAY_NOON, FrozenClock
from huntbot.database.models import User
from huntbot.database.session import Database
from huntbot.services.contest import ContestEngine, ContestRules

_telegram_ids = count(1000)


@pytest.fixture()
async def db():
    database = Database("sqlite+aiosqlite:///:memory:")
    await database.init_models()
    yield database
    await database.close()


@pytest.fixture()
async def session(db: Database):
    async with db.SessionLocal() as s:
        yield s


@pytest.fixture()
def clock() -> FrozenClock:
    return FrozenClock(MONDAY_NOON)


@pytest.fixture()
def rules() -> ContestRules:
    # single-entry catalog so the active challenge is known
    return ContestRules(challenges=(CHALLENGE,))


@pytest.fixture()
def engine(session, clock: FrozenClock, rules: ContestRules) -> ContestEngine:
    return ContestEngine.for_session(session, rules=rules, clock=clock, rng=Random(42))


@pytest.fixture()
def make_user(session):
    async def _make(username: str | None = None, *, opted_out: bool = False) -> User:
        user = User(
            telegram_id=next(_telegram_ids),
            username=username,
            first_name=(username or "anon").title(),
            contest_opt_out=opted_out,
        )
        session.add(user)
        await session.flush()
        return user

    return _make
