from __future__ import annotations

from datetime import datetime, timedelta
from random import Random

from sqlalchemy import func, select

from helpers import assignments_by_user
from huntbot.database.models import ContestWeek
from huntbot.database.repo.contest_repo import create_week_once
from huntbot.services.contest import DEFAULT_CHALLENGES, ContestEngine, ContestRules


async def _week_count(session) -> int:
    return int(await session.scalar(select(func.count(ContestWeek.id))))


async def test_creates_week_for_current_window(engine: ContestEngine, session, rules) -> None:
    week = await engine.ensure_active_week()

    assert week.starts_at == datetime(2026, 10, 18, 20, 0)
    assert week.ends_at == week.starts_at + timedelta(days=7)
    assert week.challenge in rules.challenges
    assert await _week_count(session) == 1


async def test_reuses_existing_week(engine: ContestEngine, session, clock) -> None:
    first = await engine.ensure_active_week()
    clock.advance(days=2)
    second = await engine.ensure_active_week()

    assert second.id == first.id
    assert await _week_count(session) == 1


async def test_boundary_creates_next_week(engine: ContestEngine, session, clock) -> None:
    first = await engine.ensure_active_week()

    clock.now = datetime(2026, 10, 25, 19, 59, 59)
    assert (await engine.ensure_active_week()).id == first.id

    clock.now = datetime(2026, 10, 25, 20, 0, 0)
    nxt = await engine.ensure_active_week()
    assert nxt.id != first.id
    assert nxt.starts_at == datetime(2026, 10, 25, 20, 0)
    assert await _week_count(session) == 2


async def test_challenge_drawn_from_catalog(session, clock) -> None:
    engine = ContestEngine.for_session(session, rules=ContestRules(), clock=clock, rng=Random(3))
    week = await engine.ensure_active_week()
    assert week.challenge in DEFAULT_CHALLENGES


async def test_existing_week_is_returned_not_duplicated(session, clock) -> None:
    starts = datetime(2026, 10, 18, 20, 0)
    created, week = await create_week_once(
        session, starts_at=starts, ends_at=starts + timedelta(days=7), challenge="x", created_at=clock()
    )
    assert created is True

    created_again, same = await create_week_once(
        session, starts_at=starts, ends_at=starts + timedelta(days=7), challenge="y", created_at=clock()
    )
    assert created_again is False
    assert same.id == week.id
    assert same.challenge == "x"


async def test_every_call_resyncs_roles(engine: ContestEngine, session, make_user) -> None:
    await make_user("alice")
    week = await engine.ensure_active_week()
    assert len(await assignments_by_user(session, week)) == 1

    await make_user("bob")
    await engine.ensure_active_week()
    assert len(await assignments_by_user(session, week)) == 2
