# huntbot/database/repo/contest_repo.py
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Iterable

from sqlalchemy import delete, desc, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from huntbot.database.models import (
    ContestAssignment,
    ContestCapture,
    ContestRole,
    ContestWeek,
    User,
    format_display_name,
)
from huntbot.database.tx import transactional


@dataclass(frozen=True, slots=True)
class HunterRow:
    user_id: int
    captures: int
    username: str | None
    first_name: str | None
    last_name: str | None

    @property
    def display_name(self) -> str:
        return format_display_name(self.username, self.first_name, self.last_name)


# ------------------------
# Weeks
# ------------------------

async def get_week_by_start(session: AsyncSession, starts_at: datetime) -> ContestWeek | None:
    res = await session.execute(select(ContestWeek).where(ContestWeek.starts_at == starts_at))
    return res.scalar_one_or_none()


async def create_week_once(
    session: AsyncSession,
    *,
    starts_at: datetime,
    ends_at: datetime,
    challenge: str,
    created_at: datetime,
) -> tuple[bool, ContestWeek]:
    """
    Inserts the week for `starts_at` unless it exists.
    A concurrent insert that wins the unique constraint is returned as created=False.
    """
    existing = await get_week_by_start(session, starts_at)
    if existing:
        return False, existing

    week = ContestWeek(starts_at=starts_at, ends_at=ends_at, challenge=challenge, created_at=created_at)
    try:
        async with transactional(session):
            session.add(week)
            await session.flush()
    except IntegrityError:
        # lost the race; the SAVEPOINT is gone, the winner's row is visible
        winner = await get_week_by_start(session, starts_at)
        if winner is None:
            raise
        return False, winner

    return True, week


# ------------------------
# Assignments
# ------------------------

async def list_assignments(session: AsyncSession, contest_id: int) -> list[ContestAssignment]:
    res = await session.execute(
        select(ContestAssignment)
        .where(ContestAssignment.contest_id == contest_id)
        .order_by(ContestAssignment.id.asc())
    )
    return list(res.scalars().all())


async def get_assignment(session: AsyncSession, *, contest_id: int, user_id: int) -> ContestAssignment | None:
    res = await session.execute(
        select(ContestAssignment).where(
            ContestAssignment.contest_id == contest_id,
            ContestAssignment.user_id == user_id,
        )
    )
    return res.scalar_one_or_none()


async def create_assignment_once(
    session: AsyncSession,
    *,
    contest_id: int,
    user_id: int,
    role: ContestRole,
    now: datetime,
    lat: float | None = None,
    lng: float | None = None,
) -> bool:
    """
    Adds one (contest, user) row. Returns False when another request already inserted it.
    """
    row = ContestAssignment(
        contest_id=contest_id,
        user_id=user_id,
        role=role,
        captures=0,
        survived=True,
        camping_violation=False,
        last_lat=lat,
        last_lng=lng,
        last_move_at=now,
        created_at=now,
    )
    try:
        async with transactional(session):
            session.add(row)
            await session.flush()
    except IntegrityError:
        return False
    return True


async def delete_assignments(session: AsyncSession, *, contest_id: int, user_ids: Iterable[int]) -> int:
    ids = list(user_ids)
    if not ids:
        return 0

    res = await session.execute(
        delete(ContestAssignment).where(
            ContestAssignment.contest_id == contest_id,
            ContestAssignment.user_id.in_(ids),
        )
    )
    return int(res.rowcount or 0)


async def mark_ghost_captured(session: AsyncSession, ghost: ContestAssignment) -> bool:
    """
    Flips `survived` to False only while it is still True.
    Returns False when another capture already latched this ghost.
    """
    res = await session.execute(
        update(ContestAssignment)
        .where(
            ContestAssignment.id == ghost.id,
            ContestAssignment.role == ContestRole.GHOST,
            ContestAssignment.survived.is_(True),
        )
        .values(survived=False)
        .execution_options(synchronize_session=False)
    )
    if res.rowcount != 1:
        return False

    await session.refresh(ghost)
    return True


async def increment_captures(session: AsyncSession, hunter: ContestAssignment) -> int:
    await session.execute(
        update(ContestAssignment)
        .where(ContestAssignment.id == hunter.id)
        .values(captures=ContestAssignment.captures + 1)
        .execution_options(synchronize_session=False)
    )
    await session.refresh(hunter)
    return int(hunter.captures)


async def list_active_ghosts(
    session: AsyncSession,
    contest_id: int,
    *,
    exclude_user_id: int | None = None,
) -> list[ContestAssignment]:
    q = select(ContestAssignment).where(
        ContestAssignment.contest_id == contest_id,
        ContestAssignment.role == ContestRole.GHOST,
        ContestAssignment.survived.is_(True),
    )
    if exclude_user_id is not None:
        q = q.where(ContestAssignment.user_id != exclude_user_id)

    res = await session.execute(q.order_by(ContestAssignment.user_id.asc()))
    return list(res.scalars().all())


# ------------------------
# Captures
# ------------------------

async def add_capture(
    session: AsyncSession,
    *,
    contest_id: int,
    hunter_id: int,
    ghost_id: int,
    post_id: int | None,
    challenge: str,
    created_at: datetime,
) -> ContestCapture:
    capture = ContestCapture(
        contest_id=contest_id,
        hunter_id=hunter_id,
        ghost_id=ghost_id,
        post_id=post_id,
        challenge=challenge,
        created_at=created_at,
    )
    session.add(capture)
    await session.flush()  # capture.id ready
    return capture


# ------------------------
# Leaderboard
# ------------------------

async def get_top_hunters(session: AsyncSession, contest_id: int, limit: int = 10) -> list[HunterRow]:
    q = (
        select(
            ContestAssignment.user_id,
            ContestAssignment.captures,
            User.username,
            User.first_name,
            User.last_name,
        )
        .join(User, User.id == ContestAssignment.user_id)
        .where(
            ContestAssignment.contest_id == contest_id,
            ContestAssignment.role == ContestRole.HUNTER,
        )
        .order_by(desc(ContestAssignment.captures), ContestAssignment.user_id.asc())
        .limit(limit)
    )
    res = await session.execute(q)

    out: list[HunterRow] = []
    for user_id, captures, username, first_name, last_name in res.all():
        out.append(
            HunterRow(
                user_id=int(user_id),
                captures=int(captures or 0),
                username=username,
                first_name=first_name,
                last_name=last_name,
            )
        )
    return out
