from __future__ import annotations

from datetime import datetime, timedelta

from sqlalchemy import func, select, update

from huntbot.database.models import ContestAssignment, ContestCapture, ContestRole, ContestWeek, InboxMessage, InboxMessageType

CHALLENGE = "Catch your ghost holding a hot drink"

# Monday 2026-10-19 12:00 UTC -> week started Sunday 2026-10-18 20:00
MONDAY_NOON = datetime(2026, 10, 19, 12, 0, 0)


class FrozenClock:
    """Callable clock the tests move by hand."""

    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> datetime:
        self.now = self.now + timedelta(**kwargs)
        return self.now


async def assignments_by_user(session, week: ContestWeek) -> dict[int, ContestAssignment]:
    res = await session.execute(select(ContestAssignment).where(ContestAssignment.contest_id == week.id))
    return {a.user_id: a for a in res.scalars().all()}


async def split_roles(session, week: ContestWeek) -> tuple[list[int], list[int]]:
    rows = await assignments_by_user(session, week)
    hunters = sorted(uid for uid, a in rows.items() if a.role == ContestRole.HUNTER)
    ghosts = sorted(uid for uid, a in rows.items() if a.role == ContestRole.GHOST)
    return hunters, ghosts


async def inbox_count(session, *, recipient_id: int, type: InboxMessageType, sender_id: int | None = None) -> int:
    q = select(func.count(InboxMessage.id)).where(
        InboxMessage.recipient_id == recipient_id,
        InboxMessage.type == type,
    )
    if sender_id is not None:
        q = q.where(InboxMessage.sender_id == sender_id)
    return int(await session.scalar(q) or 0)


async def capture_count(session) -> int:
    return int(await session.scalar(select(func.count(ContestCapture.id))) or 0)


async def capture_elsewhere(session, week: ContestWeek, ghost_id: int) -> None:
    """Latches the ghost in the database the way a concurrent request would; loaded rows stay stale."""
    await session.execute(
        update(ContestAssignment)
        .where(ContestAssignment.contest_id == week.id, ContestAssignment.user_id == ghost_id)
        .values(survived=False)
        .execution_options(synchronize_session=False)
    )
