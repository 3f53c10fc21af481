# huntbot/services/contest/roles.py
from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from datetime import datetime
from random import Random
from typing import Callable

from huntbot.database.models import ContestRole, ContestWeek, User
from huntbot.services.contest.store import ContestStore

log = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class SyncResult:
    removed: int
    added: int
    initial: bool = False

    @property
    def changed(self) -> bool:
        return bool(self.removed or self.added)


class RoleAssignor:
    """
    Keeps one assignment per eligible user in a contest week.

    1) drop rows of opted-out users
    2) empty week -> shuffle everyone, first ceil(n/2) are hunters
    3) otherwise each newcomer joins the smaller side (tie -> hunter)

    A second sync with the same population writes nothing.
    """

    def __init__(self, store: ContestStore, *, rng: Random, clock: Callable[[], datetime]) -> None:
        self.store = store
        self.rng = rng
        self.clock = clock

    async def sync(self, week: ContestWeek) -> SyncResult:
        now = self.clock()

        # 1) Retraction
        opted_out = await self.store.list_opted_out_ids()
        existing = await self.store.list_assignments(week.id)

        stale = [a.user_id for a in existing if a.user_id in opted_out]
        removed = await self.store.delete_assignments(week.id, stale) if stale else 0
        if removed:
            log.info("Contest %s: removed %s opted-out assignment(s)", week.id, removed)

        kept = [a for a in existing if a.user_id not in opted_out]
        held = {a.user_id for a in kept}

        eligible = await self.store.list_eligible_users()
        newcomers = [u for u in eligible if u.id not in held]
        if not newcomers:
            return SyncResult(removed=removed, added=0)

        # 2) Initial partition
        if not kept:
            added = await self._initial_partition(week, newcomers, now)
            return SyncResult(removed=removed, added=added, initial=True)

        # 3) Incremental join
        hunters = sum(1 for a in kept if a.role == ContestRole.HUNTER)
        ghosts = len(kept) - hunters
        added = 0

        for user in newcomers:
            role = ContestRole.HUNTER if hunters <= ghosts else ContestRole.GHOST
            if not await self._add(week, user, role, now):
                continue
            added += 1
            if role == ContestRole.HUNTER:
                hunters += 1
            else:
                ghosts += 1
            log.debug("Contest %s: user_id=%s joined as %s", week.id, user.id, role.value)

        return SyncResult(removed=removed, added=added)

    async def _initial_partition(self, week: ContestWeek, users: list[User], now: datetime) -> int:
        pool = list(users)
        self.rng.shuffle(pool)
        hunter_slots = math.ceil(len(pool) / 2)

        added = 0
        for i, user in enumerate(pool):
            role = ContestRole.HUNTER if i < hunter_slots else ContestRole.GHOST
            if await self._add(week, user, role, now):
                added += 1

        log.info(
            "Contest %s: initial partition of %s user(s), %s hunter(s) / %s ghost(s)",
            week.id,
            len(pool),
            hunter_slots,
            len(pool) - hunter_slots,
        )
        return added

    async def _add(self, week: ContestWeek, user: User, role: ContestRole, now: datetime) -> bool:
        return await self.store.create_assignment_once(
            contest_id=week.id,
            user_id=user.id,
            role=role,
            now=now,
            lat=user.location_lat,
            lng=user.location_lng,
        )
