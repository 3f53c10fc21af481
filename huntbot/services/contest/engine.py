# huntbot/services/contest/engine.py
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from random import Random
from typing import Callable

from sqlalchemy.ext.asyncio import AsyncSession

from huntbot.database.models import ContestAssignment, ContestWeek
from huntbot.database.repo.contest_repo import HunterRow
from huntbot.services.contest.capture import CaptureResult, CaptureValidator
from huntbot.services.contest.location import LocationOutcome, LocationUpdateProcessor
from huntbot.services.contest.notifications import InboxNotificationSink, NotificationSink
from huntbot.services.contest.registry import ContestRegistry
from huntbot.services.contest.roles import RoleAssignor
from huntbot.services.contest.rules import ContestRules
from huntbot.services.contest.store import ContestStore, SqlContestStore
from huntbot.services.contest.window import utc_now


@dataclass(frozen=True, slots=True)
class Standing:
    week: ContestWeek
    assignment: ContestAssignment | None


class ContestEngine:
    """
    Entry point for the Hunters vs Ghosts contest.

    Every public call resolves the active week first (creating it and
    re-syncing roles as needed), then delegates.
    """

    def __init__(
        self,
        store: ContestStore,
        sink: NotificationSink,
        *,
        rules: ContestRules | None = None,
        clock: Callable[[], datetime] = utc_now,
        rng: Random | None = None,
    ) -> None:
        self.store = store
        self.sink = sink
        self.rules = rules or ContestRules()
        self.clock = clock
        self.rng = rng or Random()

        self.assignor = RoleAssignor(store, rng=self.rng, clock=clock)
        self.registry = ContestRegistry(store, self.assignor, rules=self.rules, rng=self.rng, clock=clock)
        self.locations = LocationUpdateProcessor(store, sink, rules=self.rules, clock=clock)
        self.captures = CaptureValidator(store, sink, clock=clock)

    @classmethod
    def for_session(
        cls,
        session: AsyncSession,
        *,
        rules: ContestRules | None = None,
        clock: Callable[[], datetime] = utc_now,
        rng: Random | None = None,
    ) -> "ContestEngine":
        return cls(
            SqlContestStore(session),
            InboxNotificationSink(session),
            rules=rules,
            clock=clock,
            rng=rng,
        )

    async def ensure_active_week(self) -> ContestWeek:
        return await self.registry.ensure_active_week()

    async def update_location(self, user_id: int, lat: float, lng: float) -> LocationOutcome:
        week = await self.registry.ensure_active_week()
        return await self.locations.process(week, user_id, lat, lng)

    async def check_capture(
        self,
        hunter_id: int,
        ghost_id: int,
        claimed_challenge: str | None,
    ) -> ContestWeek:
        """Runs the capture checks without writing a capture; raises ContestError on failure."""
        week = await self.registry.ensure_active_week()
        await self.captures.validate(
            week,
            hunter_id=hunter_id,
            ghost_id=ghost_id,
            claimed_challenge=claimed_challenge,
        )
        return week

    async def submit_capture(
        self,
        hunter_id: int,
        ghost_id: int,
        evidence_post_id: int | None,
        claimed_challenge: str | None,
    ) -> CaptureResult:
        week = await self.registry.ensure_active_week()
        return await self.captures.capture(
            week,
            hunter_id=hunter_id,
            ghost_id=ghost_id,
            evidence_post_id=evidence_post_id,
            claimed_challenge=claimed_challenge,
        )

    async def standing(self, user_id: int) -> Standing:
        week = await self.registry.ensure_active_week()
        assignment = await self.store.get_assignment(week.id, user_id)
        return Standing(week=week, assignment=assignment)

    async def leaderboard(self, limit: int = 10) -> tuple[ContestWeek, list[HunterRow], int]:
        """Top hunters by captures plus the number of ghosts still at large."""
        week = await self.registry.ensure_active_week()
        top = await self.store.top_hunters(week.id, limit=limit)
        ghosts_left = len(await self.store.list_active_ghosts(week.id))
        return week, top, ghosts_left
