# huntbot/services/contest/registry.py
from __future__ import annotations

import logging
from datetime import datetime
from random import Random
from typing import Callable

from huntbot.database.models import ContestWeek
from huntbot.services.contest.roles import RoleAssignor
from huntbot.services.contest.rules import ContestRules
from huntbot.services.contest.store import ContestStore
from huntbot.services.contest.window import resolve_contest_window

log = logging.getLogger(__name__)


class ContestRegistry:
    def __init__(
        self,
        store: ContestStore,
        assignor: RoleAssignor,
        *,
        rules: ContestRules,
        rng: Random,
        clock: Callable[[], datetime],
    ) -> None:
        self.store = store
        self.assignor = assignor
        self.rules = rules
        self.rng = rng
        self.clock = clock

    async def ensure_active_week(self) -> ContestWeek:
        """
        Resolve (or lazily create) the week for the current window, then re-sync roles.
        Every caller goes through here, so every call also repairs assignments.
        """
        window = resolve_contest_window(
            self.clock(),
            weekday=self.rules.start_weekday,
            hour=self.rules.start_hour,
        )

        week = await self.store.get_week(window.starts_at)
        if week is None:
            challenge = self.rng.choice(self.rules.challenges)
            created, week = await self.store.create_week_once(
                starts_at=window.starts_at,
                ends_at=window.ends_at,
                challenge=challenge,
                created_at=self.clock(),
            )
            if created:
                log.info(
                    "Contest week %s created: %s -> %s, challenge=%r",
                    week.id,
                    week.starts_at.isoformat(),
                    week.ends_at.isoformat(),
                    week.challenge,
                )

        await self.assignor.sync(week)
        return week
