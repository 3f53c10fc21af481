# huntbot/services/contest/location.py
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable

from huntbot.database.models import ContestAssignment, ContestRole, ContestWeek, InboxMessageType
from huntbot.services.contest.geo import haversine_km
from huntbot.services.contest.notifications import Notification, NotificationSink
from huntbot.services.contest.rules import ContestRules
from huntbot.services.contest.store import ContestStore

log = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ProximityAlert:
    ghost_id: int
    distance_m: int


@dataclass(slots=True)
class LocationOutcome:
    participant: bool
    role: ContestRole | None = None
    camping_flagged: bool = False
    camping_cleared: bool = False
    alerts: list[ProximityAlert] = field(default_factory=list)


class LocationUpdateProcessor:
    def __init__(
        self,
        store: ContestStore,
        sink: NotificationSink,
        *,
        rules: ContestRules,
        clock: Callable[[], datetime],
    ) -> None:
        self.store = store
        self.sink = sink
        self.rules = rules
        self.clock = clock

    async def process(self, week: ContestWeek, user_id: int, lat: float, lng: float) -> LocationOutcome:
        assignment = await self.store.get_assignment(week.id, user_id)
        if assignment is None:
            # not a participant this week
            return LocationOutcome(participant=False)

        now = self.clock()
        prev_lat, prev_lng = assignment.last_lat, assignment.last_lng

        assignment.last_lat = lat
        assignment.last_lng = lng
        if assignment.last_move_at is None:
            assignment.last_move_at = now

        outcome = LocationOutcome(participant=True, role=assignment.role)

        if assignment.role == ContestRole.GHOST:
            await self._track_ghost(assignment, prev_lat, prev_lng, now, outcome)
        else:
            await self._scan_for_ghosts(week, assignment, now, outcome)

        await self.store.save_assignment(assignment)
        return outcome

    async def _track_ghost(
        self,
        ghost: ContestAssignment,
        prev_lat: float | None,
        prev_lng: float | None,
        now: datetime,
        outcome: LocationOutcome,
    ) -> None:
        moved_km = haversine_km(prev_lat, prev_lng, ghost.last_lat, ghost.last_lng)

        if moved_km > self.rules.camping_distance_km:
            outcome.camping_cleared = bool(ghost.camping_violation)
            ghost.camping_violation = False
            ghost.last_move_at = now
            return

        if ghost.camping_violation:
            return

        if now - ghost.last_move_at > self.rules.camping_window:
            ghost.camping_violation = True
            outcome.camping_flagged = True
            log.info("Camping flagged: contest=%s ghost_id=%s", ghost.contest_id, ghost.user_id)
            await self.sink.send(
                Notification(
                    recipient_id=ghost.user_id,
                    sender_id=ghost.user_id,
                    type=InboxMessageType.CONTEST_WARNING,
                    created_at=now,
                    message=(
                        f"👻 You have not moved more than {round(self.rules.camping_distance_km * 1000)}m "
                        f"in {self.rules.camping_hours:g}h. Keep moving, camping is against the rules!"
                    ),
                )
            )

    async def _scan_for_ghosts(
        self,
        week: ContestWeek,
        hunter: ContestAssignment,
        now: datetime,
        outcome: LocationOutcome,
    ) -> None:
        ghosts = await self.store.list_active_ghosts(week.id, exclude_user_id=hunter.user_id)

        nearby: list[tuple[ContestAssignment, float]] = []
        for ghost in ghosts:
            km = haversine_km(hunter.last_lat, hunter.last_lng, ghost.last_lat, ghost.last_lng)
            if km <= self.rules.proximity_km:
                nearby.append((ghost, km))

        if not nearby:
            return

        names = await self.store.get_users([g.user_id for g, _ in nearby])

        for ghost, km in nearby:
            last = await self.sink.latest(
                recipient_id=hunter.user_id,
                sender_id=ghost.user_id,
                type=InboxMessageType.CONTEST_ALERT,
            )
            if last is not None and now - last <= self.rules.alert_cooldown:
                continue

            distance_m = round(km * 1000)
            ghost_user = names.get(ghost.user_id)
            ghost_name = ghost_user.display_name if ghost_user else "A ghost"

            await self.sink.send(
                Notification(
                    recipient_id=hunter.user_id,
                    sender_id=ghost.user_id,
                    type=InboxMessageType.CONTEST_ALERT,
                    created_at=now,
                    message=f"🎯 {ghost_name} is about {distance_m}m away. Go get them!",
                )
            )
            outcome.alerts.append(ProximityAlert(ghost_id=ghost.user_id, distance_m=distance_m))
            log.debug(
                "Proximity alert: contest=%s hunter_id=%s ghost_id=%s distance_m=%s",
                week.id,
                hunter.user_id,
                ghost.user_id,
                distance_m,
            )
