# huntbot/services/contest/capture.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Callable

from huntbot.database.models import ContestAssignment, ContestCapture, ContestWeek, InboxMessageType
from huntbot.services.contest.errors import ChallengeMismatchError, NotAHunterError, NotAnActiveGhostError
from huntbot.services.contest.notifications import Notification, NotificationSink
from huntbot.services.contest.store import ContestStore

log = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class CaptureResult:
    capture: ContestCapture
    hunter: ContestAssignment
    ghost: ContestAssignment


class CaptureValidator:
    def __init__(self, store: ContestStore, sink: NotificationSink, *, clock: Callable[[], datetime]) -> None:
        self.store = store
        self.sink = sink
        self.clock = clock

    async def validate(
        self,
        week: ContestWeek,
        *,
        hunter_id: int,
        ghost_id: int,
        claimed_challenge: str | None,
    ) -> tuple[ContestAssignment, ContestAssignment]:
        """
        Read-only checks, in order; the first failure raises:
        challenge -> hunter -> active ghost.
        """
        if (claimed_challenge or "").strip() != week.challenge.strip():
            raise ChallengeMismatchError("Challenge does not match this week's challenge")

        hunter = await self.store.get_assignment(week.id, hunter_id)
        if hunter is None or not hunter.is_hunter:
            raise NotAHunterError("Only hunters can capture ghosts")

        ghost = await self.store.get_assignment(week.id, ghost_id)
        if ghost is None or not ghost.is_active_ghost:
            raise NotAnActiveGhostError("Target is not an active ghost")

        return hunter, ghost

    async def capture(
        self,
        week: ContestWeek,
        *,
        hunter_id: int,
        ghost_id: int,
        evidence_post_id: int | None,
        claimed_challenge: str | None,
    ) -> CaptureResult:
        try:
            hunter, ghost = await self.validate(
                week,
                hunter_id=hunter_id,
                ghost_id=ghost_id,
                claimed_challenge=claimed_challenge,
            )
        except (ChallengeMismatchError, NotAHunterError, NotAnActiveGhostError) as e:
            log.warning(
                "Capture rejected (%s): contest=%s hunter_id=%s ghost_id=%s",
                e.reason,
                week.id,
                hunter_id,
                ghost_id,
            )
            raise

        # one-way latch; only the first of two racing captures flips it
        if not await self.store.mark_ghost_captured(ghost):
            log.warning(
                "Capture rejected (not_an_active_ghost, already latched): contest=%s hunter_id=%s ghost_id=%s",
                week.id,
                hunter_id,
                ghost_id,
            )
            raise NotAnActiveGhostError("Target is not an active ghost")

        now = self.clock()
        capture = await self.store.add_capture(
            contest_id=week.id,
            hunter_id=hunter_id,
            ghost_id=ghost_id,
            post_id=evidence_post_id,
            challenge=week.challenge,
            created_at=now,
        )
        captures = await self.store.increment_captures(hunter)

        log.info(
            "Capture recorded: contest=%s hunter_id=%s ghost_id=%s captures=%s",
            week.id,
            hunter_id,
            ghost_id,
            captures,
        )

        await self.sink.send(
            Notification(
                recipient_id=hunter_id,
                sender_id=ghost_id,
                type=InboxMessageType.CONTEST_CAPTURE,
                created_at=now,
                post_id=evidence_post_id,
                message=f"✅ Capture confirmed! You now have {captures} capture(s) this week.",
            )
        )
        await self.sink.send(
            Notification(
                recipient_id=ghost_id,
                sender_id=hunter_id,
                type=InboxMessageType.CONTEST_CAPTURED,
                created_at=now,
                post_id=evidence_post_id,
                message="📸 You were captured! You are out of the hunt for the rest of this week.",
            )
        )

        return CaptureResult(capture=capture, hunter=hunter, ghost=ghost)
