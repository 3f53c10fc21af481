# huntbot/services/contest/store.py
from __future__ import annotations

from datetime import datetime
from typing import Iterable, Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from huntbot.database.models import ContestAssignment, ContestCapture, ContestRole, ContestWeek, User
from huntbot.database.repo import contest_repo, users as users_repo
from huntbot.database.repo.contest_repo import HunterRow


class ContestStore(Protocol):
    """
    Everything the contest engine reads or writes. Point lookups, inserts,
    updates and scans by contest id; nothing is cached between calls.
    """

    async def get_week(self, starts_at: datetime) -> ContestWeek | None: ...

    async def create_week_once(
        self, *, starts_at: datetime, ends_at: datetime, challenge: str, created_at: datetime
    ) -> tuple[bool, ContestWeek]: ...

    async def list_assignments(self, contest_id: int) -> list[ContestAssignment]: ...

    async def get_assignment(self, contest_id: int, user_id: int) -> ContestAssignment | None: ...

    async def create_assignment_once(
        self,
        *,
        contest_id: int,
        user_id: int,
        role: ContestRole,
        now: datetime,
        lat: float | None = None,
        lng: float | None = None,
    ) -> bool: ...

    async def delete_assignments(self, contest_id: int, user_ids: Iterable[int]) -> int: ...

    async def save_assignment(self, assignment: ContestAssignment) -> None: ...

    async def mark_ghost_captured(self, ghost: ContestAssignment) -> bool: ...

    async def increment_captures(self, hunter: ContestAssignment) -> int: ...

    async def list_active_ghosts(
        self, contest_id: int, *, exclude_user_id: int | None = None
    ) -> list[ContestAssignment]: ...

    async def add_capture(
        self,
        *,
        contest_id: int,
        hunter_id: int,
        ghost_id: int,
        post_id: int | None,
        challenge: str,
        created_at: datetime,
    ) -> ContestCapture: ...

    async def top_hunters(self, contest_id: int, limit: int = 10) -> list[HunterRow]: ...

    async def list_eligible_users(self) -> list[User]: ...

    async def list_opted_out_ids(self) -> set[int]: ...

    async def get_users(self, user_ids: list[int]) -> dict[int, User]: ...


class SqlContestStore:
    """ContestStore over one AsyncSession (one request)."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get_week(self, starts_at: datetime) -> ContestWeek | None:
        return await contest_repo.get_week_by_start(self.session, starts_at)

    async def create_week_once(
        self, *, starts_at: datetime, ends_at: datetime, challenge: str, created_at: datetime
    ) -> tuple[bool, ContestWeek]:
        return await contest_repo.create_week_once(
            self.session,
            starts_at=starts_at,
            ends_at=ends_at,
            challenge=challenge,
            created_at=created_at,
        )

    async def list_assignments(self, contest_id: int) -> list[ContestAssignment]:
        return await contest_repo.list_assignments(self.session, contest_id)

    async def get_assignment(self, contest_id: int, user_id: int) -> ContestAssignment | None:
        return await contest_repo.get_assignment(self.session, contest_id=contest_id, user_id=user_id)

    async def create_assignment_once(
        self,
        *,
        contest_id: int,
        user_id: int,
        role: ContestRole,
        now: datetime,
        lat: float | None = None,
        lng: float | None = None,
    ) -> bool:
        return await contest_repo.create_assignment_once(
            self.session,
            contest_id=contest_id,
            user_id=user_id,
            role=role,
            now=now,
            lat=lat,
            lng=lng,
        )

    async def delete_assignments(self, contest_id: int, user_ids: Iterable[int]) -> int:
        return await contest_repo.delete_assignments(self.session, contest_id=contest_id, user_ids=user_ids)

    async def save_assignment(self, assignment: ContestAssignment) -> None:
        self.session.add(assignment)
        await self.session.flush()

    async def mark_ghost_captured(self, ghost: ContestAssignment) -> bool:
        return await contest_repo.mark_ghost_captured(self.session, ghost)

    async def increment_captures(self, hunter: ContestAssignment) -> int:
        return await contest_repo.increment_captures(self.session, hunter)

    async def list_active_ghosts(
        self, contest_id: int, *, exclude_user_id: int | None = None
    ) -> list[ContestAssignment]:
        return await contest_repo.list_active_ghosts(self.session, contest_id, exclude_user_id=exclude_user_id)

    async def add_capture(
        self,
        *,
        contest_id: int,
        hunter_id: int,
        ghost_id: int,
        post_id: int | None,
        challenge: str,
        created_at: datetime,
    ) -> ContestCapture:
        return await contest_repo.add_capture(
            self.session,
            contest_id=contest_id,
            hunter_id=hunter_id,
            ghost_id=ghost_id,
            post_id=post_id,
            challenge=challenge,
            created_at=created_at,
        )

    async def top_hunters(self, contest_id: int, limit: int = 10) -> list[HunterRow]:
        return await contest_repo.get_top_hunters(self.session, contest_id, limit=limit)

    async def list_eligible_users(self) -> list[User]:
        return await users_repo.list_eligible_users(self.session)

    async def list_opted_out_ids(self) -> set[int]:
        return await users_repo.list_opted_out_ids(self.session)

    async def get_users(self, user_ids: list[int]) -> dict[int, User]:
        return await users_repo.get_users_by_ids(self.session, user_ids)
