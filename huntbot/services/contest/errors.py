# huntbot/services/contest/errors.py
from __future__ import annotations


class ContestError(Exception):
    """Rejected contest request. `reason` is a stable code for the request layer."""

    reason = "contest_error"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.reason)


class ChallengeMismatchError(ContestError):
    reason = "challenge_mismatch"


class NotAHunterError(ContestError):
    reason = "not_a_hunter"


class NotAnActiveGhostError(ContestError):
    reason = "not_an_active_ghost"
