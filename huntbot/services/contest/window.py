# huntbot/services/contest/window.py
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

WEEK = timedelta(days=7)


@dataclass(frozen=True, slots=True)
class ContestWindow:
    starts_at: datetime
    ends_at: datetime

    def contains(self, instant: datetime) -> bool:
        return self.starts_at <= to_naive_utc(instant) < self.ends_at


def to_naive_utc(value: datetime) -> datetime:
    """Storage keeps naive UTC; aware values are converted first."""
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


def utc_now() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


def resolve_contest_window(now: datetime, *, weekday: int = 6, hour: int = 20) -> ContestWindow:
    """
    Current weekly window: starts at the latest `weekday` `hour`:00:00 UTC
    at or before `now` and lasts exactly seven days.

    Sunday 19:59:59 -> previous Sunday 20:00 window
    Sunday 20:00:00 -> window starting right now
    """
    now = to_naive_utc(now).replace(microsecond=0)

    days_back = (now.weekday() - weekday) % 7
    anchor = (now - timedelta(days=days_back)).replace(hour=hour, minute=0, second=0)
    if anchor > now:
        # same weekday but before the start hour -> last week's anchor
        anchor -= WEEK

    return ContestWindow(starts_at=anchor, ends_at=anchor + WEEK)
