# huntbot/services/contest/__init__.py
from __future__ import annotations

from .capture import CaptureResult, CaptureValidator
from .engine import ContestEngine, Standing
from .errors import ChallengeMismatchError, ContestError, NotAHunterError, NotAnActiveGhostError
from .geo import haversine_km
from .location import LocationOutcome, LocationUpdateProcessor, ProximityAlert
from .notifications import InboxNotificationSink, Notification, NotificationSink
from .registry import ContestRegistry
from .roles import RoleAssignor, SyncResult
from .rules import DEFAULT_CHALLENGES, ContestRules
from .store import ContestStore, SqlContestStore
from .window import ContestWindow, resolve_contest_window, utc_now

__all__ = [
    "CaptureResult",
    "CaptureValidator",
    "ContestEngine",
    "Standing",
    "ContestError",
    "ChallengeMismatchError",
    "NotAHunterError",
    "NotAnActiveGhostError",
    "haversine_km",
    "LocationOutcome",
    "LocationUpdateProcessor",
    "ProximityAlert",
    "InboxNotificationSink",
    "Notification",
    "NotificationSink",
    "ContestRegistry",
    "RoleAssignor",
    "SyncResult",
    "DEFAULT_CHALLENGES",
    "ContestRules",
    "ContestStore",
    "SqlContestStore",
    "ContestWindow",
    "resolve_contest_window",
    "utc_now",
]
