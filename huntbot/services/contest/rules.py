# huntbot/services/contest/rules.py
from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta

DEFAULT_CHALLENGES: tuple[str, ...] = (
    "Catch your ghost holding a hot drink",
    "Catch your ghost under a bridge",
    "Catch your ghost next to something red",
    "Catch your ghost mid-laugh",
    "Catch your ghost in front of a mural",
    "Catch your ghost wearing sunglasses",
    "Catch your ghost on public transport",
    "Catch your ghost with a dog in frame",
)


@dataclass(frozen=True, slots=True)
class ContestRules:
    # window anchor (UTC)
    start_weekday: int = 6  # Monday = 0 ... Sunday = 6
    start_hour: int = 20

    # ghosts
    camping_distance_km: float = 0.1
    camping_hours: float = 6.0

    # hunters
    proximity_km: float = 0.3
    alert_cooldown_minutes: int = 60

    challenges: tuple[str, ...] = DEFAULT_CHALLENGES

    def __post_init__(self) -> None:
        if not self.challenges:
            raise ValueError("Contest needs at least one challenge")

    @property
    def camping_window(self) -> timedelta:
        return timedelta(hours=self.camping_hours)

    @property
    def alert_cooldown(self) -> timedelta:
        return timedelta(minutes=self.alert_cooldown_minutes)
