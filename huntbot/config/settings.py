# huntbot/config/settings.py
from __future__ import annotations

import os
from dataclasses import dataclass, field

from dotenv import load_dotenv

from huntbot.services.contest.rules import DEFAULT_CHALLENGES, ContestRules


def _require(env: dict[str, str], key: str) -> str:
    v = env.get(key)
    if v is None or not v.strip():
        raise RuntimeError(f"Missing required environment variable: {key}")
    return v.strip()


def _to_int(value: str, key_name: str) -> int:
    try:
        return int(value)
    except ValueError as e:
        raise RuntimeError(f"Invalid integer for {key_name}: {value!r}") from e


def _to_float(value: str, key_name: str) -> float:
    try:
        return float(value)
    except ValueError as e:
        raise RuntimeError(f"Invalid number for {key_name}: {value!r}") from e


def _parse_challenges(raw: str | None) -> tuple[str, ...]:
    """
    Parses a `|` separated challenge catalog.
      "Coffee in hand | Under a bridge | Wearing a hat"
    Empty / missing -> built-in catalog.
    """
    if not raw:
        return DEFAULT_CHALLENGES

    parts = tuple(p.strip() for p in raw.split("|") if p.strip())
    return parts or DEFAULT_CHALLENGES


@dataclass(frozen=True, slots=True)
class Settings:
    # --- required ---
    bot_token: str

    # --- optional ---
    database_url: str = "sqlite+aiosqlite:///./huntbot.db"

    # --- contest tuning ---
    contest_start_weekday: int = 6  # Monday = 0 ... Sunday = 6
    contest_start_hour: int = 20    # UTC
    camping_distance_km: float = 0.1
    camping_hours: float = 6.0
    proximity_km: float = 0.3
    alert_cooldown_minutes: int = 60
    challenges: tuple[str, ...] = field(default=DEFAULT_CHALLENGES)

    # --- environment ---
    environment: str = "production"  # production | development

    @property
    def is_dev(self) -> bool:
        return self.environment.lower() in {"dev", "development", "local"}

    def contest_rules(self) -> ContestRules:
        return ContestRules(
            start_weekday=self.contest_start_weekday,
            start_hour=self.contest_start_hour,
            camping_distance_km=self.camping_distance_km,
            camping_hours=self.camping_hours,
            proximity_km=self.proximity_km,
            alert_cooldown_minutes=self.alert_cooldown_minutes,
            challenges=self.challenges,
        )

    @classmethod
    def load(cls) -> "Settings":
        """
        Loads from process env (and .env if present).
        Fails fast for required fields.
        """
        load_dotenv()
        env = os.environ

        bot_token = _require(env, "BOT_TOKEN")
        database_url = (env.get("DATABASE_URL") or "sqlite+aiosqlite:///./huntbot.db").strip()

        weekday_raw = (env.get("CONTEST_START_WEEKDAY") or "6").strip()
        weekday = _to_int(weekday_raw, "CONTEST_START_WEEKDAY")
        if not 0 <= weekday <= 6:
            raise RuntimeError(f"CONTEST_START_WEEKDAY must be 0..6, got {weekday}")

        hour_raw = (env.get("CONTEST_START_HOUR") or "20").strip()
        hour = _to_int(hour_raw, "CONTEST_START_HOUR")
        if not 0 <= hour <= 23:
            raise RuntimeError(f"CONTEST_START_HOUR must be 0..23, got {hour}")

        camping_distance_km = _to_float(
            (env.get("CAMPING_DISTANCE_KM") or "0.1").strip(), "CAMPING_DISTANCE_KM"
        )
        camping_hours = _to_float((env.get("CAMPING_HOURS") or "6").strip(), "CAMPING_HOURS")
        proximity_km = _to_float((env.get("PROXIMITY_KM") or "0.3").strip(), "PROXIMITY_KM")
        alert_cooldown_minutes = _to_int(
            (env.get("ALERT_COOLDOWN_MINUTES") or "60").strip(), "ALERT_COOLDOWN_MINUTES"
        )

        challenges = _parse_challenges(env.get("CONTEST_CHALLENGES"))
        environment = (env.get("ENVIRONMENT") or "production").strip() or "production"

        return cls(
            bot_token=bot_token,
            database_url=database_url,
            contest_start_weekday=weekday,
            contest_start_hour=hour,
            camping_distance_km=camping_distance_km,
            camping_hours=camping_hours,
            proximity_km=proximity_km,
            alert_cooldown_minutes=alert_cooldown_minutes,
            challenges=challenges,
            environment=environment,
        )
