from __future__ import annotations

import pytest

from huntbot.config.settings import Settings
from huntbot.services.contest import DEFAULT_CHALLENGES

_KEYS = (
    "BOT_TOKEN",
    "DATABASE_URL",
    "ENVIRONMENT",
    "CONTEST_START_WEEKDAY",
    "CONTEST_START_HOUR",
    "CAMPING_DISTANCE_KM",
    "CAMPING_HOURS",
    "PROXIMITY_KM",
    "ALERT_COOLDOWN_MINUTES",
    "CONTEST_CHALLENGES",
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch, tmp_path):
    for key in _KEYS:
        monkeypatch.delenv(key, raising=False)
    # keep a developer's .env out of these tests
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr("huntbot.config.settings.load_dotenv", lambda *a, **k: False)


def test_missing_token_fails_fast() -> None:
    with pytest.raises(RuntimeError, match="BOT_TOKEN"):
        Settings.load()


def test_defaults(monkeypatch) -> None:
    monkeypatch.setenv("BOT_TOKEN", "123:abc")
    s = Settings.load()
    rules = s.contest_rules()

    assert s.database_url.startswith("sqlite+aiosqlite")
    assert s.is_dev is False
    assert (rules.start_weekday, rules.start_hour) == (6, 20)
    assert rules.camping_distance_km == 0.1
    assert rules.camping_window.total_seconds() == 6 * 3600
    assert rules.proximity_km == 0.3
    assert rules.alert_cooldown.total_seconds() == 3600
    assert rules.challenges == DEFAULT_CHALLENGES


def test_overrides(monkeypatch) -> None:
    monkeypatch.setenv("BOT_TOKEN", "123:abc")
    monkeypatch.setenv("ENVIRONMENT", "development")
    monkeypatch.setenv("CONTEST_START_WEEKDAY", "0")
    monkeypatch.setenv("CONTEST_START_HOUR", "9")
    monkeypatch.setenv("PROXIMITY_KM", "0.5")
    monkeypatch.setenv("CONTEST_CHALLENGES", "Hat | Bridge |  | Dog")

    s = Settings.load()
    assert s.is_dev is True
    assert s.contest_rules().start_weekday == 0
    assert s.contest_rules().start_hour == 9
    assert s.proximity_km == 0.5
    assert s.challenges == ("Hat", "Bridge", "Dog")


@pytest.mark.parametrize(
    "key,value",
    [("CONTEST_START_WEEKDAY", "7"), ("CONTEST_START_HOUR", "24"), ("CAMPING_HOURS", "six")],
)
def test_invalid_values(monkeypatch, key: str, value: str) -> None:
    monkeypatch.setenv("BOT_TOKEN", "123:abc")
    monkeypatch.setenv(key, value)
    with pytest.raises(RuntimeError, match=key):
        Settings.load()
