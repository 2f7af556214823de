"""Shared test fixtures and data loading for reservation-primitives.

All test data lives in data/fixtures/ as JSON files.  This module loads
that data and exposes helper functions + pytest fixtures for the tests.

Reference day: Thu 2013-03-21 ("thu").
Epoch: Thu 2013-03-21 00:00 (minute 0).
"""

from __future__ import annotations

import json
from datetime import date, datetime, timedelta
from pathlib import Path

import pytest

# ---------------------------------------------------------------------------
# Paths
# ---------------------------------------------------------------------------
FIXTURES_DIR = Path(__file__).resolve().parent.parent / "data" / "fixtures"
SCENARIOS_DIR = FIXTURES_DIR / "scenarios"
RESOURCES_FILE = FIXTURES_DIR / "resources.json"


# ---------------------------------------------------------------------------
# Data loaders
# ---------------------------------------------------------------------------
def _load_json(path: Path):
    with open(path) as f:
        return json.load(f)


_reference = _load_json(FIXTURES_DIR / "reference.json")
_calendars = _load_json(FIXTURES_DIR / "calendars.json")
_resources = _load_json(RESOURCES_FILE)


# ---------------------------------------------------------------------------
# Reference constants derived from reference.json
# ---------------------------------------------------------------------------
EPOCH = datetime.fromisoformat(_reference["epoch"])
MINUTES_PER_DAY = _reference["minutes_per_day"]

# DAYS["fri"] → {"date": date(2013, 3, 22), "offset": 1440, ...}
DAYS: dict[str, dict] = {
    _d["name"]: {
        "date": date.fromisoformat(_d["date"]),
        "offset": _d["day_offset"],
        "weekday": _d["weekday"],
    }
    for _d in _reference["days"]
}


# ---------------------------------------------------------------------------
# Convenience helpers (importable by test modules)
# ---------------------------------------------------------------------------
def offset(day: str, time_label: str) -> int:
    """Absolute offset in minutes from epoch.

    >>> offset("thu", "08:00")
    480
    >>> offset("fri", "10:00")
    2040
    """
    hours, minutes = time_label.split(":")
    return DAYS[day]["offset"] + int(hours) * 60 + int(minutes)


def at(pair: list[str]) -> int:
    """offset() for a ["day", "HH:MM"] pair as stored in scenario files."""
    return offset(pair[0], pair[1])


def dt(day: str, time_label: str) -> datetime:
    """Datetime from day name and time label."""
    return EPOCH + timedelta(minutes=offset(day, time_label))


def day_date(day: str) -> date:
    return DAYS[day]["date"]


def daily_source(start: int, end: int):
    """Plain next_range callable for a same-day window [start, end) in minutes.

    Pure arithmetic, no calendar; handy for intersection properties.
    """
    assert 0 <= start < end <= MINUTES_PER_DAY

    def next_range(t: int):
        day, minute = divmod(t, MINUTES_PER_DAY)
        base = day * MINUTES_PER_DAY
        if minute < end:
            return (base + max(minute, start), base + end)
        return (base + MINUTES_PER_DAY + start, base + MINUTES_PER_DAY + end)

    return next_range


# ---------------------------------------------------------------------------
# Factories
# ---------------------------------------------------------------------------
def make_calendar(name: str):
    """Build a WorkingCalendar from calendars.json by name."""
    from reservation_primitives.calendar import WorkingCalendar

    config = _calendars[name]
    rules = {int(k): v for k, v in config["rules"].items()}
    return WorkingCalendar(name, rules, config.get("exceptions", {}))


def make_pattern(name: str, resolution: str = "minute"):
    """CalendarPattern over a named calendar, anchored at EPOCH."""
    from reservation_primitives.pattern import CalendarPattern
    from reservation_primitives.resolution import HOUR, MINUTE

    res = HOUR if resolution == "hour" else MINUTE
    return CalendarPattern(make_calendar(name), EPOCH, res)


def make_project():
    """Project window: daily 06:00-20:00, memoized as callers would."""
    from reservation_primitives.pattern import memoize_range_fn

    return memoize_range_fn(make_pattern("project"))


def make_manager(reference: int = 0, settings=None):
    """ResourceManager over resources.json (A-G, X, Y)."""
    from reservation_primitives.config import DEFAULT_SETTINGS
    from reservation_primitives.loaders import load_resources_json
    from reservation_primitives.manager import ResourceManager

    settings = settings or DEFAULT_SETTINGS
    resources = load_resources_json(RESOURCES_FILE, EPOCH, settings=settings)
    return ResourceManager(resources, reference, settings)


def load_scenarios(name: str):
    """Load a scenario file from data/fixtures/scenarios/{name}.json."""
    return _load_json(SCENARIOS_DIR / f"{name}.json")


# ---------------------------------------------------------------------------
# pytest fixtures
# ---------------------------------------------------------------------------
@pytest.fixture
def epoch() -> datetime:
    return EPOCH


@pytest.fixture
def project():
    return make_project()


@pytest.fixture
def manager():
    """Fresh manager anchored at Thu 00:00."""
    return make_manager()
