"""Input validation for calendar rules, exceptions and resource definitions.

Validators return a list of error messages; an empty list means valid.
Raising is left to the loaders.
"""

from __future__ import annotations

from datetime import date, time
from typing import Any, Mapping


def _parse_period(period: Any, where: str, errors: list[str]) -> tuple[time, time] | None:
    if not isinstance(period, (list, tuple)) or len(period) != 2:
        errors.append(f"{where}: expected [start, end], got {period!r}")
        return None
    try:
        return time.fromisoformat(period[0]), time.fromisoformat(period[1])
    except (ValueError, TypeError) as e:
        errors.append(f"{where}: invalid time - {e}")
        return None


def validate_rules(rules: Mapping[int, list]) -> list[str]:
    """Check weekday keys are 0-6, times parse, and same-day periods don't overlap."""
    errors: list[str] = []

    for weekday, periods in rules.items():
        if not isinstance(weekday, int) or not 0 <= weekday <= 6:
            errors.append(f"Invalid weekday key: {weekday!r} (must be 0-6)")
            continue

        parsed = []
        for i, period in enumerate(periods):
            pair = _parse_period(period, f"Weekday {weekday}, period {i}", errors)
            if pair is not None:
                parsed.append(pair)

        # Overnight periods are checked against the next day by the calendar
        same_day = sorted((s, e) for s, e in parsed if e > s)
        for prev, curr in zip(same_day, same_day[1:]):
            if curr[0] < prev[1]:
                errors.append(f"Weekday {weekday}: overlapping periods {prev} and {curr}")

    return errors


def validate_exceptions(exceptions: Mapping[str, Any]) -> list[str]:
    """Check dates parse and entries are well-formed.

    Every entry needs a boolean is_working. Working entries need both
    start and end; non-working entries have both or neither.
    """
    errors: list[str] = []

    for date_str, entries in exceptions.items():
        try:
            date.fromisoformat(date_str)
        except (ValueError, TypeError):
            errors.append(f"Invalid date: {date_str!r}")
            continue

        if not isinstance(entries, list):
            errors.append(f"Date {date_str}: entries must be a list")
            continue

        for i, entry in enumerate(entries):
            where = f"Date {date_str}, entry {i}"
            if not isinstance(entry, dict) or "is_working" not in entry:
                errors.append(f"{where}: missing 'is_working'")
                continue
            if not isinstance(entry["is_working"], bool):
                errors.append(f"{where}: 'is_working' must be boolean")
                continue

            has = [key for key in ("start", "end") if key in entry]
            if entry["is_working"] and len(has) != 2:
                errors.append(f"{where}: working entries need start and end")
                continue
            if len(has) == 1:
                errors.append(f"{where}: give both start and end, or neither")
                continue
            if has:
                _parse_period([entry["start"], entry["end"]], where, errors)

    return errors


def validate_resource(definition: Mapping[str, Any]) -> list[str]:
    """Check one resource definition: either "daily" or "rules", plus exceptions."""
    errors: list[str] = []

    if not isinstance(definition, Mapping):
        return [f"resource definition must be an object, got {definition!r}"]

    has_daily = "daily" in definition
    has_rules = "rules" in definition
    if has_daily == has_rules:
        errors.append("give exactly one of 'daily' or 'rules'")
    elif has_daily:
        _parse_period(definition["daily"], "daily", errors)
    else:
        rules = definition["rules"]
        if not isinstance(rules, Mapping):
            errors.append("'rules' must be an object keyed by weekday")
        else:
            try:
                errors.extend(validate_rules({int(k): v for k, v in rules.items()}))
            except (ValueError, TypeError):
                errors.append(f"Invalid weekday keys: {list(rules)!r}")

    errors.extend(validate_exceptions(definition.get("exceptions", {})))
    return errors
