"""WorkingCalendar: weekly recurrence rules with planned date exceptions.

This is the recurrence-rule evaluator behind CalendarPattern. It knows
nothing about integer instants or bookings; it answers "when is the next
contiguous working interval" in naive facility-local datetimes.
"""

from __future__ import annotations

from datetime import date, datetime, time, timedelta

MINUTES_PER_DAY = 24 * 60

# Minutes-of-day period, half-open. end == MINUTES_PER_DAY means midnight.
_Period = tuple[int, int]


def _parse_minutes(s: str) -> int:
    """Parse 'HH:MM' to minutes after midnight."""
    hours, minutes = s.split(":")
    return int(hours) * 60 + int(minutes)


def _as_time(minutes: int) -> time:
    if minutes >= MINUTES_PER_DAY:
        return time(0, 0)
    return time(minutes // 60, minutes % 60)


def _subtract(periods: list[_Period], start: int, end: int) -> list[_Period]:
    """Remove [start, end) from every period, splitting where needed."""
    result: list[_Period] = []
    for p_start, p_end in periods:
        if end <= p_start or start >= p_end:
            result.append((p_start, p_end))
            continue
        if p_start < start:
            result.append((p_start, start))
        if end < p_end:
            result.append((end, p_end))
    return result


def _normalise(periods: list[_Period]) -> list[_Period]:
    """Sort and merge overlapping periods."""
    merged: list[_Period] = []
    for p_start, p_end in sorted(periods):
        if merged and p_start < merged[-1][1]:
            merged[-1] = (merged[-1][0], max(merged[-1][1], p_end))
        else:
            merged.append((p_start, p_end))
    return merged


class WorkingCalendar:
    """Horizon-free calendar answering queries by a lazy day-by-day walk.

    Rules map weekday (0=Mon .. 6=Sun) to ("HH:MM", "HH:MM") periods. A
    period whose end is not after its start crosses midnight; "00:00" as
    an end means end of day. Exceptions map ISO dates to entries:

        {"is_working": false}                         closes the whole day
        {"is_working": false, "start": .., "end": ..} removes a period
        {"is_working": true, "start": .., "end": ..}  adds a period

    All datetimes are naive.
    """

    def __init__(
        self,
        pattern_id: str,
        rules: dict[int, list[tuple[str, str]]],
        exceptions: dict[str, list[dict]] | None = None,
    ) -> None:
        self.pattern_id = pattern_id

        self._rules: dict[int, list[tuple[int, int]]] = {}
        for day_key, periods in rules.items():
            parsed = [(_parse_minutes(s), _parse_minutes(e)) for s, e in periods]
            self._rules[int(day_key)] = sorted(parsed)

        self._exceptions: dict[str, list[dict]] = dict(exceptions or {})

    @classmethod
    def daily(
        cls,
        pattern_id: str,
        start: str,
        end: str,
        exceptions: dict[str, list[dict]] | None = None,
    ) -> WorkingCalendar:
        """Same window every day of the week."""
        return cls(
            pattern_id,
            {weekday: [(start, end)] for weekday in range(7)},
            exceptions,
        )

    def __repr__(self) -> str:
        return f"WorkingCalendar({self.pattern_id!r})"

    def periods_for_date(self, d: date) -> list[tuple[time, time]]:
        """Working periods of a date as sorted (start, end) time pairs.

        Resolves weekly rules, overnight carryover from the previous day
        and planned exceptions. time(0, 0) as an end means midnight.
        """
        return [(_as_time(s), _as_time(e)) for s, e in self._periods(d)]

    def _periods(self, d: date) -> list[_Period]:
        entries = self._exceptions.get(d.isoformat())
        if not entries:
            return self._resolve_rules(d)

        closed = any(
            not entry.get("is_working", True)
            and "start" not in entry
            and "end" not in entry
            for entry in entries
        )
        periods = [] if closed else self._resolve_rules(d)

        for entry in entries:
            if "start" not in entry or "end" not in entry:
                continue
            start = _parse_minutes(entry["start"])
            end = _parse_minutes(entry["end"]) or MINUTES_PER_DAY
            if entry.get("is_working", False):
                periods.append((start, end))
            else:
                periods = _subtract(periods, start, end)

        return _normalise(periods)

    def _resolve_rules(self, d: date) -> list[_Period]:
        periods: list[_Period] = []

        for start, end in self._rules.get(d.weekday(), []):
            if end <= start:
                periods.append((start, MINUTES_PER_DAY))
            else:
                periods.append((start, end))

        # Tail of yesterday's overnight periods
        prev_weekday = (d - timedelta(days=1)).weekday()
        for start, end in self._rules.get(prev_weekday, []):
            if end < start and end != 0:
                periods.append((0, end))

        return _normalise(periods)

    def intervals_for_date(self, d: date) -> list[tuple[datetime, datetime]]:
        """Working periods of a date as datetime intervals."""
        midnight = datetime.combine(d, time(0, 0))
        return [
            (midnight + timedelta(minutes=s), midnight + timedelta(minutes=e))
            for s, e in self._periods(d)
        ]

    def next_interval(
        self,
        after: datetime,
        lookahead_days: int = 366,
    ) -> tuple[datetime, datetime] | None:
        """Next maximal contiguous working interval at or after `after`.

        If `after` is inside working time the interval starts at `after`.
        Periods that touch, including across midnight, are merged. Returns
        None when no working time exists within `lookahead_days`.
        """
        current = after.date()
        found: list[datetime] | None = None

        for _ in range(lookahead_days + 1):
            for iv_start, iv_end in self.intervals_for_date(current):
                if iv_end <= after:
                    continue
                if found is None:
                    found = [max(iv_start, after), iv_end]
                elif iv_start <= found[1]:
                    found[1] = max(found[1], iv_end)
                else:
                    return (found[0], found[1])

            current += timedelta(days=1)
            if found is not None and found[1] < datetime.combine(current, time(0, 0)):
                return (found[0], found[1])

        if found is None:
            return None
        return (found[0], found[1])
