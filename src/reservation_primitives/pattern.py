"""Recurrence patterns at the integer seam: next_range(instant) -> range.

The engine only consumes the RangeSource contract. CalendarPattern is the
shipped provider; next_range_excluding layers booked exceptions over any
source.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from functools import lru_cache
from typing import Callable, Protocol, Sequence

from reservation_primitives.calendar import WorkingCalendar
from reservation_primitives.resolution import MINUTE, TimeResolution
from reservation_primitives.types import ExceptionInterval, Range

# Bare callable form of a source, e.g. a bound method or a memoized wrapper.
RangeFn = Callable[[int], "Range | None"]


class RangeSource(Protocol):
    """Anything producing successive forward ranges.

    next_range(instant) returns the earliest [start, end) with
    start >= instant and start < end, clipped to start at `instant` when
    `instant` is inside available time. None means nothing further.
    """

    def next_range(self, instant: int) -> Range | None: ...


def as_range_fn(source: RangeSource | RangeFn) -> RangeFn:
    """Accept either a RangeSource or a plain callable."""
    next_range = getattr(source, "next_range", None)
    if next_range is not None:
        return next_range
    if callable(source):
        return source
    raise TypeError(f"{source!r} is neither a RangeSource nor callable")


@dataclass(frozen=True)
class CalendarPattern:
    """RangeSource backed by a WorkingCalendar.

    Range starts are rounded up and ends rounded down to the resolution,
    so a coarse resolution never reports time the calendar does not have.
    """

    calendar: WorkingCalendar
    epoch: datetime
    resolution: TimeResolution = MINUTE
    lookahead_days: int = 366

    def next_range(self, instant: int) -> Range | None:
        after = self.resolution.to_datetime(instant, self.epoch)
        # Intervals thinner than one unit vanish after rounding
        for _ in range(self.lookahead_days):
            interval = self.calendar.next_interval(after, self.lookahead_days)
            if interval is None:
                return None
            start = self.resolution.to_int(interval[0], self.epoch, "ceil")
            end = self.resolution.to_int(interval[1], self.epoch, "floor")
            if start < end:
                return (start, end)
            after = interval[1]
        return None


def next_range_excluding(
    source: RangeSource | RangeFn,
    exceptions: Sequence[ExceptionInterval],
    instant: int,
) -> Range | None:
    """Next range of `source` at or after `instant` not covered by exceptions.

    Exceptions are absolute carve-outs; they need not be sorted. Each base
    range is either trimmed, cut short at the first exception inside it,
    or skipped entirely because exceptions cover it. A skipped range uses
    up at least one exception, so the loop runs at most len(exceptions)+1
    times.
    """
    next_range = as_range_fn(source)
    ordered = sorted(exceptions)
    cursor = instant

    for _ in range(len(ordered) + 1):
        base = next_range(cursor)
        if base is None:
            return None
        start, end = base

        for exc in ordered:
            if not exc.overlaps(start, end):
                continue
            if exc.start <= start:
                start = exc.end
                if start >= end:
                    break
            else:
                end = exc.start
                break

        if start < end:
            return (start, end)
        # start now sits on the end of the exception that swallowed the range
        cursor = start

    return None


def memoize_range_fn(source: RangeSource | RangeFn, maxsize: int | None = 4096) -> RangeFn:
    """Cache a pure source's answers per instant.

    Only for sources whose answers never change, such as a project
    window. Resource sources change as exceptions are carved and must not
    be wrapped.
    """
    return lru_cache(maxsize=maxsize)(as_range_fn(source))
