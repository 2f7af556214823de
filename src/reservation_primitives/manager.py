"""ResourceManager: owns resources, searches and commits reservations.

Commits and prunes are the only two operations that change a resource,
and both run under the manager's lock together with the search that
precedes them, so a search never reads half-committed state.
"""

from __future__ import annotations

import logging
import threading
from datetime import datetime
from typing import Any, Iterable, Sequence

from reservation_primitives.calendar import WorkingCalendar
from reservation_primitives.config import DEFAULT_SETTINGS, SearchSettings
from reservation_primitives.evaluator import Source, resolve
from reservation_primitives.pattern import (
    CalendarPattern,
    RangeFn,
    RangeSource,
    as_range_fn,
    next_range_excluding,
)
from reservation_primitives.resolution import MINUTE, TimeResolution
from reservation_primitives.types import (
    ExceptionInterval,
    Range,
    ReservationResult,
    ResourceStatus,
    UnknownResourceError,
)

logger = logging.getLogger(__name__)

# Marks a duration bound the caller did not pass; None means unbounded.
_UNSET: Any = object()


class Resource:
    """A bookable entity: id, recurring availability and its carve-outs.

    Exceptions are kept in insertion order. The search only ever books
    time the overlay reports as free, so they never overlap.
    """

    def __init__(
        self,
        resource_id: str,
        pattern: RangeSource | RangeFn,
        exceptions: Iterable[ExceptionInterval] = (),
    ) -> None:
        self.resource_id = resource_id
        self.pattern = pattern
        self._next_base = as_range_fn(pattern)
        self._exceptions: list[ExceptionInterval] = list(exceptions)
        self._version = 0

    @classmethod
    def from_calendar(
        cls,
        cal: WorkingCalendar,
        epoch: datetime,
        resolution: TimeResolution = MINUTE,
        settings: SearchSettings = DEFAULT_SETTINGS,
    ) -> Resource:
        """Resource named after the calendar, available on its working time."""
        pattern = CalendarPattern(
            cal, epoch, resolution, lookahead_days=settings.calendar_lookahead_days
        )
        return cls(cal.pattern_id, pattern)

    def __repr__(self) -> str:
        return (
            f"Resource({self.resource_id!r}, "
            f"exceptions={len(self._exceptions)}, version={self._version})"
        )

    @property
    def exceptions(self) -> tuple[ExceptionInterval, ...]:
        return tuple(self._exceptions)

    @property
    def version(self) -> int:
        """Bumped on every change to the exception set."""
        return self._version

    def next_range(self, instant: int) -> Range | None:
        """Pattern availability at or after `instant`, minus exceptions."""
        return next_range_excluding(self._next_base, self._exceptions, instant)

    def copy(self) -> Resource:
        return Resource(self.resource_id, self.pattern, self._exceptions)

    def carve(self, start: int, end: int) -> ExceptionInterval:
        """Block [start, end) on this resource."""
        exc = ExceptionInterval(start, end)
        self._exceptions.append(exc)
        self._version += 1
        return exc

    def prune(self, instant: int) -> int:
        """Drop exceptions ending at or before `instant`; returns how many."""
        kept = [exc for exc in self._exceptions if exc.end > instant]
        removed = len(self._exceptions) - len(kept)
        if removed:
            self._exceptions = kept
            self._version += 1
        return removed


class ResourceManager:
    """Exclusive owner of a set of resources.

    Resources passed in are copied; callers keep no handle on the managed
    state. `reference` anchors pruning only; each reservation supplies its
    own search start.
    """

    def __init__(
        self,
        resources: Iterable[Resource],
        reference: int,
        settings: SearchSettings = DEFAULT_SETTINGS,
    ) -> None:
        self._resources: dict[str, Resource] = {}
        for resource in resources:
            if resource.resource_id in self._resources:
                raise ValueError(f"Duplicate resource id {resource.resource_id!r}")
            self._resources[resource.resource_id] = resource.copy()

        self.reference = reference
        self.settings = settings
        self._lock = threading.RLock()

    def __contains__(self, resource_id: object) -> bool:
        return resource_id in self._resources

    def __len__(self) -> int:
        return len(self._resources)

    @property
    def resource_ids(self) -> tuple[str, ...]:
        return tuple(self._resources)

    def get(self, resource_id: str) -> ResourceStatus:
        """Status of one resource at the manager's reference instant."""
        with self._lock:
            try:
                resource = self._resources[resource_id]
            except KeyError:
                raise UnknownResourceError(resource_id) from None
            return self._status(resource)

    def _status(self, resource: Resource) -> ResourceStatus:
        return ResourceStatus(
            resource_id=resource.resource_id,
            next_avail=resource.next_range(self.reference),
            exceptions=resource.exceptions,
        )

    def availability_snapshot(self) -> dict[str, ResourceStatus]:
        """Next available range of every resource on its own.

        Not intersected with any project window; a diagnostic view,
        independent of reservation search.
        """
        with self._lock:
            return {rid: self._status(res) for rid, res in self._resources.items()}

    def reserve(
        self,
        requirements: Sequence[object],
        project_range: Source,
        from_date: int,
        min_duration: int = _UNSET,
        max_duration: int | None = _UNSET,
    ) -> ReservationResult:
        """Find the earliest feasible window and book it on every resource used.

        Omitted duration bounds fall back to the manager's settings;
        max_duration=None asks for no cap. A settings cap below a caller
        min_duration is raised to it. On failure nothing changes.
        Malformed input raises a ReservationError subclass before any
        search.
        """
        if min_duration is _UNSET:
            min_duration = self.settings.min_duration
        if max_duration is _UNSET:
            max_duration = self.settings.max_duration
            if max_duration is not None and isinstance(min_duration, int):
                max_duration = max(max_duration, min_duration)

        with self._lock:
            sources = {rid: res.next_range for rid, res in self._resources.items()}
            result = resolve(
                requirements,
                sources,
                project_range,
                from_date,
                min_duration=min_duration,
                max_duration=max_duration,
                search_bound=self.settings.search_bound,
            )
            if result.success:
                self._commit(result)
            return result

    def _commit(self, result: ReservationResult) -> None:
        # A resource satisfying several terms is booked once
        for resource_id in dict.fromkeys(result.resources):
            self._resources[resource_id].carve(result.start, result.end)
        logger.info(
            "Reserved %s at %d for %d units",
            ", ".join(result.resources), result.start, result.duration,
        )

    def move_start_date(self, instant: int) -> int:
        """Advance the reference instant and drop exceptions ended by it.

        Only exceptions with end <= instant go; anything still in effect
        stays. Idempotent for a repeated instant. Returns how many
        exceptions were removed.
        """
        with self._lock:
            self.reference = instant
            removed = sum(res.prune(instant) for res in self._resources.values())
        logger.debug("Pruned %d exceptions at %d", removed, instant)
        return removed
