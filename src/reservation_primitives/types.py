"""Shared types: ranges, exception intervals, results and errors."""

from __future__ import annotations

from dataclasses import dataclass

# Half-open [start, end) in integer resolution units from the epoch.
Range = tuple[int, int]


@dataclass(frozen=True, order=True)
class ExceptionInterval:
    """A concrete interval carved out of a resource's availability.

    Created when a reservation commits against the resource. Half-open:
    [start, end). Ordering is by (start, end).
    """

    start: int
    end: int

    def __post_init__(self) -> None:
        if self.end <= self.start:
            raise ValueError(
                f"ExceptionInterval requires start < end, "
                f"got [{self.start}, {self.end})"
            )

    @property
    def duration(self) -> int:
        return self.end - self.start

    def overlaps(self, start: int, end: int) -> bool:
        """Whether [start, end) shares at least one unit with this interval."""
        return self.start < end and start < self.end

    def as_range(self) -> Range:
        return (self.start, self.end)


@dataclass(frozen=True)
class ReservationResult:
    """Outcome of a reservation search. Ephemeral, never stored by the manager.

    Invariants:
        - len(resources) == number of requirement terms when success
        - duration > 0 when success
        - a failed result carries no resources, start 0 and duration 0
    """

    resources: tuple[str, ...]
    start: int
    duration: int
    success: bool

    @property
    def end(self) -> int:
        """One past the last booked unit."""
        return self.start + self.duration

    @classmethod
    def failed(cls) -> ReservationResult:
        return cls(resources=(), start=0, duration=0, success=False)


@dataclass(frozen=True)
class ResourceStatus:
    """Read-only view of one resource, as produced by availability_snapshot."""

    resource_id: str
    next_avail: Range | None
    exceptions: tuple[ExceptionInterval, ...]


class ReservationError(ValueError):
    """Base class for malformed reservation input. Never mutates state."""


class UnknownResourceError(ReservationError, KeyError):
    """Raised when a requirement names a resource the manager does not own."""

    def __init__(self, resource_id: str) -> None:
        self.resource_id = resource_id
        super().__init__(f"Unknown resource id {resource_id!r}")

    def __str__(self) -> str:
        # KeyError would otherwise repr() the message
        return self.args[0]


class InvalidRequirementError(ReservationError):
    """Raised for an empty requirement spec or an empty disjunctive group."""

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(f"Invalid requirement: {reason}")


class InvalidDurationError(ReservationError):
    """Raised when min_duration <= 0 or max_duration < min_duration."""

    def __init__(
        self,
        min_duration: int,
        max_duration: int | None,
        reason: str,
    ) -> None:
        self.min_duration = min_duration
        self.max_duration = max_duration
        self.reason = reason
        super().__init__(
            f"Invalid duration bounds: min={min_duration}, "
            f"max={max_duration} ({reason})"
        )


class SearchExhaustedError(Exception):
    """Internal: the search bound was hit before a feasible window was found.

    Never escapes ResourceManager.reserve; it collapses into a failed
    ReservationResult.
    """

    def __init__(self, reference: int, steps: int) -> None:
        self.reference = reference
        self.steps = steps
        super().__init__(
            f"Search exhausted after {steps} steps from instant {reference}"
        )
