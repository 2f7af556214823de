"""reservation-primitives: Resource reservation against recurring availability."""

from reservation_primitives.calendar import WorkingCalendar
from reservation_primitives.config import DEFAULT_SETTINGS, SearchSettings
from reservation_primitives.evaluator import resolve
from reservation_primitives.intersect import intersect
from reservation_primitives.manager import Resource, ResourceManager
from reservation_primitives.pattern import (
    CalendarPattern,
    RangeSource,
    memoize_range_fn,
    next_range_excluding,
)
from reservation_primitives.requirements import AnyOf, Mandatory, parse_requirements
from reservation_primitives.resolution import HOUR, MINUTE, TimeResolution
from reservation_primitives.types import (
    ExceptionInterval,
    InvalidDurationError,
    InvalidRequirementError,
    ReservationError,
    ReservationResult,
    ResourceStatus,
    UnknownResourceError,
)

__all__ = [
    "AnyOf",
    "CalendarPattern",
    "DEFAULT_SETTINGS",
    "ExceptionInterval",
    "HOUR",
    "InvalidDurationError",
    "InvalidRequirementError",
    "MINUTE",
    "Mandatory",
    "RangeSource",
    "ReservationError",
    "ReservationResult",
    "Resource",
    "ResourceManager",
    "ResourceStatus",
    "SearchSettings",
    "TimeResolution",
    "UnknownResourceError",
    "WorkingCalendar",
    "intersect",
    "memoize_range_fn",
    "next_range_excluding",
    "parse_requirements",
    "resolve",
]
