"""Search settings shared by the evaluator and the manager."""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Any, Mapping


@dataclass(frozen=True)
class SearchSettings:
    """Tunables for reservation search. Immutable.

    search_bound caps the number of advancement steps of one intersection
    and the number of windows one reservation may reject. It is the only
    timeout the engine has.
    """

    search_bound: int = 1000
    min_duration: int = 1
    max_duration: int | None = None
    calendar_lookahead_days: int = 366

    def __post_init__(self) -> None:
        if self.search_bound <= 0:
            raise ValueError(f"search_bound must be positive, got {self.search_bound}")
        if self.min_duration <= 0:
            raise ValueError(f"min_duration must be positive, got {self.min_duration}")
        if self.max_duration is not None and self.max_duration < self.min_duration:
            raise ValueError(
                f"max_duration ({self.max_duration}) must be >= "
                f"min_duration ({self.min_duration})"
            )
        if self.calendar_lookahead_days <= 0:
            raise ValueError(
                f"calendar_lookahead_days must be positive, "
                f"got {self.calendar_lookahead_days}"
            )

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> SearchSettings:
        """Build settings from a JSON-style block. Unknown keys are rejected."""
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ValueError(f"Unknown search settings: {', '.join(unknown)}")
        for key, value in data.items():
            if key == "max_duration" and value is None:
                continue
            if not isinstance(value, int) or isinstance(value, bool):
                raise ValueError(f"Setting {key!r} must be an integer, got {value!r}")
        return cls(**data)


DEFAULT_SETTINGS = SearchSettings()
