"""Boundary: TimeResolution — datetime ↔ integer instant conversion."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Literal

Rounding = Literal["exact", "floor", "ceil"]


def _reject_aware(dt: datetime, name: str) -> None:
    """Instants are naive; localisation belongs to the pattern provider."""
    if dt.tzinfo is not None:
        raise TypeError(
            f"{name} must be a naive datetime (no tzinfo), "
            f"got tzinfo={dt.tzinfo!r}"
        )


@dataclass(frozen=True)
class TimeResolution:
    """Unit of the integer instants the engine works on. Immutable.

    Instants are whole units elapsed since an epoch. Durations use the
    same unit.
    """

    unit_seconds: int
    label: str

    def to_int(
        self,
        dt: datetime,
        epoch: datetime,
        rounding: Rounding = "exact",
    ) -> int:
        """Convert datetime to integer units from epoch.

        With rounding="exact" an unaligned datetime raises ValueError;
        "floor" and "ceil" align to the neighbouring unit instead.
        """
        _reject_aware(dt, "dt")
        _reject_aware(epoch, "epoch")

        delta_seconds = int((dt - epoch).total_seconds())
        units, remainder = divmod(delta_seconds, self.unit_seconds)
        if remainder == 0:
            return units
        if rounding == "floor":
            return units
        if rounding == "ceil":
            return units + 1
        raise ValueError(
            f"datetime {dt.isoformat()} does not align to {self.label} "
            f"resolution (unit_seconds={self.unit_seconds}), "
            f"remainder {remainder}s"
        )

    def to_datetime(self, t: int, epoch: datetime) -> datetime:
        """Convert integer units from epoch to datetime."""
        _reject_aware(epoch, "epoch")
        return epoch + timedelta(seconds=t * self.unit_seconds)

    def units(self, minutes: int) -> int:
        """Express a whole number of minutes in this resolution's units."""
        seconds = minutes * 60
        if seconds % self.unit_seconds:
            raise ValueError(
                f"{minutes} minutes is not a whole number of "
                f"{self.label} units"
            )
        return seconds // self.unit_seconds


MINUTE = TimeResolution(unit_seconds=60, label="minute")
HOUR = TimeResolution(unit_seconds=3600, label="hour")
