"""ASCII visualisation of resource availability for development-time checks.

This module is dev-only and not imported by production code.
"""

from __future__ import annotations

from datetime import date, datetime, time, timedelta
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from reservation_primitives.manager import ResourceManager
    from reservation_primitives.resolution import TimeResolution

_DAY_NAMES = ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]
_CHARS_PER_DAY = 48
_MINUTES_PER_CHAR = 30


def show_availability(
    manager: ResourceManager,
    epoch: datetime,
    resolution: TimeResolution,
    start: date,
    end: date,
) -> str:
    """Print one block per resource, one row per day in [start, end).

    Legend: '.' = unavailable, '-' = free, '#' = booked. Each char is 30
    minutes; a block shows '#' if any of it is booked, else '-' if any of
    it is free. Returns the string and also prints it.
    """
    header = "".join(f"{h:02d}" if h % 3 == 0 else "  " for h in range(24))
    lines: list[str] = []

    for resource_id, resource in manager._resources.items():
        lines.append(f"=== {resource_id} ===")
        lines.append(f"{'':>10s}  {header}")

        current = start
        while current < end:
            midnight = datetime.combine(current, time(0, 0))
            row = []
            for i in range(_CHARS_PER_DAY):
                block_start = midnight + timedelta(minutes=i * _MINUTES_PER_CHAR)
                t0 = resolution.to_int(block_start, epoch, "floor")
                t1 = resolution.to_int(
                    block_start + timedelta(minutes=_MINUTES_PER_CHAR), epoch, "ceil"
                )
                if any(exc.overlaps(t0, t1) for exc in resource.exceptions):
                    row.append("#")
                    continue
                free = resource.next_range(t0)
                row.append("-" if free is not None and free[0] < t1 else ".")

            label = f"{_DAY_NAMES[current.weekday()]} {current.strftime('%d %b')}"
            lines.append(f"{label:>10s}  {''.join(row)}")
            current += timedelta(days=1)

        lines.append("")

    lines.append("Legend: . = unavailable, - = free, # = booked")
    result = "\n".join(lines)
    print(result)
    return result
