"""Earliest common range across several forward range sources."""

from __future__ import annotations

import logging
from typing import Sequence

from reservation_primitives.config import DEFAULT_SETTINGS
from reservation_primitives.pattern import RangeFn, RangeSource, as_range_fn
from reservation_primitives.types import Range

logger = logging.getLogger(__name__)


def intersect(
    sources: Sequence[RangeSource | RangeFn],
    reference: int,
    search_bound: int = DEFAULT_SETTINGS.search_bound,
) -> Range | None:
    """Earliest [start, end) inside the current range of every source.

    Keeps one current range per source. While the latest start is not
    before the earliest end there is no overlap, so the source whose
    range ends first is advanced. Gives up with None after `search_bound`
    advancements: two recurring windows that never meet would otherwise
    loop forever. Also None as soon as any source runs dry.
    """
    if not sources:
        raise ValueError("intersect() needs at least one source")

    fns = [as_range_fn(source) for source in sources]
    current: list[Range] = []
    for fn in fns:
        rng = fn(reference)
        if rng is None:
            return None
        current.append(rng)

    steps = 0
    while True:
        latest_start = max(start for start, _ in current)
        earliest_end = min(end for _, end in current)
        if latest_start < earliest_end:
            return (latest_start, earliest_end)
        if steps >= search_bound:
            break

        # Nothing can overlap before latest_start, so skip straight to it
        lagging = min(range(len(current)), key=lambda i: current[i][1])
        rng = fns[lagging](max(current[lagging][1], latest_start))
        if rng is None:
            return None
        current[lagging] = rng
        steps += 1

    logger.debug(
        "No common range across %d sources from %d within %d steps",
        len(fns), reference, search_bound,
    )
    return None
