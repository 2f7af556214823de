"""Requirement evaluation: earliest window satisfying an AND-of-OR spec.

Read-only. Nothing here mutates a resource; committing the outcome is the
manager's job.
"""

from __future__ import annotations

import logging
from itertools import islice, product
from typing import Mapping, Sequence, Union

from reservation_primitives.config import DEFAULT_SETTINGS
from reservation_primitives.intersect import intersect
from reservation_primitives.pattern import RangeFn, RangeSource, as_range_fn
from reservation_primitives.requirements import (
    Mandatory,
    Term,
    check_known,
    parse_requirements,
)
from reservation_primitives.types import (
    InvalidDurationError,
    Range,
    ReservationResult,
    SearchExhaustedError,
)

logger = logging.getLogger(__name__)

Source = Union[RangeSource, RangeFn]


def check_durations(min_duration: int, max_duration: int | None) -> None:
    """Raise InvalidDurationError unless 0 < min_duration <= max_duration."""
    if min_duration <= 0:
        raise InvalidDurationError(
            min_duration, max_duration, "min_duration must be positive"
        )
    if max_duration is not None and max_duration < min_duration:
        raise InvalidDurationError(
            min_duration, max_duration, "max_duration is below min_duration"
        )


def resolve(
    requirements: Sequence[object],
    sources: Mapping[str, Source],
    project_range: Source,
    reference: int,
    min_duration: int = DEFAULT_SETTINGS.min_duration,
    max_duration: int | None = DEFAULT_SETTINGS.max_duration,
    search_bound: int = DEFAULT_SETTINGS.search_bound,
) -> ReservationResult:
    """Find the earliest window at or after `reference` meeting every term.

    Args:
        requirements: Terms, or raw ids and id groups (see parse_requirements).
        sources: resource id -> availability source, exceptions applied.
        project_range: Project-wide window every reservation must sit in.
        reference: Instant the search starts from. Never looks backward.
        min_duration: Shortest acceptable window, in resolution units.
        max_duration: Cap on the reserved duration; None for no cap.
        search_bound: Cap on intersection steps and on rejected windows.

    Returns:
        A successful ReservationResult listing, per term in input order,
        the resource that satisfied it. A failed result when the search
        bound is hit or a source runs dry.

    Raises:
        InvalidRequirementError: Empty spec or empty group.
        UnknownResourceError: A term names an id missing from `sources`.
        InvalidDurationError: Non-positive or inverted duration bounds.
    """
    terms = parse_requirements(requirements)
    check_known(terms, sources)
    check_durations(min_duration, max_duration)

    try:
        return _search(
            terms, sources, as_range_fn(project_range), reference,
            min_duration, max_duration, search_bound,
        )
    except SearchExhaustedError as exc:
        logger.debug("Reservation failed: %s", exc)
        return ReservationResult.failed()


def _search(
    terms: tuple[Term, ...],
    sources: Mapping[str, Source],
    project: RangeFn,
    reference: int,
    min_duration: int,
    max_duration: int | None,
    search_bound: int,
) -> ReservationResult:
    cursor = reference

    for attempt in range(search_bound):
        ranked = [
            _rank(term, sources, project, cursor, search_bound, reference)
            for term in terms
        ]
        chosen, window = _first_joint_window(ranked, sources, project, cursor, search_bound)
        if window is None:
            raise SearchExhaustedError(reference, attempt + 1)

        start, end = window
        available = end - start
        if available >= min_duration:
            duration = available if max_duration is None else min(available, max_duration)
            return ReservationResult(
                resources=chosen,
                start=start,
                duration=duration,
                success=True,
            )

        logger.debug(
            "Rejected window [%d, %d) for %s: %d < min_duration %d",
            start, end, chosen, available, min_duration,
        )
        cursor = end

    raise SearchExhaustedError(reference, search_bound)


def _joint_window(
    chosen: tuple[str, ...],
    sources: Mapping[str, Source],
    project: RangeFn,
    cursor: int,
    search_bound: int,
) -> Range | None:
    joint = [sources[rid] for rid in dict.fromkeys(chosen)]
    joint.append(project)
    return intersect(joint, cursor, search_bound)


def _first_joint_window(
    ranked: list[list[str]],
    sources: Mapping[str, Source],
    project: RangeFn,
    cursor: int,
    search_bound: int,
) -> tuple[tuple[str, ...], Range | None]:
    """Joint window for the earliest member of every term.

    When those members share no window, every other combination of
    feasible members is tried and the earliest joint start wins; ties go
    to the combination ranked first.
    """
    preferred = tuple(members[0] for members in ranked)
    window = _joint_window(preferred, sources, project, cursor, search_bound)
    if window is not None:
        return preferred, window

    logger.debug("No joint window for %s from %d; trying other members", preferred, cursor)
    best: tuple[tuple[str, ...], Range | None] = (preferred, None)
    for combo in islice(product(*ranked), 1, None):
        window = _joint_window(combo, sources, project, cursor, search_bound)
        if window is not None and (best[1] is None or window[0] < best[1][0]):
            best = (combo, window)
    return best


def _rank(
    term: Term,
    sources: Mapping[str, Source],
    project: RangeFn,
    cursor: int,
    search_bound: int,
    reference: int,
) -> list[str]:
    """Resource ids able to satisfy `term` at `cursor`, best first.

    For AnyOf, each member is intersected with the project window on its
    own; members are ordered by that start, equal starts keeping the
    listed order. Members that never meet the project window are dropped.
    """
    if isinstance(term, Mandatory):
        return [term.resource_id]

    starts: list[tuple[int, int, str]] = []
    for position, resource_id in enumerate(term.resource_ids):
        window = intersect([sources[resource_id], project], cursor, search_bound)
        if window is not None:
            starts.append((window[0], position, resource_id))

    if not starts:
        raise SearchExhaustedError(reference, search_bound)
    return [resource_id for _, _, resource_id in sorted(starts)]
