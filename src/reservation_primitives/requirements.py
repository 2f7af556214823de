"""Requirement terms: an AND over terms, each one resource or any of a group."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Sequence, Union

from reservation_primitives.types import InvalidRequirementError, UnknownResourceError


@dataclass(frozen=True)
class Mandatory:
    """Exactly this resource must be available."""

    resource_id: str

    @property
    def candidates(self) -> tuple[str, ...]:
        return (self.resource_id,)


@dataclass(frozen=True)
class AnyOf:
    """Any one member suffices; the earliest feasible member wins.

    Ties on start go to the member listed first.
    """

    resource_ids: tuple[str, ...]

    def __post_init__(self) -> None:
        if not self.resource_ids:
            raise InvalidRequirementError("empty disjunctive group")

    @property
    def candidates(self) -> tuple[str, ...]:
        return self.resource_ids


Term = Union[Mandatory, AnyOf]


def _check_id(value: object, where: str) -> str:
    if not isinstance(value, str):
        raise InvalidRequirementError(
            f"{where}: resource id must be a string, got {value!r}"
        )
    return value


def parse_requirements(spec: Sequence[object]) -> tuple[Term, ...]:
    """Normalise a requirement spec into terms.

    Items may be a resource id (Mandatory), a sequence of ids (AnyOf) or
    an already-built term. The outer sequence is conjunctive.

    >>> parse_requirements(["A", ["B", "C"]])
    (Mandatory(resource_id='A'), AnyOf(resource_ids=('B', 'C')))
    """
    if isinstance(spec, (str, bytes)):
        raise InvalidRequirementError(
            f"requirements must be a sequence of terms, got {spec!r}"
        )
    terms: list[Term] = []
    for i, item in enumerate(spec):
        if isinstance(item, (Mandatory, AnyOf)):
            terms.append(item)
        elif isinstance(item, str):
            terms.append(Mandatory(item))
        elif isinstance(item, (list, tuple)):
            ids = tuple(_check_id(member, f"term {i}") for member in item)
            if not ids:
                raise InvalidRequirementError(f"term {i}: empty disjunctive group")
            terms.append(AnyOf(ids))
        else:
            raise InvalidRequirementError(
                f"term {i}: expected a resource id or a group of ids, "
                f"got {item!r}"
            )

    if not terms:
        raise InvalidRequirementError("no terms given")
    return tuple(terms)


def check_known(terms: Iterable[Term], known_ids: Iterable[str]) -> None:
    """Raise UnknownResourceError for the first id not in known_ids."""
    known = set(known_ids)
    for term in terms:
        for resource_id in term.candidates:
            if resource_id not in known:
                raise UnknownResourceError(resource_id)
