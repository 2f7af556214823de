"""Tests for requirement parsing and validation."""

from __future__ import annotations

import pytest

from reservation_primitives.requirements import (
    AnyOf,
    Mandatory,
    check_known,
    parse_requirements,
)
from reservation_primitives.types import InvalidRequirementError, UnknownResourceError


class TestParse:

    def test_mandatory(self):
        assert parse_requirements(["A", "B"]) == (Mandatory("A"), Mandatory("B"))

    def test_any_of(self):
        assert parse_requirements([["A", "B"]]) == (AnyOf(("A", "B")),)

    def test_tuple_group(self):
        assert parse_requirements([("A", "B")]) == (AnyOf(("A", "B")),)

    def test_mixed_keeps_order(self):
        terms = parse_requirements(["B", ["C", "E"], "A"])
        assert terms == (Mandatory("B"), AnyOf(("C", "E")), Mandatory("A"))

    def test_terms_pass_through(self):
        terms = (Mandatory("A"), AnyOf(("B",)))
        assert parse_requirements(terms) == terms

    def test_candidates(self):
        assert Mandatory("A").candidates == ("A",)
        assert AnyOf(("A", "B")).candidates == ("A", "B")

    @pytest.mark.parametrize(
        "spec,match",
        [
            ([], "no terms"),
            ([[]], "empty disjunctive group"),
            (["A", []], "empty disjunctive group"),
            ([42], "expected a resource id"),
            ([["A", 3]], "must be a string"),
            ("AB", "sequence of terms"),
        ],
    )
    def test_invalid(self, spec, match):
        with pytest.raises(InvalidRequirementError, match=match):
            parse_requirements(spec)

    def test_empty_any_of_term(self):
        with pytest.raises(InvalidRequirementError):
            AnyOf(())


class TestCheckKnown:

    def test_all_known(self):
        check_known(parse_requirements(["A", ["B", "C"]]), {"A", "B", "C"})

    def test_first_unknown_reported(self):
        terms = parse_requirements(["A", ["B", "Z"], "Q"])
        with pytest.raises(UnknownResourceError) as exc_info:
            check_known(terms, ["A", "B"])
        assert exc_info.value.resource_id == "Z"
