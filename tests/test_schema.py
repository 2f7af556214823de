"""Tests for rule, exception and resource-definition validation."""

from __future__ import annotations

import pytest

from reservation_primitives.schema import (
    validate_exceptions,
    validate_resource,
    validate_rules,
)


class TestValidateRules:

    def test_valid(self):
        assert validate_rules({0: [["08:00", "12:00"], ["13:00", "17:00"]]}) == []

    def test_touching_periods_allowed(self):
        assert validate_rules({4: [["08:00", "12:00"], ["12:00", "17:00"]]}) == []

    def test_overnight_allowed(self):
        assert validate_rules({3: [["22:00", "06:00"], ["08:00", "12:00"]]}) == []

    @pytest.mark.parametrize("key", [-1, 7, "mon"])
    def test_bad_weekday(self, key):
        errors = validate_rules({key: [["08:00", "12:00"]]})
        assert len(errors) == 1
        assert "Invalid weekday key" in errors[0]

    def test_bad_time(self):
        errors = validate_rules({0: [["8am", "12:00"]]})
        assert "invalid time" in errors[0]

    def test_bad_shape(self):
        errors = validate_rules({0: [["08:00"]]})
        assert "expected [start, end]" in errors[0]

    def test_overlap(self):
        errors = validate_rules({2: [["08:00", "12:00"], ["11:00", "15:00"]]})
        assert errors == [
            "Weekday 2: overlapping periods "
            "(datetime.time(8, 0), datetime.time(12, 0)) and "
            "(datetime.time(11, 0), datetime.time(15, 0))"
        ]

    def test_collects_all_errors(self):
        errors = validate_rules({9: [], 0: [["x", "y"], ["08:00"]]})
        assert len(errors) == 3


class TestValidateExceptions:

    def test_valid(self):
        exceptions = {
            "2013-03-22": [{"is_working": False}],
            "2013-03-23": [{"is_working": True, "start": "09:00", "end": "13:00"}],
            "2013-03-25": [{"is_working": False, "start": "12:00", "end": "13:00"}],
        }
        assert validate_exceptions(exceptions) == []

    @pytest.mark.parametrize(
        "exceptions,fragment",
        [
            ({"2013-02-30": [{"is_working": False}]}, "Invalid date"),
            ({"2013-03-22": {"is_working": False}}, "must be a list"),
            ({"2013-03-22": [{}]}, "missing 'is_working'"),
            ({"2013-03-22": [{"is_working": "no"}]}, "must be boolean"),
            ({"2013-03-22": [{"is_working": True}]}, "need start and end"),
            ({"2013-03-22": [{"is_working": False, "start": "09:00"}]}, "or neither"),
            (
                {"2013-03-22": [{"is_working": True, "start": "09:00", "end": "25:00"}]},
                "invalid time",
            ),
        ],
    )
    def test_invalid(self, exceptions, fragment):
        errors = validate_exceptions(exceptions)
        assert len(errors) == 1
        assert fragment in errors[0]


class TestValidateResource:

    def test_daily(self):
        assert validate_resource({"daily": ["08:00", "16:00"]}) == []

    def test_rules(self):
        assert validate_resource({"rules": {"0": [["08:00", "16:00"]]}}) == []

    @pytest.mark.parametrize("definition", [{}, {"daily": ["08:00", "16:00"], "rules": {}}])
    def test_exactly_one_source(self, definition):
        assert validate_resource(definition) == ["give exactly one of 'daily' or 'rules'"]

    def test_not_an_object(self):
        assert "must be an object" in validate_resource(["08:00", "16:00"])[0]

    def test_rules_not_a_mapping(self):
        assert validate_resource({"rules": [["08:00", "16:00"]]}) == [
            "'rules' must be an object keyed by weekday"
        ]

    def test_non_numeric_weekday_keys(self):
        errors = validate_resource({"rules": {"monday": [["08:00", "16:00"]]}})
        assert errors[0].startswith("Invalid weekday keys")

    def test_bad_daily(self):
        assert "daily" in validate_resource({"daily": ["08:00"]})[0]

    def test_exceptions_checked(self):
        definition = {"daily": ["08:00", "16:00"], "exceptions": {"bad": []}}
        assert validate_resource(definition) == ["Invalid date: 'bad'"]
