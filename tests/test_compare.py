"""Tests for value extraction, formatting and comparison."""

import datetime
import math
from dataclasses import dataclass
from decimal import Decimal

from docmonitor_tables.processing.compare import (
    compare_values,
    compare_with_direction,
    format_value,
    get_nested_value,
    is_nullish,
)


@dataclass
class Status:
    code: str


@dataclass
class Request:
    id: int
    status: Status


class TestGetNestedValue:
    """Tests for dot-path extraction."""

    def test_resolves_nested_dicts(self):
        row = {"status": {"ref_data": {"value": "OK"}}}
        assert get_nested_value(row, "status.ref_data.value") == "OK"

    def test_missing_segment_returns_none(self):
        row = {"status": {"code": "OK"}}
        assert get_nested_value(row, "status.label") is None
        assert get_nested_value(row, "missing.code") is None

    def test_none_intermediate_returns_none(self):
        assert get_nested_value({"status": None}, "status.code") is None

    def test_scalar_intermediate_returns_none(self):
        assert get_nested_value({"status": "OK"}, "status.code") is None

    def test_resolves_attributes(self):
        row = Request(id=7, status=Status(code="DONE"))
        assert get_nested_value(row, "status.code") == "DONE"
        assert get_nested_value(row, "status.missing") is None

    def test_numeric_segments_index_lists(self):
        row = {"batches": [{"id": 10}, {"id": 11}]}
        assert get_nested_value(row, "batches.1.id") == 11
        assert get_nested_value(row, "batches.5.id") is None
        assert get_nested_value(row, "batches.first") is None

    def test_methods_are_not_values(self):
        assert get_nested_value({"name": "x"}, "name.upper") is None


class TestFormatValue:
    """Tests for display formatting of cell values."""

    def test_nullish_uses_fallback(self):
        assert format_value(None) == ""
        assert format_value(float("nan"), "-") == "-"

    def test_booleans(self):
        assert format_value(True) == "true"
        assert format_value(False) == "false"

    def test_integral_float_drops_fraction(self):
        assert format_value(3.0) == "3"
        assert format_value(2.5) == "2.5"

    def test_containers_render_as_json(self):
        assert format_value({"a": 1}) == '{"a":1}'
        assert format_value([1, "x"]) == '[1,"x"]'


class TestCompareValues:
    """Tests for the type-aware comparator."""

    def test_nullish_sorts_last(self):
        assert compare_values(None, 1) == 1
        assert compare_values(1, None) == -1
        assert compare_values(None, None) == 0
        assert compare_values(float("nan"), "a") == 1

    def test_is_nullish(self):
        assert is_nullish(None)
        assert is_nullish(math.nan)
        assert not is_nullish(0)
        assert not is_nullish("")

    def test_strings_ignore_case_and_accents(self):
        assert compare_values("apple", "Banana") == -1
        assert compare_values("Banana", "apple") == 1
        assert compare_values("Emile", "émile") == 0

    def test_numbers(self):
        assert compare_values(2, 10) == -1
        assert compare_values(10.5, 2) == 1
        assert compare_values(Decimal("1.5"), Decimal("1.5")) == 0

    def test_numbers_do_not_compare_as_strings(self):
        # "10" < "2" as strings, but 10 > 2 as numbers
        assert compare_values(10, 2) == 1

    def test_dates(self):
        earlier = datetime.datetime(2024, 3, 1)
        later = datetime.datetime(2024, 3, 5)
        assert compare_values(earlier, later) == -1
        assert compare_values(later, earlier) == 1

    def test_mixed_types_fall_back_to_strings(self):
        assert compare_values(1, "a") == -1
        assert compare_values(True, "false") == 1

    def test_never_raises_on_incomparable(self):
        naive = datetime.datetime(2024, 1, 1)
        aware = datetime.datetime(2024, 1, 1, tzinfo=datetime.timezone.utc)
        assert compare_values(naive, aware) in (-1, 0, 1)
        assert compare_values({"a": 1}, [1]) in (-1, 0, 1)


class TestCompareWithDirection:
    """Tests for directional comparison."""

    def test_desc_negates_values(self):
        assert compare_with_direction(1, 2, "asc") == -1
        assert compare_with_direction(1, 2, "desc") == 1

    def test_nulls_stay_last_in_both_directions(self):
        assert compare_with_direction(None, 1, "asc") == 1
        assert compare_with_direction(None, 1, "desc") == 1
        assert compare_with_direction(1, None, "desc") == -1
