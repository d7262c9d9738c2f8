"""
Unit tests for numeric coercion helpers
"""
from decimal import Decimal

import pytest

from directory_api.utils.numeric import safe_float, safe_int


class TestSafeFloat:
    @pytest.mark.unit
    @pytest.mark.parametrize(
        "value,expected",
        [
            (4.5, 4.5),
            ("4.5", 4.5),
            (" 3 ", 3.0),
            (Decimal("4.7"), 4.7),
            (7, 7.0),
        ],
    )
    def test_parses_numbers(self, value, expected):
        assert safe_float(value) == pytest.approx(expected)

    @pytest.mark.unit
    @pytest.mark.parametrize("value", [None, "", "n/a", [], {}, True, float("nan"), float("inf"), "-inf"])
    def test_garbage_becomes_default(self, value):
        assert safe_float(value) == 0.0

    @pytest.mark.unit
    def test_custom_default(self):
        assert safe_float("oops", default=-1.0) == -1.0


class TestSafeInt:
    @pytest.mark.unit
    @pytest.mark.parametrize("value,expected", [(12, 12), ("1200", 1200), ("99.9", 99), (Decimal("5"), 5)])
    def test_parses_numbers(self, value, expected):
        assert safe_int(value) == expected

    @pytest.mark.unit
    @pytest.mark.parametrize("value", [None, "many", False, float("nan")])
    def test_garbage_becomes_default(self, value):
        assert safe_int(value) == 0
