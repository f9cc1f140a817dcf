"""Unit tests for amount validation and unit conversion."""

from decimal import Decimal

import pytest

from bookpay.common.amounts import major_unit_string, parse_amount, to_minor_units
from bookpay.common.errors import InvalidAmount


@pytest.mark.parametrize(
    "raw",
    [None, 0, -1, "0", "-5", "abc", "", float("nan"), float("inf"), "NaN", "Infinity", "1_000", "1,000", True, [], {}],
)
def test_invalid_amounts_rejected(raw):
    with pytest.raises(InvalidAmount):
        parse_amount(raw)


def test_numeric_strings_accepted():
    assert parse_amount("250") == Decimal("250")
    assert parse_amount(" 99.99 ") == Decimal("99.99")


def test_minor_units_round_half_up():
    assert to_minor_units(parse_amount(100.5)) == 10050
    assert to_minor_units(parse_amount(500)) == 50000
    assert to_minor_units(parse_amount("0.005")) == 1
    assert to_minor_units(parse_amount("1.005")) == 101


def test_major_unit_string_keeps_request_value():
    assert major_unit_string(100.5) == "100.5"
    assert major_unit_string(500) == "500"
    assert major_unit_string(500.0) == "500"
    assert major_unit_string("100.50") == "100.50"


def test_amount_rounding_to_zero_minor_units_rejected():
    """0.001 is positive but would send a zero-paise order."""

    with pytest.raises(InvalidAmount):
        to_minor_units(parse_amount(0.001))
    assert to_minor_units(parse_amount("0.005")) == 1


def test_exponent_strings_accepted():
    assert parse_amount("1e2") == Decimal("100")
