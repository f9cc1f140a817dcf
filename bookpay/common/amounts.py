"""Amount validation and currency-unit conversion shared by the adapters."""

import re
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any

from bookpay.common.errors import InvalidAmount

# Plain decimal with optional exponent; no digit grouping, no "Infinity"/"NaN".
NUMERIC_STRING = re.compile(r"^[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?$")


def parse_amount(raw: Any) -> Decimal:
    """Validate a major-unit amount from a request body.

    Accepts numbers and plain numeric strings. Missing values, booleans,
    non-finite values and anything not strictly positive raise `InvalidAmount`.
    """

    if raw is None or isinstance(raw, bool) or not isinstance(raw, (int, float, str)):
        raise InvalidAmount("Invalid amount")
    if isinstance(raw, str) and not NUMERIC_STRING.match(raw.strip()):
        raise InvalidAmount("Invalid amount")
    try:
        amount = Decimal(str(raw).strip())
    except InvalidOperation as exc:
        raise InvalidAmount("Invalid amount") from exc
    if not amount.is_finite() or amount <= 0:
        raise InvalidAmount("Invalid amount")
    return amount


def to_minor_units(amount: Decimal) -> int:
    """Convert major units to minor units (x100), rounding half up: 100.5 -> 10050.

    Amounts that round to zero minor units are rejected.
    """

    minor = int((amount * 100).quantize(Decimal(1), rounding=ROUND_HALF_UP))
    if minor <= 0:
        raise InvalidAmount("Invalid amount")
    return minor


def major_unit_string(raw: Any) -> str:
    """Render the request amount as the decimal string PayPal expects.

    Strings pass through untouched; whole floats drop their trailing `.0`.
    """

    if isinstance(raw, str):
        return raw
    if isinstance(raw, float) and raw.is_integer():
        return str(int(raw))
    return str(raw)
