# ==============================================
# Numeric helpers
# ==============================================
#
# - parse_number(value) -> float | None
#     Lenient parse of form input: int/float, or a numeric string
#     with "." or "," as decimal separator. Booleans, NaN and
#     infinities are rejected (None).
#
# - round2(value, places=2) -> float
#     Round half away from zero on the shortest decimal repr of
#     the value, so 1.005 -> 1.01 and -1.005 -> -1.01.
#
# ==============================================

import math
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Any, Optional


def parse_number(value: Any) -> Optional[float]:
    """
    Parse a raw field value into a finite float.

    Args:
        value: int, float or string from a form field

    Returns:
        The parsed number, or None when the value is empty or not numeric
    """
    if value is None or isinstance(value, bool):
        return None

    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        text = value.strip().replace(",", ".")
        if not text:
            return None
        try:
            number = float(text)
        except ValueError:
            return None
    else:
        return None

    if not math.isfinite(number):
        return None
    return number


def round2(value: float, places: int = 2) -> float:
    """
    Round a number to `places` decimals, half away from zero.

    Args:
        value: Number to round
        places: Decimal places (default 2)

    Returns:
        The rounded float
    """
    number = float(value)
    if not math.isfinite(number):
        return number
    try:
        quantum = Decimal(1).scaleb(-places)
        return float(Decimal(str(number)).quantize(quantum, rounding=ROUND_HALF_UP))
    except InvalidOperation:
        # quantize overflows the default context precision for huge values
        return round(number, places)
