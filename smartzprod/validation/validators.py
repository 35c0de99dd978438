# ==============================================
# Validators
# ==============================================
#
# PURPOSE:
#   Pure, side-effect-free predicates over raw form values.
#
# CONTRACT:
#   Every predicate returns a bool and never raises. Empty or
#   non-numeric input is False, never a default pass.
#
# FUNCTIONS:
# ----------
# - is_valid_name(value)             → letters, spaces, hyphen, apostrophe
# - is_valid_identifier(value)       → alphanumeric (excavator no., NRP)
# - is_valid_positive_int(value)     → integral, within [1, 9999]
# - is_valid_positive_decimal(value) → >= 0.1, no upper bound
# - is_valid_range(end, start)       → both numeric and end > start
# - is_within_warn_band(value)       → inclusive, default 0.1 - 2.0
# - is_within_optimal_band(value)    → inclusive, default 0.5 - 1.5
#
#   All take an optional ValidationConfig; the default instance is
#   used when omitted.
#
# ==============================================

import re
from typing import Any, Optional

from smartzprod.calculation.numeric import parse_number
from smartzprod.config import ValidationConfig

_DEFAULT = ValidationConfig()


def _matches(value: Any, pattern: str, max_length: int) -> bool:
    if not isinstance(value, str):
        return False
    text = value.strip()
    if not text or len(text) > max_length:
        return False
    return re.fullmatch(pattern, text) is not None


def is_valid_name(value: Any, config: Optional[ValidationConfig] = None) -> bool:
    """Supervisor name: letters, spaces, hyphens and apostrophes only."""
    config = config or _DEFAULT
    return _matches(value, config.name_pattern, config.name_max_length)


def is_valid_identifier(value: Any, config: Optional[ValidationConfig] = None) -> bool:
    """Excavator number or NRP: letters and digits only."""
    config = config or _DEFAULT
    return _matches(value, config.identifier_pattern, config.identifier_max_length)


def is_valid_positive_int(value: Any, config: Optional[ValidationConfig] = None) -> bool:
    """Whole number within [positive_int_min, positive_int_max]."""
    config = config or _DEFAULT
    number = parse_number(value)
    if number is None or not number.is_integer():
        return False
    return config.positive_int_min <= number <= config.positive_int_max


def is_valid_positive_decimal(value: Any, config: Optional[ValidationConfig] = None) -> bool:
    """Number of at least positive_decimal_min."""
    config = config or _DEFAULT
    number = parse_number(value)
    if number is None:
        return False
    return number >= config.positive_decimal_min


def is_valid_range(end: Any, start: Any) -> bool:
    """Both values numeric and end strictly greater than start."""
    end_number = parse_number(end)
    start_number = parse_number(start)
    if end_number is None or start_number is None:
        return False
    return end_number > start_number


def is_within_warn_band(value: Any, config: Optional[ValidationConfig] = None) -> bool:
    """Match factor inside the (wider) warn band."""
    config = config or _DEFAULT
    number = parse_number(value)
    if number is None:
        return False
    return config.match_factor_warn.contains(number)


def is_within_optimal_band(value: Any, config: Optional[ValidationConfig] = None) -> bool:
    """Match factor inside the (narrower) optimal band."""
    config = config or _DEFAULT
    number = parse_number(value)
    if number is None:
        return False
    return config.match_factor_optimal.contains(number)
