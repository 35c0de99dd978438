# ==============================================
# TOPIC 1: VALIDATION
# ==============================================
#
# This package checks raw form input BEFORE anything is
# computed or stored.
#
# Modules:
# --------
# - validators.py       → Pure predicates (never raise)
# - field_rules.py      → Field name → validator kind table
# - input_validator.py  → Whole-form validation, errors + warnings
#
# ==============================================

from .validators import (
    is_valid_identifier,
    is_valid_name,
    is_valid_positive_decimal,
    is_valid_positive_int,
    is_valid_range,
    is_within_optimal_band,
    is_within_warn_band,
)
from .field_rules import FIELD_RULES, FieldKind, FieldRule, check_field_rules
from .input_validator import (
    ValidationResult,
    validate_field,
    validate_match_factor_inputs,
    validate_productivity_inputs,
)

__all__ = [
    "is_valid_identifier",
    "is_valid_name",
    "is_valid_positive_decimal",
    "is_valid_positive_int",
    "is_valid_range",
    "is_within_optimal_band",
    "is_within_warn_band",
    "FIELD_RULES",
    "FieldKind",
    "FieldRule",
    "check_field_rules",
    "ValidationResult",
    "validate_field",
    "validate_match_factor_inputs",
    "validate_productivity_inputs",
]
