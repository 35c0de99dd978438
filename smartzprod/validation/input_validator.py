# ==============================================
# Input Validator
# ==============================================
#
# PURPOSE:
#   Run every applicable field rule over one form submission and
#   collect human-readable messages. Nothing here raises for bad
#   input: failures are returned, never thrown.
#
# CLASS: ValidationResult (dataclass)
# -----------------------------------
#   - errors: list[str]     → one message per failed rule; blocks creation
#   - warnings: list[str]   → informational only
#   - is_valid (property)   → strictly len(errors) == 0
#
# FUNCTIONS:
# ----------
# - validate_productivity_inputs(inputs, config=None) -> ValidationResult
#     1. Required general data (name, NRP, excavator): one message
#     2. Field rules for every present field
#     3. Hour meter range: end > start
#
# - validate_match_factor_inputs(inputs, config=None) -> ValidationResult
#     1-2 as above
#     3. Only when there are no errors: compute the prospective match
#        factor and warn if it falls outside the warn band
#
# - validate_field(field_name, value, config=None) -> str | None
#     Live check of one field (blank is not reported)
#
# ==============================================

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Sequence

from smartzprod.calculation.numeric import parse_number
from smartzprod.calculation.record_factory import compute_match_factor
from smartzprod.config import ValidationConfig
from smartzprod.errors import ComputationError
from .field_rules import (
    FIELD_RULES,
    MATCH_FACTOR_FIELDS,
    PREDICATES,
    PRODUCTIVITY_FIELDS,
    REQUIRED_FIELDS,
    FieldKind,
    FieldRule,
)
from .validators import is_valid_range, is_within_warn_band

INCOMPLETE_DATA = "Please complete the general data (supervisor name, NRP and excavator number)"
METER_RANGE_INVALID = "Hour meter end must be greater than hour meter start"


@dataclass
class ValidationResult:
    """Outcome of validating one form submission."""
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return len(self.errors) == 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "isValid": self.is_valid,
            "errors": list(self.errors),
            "warnings": list(self.warnings),
        }


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _message(rule: FieldRule, config: ValidationConfig) -> str:
    if rule.kind is FieldKind.NAME:
        return f"{rule.label} may only contain letters, spaces, hyphens or apostrophes"
    if rule.kind is FieldKind.IDENTIFIER:
        return f"{rule.label} may only contain letters and numbers"
    if rule.kind is FieldKind.POSITIVE_INT:
        return (
            f"{rule.label} must be a whole number between "
            f"{config.positive_int_min} and {config.positive_int_max}"
        )
    return f"{rule.label} must be at least {config.positive_decimal_min}"


def _check_fields(
    inputs: Mapping[str, Any],
    field_names: Sequence[str],
    config: ValidationConfig,
) -> List[str]:
    errors = []

    # Required general data first; format checks skip the missing ones
    missing = {name for name in REQUIRED_FIELDS if _is_blank(inputs.get(name))}
    if missing:
        errors.append(INCOMPLETE_DATA)

    for name in field_names:
        if name in missing:
            continue
        rule = FIELD_RULES[name]
        predicate = PREDICATES[rule.kind]
        if not predicate(inputs.get(name), config):
            errors.append(_message(rule, config))

    return errors


def validate_productivity_inputs(
    inputs: Mapping[str, Any],
    config: Optional[ValidationConfig] = None,
) -> ValidationResult:
    """
    Validate a productivity form submission.

    Args:
        inputs: Raw form fields
        config: Validation limits; defaults when omitted

    Returns:
        ValidationResult with one error per failed rule
    """
    config = config or ValidationConfig()
    errors = _check_fields(inputs, PRODUCTIVITY_FIELDS, config)

    if not is_valid_range(inputs.get("meter_end"), inputs.get("meter_start")):
        errors.append(METER_RANGE_INVALID)

    return ValidationResult(errors=errors)


def validate_match_factor_inputs(
    inputs: Mapping[str, Any],
    config: Optional[ValidationConfig] = None,
) -> ValidationResult:
    """
    Validate a match factor form submission.

    A match factor outside the warn band is reported as a warning
    and does not block creation.

    Args:
        inputs: Raw form fields
        config: Validation limits and bands; defaults when omitted

    Returns:
        ValidationResult with errors and warnings
    """
    config = config or ValidationConfig()
    errors = _check_fields(inputs, MATCH_FACTOR_FIELDS, config)
    warnings = []

    if not errors:
        try:
            match_factor = compute_match_factor(
                int(parse_number(inputs.get("hauler_count"))),
                parse_number(inputs.get("loader_cycle_time")),
                parse_number(inputs.get("hauler_cycle_time")),
            )
        except ComputationError as e:
            errors.append(e.message)
        else:
            if not is_within_warn_band(match_factor, config):
                warnings.append(
                    f"Match factor outside valid range ({config.match_factor_warn}): {match_factor}"
                )

    return ValidationResult(errors=errors, warnings=warnings)


def validate_field(
    field_name: str,
    value: Any,
    config: Optional[ValidationConfig] = None,
) -> Optional[str]:
    """
    Check a single field while it is being typed.

    Blank values are not reported here; the whole-form check
    reports missing general data on submit.

    Returns:
        The error message, or None when the value is acceptable

    Raises:
        KeyError: If the field has no validation rule
    """
    config = config or ValidationConfig()
    rule = FIELD_RULES[field_name]
    if _is_blank(value):
        return None
    if PREDICATES[rule.kind](value, config):
        return None
    return _message(rule, config)
