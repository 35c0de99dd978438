# ==============================================
# Field Rules (descriptor table)
# ==============================================
#
# PURPOSE:
#   Explicit mapping of form field name → validator kind + label.
#   Input validation looks fields up here instead of guessing the
#   validator from the field name.
#
# ENUMS:
# ------
# - FieldKind: NAME, IDENTIFIER, POSITIVE_INT, POSITIVE_DECIMAL
#
# TABLES:
# -------
# - FIELD_RULES: dict[str, FieldRule]
# - PREDICATES: dict[FieldKind, predicate]
# - PRODUCTIVITY_FIELDS / MATCH_FACTOR_FIELDS: rule order per form
#
# FUNCTION:
# ---------
# - check_field_rules(rules) -> None
#     Run once when configuration is loaded. Raises ConfigError for
#     an unknown kind, a missing label or a key / name mismatch.
#
# ==============================================

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, Tuple

from smartzprod.errors import ConfigError
from . import validators


class FieldKind(Enum):
    """Which predicate checks a field."""
    NAME = "name"
    IDENTIFIER = "identifier"
    POSITIVE_INT = "positive_int"
    POSITIVE_DECIMAL = "positive_decimal"


@dataclass(frozen=True)
class FieldRule:
    """How one form field is validated."""
    name: str
    kind: FieldKind
    label: str


PREDICATES: Dict[FieldKind, Callable[..., bool]] = {
    FieldKind.NAME: validators.is_valid_name,
    FieldKind.IDENTIFIER: validators.is_valid_identifier,
    FieldKind.POSITIVE_INT: validators.is_valid_positive_int,
    FieldKind.POSITIVE_DECIMAL: validators.is_valid_positive_decimal,
}


FIELD_RULES: Dict[str, FieldRule] = {
    rule.name: rule
    for rule in (
        FieldRule("supervisor_name", FieldKind.NAME, "Supervisor name"),
        FieldRule("supervisor_id", FieldKind.IDENTIFIER, "NRP"),
        FieldRule("excavator_id", FieldKind.IDENTIFIER, "Excavator number"),
        FieldRule("trip_count", FieldKind.POSITIVE_INT, "Trip count"),
        FieldRule("bucket_capacity", FieldKind.POSITIVE_DECIMAL, "Bucket capacity"),
        FieldRule("hauler_count", FieldKind.POSITIVE_INT, "Hauler count"),
        FieldRule("hauler_cycle_time", FieldKind.POSITIVE_DECIMAL, "Hauler cycle time"),
        FieldRule("loader_cycle_time", FieldKind.POSITIVE_DECIMAL, "Loader cycle time"),
    )
}

# General data that every form must carry
REQUIRED_FIELDS: Tuple[str, ...] = ("supervisor_name", "supervisor_id", "excavator_id")

PRODUCTIVITY_FIELDS: Tuple[str, ...] = REQUIRED_FIELDS + ("trip_count", "bucket_capacity")

MATCH_FACTOR_FIELDS: Tuple[str, ...] = REQUIRED_FIELDS + (
    "hauler_count",
    "hauler_cycle_time",
    "loader_cycle_time",
)


def check_field_rules(rules: Dict[str, FieldRule]) -> None:
    """
    Check the descriptor table before anything is validated against it.

    Args:
        rules: Mapping of field name → FieldRule

    Raises:
        ConfigError: If a rule is inconsistent or a form lists an unknown field
    """
    for key, rule in rules.items():
        if not isinstance(rule.kind, FieldKind) or rule.kind not in PREDICATES:
            raise ConfigError(f"Field '{key}' has unknown validator kind {rule.kind!r}")
        if not rule.label:
            raise ConfigError(f"Field '{key}' has no label")
        if rule.name != key:
            raise ConfigError(f"Field rule key '{key}' does not match its name '{rule.name}'")

    for form_fields in (PRODUCTIVITY_FIELDS, MATCH_FACTOR_FIELDS):
        for name in form_fields:
            if name not in rules:
                raise ConfigError(f"Form field '{name}' has no validation rule")
