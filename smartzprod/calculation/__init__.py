# ==============================================
# TOPIC 2: CALCULATION (RecordFactory)
# ==============================================
#
# This package owns the arithmetic: duration, productivity and
# match factor, the rounding policy, and the record data classes.
#
# Modules:
# --------
# - numeric.py         → Lenient number parsing + round half away from zero
# - records.py         → ProductivityRecord / MatchFactorRecord
# - record_factory.py  → compute_* formulas and build_* record assembly
#
# ==============================================

from .numeric import parse_number, round2
from .records import MatchFactorRecord, ProductivityRecord, new_record_id
from .record_factory import (
    build_match_factor_record,
    build_productivity_record,
    compute_duration,
    compute_match_factor,
    compute_productivity,
    current_timestamp,
)

__all__ = [
    "parse_number",
    "round2",
    "MatchFactorRecord",
    "ProductivityRecord",
    "new_record_id",
    "build_match_factor_record",
    "build_productivity_record",
    "compute_duration",
    "compute_match_factor",
    "compute_productivity",
    "current_timestamp",
]
