# ==============================================
# TOPIC 3: ANALYSIS (StatisticsEngine)
# ==============================================
#
# This package summarizes the current collections on demand.
#
# Modules:
# --------
# - statistics.py  → Summary, per-kind stats, per-excavator summary
# - status.py      → Critical / Warning / Optimal tiers + interpretation
# - filters.py     → Excavator, supervisor and date range selection
#
# ==============================================

from .filters import (
    filter_by_date_range,
    filter_by_excavator,
    filter_by_supervisor,
    unique_excavators,
    unique_supervisors,
)
from .status import Interpretation, MatchFactorStatus, classify_match_factor, interpret_match_factor
from .statistics import (
    EquipmentSummary,
    MatchFactorStats,
    ProductivityStats,
    Summary,
    match_factor_stats,
    per_equipment_summary,
    productivity_stats,
    summarize,
)

__all__ = [
    "filter_by_date_range",
    "filter_by_excavator",
    "filter_by_supervisor",
    "unique_excavators",
    "unique_supervisors",
    "Interpretation",
    "MatchFactorStatus",
    "classify_match_factor",
    "interpret_match_factor",
    "EquipmentSummary",
    "MatchFactorStats",
    "ProductivityStats",
    "Summary",
    "match_factor_stats",
    "per_equipment_summary",
    "productivity_stats",
    "summarize",
]
