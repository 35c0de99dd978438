# ==============================================
# Statistics
# ==============================================
#
# PURPOSE:
#   Aggregate a collection of records into summary statistics.
#   This is what the dashboard cards and per-excavator charts read.
#
# CLASSES:
# --------
# - Summary (dataclass)
#     count, avg (rounded to 2 dp), max, min
#     An empty collection gives Summary(0, 0, 0, 0), never an error.
#
# - ProductivityStats(Summary)
#     + total_trips, avg_trips
#
# - MatchFactorStats(Summary)
#     + status (None when there are no records)
#
# - EquipmentSummary (dataclass)
#     Both stats for one excavator + total record count.
#
# FUNCTIONS:
# ----------
# - summarize(records, field) -> Summary
# - productivity_stats(records) -> ProductivityStats
# - match_factor_stats(records, config=None) -> MatchFactorStats
# - per_equipment_summary(prod, mf, excavator_id, config=None)
#       -> EquipmentSummary
#
# ==============================================

import re
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Sequence

from smartzprod.calculation.numeric import round2
from smartzprod.calculation.records import MatchFactorRecord, ProductivityRecord
from smartzprod.config import ValidationConfig
from .filters import filter_by_excavator
from .status import MatchFactorStatus, classify_match_factor


@dataclass
class Summary:
    """Count / mean / extremes of one numeric field."""
    count: int = 0
    avg: float = 0.0
    max: float = 0.0
    min: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {"count": self.count, "avg": self.avg, "max": self.max, "min": self.min}


@dataclass
class ProductivityStats(Summary):
    """Productivity summary plus trip totals."""
    total_trips: int = 0
    avg_trips: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data.update({"totalTrips": self.total_trips, "avgTrips": self.avg_trips})
        return data


@dataclass
class MatchFactorStats(Summary):
    """Match factor summary plus the status of the average."""
    status: Optional[MatchFactorStatus] = None

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["status"] = self.status.value if self.status else "N/A"
        return data


@dataclass
class EquipmentSummary:
    """Combined statistics for one excavator."""
    excavator_id: str
    productivity: ProductivityStats = field(default_factory=ProductivityStats)
    match_factor: MatchFactorStats = field(default_factory=MatchFactorStats)
    total_records: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "excavatorId": self.excavator_id,
            "productivity": self.productivity.to_dict(),
            "matchFactor": self.match_factor.to_dict(),
            "totalRecords": self.total_records,
        }


def _attribute_name(name: str) -> str:
    """Accept wire names too: matchFactor -> match_factor."""
    name = re.sub(r"([a-z\d])([A-Z])", r"\1_\2", name)
    return name.lower()


def _values(records: Sequence[Any], field_name: str) -> list:
    attribute = _attribute_name(field_name)
    values = []
    for record in records:
        if not hasattr(record, attribute):
            raise ValueError(f"Records have no field '{field_name}'")
        values.append(getattr(record, attribute))
    return values


def summarize(records: Sequence[Any], field_name: str) -> Summary:
    """
    Summarize one numeric field over a collection of records.

    Args:
        records: ProductivityRecord or MatchFactorRecord instances
        field_name: Attribute name ("match_factor") or wire name ("matchFactor")

    Returns:
        Summary; all zeros when records is empty

    Raises:
        ValueError: If the records have no such field
    """
    if not records:
        return Summary()

    values = _values(records, field_name)
    return Summary(
        count=len(values),
        avg=round2(sum(values) / len(values)),
        max=round2(max(values)),
        min=round2(min(values)),
    )


def productivity_stats(records: Sequence[ProductivityRecord]) -> ProductivityStats:
    """Productivity summary plus total and average trip count."""
    base = summarize(records, "productivity")
    if not records:
        return ProductivityStats()

    trips = [record.trip_count for record in records]
    return ProductivityStats(
        count=base.count,
        avg=base.avg,
        max=base.max,
        min=base.min,
        total_trips=sum(trips),
        avg_trips=round2(sum(trips) / len(trips)),
    )


def match_factor_stats(
    records: Sequence[MatchFactorRecord],
    config: Optional[ValidationConfig] = None,
) -> MatchFactorStats:
    """Match factor summary plus the status of the average (None when empty)."""
    if not records:
        return MatchFactorStats()

    base = summarize(records, "match_factor")
    return MatchFactorStats(
        count=base.count,
        avg=base.avg,
        max=base.max,
        min=base.min,
        status=classify_match_factor(base.avg, config),
    )


def per_equipment_summary(
    productivity_records: Sequence[ProductivityRecord],
    match_factor_records: Sequence[MatchFactorRecord],
    excavator_id: str,
    config: Optional[ValidationConfig] = None,
) -> EquipmentSummary:
    """
    Statistics for a single excavator across both collections.

    Args:
        productivity_records: All productivity records
        match_factor_records: All match factor records
        excavator_id: Excavator to filter on
        config: Bands for the match factor status

    Returns:
        EquipmentSummary for that excavator
    """
    prod = filter_by_excavator(productivity_records, excavator_id)
    mf = filter_by_excavator(match_factor_records, excavator_id)

    return EquipmentSummary(
        excavator_id=excavator_id,
        productivity=productivity_stats(prod),
        match_factor=match_factor_stats(mf, config),
        total_records=len(prod) + len(mf),
    )
