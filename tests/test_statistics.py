# ==============================================
# Tests for Statistics, Status Tiers and Filters
# ==============================================

from datetime import date

import pytest

from smartzprod.analysis.filters import (
    filter_by_date_range,
    filter_by_excavator,
    filter_by_supervisor,
    unique_excavators,
    unique_supervisors,
)
from smartzprod.analysis.statistics import (
    Summary,
    match_factor_stats,
    per_equipment_summary,
    productivity_stats,
    summarize,
)
from smartzprod.analysis.status import (
    MatchFactorStatus,
    classify_match_factor,
    interpret_match_factor,
)
from smartzprod.calculation.records import MatchFactorRecord, ProductivityRecord


def make_prod(excavator="EX01", productivity=10.0, trips=5, timestamp="2026-01-15T08:00",
              supervisor="Budi"):
    return ProductivityRecord(
        record_id=f"p-{excavator}-{productivity}-{timestamp}",
        supervisor_name=supervisor,
        supervisor_id="123",
        timestamp=timestamp,
        excavator_id=excavator,
        trip_count=trips,
        meter_start=0.0,
        meter_end=1.0,
        duration=1.0,
        bucket_capacity=2.0,
        productivity=productivity,
    )


def make_mf(excavator="EX01", match_factor=1.0, timestamp="2026-01-15T08:00", supervisor="Budi"):
    return MatchFactorRecord(
        record_id=f"m-{excavator}-{match_factor}-{timestamp}",
        supervisor_name=supervisor,
        supervisor_id="123",
        timestamp=timestamp,
        excavator_id=excavator,
        hauler_count=4,
        loader_cycle_time=3.0,
        hauler_cycle_time=12.0,
        match_factor=match_factor,
    )


class TestSummarize:
    @pytest.mark.parametrize("field_name", ["productivity", "matchFactor", "no_such_field"])
    def test_empty_is_all_zeros(self, field_name):
        assert summarize([], field_name) == Summary(0, 0, 0, 0)

    def test_values(self):
        records = [make_prod(productivity=10.0), make_prod(productivity=20.0),
                   make_prod(productivity=15.5)]
        summary = summarize(records, "productivity")
        assert summary.count == 3
        assert summary.avg == 15.17
        assert summary.max == 20.0
        assert summary.min == 10.0

    def test_wire_field_name(self):
        records = [make_mf(match_factor=0.8), make_mf(match_factor=1.2)]
        assert summarize(records, "matchFactor").avg == 1.0

    def test_unknown_field_on_records(self):
        with pytest.raises(ValueError):
            summarize([make_prod()], "colour")


class TestClassification:
    @pytest.mark.parametrize("value, status", [
        (0.05, MatchFactorStatus.CRITICAL),
        (0.1, MatchFactorStatus.WARNING),
        (0.49, MatchFactorStatus.WARNING),
        (0.5, MatchFactorStatus.OPTIMAL),
        (1.0, MatchFactorStatus.OPTIMAL),
        (1.5, MatchFactorStatus.OPTIMAL),
        (1.51, MatchFactorStatus.WARNING),
        (2.0, MatchFactorStatus.WARNING),
        (2.01, MatchFactorStatus.CRITICAL),
        (7.5, MatchFactorStatus.CRITICAL),
    ])
    def test_tiers(self, value, status):
        assert classify_match_factor(value) is status

    def test_monotonic_toward_one(self):
        """Moving closer to 1.0 never makes the status worse."""
        rank = {MatchFactorStatus.CRITICAL: 0, MatchFactorStatus.WARNING: 1,
                MatchFactorStatus.OPTIMAL: 2}
        above = [3.0, 2.5, 2.0, 1.8, 1.5, 1.2, 1.0]
        below = [0.0, 0.05, 0.1, 0.3, 0.5, 0.8, 1.0]
        for path in (above, below):
            ranks = [rank[classify_match_factor(v)] for v in path]
            assert ranks == sorted(ranks)

    def test_status_values(self):
        assert MatchFactorStatus.CRITICAL.value == "Critical"
        assert MatchFactorStatus.WARNING.value == "Warning"
        assert MatchFactorStatus.OPTIMAL.value == "Optimal"

    def test_interpretation(self):
        assert "excess" in interpret_match_factor(0.3).message
        assert interpret_match_factor(0.9).status is MatchFactorStatus.OPTIMAL
        severe = interpret_match_factor(2.5)
        assert severe.status is MatchFactorStatus.CRITICAL
        assert "Severe" in severe.message
        assert severe.to_dict()["status"] == "Critical"


class TestKindStats:
    def test_productivity_stats(self):
        stats = productivity_stats([make_prod(trips=4), make_prod(trips=7)])
        assert stats.total_trips == 11
        assert stats.avg_trips == 5.5

    def test_match_factor_stats_status(self):
        stats = match_factor_stats([make_mf(match_factor=1.8), make_mf(match_factor=2.2)])
        assert stats.avg == 2.0
        assert stats.status is MatchFactorStatus.WARNING

    def test_empty_status_is_na(self):
        stats = match_factor_stats([])
        assert stats.status is None
        assert stats.to_dict()["status"] == "N/A"


class TestEquipmentSummary:
    def test_per_excavator(self):
        prod = [make_prod("EX01", 10.0), make_prod("EX02", 30.0), make_prod("EX01", 20.0)]
        mf = [make_mf("EX01", 1.0), make_mf("EX03", 0.7)]
        summary = per_equipment_summary(prod, mf, "EX01")
        assert summary.excavator_id == "EX01"
        assert summary.productivity.count == 2
        assert summary.productivity.avg == 15.0
        assert summary.match_factor.count == 1
        assert summary.total_records == 3

    def test_unknown_excavator(self):
        summary = per_equipment_summary([make_prod()], [make_mf()], "EX99")
        assert summary.total_records == 0
        assert summary.productivity.avg == 0


class TestFilters:
    def test_by_excavator_and_supervisor(self):
        records = [make_prod("EX01", supervisor="Budi"), make_prod("EX02", supervisor="Siti")]
        assert len(filter_by_excavator(records, "EX02")) == 1
        assert filter_by_supervisor(records, "Budi")[0].excavator_id == "EX01"

    def test_date_range_inclusive_to_end_of_day(self):
        records = [
            make_prod(timestamp="2026-01-14T23:59"),
            make_prod(timestamp="2026-01-15T00:00"),
            make_prod(timestamp="2026-01-16T23:59"),
            make_prod(timestamp="2026-01-17T00:00"),
        ]
        selected = filter_by_date_range(records, "2026-01-15", date(2026, 1, 16))
        assert [r.timestamp for r in selected] == ["2026-01-15T00:00", "2026-01-16T23:59"]

    def test_open_bounds(self):
        records = [make_prod(timestamp="2026-01-14T08:00"), make_prod(timestamp="2030-01-01T08:00")]
        assert len(filter_by_date_range(records, date_from="2026-01-15")) == 1
        assert len(filter_by_date_range(records)) == 2

    def test_unreadable_timestamp_skipped(self):
        records = [make_prod(timestamp="yesterday"), make_prod(timestamp="2026-01-15T08:00")]
        assert len(filter_by_date_range(records, "2026-01-01")) == 1

    def test_unique_lists_sorted(self):
        prod = [make_prod("EX02", supervisor="Siti"), make_prod("EX01")]
        mf = [make_mf("EX03"), make_mf("EX01")]
        assert unique_excavators(prod, mf) == ["EX01", "EX02", "EX03"]
        assert unique_supervisors(prod, mf) == ["Budi", "Siti"]
