# ==============================================
# RecordFactory
# ==============================================
#
# PURPOSE:
#   Owns the core arithmetic. Turns validated form input into
#   complete, rounded, immutable records.
#
# FUNCTIONS:
# ----------
# - compute_duration(end, start) -> float
#       end - start (hour meter interval)
#
# - compute_productivity(trips, capacity, duration) -> float
#       round2(trips * capacity / duration)
#       Raises ComputationError if duration == 0, or if duration or
#       the result is not a finite number.
#
# - compute_match_factor(haulers, loader_ct, hauler_ct) -> float
#       round2(haulers * loader_ct / hauler_ct)
#       Raises ComputationError if hauler_ct == 0 or the result is
#       not a finite number.
#
# - build_productivity_record(inputs, record_id=None, now=None)
# - build_match_factor_record(inputs, record_id=None, now=None)
#       Assemble the full record:
#         * missing timestamp -> now, truncated to the minute
#         * decimals rounded to 2 places, counts truncated to int
#         * record_id generated unless given (edits keep the old id)
#
#   The build functions expect input that already passed
#   validation/input_validator.py. A non-numeric value here is a
#   programming error and raises ValueError.
#
# ==============================================

import math
from datetime import datetime
from typing import Any, Mapping, Optional

from smartzprod.errors import ComputationError
from .numeric import parse_number, round2
from .records import MatchFactorRecord, ProductivityRecord, new_record_id

TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M"


def compute_duration(end: float, start: float) -> float:
    """Hour meter interval (end - start)."""
    return end - start


def _finite(value: float, label: str) -> float:
    if not math.isfinite(value):
        raise ComputationError(f"{label} is out of range", code="out_of_range")
    return value


def compute_productivity(trips: float, capacity: float, duration: float) -> float:
    """
    Productivity in BCM per hour.

    Args:
        trips: Number of trips (ritase)
        capacity: Bucket capacity in BCM
        duration: Working hours from the hour meter

    Returns:
        trips * capacity / duration, rounded to 2 decimals

    Raises:
        ComputationError: If duration is zero, or duration or the result
                          is not a finite number
    """
    if duration == 0:
        raise ComputationError("Duration cannot be zero", code="zero_duration")
    _finite(duration, "Duration")
    return round2(_finite(trips * capacity / duration, "Productivity"))


def compute_match_factor(haulers: float, loader_ct: float, hauler_ct: float) -> float:
    """
    Match factor of a loader and its hauler fleet.

    Args:
        haulers: Number of haulers (dump trucks)
        loader_ct: Loader cycle time in minutes
        hauler_ct: Hauler cycle time in minutes

    Returns:
        haulers * loader_ct / hauler_ct, rounded to 2 decimals

    Raises:
        ComputationError: If the hauler cycle time is zero or the result
                          is not a finite number
    """
    if hauler_ct == 0:
        raise ComputationError(
            "Hauler cycle time cannot be zero", code="zero_hauler_cycle_time"
        )
    return round2(_finite(haulers * loader_ct / hauler_ct, "Match factor"))


def current_timestamp(now: Optional[datetime] = None) -> str:
    """Local time truncated to minute precision."""
    return (now or datetime.now()).strftime(TIMESTAMP_FORMAT)


def _number(inputs: Mapping[str, Any], key: str) -> float:
    value = parse_number(inputs.get(key))
    if value is None:
        raise ValueError(f"{key} is not a number: {inputs.get(key)!r}")
    return value


def _text(inputs: Mapping[str, Any], key: str) -> str:
    return str(inputs.get(key) or "").strip()


def build_productivity_record(
    inputs: Mapping[str, Any],
    record_id: Optional[str] = None,
    now: Optional[datetime] = None,
) -> ProductivityRecord:
    """
    Build a complete productivity record from validated input.

    Args:
        inputs: Raw form fields (supervisor_name, supervisor_id, timestamp,
                excavator_id, trip_count, meter_start, meter_end, bucket_capacity)
        record_id: Existing id when replacing a record on edit
        now: Clock override for the default timestamp

    Returns:
        A ProductivityRecord

    Raises:
        ComputationError: If the hour meter interval is zero or a derived
                          value is out of range
    """
    trip_count = int(_number(inputs, "trip_count"))
    meter_start = _number(inputs, "meter_start")
    meter_end = _number(inputs, "meter_end")
    bucket_capacity = _number(inputs, "bucket_capacity")

    duration = compute_duration(meter_end, meter_start)
    productivity = compute_productivity(trip_count, bucket_capacity, duration)

    return ProductivityRecord(
        record_id=record_id or new_record_id(),
        supervisor_name=_text(inputs, "supervisor_name"),
        supervisor_id=_text(inputs, "supervisor_id"),
        timestamp=_text(inputs, "timestamp") or current_timestamp(now),
        excavator_id=_text(inputs, "excavator_id"),
        trip_count=trip_count,
        meter_start=round2(meter_start),
        meter_end=round2(meter_end),
        duration=round2(duration),
        bucket_capacity=round2(bucket_capacity),
        productivity=productivity,
    )


def build_match_factor_record(
    inputs: Mapping[str, Any],
    record_id: Optional[str] = None,
    now: Optional[datetime] = None,
) -> MatchFactorRecord:
    """
    Build a complete match factor record from validated input.

    Args:
        inputs: Raw form fields (supervisor_name, supervisor_id, timestamp,
                excavator_id, hauler_count, loader_cycle_time, hauler_cycle_time)
        record_id: Existing id when replacing a record on edit
        now: Clock override for the default timestamp

    Returns:
        A MatchFactorRecord

    Raises:
        ComputationError: If the hauler cycle time is zero
    """
    hauler_count = int(_number(inputs, "hauler_count"))
    loader_cycle_time = _number(inputs, "loader_cycle_time")
    hauler_cycle_time = _number(inputs, "hauler_cycle_time")

    match_factor = compute_match_factor(hauler_count, loader_cycle_time, hauler_cycle_time)

    return MatchFactorRecord(
        record_id=record_id or new_record_id(),
        supervisor_name=_text(inputs, "supervisor_name"),
        supervisor_id=_text(inputs, "supervisor_id"),
        timestamp=_text(inputs, "timestamp") or current_timestamp(now),
        excavator_id=_text(inputs, "excavator_id"),
        hauler_count=hauler_count,
        loader_cycle_time=round2(loader_cycle_time),
        hauler_cycle_time=round2(hauler_cycle_time),
        match_factor=match_factor,
    )
