# ==============================================
# Records (Data Classes)
# ==============================================
#
# PURPOSE:
#   Immutable data classes for the two kinds of field entries.
#   These are what the RecordFactory produces, what the
#   PersistentStore keeps, and what the BackupCodec writes out.
#
# CLASSES:
# --------
# - ProductivityRecord (frozen dataclass)
#     Excavator productivity over one hour-meter interval.
#     productivity = trip_count * bucket_capacity / duration
#
# - MatchFactorRecord (frozen dataclass)
#     Loader / hauler fleet balance.
#     match_factor = hauler_count * loader_cycle_time / hauler_cycle_time
#
#     Methods (both):
#     ---------------
#     - to_dict() -> dict            → camelCase wire format
#     - from_dict(data) -> Record    (classmethod) → raises KeyError /
#                                      TypeError / ValueError when malformed
#
# FUNCTIONS:
# ----------
# - new_record_id() -> str           → stable identifier (uuid4 hex)
# - with_unique_ids(records)         → fresh ids for repeated ones
#
# ==============================================

import math
import uuid
from dataclasses import dataclass, replace
from typing import Any, Dict, List, Tuple


def new_record_id() -> str:
    """Generate a stable record identifier."""
    return uuid.uuid4().hex


def with_unique_ids(records: List[Any]) -> Tuple[List[Any], int]:
    """
    Give every record whose id repeats an earlier one a fresh id.

    Args:
        records: Parsed records of one kind, in order

    Returns:
        Tuple of (records with unique ids, number of ids replaced)
    """
    seen = set()
    unique = []
    replaced = 0
    for record in records:
        if record.record_id in seen:
            record = replace(record, record_id=new_record_id())
            replaced += 1
        seen.add(record.record_id)
        unique.append(record)
    return unique, replaced


def _require_mapping(data: Any) -> Dict[str, Any]:
    if not isinstance(data, dict):
        raise TypeError(f"record must be an object, got {type(data).__name__}")
    return data


def _text(data: Dict[str, Any], key: str) -> str:
    value = data[key]
    if not isinstance(value, str):
        raise TypeError(f"'{key}' must be a string")
    return value


def _number(data: Dict[str, Any], key: str) -> float:
    value = data[key]
    if isinstance(value, bool) or not isinstance(value, (int, float, str)):
        raise TypeError(f"'{key}' must be a number")
    number = float(value)
    if not math.isfinite(number):
        raise ValueError(f"'{key}' must be a finite number")
    return number


def _count(data: Dict[str, Any], key: str) -> int:
    return int(_number(data, key))


def _record_id(data: Dict[str, Any]) -> str:
    # Entries written before ids existed have none
    value = data.get("id")
    if value is None or value == "":
        return new_record_id()
    if not isinstance(value, str):
        raise TypeError("'id' must be a string")
    return value


@dataclass(frozen=True)
class ProductivityRecord:
    """
    One productivity entry for an excavator.

    All decimal fields are already rounded to 2 places and trip_count
    is an integer when the record comes out of the RecordFactory.
    """

    # --- Identity ---
    record_id: str

    # --- General data ---
    supervisor_name: str
    supervisor_id: str  # NRP
    timestamp: str  # "YYYY-MM-DDTHH:MM"
    excavator_id: str

    # --- Inputs ---
    trip_count: int
    meter_start: float  # hour meter at start
    meter_end: float  # hour meter at end
    duration: float  # meter_end - meter_start, in hours
    bucket_capacity: float  # BCM per trip

    # --- Derived ---
    productivity: float  # BCM / hour

    def to_dict(self) -> Dict[str, Any]:
        """
        Serialize the record for storage and backup.

        Returns:
            A JSON-serializable dictionary with camelCase keys
        """
        return {
            "id": self.record_id,
            "supervisorName": self.supervisor_name,
            "supervisorId": self.supervisor_id,
            "timestamp": self.timestamp,
            "excavatorId": self.excavator_id,
            "tripCount": self.trip_count,
            "meterStart": self.meter_start,
            "meterEnd": self.meter_end,
            "duration": self.duration,
            "bucketCapacity": self.bucket_capacity,
            "productivity": self.productivity,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ProductivityRecord":
        """
        Reconstruct a record from its stored form.

        Entries written before ids existed get a fresh id.

        Args:
            data: Dictionary produced by to_dict()

        Returns:
            A ProductivityRecord instance
        """
        data = _require_mapping(data)
        return cls(
            record_id=_record_id(data),
            supervisor_name=_text(data, "supervisorName"),
            supervisor_id=_text(data, "supervisorId"),
            timestamp=_text(data, "timestamp"),
            excavator_id=_text(data, "excavatorId"),
            trip_count=_count(data, "tripCount"),
            meter_start=_number(data, "meterStart"),
            meter_end=_number(data, "meterEnd"),
            duration=_number(data, "duration"),
            bucket_capacity=_number(data, "bucketCapacity"),
            productivity=_number(data, "productivity"),
        )


@dataclass(frozen=True)
class MatchFactorRecord:
    """One match factor entry for a loader and its hauler fleet."""

    record_id: str

    supervisor_name: str
    supervisor_id: str
    timestamp: str
    excavator_id: str

    hauler_count: int
    loader_cycle_time: float  # minutes
    hauler_cycle_time: float  # minutes

    match_factor: float

    def to_dict(self) -> Dict[str, Any]:
        """Serialize the record for storage and backup."""
        return {
            "id": self.record_id,
            "supervisorName": self.supervisor_name,
            "supervisorId": self.supervisor_id,
            "timestamp": self.timestamp,
            "excavatorId": self.excavator_id,
            "haulerCount": self.hauler_count,
            "loaderCycleTime": self.loader_cycle_time,
            "haulerCycleTime": self.hauler_cycle_time,
            "matchFactor": self.match_factor,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "MatchFactorRecord":
        """Reconstruct a record from its stored form."""
        data = _require_mapping(data)
        return cls(
            record_id=_record_id(data),
            supervisor_name=_text(data, "supervisorName"),
            supervisor_id=_text(data, "supervisorId"),
            timestamp=_text(data, "timestamp"),
            excavator_id=_text(data, "excavatorId"),
            hauler_count=_count(data, "haulerCount"),
            loader_cycle_time=_number(data, "loaderCycleTime"),
            hauler_cycle_time=_number(data, "haulerCycleTime"),
            match_factor=_number(data, "matchFactor"),
        )
