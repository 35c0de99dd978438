# ==============================================
# Filters
# ==============================================
#
# Selection helpers used before summarizing or listing records.
#
# - filter_by_excavator(records, excavator_id)
# - filter_by_supervisor(records, supervisor_name)
# - filter_by_date_range(records, date_from=None, date_to=None)
#       inclusive; date_to covers the whole day; either bound optional
# - unique_excavators(prod, mf) / unique_supervisors(prod, mf)
#       sorted, de-duplicated across both collections
#
# ==============================================

from datetime import date, datetime, time
from typing import Any, List, Optional, Sequence, Union

DateLike = Union[str, date, None]


def filter_by_excavator(records: Sequence[Any], excavator_id: str) -> List[Any]:
    return [record for record in records if record.excavator_id == excavator_id]


def filter_by_supervisor(records: Sequence[Any], supervisor_name: str) -> List[Any]:
    return [record for record in records if record.supervisor_name == supervisor_name]


def _to_date(value: DateLike) -> Optional[date]:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(value)


def filter_by_date_range(
    records: Sequence[Any],
    date_from: DateLike = None,
    date_to: DateLike = None,
) -> List[Any]:
    """
    Keep records whose timestamp falls within [date_from, end of date_to].

    Records with an unreadable timestamp are left out once any bound is set.

    Args:
        records: Records with a "YYYY-MM-DDTHH:MM" timestamp
        date_from: First day included ("YYYY-MM-DD" or date)
        date_to: Last day included ("YYYY-MM-DD" or date)

    Returns:
        Filtered list, in the original order
    """
    start = _to_date(date_from)
    end = _to_date(date_to)
    if start is None and end is None:
        return list(records)

    lower = datetime.combine(start, time.min) if start else None
    upper = datetime.combine(end, time.max) if end else None

    selected = []
    for record in records:
        try:
            moment = datetime.fromisoformat(record.timestamp)
        except (TypeError, ValueError):
            continue
        if moment.tzinfo is not None:
            moment = moment.replace(tzinfo=None)
        if lower and moment < lower:
            continue
        if upper and moment > upper:
            continue
        selected.append(record)
    return selected


def unique_excavators(
    productivity_records: Sequence[Any],
    match_factor_records: Sequence[Any],
) -> List[str]:
    excavators = {record.excavator_id for record in productivity_records}
    excavators.update(record.excavator_id for record in match_factor_records)
    return sorted(excavators)


def unique_supervisors(
    productivity_records: Sequence[Any],
    match_factor_records: Sequence[Any],
) -> List[str]:
    supervisors = {record.supervisor_name for record in productivity_records}
    supervisors.update(record.supervisor_name for record in match_factor_records)
    return sorted(supervisors)
