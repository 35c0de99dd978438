# ==============================================
# Backup Codec
# ==============================================
#
# PURPOSE:
#   Export the whole store as one JSON document, and restore a
#   store from such a document.
#
# ENVELOPE:
#   {
#     "version": "2.0.12",
#     "exportDate": "2026-01-15T08:30:00",
#     "productivityData": [ ProductivityRecord.to_dict(), ... ],
#     "matchFactorData": [ MatchFactorRecord.to_dict(), ... ],
#     "userSettings": {"nama": "...", "nrp": "..."},
#     "metadata": {
#       "totalProductivity": 3, "totalMatchFactor": 2,
#       "totalRecords": 5, "excavators": ["EX01", "EX02"]
#     }
#   }
#
# RESTORE RULES:
#   - The document is parsed and every entry checked BEFORE the
#     store is touched. Any problem → RestoreError, store untouched.
#   - Restore replaces, never merges.
#   - Entries of one kind sharing an id: the first keeps it, later
#     ones get fresh ids.
#   - userSettings is optional; restored only when it names someone.
#
# ==============================================

import json
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple

from smartzprod.analysis.filters import unique_excavators
from smartzprod.calculation.records import MatchFactorRecord, ProductivityRecord, with_unique_ids
from smartzprod.config import BackupConfig
from smartzprod.errors import RestoreError, StorageError
from smartzprod.persistence.record_store import PersistentStore, UserSettings

PRODUCTIVITY_FIELD = "productivityData"
MATCH_FACTOR_FIELD = "matchFactorData"


@dataclass(frozen=True)
class Snapshot:
    """A serialized backup ready to be written or offered for download."""
    filename: str
    content: str
    content_type: str

    @property
    def size(self) -> int:
        return len(self.content.encode("utf-8"))


def backup_filename(now: datetime, config: Optional[BackupConfig] = None) -> str:
    """
    Name for a backup taken at `now`.

    >>> backup_filename(datetime(2026, 1, 15, 8, 30, 5))
    'SmartzProd-Backup-2026-01-15T08-30-05.json'
    """
    config = config or BackupConfig()
    stamp = now.strftime("%Y-%m-%dT%H-%M-%S")
    return f"{config.file_prefix}-{stamp}.{config.file_extension}"


def build_envelope(
    productivity: List[ProductivityRecord],
    match_factor: List[MatchFactorRecord],
    user_settings: UserSettings,
    now: datetime,
    config: Optional[BackupConfig] = None,
) -> Dict[str, Any]:
    config = config or BackupConfig()
    return {
        "version": config.app_version,
        "exportDate": now.isoformat(timespec="seconds"),
        PRODUCTIVITY_FIELD: [record.to_dict() for record in productivity],
        MATCH_FACTOR_FIELD: [record.to_dict() for record in match_factor],
        "userSettings": user_settings.to_dict(),
        "metadata": {
            "totalProductivity": len(productivity),
            "totalMatchFactor": len(match_factor),
            "totalRecords": len(productivity) + len(match_factor),
            "excavators": unique_excavators(productivity, match_factor),
        },
    }


def export_snapshot(
    store: PersistentStore,
    now: Optional[datetime] = None,
    config: Optional[BackupConfig] = None,
) -> Snapshot:
    """
    Serialize the whole store.

    Args:
        store: Store to export (not modified)
        now: Export time, defaults to the current local time
        config: Backup file format

    Returns:
        Snapshot with filename, JSON content and content type

    Raises:
        StorageError: If a record holds a value JSON cannot represent
    """
    config = config or BackupConfig()
    now = now or datetime.now()
    envelope = build_envelope(
        store.productivity_records,
        store.match_factor_records,
        store.load_user_settings(),
        now,
        config,
    )
    try:
        content = json.dumps(envelope, indent=2, ensure_ascii=False, allow_nan=False)
    except ValueError as e:
        raise StorageError(f"Cannot serialize backup: {e}") from e
    return Snapshot(
        filename=backup_filename(now, config),
        content=content,
        content_type=config.mime_type,
    )


def _parse_entries(envelope: Dict[str, Any], field_name: str, record_class) -> List[Any]:
    if field_name not in envelope:
        raise RestoreError(f"Backup is missing '{field_name}'", code="missing_field")
    entries = envelope[field_name]
    if not isinstance(entries, list):
        raise RestoreError(f"'{field_name}' must be a list", code="invalid_field")

    records = []
    for position, entry in enumerate(entries):
        try:
            records.append(record_class.from_dict(entry))
        except (KeyError, TypeError, ValueError) as e:
            raise RestoreError(
                f"Invalid entry #{position} in '{field_name}': {e}",
                code="invalid_record",
            ) from e
    return records


def _parse_user_settings(envelope: Dict[str, Any]) -> Optional[UserSettings]:
    settings = envelope.get("userSettings")
    if not isinstance(settings, dict):
        return None
    name = settings.get("nama") or ""
    nrp = settings.get("nrp") or ""
    if not isinstance(name, str) or not isinstance(nrp, str):
        return None
    if not name and not nrp:
        return None
    return UserSettings(supervisor_name=name, supervisor_id=nrp)


def parse_snapshot(
    raw: str,
) -> Tuple[List[ProductivityRecord], List[MatchFactorRecord], Optional[UserSettings]]:
    """
    Parse and check a backup document without touching any store.

    Args:
        raw: JSON text of a backup

    Returns:
        Tuple of (productivity records, match factor records, user settings
        or None when the backup carries none)

    Raises:
        RestoreError: If the text is not a well-formed backup
    """
    try:
        envelope = json.loads(raw)
    except (TypeError, ValueError) as e:
        raise RestoreError(f"Backup is not valid JSON: {e}", code="invalid_json") from e

    if not isinstance(envelope, dict):
        raise RestoreError("Backup must be a JSON object", code="invalid_envelope")

    productivity = _parse_entries(envelope, PRODUCTIVITY_FIELD, ProductivityRecord)
    match_factor = _parse_entries(envelope, MATCH_FACTOR_FIELD, MatchFactorRecord)

    productivity, _ = with_unique_ids(productivity)
    match_factor, _ = with_unique_ids(match_factor)
    return productivity, match_factor, _parse_user_settings(envelope)


def import_snapshot(store: PersistentStore, raw: str) -> int:
    """
    Replace the store contents with a backup.

    Args:
        store: Store to restore into
        raw: JSON text of a backup

    Returns:
        Number of records restored

    Raises:
        RestoreError: If the backup is malformed or could not be persisted.
                      The store is unchanged in both cases.
    """
    productivity, match_factor, user_settings = parse_snapshot(raw)

    if not store.replace_all(productivity, match_factor):
        raise RestoreError("Restored data could not be saved", code="persist_failed")

    if user_settings is not None:
        store.save_user_settings(user_settings.supervisor_name, user_settings.supervisor_id)

    return len(productivity) + len(match_factor)
