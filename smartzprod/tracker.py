# ==============================================
# EquipmentTracker: Orchestrator
# ==============================================
#
# PURPOSE:
#   This is the class callers (a UI, the CLI, tests) talk to. It
#   wires validation, record building, the persistent store,
#   statistics and backup into one flow.
#
# HOW IT CONNECTS THE TOPICS:
#
#   ┌──────────────────────────────────────────────────────────┐
#   │                   EquipmentTracker                       │
#   │                                                          │
#   │  raw form inputs                                         │
#   │        │                                                 │
#   │        ▼                                                 │
#   │  ┌──────────────────────────────────────────────┐        │
#   │  │ TOPIC 1: VALIDATION                          │        │
#   │  │  validate_*_inputs → ValidationResult        │        │
#   │  └──────────────┬───────────────────────────────┘        │
#   │                 │ valid                                  │
#   │                 ▼                                        │
#   │  ┌──────────────────────────────────────────────┐        │
#   │  │ TOPIC 2: CALCULATION                         │        │
#   │  │  build_*_record → ProductivityRecord /       │        │
#   │  │                   MatchFactorRecord          │        │
#   │  └──────────────┬───────────────────────────────┘        │
#   │                 │ record                                 │
#   │                 ▼                                        │
#   │  ┌──────────────────────────────────────────────┐        │
#   │  │ TOPIC 4: PERSISTENCE                         │        │
#   │  │  PersistentStore.append / update / remove    │        │
#   │  └──────┬───────────────────────────┬───────────┘        │
#   │         │ on demand                 │ on demand          │
#   │         ▼                           ▼                    │
#   │  TOPIC 3: ANALYSIS           TOPIC 5: BACKUP             │
#   │  stats, status, filters      export / restore            │
#   └──────────────────────────────────────────────────────────┘
#
#
# CLASS: EquipmentTracker
# -----------------------
#
#   Constructor:
#   ------------
#   - __init__(config: AppConfig | None = None, storage_dir: str | None = None)
#       1. Load config (from .env or passed in)
#       2. Open JSON storage in storage_dir (default config.storage.data_dir)
#       3. Load existing records and user settings
#
#   Public Methods:
#   ---------------
#   - add_productivity(inputs) / add_match_factor(inputs) -> SubmitResult
#   - edit_productivity(record_id, inputs) / edit_match_factor(...) -> SubmitResult
#   - delete(kind, record_id) -> bool
#   - records(kind, excavator_id=None, date_from=None, date_to=None) -> list
#   - productivity_stats() / match_factor_stats() / excavator_summary(id)
#   - all_excavator_summaries() / interpret(match_factor)
#   - field_debouncer(on_result) / field_throttler(on_result)
#   - backup(directory) -> Path
#   - restore(path_or_text) -> RestoreResult
#   - get_status() -> dict
#   - reset() -> bool
#
# ==============================================

from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Callable, Dict, List, Mapping, Optional, Union

from smartzprod.analysis.filters import (
    DateLike,
    filter_by_date_range,
    filter_by_excavator,
    unique_excavators,
)
from smartzprod.analysis.statistics import (
    EquipmentSummary,
    MatchFactorStats,
    ProductivityStats,
    match_factor_stats,
    per_equipment_summary,
    productivity_stats,
)
from smartzprod.analysis.status import Interpretation, interpret_match_factor
from smartzprod.backup.codec import export_snapshot, import_snapshot
from smartzprod.calculation.record_factory import (
    build_match_factor_record,
    build_productivity_record,
)
from smartzprod.config import AppConfig, load_config
from smartzprod.errors import ComputationError, RestoreError, StorageError
from smartzprod.persistence.kv_storage import JsonFileStorage
from smartzprod.persistence.record_store import (
    CollectionKind,
    PersistentStore,
    Record,
    UserSettings,
)
from smartzprod.timing import Debouncer, Throttler
from smartzprod.validation.input_validator import (
    validate_field,
    validate_match_factor_inputs,
    validate_productivity_inputs,
)

SAVE_FAILED = "Data could not be saved, please try again"

_VALIDATORS = {
    CollectionKind.PRODUCTIVITY: validate_productivity_inputs,
    CollectionKind.MATCH_FACTOR: validate_match_factor_inputs,
}

_BUILDERS = {
    CollectionKind.PRODUCTIVITY: build_productivity_record,
    CollectionKind.MATCH_FACTOR: build_match_factor_record,
}


@dataclass
class SubmitResult:
    """Outcome of an add or edit."""
    success: bool
    record: Optional[Record] = None
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success": self.success,
            "record": self.record.to_dict() if self.record else None,
            "errors": list(self.errors),
            "warnings": list(self.warnings),
        }


@dataclass
class RestoreResult:
    """Outcome of a restore."""
    success: bool
    message: str
    total_records: int = 0


class EquipmentTracker:
    """
    Main entry point: validation, records, persistence, statistics, backup.
    """

    def __init__(self, config: Optional[AppConfig] = None, storage_dir: Optional[str] = None):
        """
        Initialize the tracker and load any previous session.

        Args:
            config: Application configuration. If None, loads from environment.
            storage_dir: Overrides config.storage.data_dir
        """
        self._config = config or load_config()
        self._storage_dir = storage_dir or self._config.storage.data_dir

        self._storage = JsonFileStorage(self._storage_dir)
        self._store = PersistentStore(self._storage)
        self._user_settings = self._store.load_user_settings()
        self._last_update: Optional[str] = None

        print(f"✓ Tracker initialized (storage: {self._storage_dir})")

    @property
    def config(self) -> AppConfig:
        return self._config

    @property
    def store(self) -> PersistentStore:
        return self._store

    @property
    def user_settings(self) -> UserSettings:
        return self._user_settings

    # ======================================
    # Add / edit / delete
    # ======================================
    def add_productivity(self, inputs: Mapping[str, Any], now: Optional[datetime] = None) -> SubmitResult:
        """
        Validate, compute and store a productivity entry.

        Args:
            inputs: Raw form fields (see build_productivity_record)
            now: Clock override for the default timestamp

        Returns:
            SubmitResult with the stored record, or the errors
        """
        return self._submit(CollectionKind.PRODUCTIVITY, inputs, None, now)

    def add_match_factor(self, inputs: Mapping[str, Any], now: Optional[datetime] = None) -> SubmitResult:
        """Validate, compute and store a match factor entry."""
        return self._submit(CollectionKind.MATCH_FACTOR, inputs, None, now)

    def edit_productivity(self, record_id: str, inputs: Mapping[str, Any]) -> SubmitResult:
        """Replace a stored productivity entry, keeping its id."""
        return self._edit(CollectionKind.PRODUCTIVITY, record_id, inputs)

    def edit_match_factor(self, record_id: str, inputs: Mapping[str, Any]) -> SubmitResult:
        return self._edit(CollectionKind.MATCH_FACTOR, record_id, inputs)

    def delete(self, kind: Union[CollectionKind, str], record_id: str) -> bool:
        """
        Delete one record by id.

        Args:
            kind: CollectionKind or its value ("productivity" / "matchFactor")
            record_id: Id of the record

        Returns:
            True if the record existed and the deletion was saved
        """
        kind = CollectionKind(kind)
        if not self._store.remove(kind, record_id):
            print(f"⚠ No {kind.label} record deleted (id {record_id})")
            return False
        self._touch()
        print(f"✓ Deleted {kind.label} record {record_id}")
        return True

    # ======================================
    # Reading / statistics
    # ======================================
    def records(
        self,
        kind: Union[CollectionKind, str],
        excavator_id: Optional[str] = None,
        date_from: DateLike = None,
        date_to: DateLike = None,
    ) -> List[Record]:
        """Records of one kind, optionally narrowed by excavator and date."""
        selected = self._store.records(CollectionKind(kind))
        if excavator_id:
            selected = filter_by_excavator(selected, excavator_id)
        return filter_by_date_range(selected, date_from, date_to)

    def productivity_stats(self, excavator_id: Optional[str] = None) -> ProductivityStats:
        return productivity_stats(self.records(CollectionKind.PRODUCTIVITY, excavator_id))

    def match_factor_stats(self, excavator_id: Optional[str] = None) -> MatchFactorStats:
        return match_factor_stats(
            self.records(CollectionKind.MATCH_FACTOR, excavator_id),
            self._config.validation,
        )

    def excavator_summary(self, excavator_id: str) -> EquipmentSummary:
        return per_equipment_summary(
            self._store.productivity_records,
            self._store.match_factor_records,
            excavator_id,
            self._config.validation,
        )

    def all_excavator_summaries(self) -> List[EquipmentSummary]:
        """One summary per excavator seen in either collection, sorted by id."""
        excavators = unique_excavators(
            self._store.productivity_records,
            self._store.match_factor_records,
        )
        return [self.excavator_summary(excavator_id) for excavator_id in excavators]

    def interpret(self, match_factor: float) -> Interpretation:
        return interpret_match_factor(match_factor, self._config.validation)

    # ======================================
    # Live field validation
    # ======================================
    def field_debouncer(self, on_result: Callable[[str, Optional[str]], Any]) -> Debouncer:
        """
        Debounced single-field check (latest keystroke in the window wins).

        Args:
            on_result: Called with (field_name, error message or None)

        Returns:
            Debouncer whose call(field_name, value) schedules a check
        """
        return Debouncer(
            self._field_check(on_result),
            self._config.timing.debounce_seconds,
        )

    def field_throttler(self, on_result: Callable[[str, Optional[str]], Any]) -> Throttler:
        """Throttled single-field check (extra calls in the window are dropped)."""
        return Throttler(
            self._field_check(on_result),
            self._config.timing.throttle_seconds,
        )

    # ======================================
    # Backup / restore
    # ======================================
    def backup(self, directory: Union[str, Path] = ".", now: Optional[datetime] = None) -> Path:
        """
        Write a backup file of the whole store.

        Args:
            directory: Where to write the file
            now: Export time override

        Returns:
            Path of the written file

        Raises:
            StorageError: If the data cannot be serialized or the file
                          cannot be written
        """
        snapshot = export_snapshot(self._store, now, self._config.backup)
        path = Path(directory) / snapshot.filename
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(snapshot.content, encoding="utf-8")
        except OSError as e:
            print(f"✗ Backup failed: {e}")
            raise StorageError(f"Cannot write backup to {path}: {e}") from e

        print(f"✓ Backup saved to {path} ({self._store.count()} records)")
        return path

    def restore(self, source: Union[str, Path]) -> RestoreResult:
        """
        Replace all data with the contents of a backup.

        Args:
            source: Path of a backup file, or the backup JSON text itself

        Returns:
            RestoreResult; on failure the current data is untouched
        """
        try:
            raw = self._read_backup(source)
            total = import_snapshot(self._store, raw)
        except RestoreError as e:
            print(f"✗ Restore failed: {e.message}")
            return RestoreResult(success=False, message=e.message)

        self._user_settings = self._store.load_user_settings()
        self._touch()
        message = f"Restored {total} records"
        print(f"✓ {message}")
        return RestoreResult(success=True, message=message, total_records=total)

    # ======================================
    # Status / lifecycle
    # ======================================
    def get_status(self) -> dict:
        """
        Get current tracker status.

        Returns:
            Dictionary with record counts and storage information.
        """
        usage = self._store.usage_info()
        return {
            "productivity_records": self._store.count(CollectionKind.PRODUCTIVITY),
            "match_factor_records": self._store.count(CollectionKind.MATCH_FACTOR),
            "total_records": self._store.count(),
            "excavators": len(unique_excavators(
                self._store.productivity_records,
                self._store.match_factor_records,
            )),
            "supervisor_name": self._user_settings.supervisor_name,
            "supervisor_id": self._user_settings.supervisor_id,
            "storage_dir": str(self._storage.storage_dir),
            "storage_kb": usage["total_kb"],
            "last_update": self._last_update,
            "timestamp": datetime.now().isoformat(timespec="seconds"),
        }

    def reset(self) -> bool:
        """Delete all records and user settings."""
        if not self._store.clear():
            return False
        self._user_settings = UserSettings()
        self._touch()
        return True

    def close(self) -> None:
        # Every mutation is already on disk
        print("✓ Tracker closed")

    def __enter__(self):
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        self.close()
        return False

    # ======================================
    # Internal
    # ======================================
    def _submit(
        self,
        kind: CollectionKind,
        inputs: Mapping[str, Any],
        record_id: Optional[str],
        now: Optional[datetime],
    ) -> SubmitResult:
        validation = _VALIDATORS[kind](inputs, self._config.validation)
        if not validation.is_valid:
            return SubmitResult(False, errors=validation.errors, warnings=validation.warnings)

        try:
            record = _BUILDERS[kind](inputs, record_id=record_id, now=now)
        except ComputationError as e:
            return SubmitResult(False, errors=[e.message], warnings=validation.warnings)

        if record_id is None:
            saved = self._store.append(kind, record)
        else:
            saved = self._store.update(kind, record_id, record)
        if not saved:
            return SubmitResult(False, errors=[SAVE_FAILED], warnings=validation.warnings)

        self._remember_supervisor(record)
        self._touch()
        for warning in validation.warnings:
            print(f"⚠ {warning}")
        action = "Added" if record_id is None else "Updated"
        print(f"✓ {action} {kind.label} record {record.record_id} ({record.excavator_id})")
        return SubmitResult(True, record=record, warnings=validation.warnings)

    def _edit(self, kind: CollectionKind, record_id: str, inputs: Mapping[str, Any]) -> SubmitResult:
        existing = self._store.get(kind, record_id)
        if existing is None:
            return SubmitResult(False, errors=[f"No {kind.label} record with id {record_id}"])

        # An edit without a timestamp keeps the original one
        inputs = dict(inputs)
        if not str(inputs.get("timestamp") or "").strip():
            inputs["timestamp"] = existing.timestamp
        return self._submit(kind, inputs, record_id, None)

    def _remember_supervisor(self, record: Record) -> None:
        settings = UserSettings(record.supervisor_name, record.supervisor_id)
        if settings == self._user_settings:
            return
        if self._store.save_user_settings(settings.supervisor_name, settings.supervisor_id):
            self._user_settings = settings

    def _field_check(self, on_result: Callable[[str, Optional[str]], Any]) -> Callable[[str, Any], Any]:
        config = self._config.validation

        def check(field_name: str, value: Any) -> Any:
            return on_result(field_name, validate_field(field_name, value, config))

        return check

    def _read_backup(self, source: Union[str, Path]) -> str:
        if isinstance(source, str) and source.lstrip().startswith(("{", "[")):
            return source
        path = Path(source)
        try:
            return path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise RestoreError(f"Cannot read backup file {path}: {e}", code="unreadable_file") from e

    def _touch(self) -> None:
        self._last_update = datetime.now().isoformat(timespec="seconds")
