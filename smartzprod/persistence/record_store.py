from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple, Type, Union

from smartzprod.calculation.records import MatchFactorRecord, ProductivityRecord, with_unique_ids
from smartzprod.errors import StorageError
from .kv_storage import JsonFileStorage

Record = Union[ProductivityRecord, MatchFactorRecord]


# ==============================================
# PersistentStore
# ==============================================
#
# PURPOSE:
#   Hold the two ordered record collections in memory and keep
#   durable storage in step with them after every mutation.
#
# IDENTITY:
#   Records can be addressed two ways:
#     - by position (update_at / remove_at). Any insert or delete
#       shifts every later index, so callers must re-derive the index
#       from the current collection right before the call.
#     - by record_id (update / remove). Ids never shift.
#
# FAILURE MODEL:
#   - load: unreadable or corrupt data → empty collection + warning
#           malformed entry → skipped + warning
#           repeated id → fresh id, saved back
#   - save: StorageError is caught here, reported, and the in-memory
#     collections are left exactly as they were before the call
#   - out-of-bounds index / unknown id → no-op, returns False
#
# STORAGE KEYS:
#   productivity_data, matchFactor_data, user_name, user_nrp
#
class CollectionKind(Enum):
    """The two record collections."""
    PRODUCTIVITY = "productivity"
    MATCH_FACTOR = "matchFactor"

    @property
    def storage_key(self) -> str:
        return f"{self.value}_data"

    @property
    def record_class(self) -> Type[Record]:
        if self is CollectionKind.PRODUCTIVITY:
            return ProductivityRecord
        return MatchFactorRecord

    @property
    def label(self) -> str:
        return "productivity" if self is CollectionKind.PRODUCTIVITY else "match factor"


USER_NAME_KEY = "user_name"
USER_NRP_KEY = "user_nrp"

ALL_KEYS = (
    CollectionKind.PRODUCTIVITY.storage_key,
    CollectionKind.MATCH_FACTOR.storage_key,
    USER_NAME_KEY,
    USER_NRP_KEY,
)


@dataclass
class UserSettings:
    """Last-used supervisor identity, used to pre-fill forms."""
    supervisor_name: str = ""
    supervisor_id: str = ""

    def to_dict(self) -> Dict[str, str]:
        return {"nama": self.supervisor_name, "nrp": self.supervisor_id}


class PersistentStore:
    """
    Ordered productivity / match factor collections with durable storage.

    All operations are synchronous and run to completion.
    """

    def __init__(self, storage: JsonFileStorage, load: bool = True):
        """
        Initialize the store.

        Args:
            storage: Durable key-value storage
            load: Load existing collections from storage right away
        """
        self.storage = storage
        self._collections: Dict[CollectionKind, List[Record]] = {
            CollectionKind.PRODUCTIVITY: [],
            CollectionKind.MATCH_FACTOR: [],
        }
        if load:
            self.load_all()

    # ======================================
    # Reading
    # ======================================
    def records(self, kind: CollectionKind) -> List[Record]:
        """Copy of one collection, in insertion order."""
        return list(self._collections[kind])

    @property
    def productivity_records(self) -> List[ProductivityRecord]:
        return self.records(CollectionKind.PRODUCTIVITY)

    @property
    def match_factor_records(self) -> List[MatchFactorRecord]:
        return self.records(CollectionKind.MATCH_FACTOR)

    def count(self, kind: Optional[CollectionKind] = None) -> int:
        """Records in one collection, or in both when kind is None."""
        if kind is None:
            return sum(len(records) for records in self._collections.values())
        return len(self._collections[kind])

    def get_at(self, kind: CollectionKind, index: int) -> Optional[Record]:
        records = self._collections[kind]
        if 0 <= index < len(records):
            return records[index]
        return None

    def index_of(self, kind: CollectionKind, record_id: str) -> Optional[int]:
        """Current position of a record, or None if it is not stored."""
        for index, record in enumerate(self._collections[kind]):
            if record.record_id == record_id:
                return index
        return None

    def get(self, kind: CollectionKind, record_id: str) -> Optional[Record]:
        index = self.index_of(kind, record_id)
        return None if index is None else self._collections[kind][index]

    # ======================================
    # Mutations (each one persists immediately)
    # ======================================
    def append(self, kind: CollectionKind, record: Record) -> bool:
        """
        Add a record at the tail of a collection.

        Args:
            kind: Target collection
            record: Record of the matching type

        Returns:
            True if stored and persisted, False if persisting failed
        """
        self._check_type(kind, record)
        updated = self.records(kind)
        updated.append(record)
        return self._commit({kind: updated})

    def update_at(self, kind: CollectionKind, index: int, record: Record) -> bool:
        """
        Replace the record at `index`.

        The index must come from the current collection; an index held
        across another mutation may point at a different record.

        Returns:
            False (and nothing changes) if the index is out of bounds
        """
        self._check_type(kind, record)
        if not 0 <= index < len(self._collections[kind]):
            return False
        updated = self.records(kind)
        updated[index] = record
        return self._commit({kind: updated})

    def remove_at(self, kind: CollectionKind, index: int) -> bool:
        """
        Remove the record at `index`; later records shift down by one.

        Returns:
            False (and nothing changes) if the index is out of bounds
        """
        if not 0 <= index < len(self._collections[kind]):
            return False
        updated = self.records(kind)
        del updated[index]
        return self._commit({kind: updated})

    def update(self, kind: CollectionKind, record_id: str, record: Record) -> bool:
        """
        Replace the record with `record_id`, keeping that id.

        Returns:
            False if no record has that id, or persisting failed
        """
        index = self.index_of(kind, record_id)
        if index is None:
            return False
        return self.update_at(kind, index, replace(record, record_id=record_id))

    def remove(self, kind: CollectionKind, record_id: str) -> bool:
        """Remove the record with `record_id`. False if there is none."""
        index = self.index_of(kind, record_id)
        if index is None:
            return False
        return self.remove_at(kind, index)

    def replace_all(
        self,
        productivity: List[ProductivityRecord],
        match_factor: List[MatchFactorRecord],
    ) -> bool:
        """
        Replace both collections wholesale (restore).

        Either both collections are replaced and persisted, or nothing
        changes.
        """
        for record in productivity:
            self._check_type(CollectionKind.PRODUCTIVITY, record)
        for record in match_factor:
            self._check_type(CollectionKind.MATCH_FACTOR, record)
        return self._commit({
            CollectionKind.PRODUCTIVITY: list(productivity),
            CollectionKind.MATCH_FACTOR: list(match_factor),
        })

    def clear(self) -> bool:
        """Delete every stored key and empty both collections."""
        try:
            self.storage.clear(ALL_KEYS)
        except StorageError as e:
            print(f"✗ Could not clear stored data: {e}")
            return False
        for kind in self._collections:
            self._collections[kind] = []
        print("✓ All stored data cleared")
        return True

    # ======================================
    # Load / save
    # ======================================
#   - load_all() -> (productivity, match_factor)
#       Missing data or unreadable data → empty lists, never an error.
#       Malformed entries are skipped one by one.
#
#   - save_all(productivity, match_factor) -> bool
#       Write both collections. StorageError is reported, not raised.
#
    def load_all(self) -> Tuple[List[ProductivityRecord], List[MatchFactorRecord]]:
        """
        Load both collections from durable storage into memory.

        Returns:
            Tuple of (productivity records, match factor records)
        """
        missing_ids = False
        for kind in CollectionKind:
            records, generated = self._load_collection(kind)
            self._collections[kind] = records
            missing_ids = missing_ids or generated

        # Entries stored without an id, or with a repeated one, got fresh ids;
        # keep them stable
        if missing_ids:
            self.save_all(self._collections[CollectionKind.PRODUCTIVITY],
                          self._collections[CollectionKind.MATCH_FACTOR])

        print(f"✓ Loaded {self.count(CollectionKind.PRODUCTIVITY)} productivity and "
              f"{self.count(CollectionKind.MATCH_FACTOR)} match factor records "
              f"from {self.storage.storage_dir}")
        return self.productivity_records, self.match_factor_records

    def save_all(
        self,
        productivity: List[ProductivityRecord],
        match_factor: List[MatchFactorRecord],
    ) -> bool:
        """
        Write both collections to durable storage.

        Returns:
            True if both were written, False if a write failed
        """
        try:
            self._write(CollectionKind.PRODUCTIVITY, productivity)
            self._write(CollectionKind.MATCH_FACTOR, match_factor)
        except StorageError as e:
            print(f"✗ Could not save records: {e}")
            return False
        return True

    def load_user_settings(self) -> UserSettings:
        """Last-used supervisor name / NRP (empty strings when unknown)."""
        try:
            name = self.storage.get(USER_NAME_KEY, "")
            nrp = self.storage.get(USER_NRP_KEY, "")
        except StorageError as e:
            print(f"⚠ Could not load user settings: {e}")
            return UserSettings()
        return UserSettings(
            supervisor_name=name if isinstance(name, str) else "",
            supervisor_id=nrp if isinstance(nrp, str) else "",
        )

    def save_user_settings(self, supervisor_name: str, supervisor_id: str) -> bool:
        """Remember the supervisor for the next session. Last write wins."""
        try:
            self.storage.set(USER_NAME_KEY, supervisor_name)
            self.storage.set(USER_NRP_KEY, supervisor_id)
        except StorageError as e:
            print(f"✗ Could not save user settings: {e}")
            return False
        return True

    def usage_info(self) -> Dict[str, Any]:
        """Bytes on disk per stored key plus the total."""
        items = self.storage.usage(ALL_KEYS)
        total = sum(items.values())
        return {
            "total_bytes": total,
            "total_kb": round(total / 1024, 2),
            "item_count": sum(1 for size in items.values() if size),
            "items": items,
        }

    # ======================================
    # Internal
    # ======================================
    def _check_type(self, kind: CollectionKind, record: Record) -> None:
        if not isinstance(record, kind.record_class):
            raise TypeError(
                f"{kind.label} collection expects {kind.record_class.__name__}, "
                f"got {type(record).__name__}"
            )

    def _write(self, kind: CollectionKind, records: List[Record]) -> None:
        self.storage.set(kind.storage_key, [record.to_dict() for record in records])

    def _commit(self, changes: Dict[CollectionKind, List[Record]]) -> bool:
        """
        Persist the changed collections, then swap them into memory.

        If a later write fails, collections already written are put
        back to their previous content before reporting the failure.
        """
        written = []
        try:
            for kind, records in changes.items():
                self._write(kind, records)
                written.append(kind)
        except StorageError as e:
            print(f"✗ Could not save records, changes discarded: {e}")
            for kind in written:
                try:
                    self._write(kind, self._collections[kind])
                except StorageError as rollback_error:
                    print(f"⚠ Could not roll back {kind.label} data: {rollback_error}")
            return False

        for kind, records in changes.items():
            self._collections[kind] = records
        return True

    def _load_collection(self, kind: CollectionKind) -> Tuple[List[Record], bool]:
        try:
            raw = self.storage.get(kind.storage_key, [])
        except StorageError as e:
            print(f"⚠ Could not load {kind.label} data, starting empty: {e}")
            return [], False

        if not isinstance(raw, list):
            print(f"⚠ Stored {kind.label} data is not a list, starting empty")
            return [], False

        records = []
        generated = False
        for position, entry in enumerate(raw):
            try:
                record = kind.record_class.from_dict(entry)
            except (KeyError, TypeError, ValueError) as e:
                print(f"⚠ Skipping malformed {kind.label} entry #{position}: {e}")
                continue
            generated = generated or not entry.get("id")
            records.append(record)

        records, replaced = with_unique_ids(records)
        if replaced:
            print(f"⚠ Gave {replaced} duplicate {kind.label} entries fresh ids")
        return records, generated or replaced > 0
