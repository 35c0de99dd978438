import json
import os
from pathlib import Path
from typing import Any, Dict, Iterable

from smartzprod.errors import StorageError


# ==============================================
# JsonFileStorage
# ==============================================
#
# PURPOSE:
#   Durable key-value storage on local disk. One JSON file per key,
#   so a corrupt entry only ever affects that key.
#
# WHY THIS CLASS EXISTS:
#   The record store must survive process restarts. Reads and
#   writes are synchronous and complete before returning. A write
#   goes to a temporary file first and is swapped in with
#   os.replace(), so a crash mid-write leaves the old value intact.
#
# ERRORS:
#   Every OS or JSON failure is raised as StorageError. Deciding
#   what to do about it (empty fallback, report) is the caller's job.
#
class JsonFileStorage:
    """
    Key-value storage backed by JSON files in one directory.

    Files created:
    - <storage_dir>/productivity_data.json  → productivity records
    - <storage_dir>/matchFactor_data.json   → match factor records
    - <storage_dir>/user_name.json          → last supervisor name
    - <storage_dir>/user_nrp.json           → last supervisor NRP
    """

    def __init__(self, storage_dir: str = "data/"):
        """
        Initialize the storage.

        Args:
            storage_dir: Directory to store the JSON files
        """
        self.storage_dir = Path(storage_dir)

        # Create directory if it doesn't exist
        try:
            self.storage_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StorageError(f"Cannot create storage directory {self.storage_dir}: {e}") from e

    def path_for(self, key: str) -> Path:
        """File that holds the value for `key`."""
        return self.storage_dir / f"{key}.json"

#   Methods:
#   --------
#   - get(key, default=None) -> Any
#       Missing key → default. Unreadable/corrupt file → StorageError.
#
#   - set(key, value) -> None
#       Serialize to JSON and atomically replace the file.
#
#   - remove(key) -> None / clear(keys) -> None
#
#   - exists(key) -> bool
#
#   - size_of(key) -> int   (bytes on disk, 0 when missing)
#
    def get(self, key: str, default: Any = None) -> Any:
        """
        Read the value stored under `key`.

        Args:
            key: Storage key
            default: Returned when nothing is stored under the key

        Returns:
            The deserialized value, or default

        Raises:
            StorageError: If the file cannot be read or parsed
        """
        path = self.path_for(key)
        if not path.exists():
            return default

        try:
            with open(path, "r", encoding="utf-8") as f:
                return json.load(f)
        except (OSError, ValueError) as e:
            raise StorageError(f"Cannot read '{key}' from {path}: {e}") from e

    def set(self, key: str, value: Any) -> None:
        """
        Store `value` under `key`.

        Raises:
            StorageError: If the value cannot be serialized or written
        """
        path = self.path_for(key)
        tmp_path = path.with_name(path.name + ".tmp")

        try:
            payload = json.dumps(value, indent=2, ensure_ascii=False, allow_nan=False)
        except (TypeError, ValueError) as e:
            raise StorageError(f"Cannot serialize '{key}': {e}") from e

        try:
            with open(tmp_path, "w", encoding="utf-8") as f:
                f.write(payload)
            os.replace(tmp_path, path)
        except OSError as e:
            if tmp_path.exists():
                tmp_path.unlink()
            raise StorageError(f"Cannot write '{key}' to {path}: {e}") from e

    def remove(self, key: str) -> None:
        """Delete the value stored under `key` (no error if absent)."""
        path = self.path_for(key)
        try:
            if path.exists():
                path.unlink()
        except OSError as e:
            raise StorageError(f"Cannot remove '{key}': {e}") from e

    def clear(self, keys: Iterable[str]) -> None:
        """Delete every listed key."""
        for key in keys:
            self.remove(key)

    def exists(self, key: str) -> bool:
        return self.path_for(key).exists()

    def size_of(self, key: str) -> int:
        path = self.path_for(key)
        return path.stat().st_size if path.exists() else 0

    def usage(self, keys: Iterable[str]) -> Dict[str, int]:
        """Bytes on disk per key."""
        return {key: self.size_of(key) for key in keys}
