# ==============================================
# TOPIC 4: PERSISTENCE (records across restarts)
# ==============================================
#
# This package keeps the record collections and user settings
# on local disk so they survive process restarts.
#
# Modules:
# --------
# - kv_storage.py    → JSON-file key-value storage (atomic writes)
# - record_store.py  → PersistentStore: ordered collections + user settings
#
# ==============================================

from .kv_storage import JsonFileStorage
from .record_store import CollectionKind, PersistentStore, UserSettings

__all__ = ["JsonFileStorage", "CollectionKind", "PersistentStore", "UserSettings"]
