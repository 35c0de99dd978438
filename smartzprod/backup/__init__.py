# ==============================================
# TOPIC 5: BACKUP (export / restore the whole store)
# ==============================================
#
# Modules:
# --------
# - codec.py  → Snapshot, backup_filename, export / parse / import
#
# ==============================================

from .codec import Snapshot, backup_filename, export_snapshot, import_snapshot, parse_snapshot

__all__ = ["Snapshot", "backup_filename", "export_snapshot", "import_snapshot", "parse_snapshot"]
