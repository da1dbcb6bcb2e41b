"""
Storage: local key -> JSON persistence shared by every component.
"""

from .backup import BackupError, export_backup, import_backup
from .json_store import (
    KNOWN_COLLECTIONS,
    PROGRESS_COLLECTION,
    SNAPSHOT_COLLECTION,
    SRS_COLLECTION,
    PersistedStore,
)

__all__ = [
    "PersistedStore",
    "SRS_COLLECTION",
    "PROGRESS_COLLECTION",
    "SNAPSHOT_COLLECTION",
    "KNOWN_COLLECTIONS",
    "BackupError",
    "export_backup",
    "import_backup",
]
