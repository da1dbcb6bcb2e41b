"""
Backup export/import for a course namespace.

The backup file is a single JSON document:

    {
        "srs": {...},
        "exercise-progress": {...},
        "analytics-snapshots": {...},
        "_meta": {"export_date": "...", "version": 1, "collections": 3}
    }
"""

from __future__ import annotations

import json
from datetime import datetime
from pathlib import Path

from loguru import logger

from .json_store import KNOWN_COLLECTIONS, PersistedStore

BACKUP_VERSION = 1


class BackupError(Exception):
    """Raised when a backup file cannot be read or is not a drillcore backup."""


def export_backup(store: PersistedStore, path: Path) -> int:
    """
    Write all collections of the store's namespace to a JSON file.

    Args:
        store: Source store
        path: Destination file (parent directories are created)

    Returns:
        Number of collections written (0 means nothing to export, no file written)
    """
    data: dict = {}
    for collection in store.collections():
        entries = store.load(collection)
        if entries:
            data[collection] = entries

    if not data:
        logger.info("Nothing to export")
        return 0

    data["_meta"] = {
        "export_date": datetime.now().isoformat(),
        "version": BACKUP_VERSION,
        "namespace": store.namespace,
        "collections": len(data),
    }

    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2)

    logger.info(f"Exported {len(data) - 1} collections to {path}")
    return len(data) - 1


def import_backup(store: PersistedStore, path: Path) -> int:
    """
    Restore known collections from a backup file, overwriting current data.

    Args:
        store: Target store
        path: Backup file written by export_backup

    Returns:
        Number of collections restored

    Raises:
        BackupError: If the file is missing or unreadable, not JSON text,
            or lacks the _meta block
    """
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError as e:
        raise BackupError(f"Backup file not found: {path}") from e
    except OSError as e:
        raise BackupError(f"Could not read backup file {path}: {e}") from e
    except UnicodeDecodeError as e:
        raise BackupError(f"Invalid backup file: not UTF-8 text ({e})") from e
    except json.JSONDecodeError as e:
        raise BackupError(f"Invalid backup file: could not parse JSON ({e})") from e

    if not isinstance(data, dict) or not isinstance(data.get("_meta"), dict):
        raise BackupError("Invalid backup file: missing metadata")

    restored = 0
    for collection in KNOWN_COLLECTIONS:
        entries = data.get(collection)
        if not isinstance(entries, dict):
            continue
        if store.replace(collection, entries):
            restored += 1

    logger.info(f"Restored {restored} collections from {path}")
    return restored
