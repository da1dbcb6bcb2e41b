"""
SQLite-backed JSON Store for drillcore.

Provides portable key -> JSON persistence for every other component:
- srs: review record per exercise key
- exercise-progress: latest attempt per exercise key
- analytics-snapshots: one aggregate snapshot per calendar date

Each (namespace, collection, entry_key) row holds one JSON document, so a
write replaces exactly one record and a corrupt row never hides the others.

Database location: ~/.drillcore/state.db
"""

from __future__ import annotations

import json
import sqlite3
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from loguru import logger

SRS_COLLECTION = "srs"
PROGRESS_COLLECTION = "exercise-progress"
SNAPSHOT_COLLECTION = "analytics-snapshots"

KNOWN_COLLECTIONS = (SRS_COLLECTION, PROGRESS_COLLECTION, SNAPSHOT_COLLECTION)

MEMORY_PATH = ":memory:"


class PersistedStore:
    """
    Namespaced key -> JSON persistence.

    Handles:
    - Per-entry upserts (one record per write, committed immediately)
    - Full-collection loads that skip undecodable rows
    - Swallowing storage failures so callers degrade to empty results
    """

    def __init__(self, db_path: Path | str, namespace: str = "course"):
        """
        Initialize the store.

        Args:
            db_path: SQLite file path, or ":memory:" for a throwaway store
            namespace: Storage prefix of the course instance
        """
        self.db_path = db_path
        self.namespace = namespace

        self._conn: sqlite3.Connection | None = None

        try:
            if str(db_path) != MEMORY_PATH:
                Path(db_path).parent.mkdir(parents=True, exist_ok=True)
            self._init_schema()
        except (OSError, sqlite3.Error) as e:
            # Reads return empty and writes return False from here on
            logger.warning(f"Could not open state database {self.db_path}: {e}")
            return

        logger.info(f"PersistedStore initialized at {self.db_path} (namespace={namespace})")

    @classmethod
    def in_memory(cls, namespace: str = "course") -> PersistedStore:
        """Create a store that lives only as long as the object."""
        return cls(MEMORY_PATH, namespace=namespace)

    @property
    def conn(self) -> sqlite3.Connection:
        """Get or create database connection."""
        if self._conn is None:
            self._conn = sqlite3.connect(str(self.db_path))
            self._conn.row_factory = sqlite3.Row
        return self._conn

    def _init_schema(self) -> None:
        """Initialize database schema."""
        cursor = self.conn.cursor()
        cursor.execute("""
            CREATE TABLE IF NOT EXISTS entries (
                namespace TEXT NOT NULL,
                collection TEXT NOT NULL,
                entry_key TEXT NOT NULL,
                value TEXT NOT NULL,
                PRIMARY KEY (namespace, collection, entry_key)
            )
        """)
        self.conn.commit()

    # =========================================================================
    # Reads
    # =========================================================================

    def load(self, collection: str) -> dict[str, Any]:
        """
        Load a whole collection.

        Args:
            collection: Collection name (e.g. "srs")

        Returns:
            Mapping of entry key to decoded JSON value; empty on any read failure
        """
        try:
            cursor = self.conn.execute(
                "SELECT entry_key, value FROM entries WHERE namespace = ? AND collection = ?",
                (self.namespace, collection),
            )
            rows = cursor.fetchall()
        except sqlite3.Error as e:
            logger.warning(f"Failed to read {collection}: {e}")
            return {}

        data: dict[str, Any] = {}
        for row in rows:
            try:
                data[row["entry_key"]] = json.loads(row["value"])
            except (json.JSONDecodeError, TypeError):
                logger.warning(f"Skipping malformed {collection} entry {row['entry_key']!r}")
        return data

    def get(self, collection: str, entry_key: str) -> Any | None:
        """Get one decoded entry, or None if missing or unreadable."""
        try:
            row = self.conn.execute(
                "SELECT value FROM entries WHERE namespace = ? AND collection = ? AND entry_key = ?",
                (self.namespace, collection, entry_key),
            ).fetchone()
        except sqlite3.Error as e:
            logger.warning(f"Failed to read {collection}/{entry_key}: {e}")
            return None

        if row is None:
            return None
        try:
            return json.loads(row["value"])
        except (json.JSONDecodeError, TypeError):
            logger.warning(f"Ignoring malformed {collection} entry {entry_key!r}")
            return None

    def collections(self) -> list[str]:
        """List collections that hold at least one entry in this namespace."""
        try:
            rows = self.conn.execute(
                "SELECT DISTINCT collection FROM entries WHERE namespace = ? ORDER BY collection",
                (self.namespace,),
            ).fetchall()
        except sqlite3.Error as e:
            logger.warning(f"Failed to list collections: {e}")
            return []
        return [row["collection"] for row in rows]

    # =========================================================================
    # Writes
    # =========================================================================

    def put(self, collection: str, entry_key: str, value: Any) -> bool:
        """
        Save or replace one entry.

        Returns:
            True if the write was committed, False if it failed
        """
        return self.put_many(collection, {entry_key: value})

    def put_many(self, collection: str, mapping: Mapping[str, Any]) -> bool:
        """Upsert several entries in one transaction."""
        try:
            rows = [
                (self.namespace, collection, key, json.dumps(value))
                for key, value in mapping.items()
            ]
            with self.conn:
                self.conn.executemany(
                    """
                    INSERT INTO entries (namespace, collection, entry_key, value)
                    VALUES (?, ?, ?, ?)
                    ON CONFLICT(namespace, collection, entry_key) DO UPDATE SET
                        value = excluded.value
                """,
                    rows,
                )
        except (sqlite3.Error, TypeError, ValueError) as e:
            logger.warning(f"Failed to save {collection}: {e}")
            return False
        return True

    def delete(self, collection: str, entry_key: str) -> bool:
        """Remove one entry. Returns False on storage failure."""
        try:
            with self.conn:
                self.conn.execute(
                    "DELETE FROM entries WHERE namespace = ? AND collection = ? AND entry_key = ?",
                    (self.namespace, collection, entry_key),
                )
        except sqlite3.Error as e:
            logger.warning(f"Failed to delete {collection}/{entry_key}: {e}")
            return False
        return True

    def replace(self, collection: str, mapping: Mapping[str, Any]) -> bool:
        """Replace a whole collection atomically."""
        try:
            rows = [
                (self.namespace, collection, key, json.dumps(value))
                for key, value in mapping.items()
            ]
            with self.conn:
                self.conn.execute(
                    "DELETE FROM entries WHERE namespace = ? AND collection = ?",
                    (self.namespace, collection),
                )
                self.conn.executemany(
                    "INSERT INTO entries (namespace, collection, entry_key, value) VALUES (?, ?, ?, ?)",
                    rows,
                )
        except (sqlite3.Error, TypeError, ValueError) as e:
            logger.warning(f"Failed to replace {collection}: {e}")
            return False
        return True

    def close(self) -> None:
        """Close the database connection."""
        if self._conn:
            self._conn.close()
            self._conn = None
