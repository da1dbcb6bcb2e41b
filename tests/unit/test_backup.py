"""
Unit tests for backup export and import.
"""

import json

import pytest

from drillcore.storage import (
    PROGRESS_COLLECTION,
    SRS_COLLECTION,
    BackupError,
    PersistedStore,
    export_backup,
    import_backup,
)


class TestExport:
    def test_empty_store_writes_nothing(self, store, tmp_path):
        path = tmp_path / "backup.json"

        assert export_backup(store, path) == 0
        assert not path.exists()

    def test_writes_collections_and_meta(self, store, tmp_path):
        store.put(SRS_COLLECTION, "x", {"easeFactor": 2.5})
        store.put(PROGRESS_COLLECTION, "x", {"selfRating": 1})
        path = tmp_path / "backup.json"

        assert export_backup(store, path) == 2

        data = json.loads(path.read_text(encoding="utf-8"))
        assert data[SRS_COLLECTION] == {"x": {"easeFactor": 2.5}}
        assert data["_meta"]["version"] == 1
        assert data["_meta"]["namespace"] == "test-course"
        assert "export_date" in data["_meta"]


class TestImport:
    def test_round_trip_into_fresh_store(self, store, tmp_path):
        store.put(SRS_COLLECTION, "x", {"easeFactor": 2.5})
        path = tmp_path / "backup.json"
        export_backup(store, path)

        target = PersistedStore.in_memory(namespace="other")
        target.put(SRS_COLLECTION, "stale", {"easeFactor": 1.3})

        assert import_backup(target, path) == 1
        assert target.load(SRS_COLLECTION) == {"x": {"easeFactor": 2.5}}
        target.close()

    def test_missing_file(self, store, tmp_path):
        with pytest.raises(BackupError, match="not found"):
            import_backup(store, tmp_path / "missing.json")

    def test_not_json(self, store, tmp_path):
        path = tmp_path / "backup.json"
        path.write_text("garbage", encoding="utf-8")

        with pytest.raises(BackupError, match="parse JSON"):
            import_backup(store, path)

    def test_not_utf8(self, store, tmp_path):
        path = tmp_path / "backup.json"
        path.write_bytes(b"\xff\xfe{bad")

        with pytest.raises(BackupError, match="UTF-8"):
            import_backup(store, path)

    def test_directory_path(self, store, tmp_path):
        with pytest.raises(BackupError, match="Could not read"):
            import_backup(store, tmp_path)

    def test_missing_meta(self, store, tmp_path):
        path = tmp_path / "backup.json"
        path.write_text(json.dumps({SRS_COLLECTION: {}}), encoding="utf-8")

        with pytest.raises(BackupError, match="missing metadata"):
            import_backup(store, path)

    def test_unknown_collections_ignored(self, store, tmp_path):
        path = tmp_path / "backup.json"
        path.write_text(
            json.dumps({"_meta": {"version": 1}, "settings": {"theme": "dark"}}),
            encoding="utf-8",
        )

        assert import_backup(store, path) == 0
        assert store.collections() == []
