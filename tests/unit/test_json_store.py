"""
Unit tests for the SQLite-backed JSON store.
"""

from drillcore.storage import PersistedStore, SRS_COLLECTION


class TestPersistedStore:
    def test_put_and_get(self, store):
        assert store.put(SRS_COLLECTION, "x", {"a": 1}) is True

        assert store.get(SRS_COLLECTION, "x") == {"a": 1}
        assert store.load(SRS_COLLECTION) == {"x": {"a": 1}}

    def test_put_overwrites_single_key(self, store):
        store.put(SRS_COLLECTION, "x", {"a": 1})
        store.put(SRS_COLLECTION, "y", {"b": 2})
        store.put(SRS_COLLECTION, "x", {"a": 3})

        assert store.load(SRS_COLLECTION) == {"x": {"a": 3}, "y": {"b": 2}}

    def test_missing_collection_is_empty(self, store):
        assert store.load("nothing-here") == {}
        assert store.get("nothing-here", "x") is None

    def test_unserializable_value_is_not_fatal(self, store):
        assert store.put(SRS_COLLECTION, "x", {"when": object()}) is False
        assert store.load(SRS_COLLECTION) == {}

    def test_malformed_row_is_skipped(self, store):
        store.put(SRS_COLLECTION, "good", {"a": 1})
        with store.conn:
            store.conn.execute(
                "INSERT INTO entries (namespace, collection, entry_key, value) VALUES (?, ?, ?, ?)",
                (store.namespace, SRS_COLLECTION, "bad", "{oops"),
            )

        assert store.load(SRS_COLLECTION) == {"good": {"a": 1}}
        assert store.get(SRS_COLLECTION, "bad") is None

    def test_replace_and_delete(self, store):
        store.put_many(SRS_COLLECTION, {"a": 1, "b": 2})

        store.replace(SRS_COLLECTION, {"c": 3})
        assert store.load(SRS_COLLECTION) == {"c": 3}

        store.delete(SRS_COLLECTION, "c")
        assert store.load(SRS_COLLECTION) == {}

    def test_collections_lists_non_empty(self, store):
        store.put("srs", "x", 1)
        store.put("exercise-progress", "x", 1)

        assert store.collections() == ["exercise-progress", "srs"]

    def test_namespaces_are_isolated(self, tmp_path):
        path = tmp_path / "state.db"
        go = PersistedStore(path, namespace="go-course")
        rust = PersistedStore(path, namespace="rust-course")

        go.put(SRS_COLLECTION, "x", {"a": 1})

        assert rust.load(SRS_COLLECTION) == {}
        assert go.load(SRS_COLLECTION) == {"x": {"a": 1}}
        go.close()
        rust.close()

    def test_file_store_survives_reopen(self, tmp_path):
        path = tmp_path / "nested" / "state.db"
        first = PersistedStore(path)
        first.put(SRS_COLLECTION, "x", {"a": 1})
        first.close()

        second = PersistedStore(path)
        assert second.get(SRS_COLLECTION, "x") == {"a": 1}
        second.close()

    def test_unusable_path_degrades(self, tmp_path):
        blocker = tmp_path / "not-a-dir"
        blocker.write_text("", encoding="utf-8")

        store = PersistedStore(blocker / "state.db")

        assert store.load(SRS_COLLECTION) == {}
        assert store.get(SRS_COLLECTION, "x") is None
        assert store.put(SRS_COLLECTION, "x", {"a": 1}) is False
        assert store.collections() == []
        store.close()
