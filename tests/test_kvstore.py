"""
tests/test_kvstore.py

Tests for the SQLite-backed KVStore. Each test gets its own database file.
"""

import pytest

from image_guard.kvstore import KVStore, KVStoreError


@pytest.fixture
def store(tmp_path) -> KVStore:
    return KVStore(tmp_path)


class TestKVStore:

    def test_creates_database_file(self, tmp_path) -> None:
        store = KVStore(tmp_path / "nested")
        assert store.db_path.exists()

    def test_missing_key_returns_default(self, store) -> None:
        assert store.get("nope") is None
        assert store.get("nope", "fallback") == "fallback"

    def test_set_then_get(self, store) -> None:
        store.set("settings", {"enabled": True, "count": 3})
        assert store.get("settings") == {"enabled": True, "count": 3}

    def test_set_overwrites(self, store) -> None:
        store.set("k", "first")
        store.set("k", "second")
        assert store.get("k") == "second"

    def test_delete(self, store) -> None:
        store.set("k", 1)
        store.delete("k")
        assert store.get("k") is None

    def test_delete_missing_key_is_noop(self, store) -> None:
        store.delete("never-set")

    def test_values_survive_reopen(self, tmp_path) -> None:
        KVStore(tmp_path).set("k", [1, 2])
        assert KVStore(tmp_path).get("k") == [1, 2]

    def test_unserializable_value_raises(self, store) -> None:
        with pytest.raises(KVStoreError):
            store.set("k", object())


class TestTemplateData:

    def test_absent_user_gives_empty_string(self, store) -> None:
        assert store.get_template_data("user-1") == ""

    def test_reads_prefixed_key(self, store) -> None:
        store.set("template_key-user-1", "hello")
        assert store.get_template_data("user-1") == "hello"
        assert store.get_template_data("user-2") == ""
