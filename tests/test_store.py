"""Tests for the file-backed editor store."""

import json

from store import STORE_KEYS, Store


class TestStore:
    def test_empty_store_defaults(self, store):
        assert store.get_cv_data() is None
        assert store.get_cv_saved_time() is None
        assert store.get_primary_color() == "#950e0e"
        assert store.get_theme() == "xenking"

    def test_cv_json_roundtrip_updates_saved_time(self, store):
        store.save_cv_json(json.dumps({"basics": {"name": "Jane"}}))
        assert store.get_cv_data() == {"basics": {"name": "Jane"}}
        saved = store.get_cv_saved_time()
        assert saved is not None and saved.isdigit()

    def test_slots_are_independent(self, store):
        store.save_theme("classic")
        store.save_primary_color("#123456")
        assert store.get_theme() == "classic"
        assert store.get_primary_color() == "#123456"
        assert store.get_cv_data() is None

    def test_one_file_per_key(self, tmp_path):
        s = Store(tmp_path)
        s.save_theme("classic")
        assert (tmp_path / STORE_KEYS["theme"]).read_text(encoding="utf-8") == "classic"
        assert (tmp_path / STORE_KEYS["cv_saved_time"]).exists()

    def test_empty_cv_json_reads_as_missing(self, store):
        store.set_item(STORE_KEYS["cv_json"], "")
        assert store.get_cv_data() is None
