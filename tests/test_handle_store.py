# Area: Shared Tests
"""Tests for HandleStore — persisted message ids."""

import json
from unittest.mock import patch

from server_warden._shared.handle_store import STARTUP_SLOT, STATUS_SLOT, HandleStore


class TestHandleStoreLoad:
    """Tests for loading the handle file."""

    def test_missing_file_loads_empty(self, tmp_path):
        store = HandleStore(str(tmp_path / "message_ids.json"))
        assert store.load() == {}

    def test_loads_legacy_file_format(self, tmp_path):
        path = tmp_path / "message_ids.json"
        path.write_text(json.dumps({
            "status_message_id": "111",
            "startup_message_id": "222",
        }))
        assert HandleStore(str(path)).load() == {STATUS_SLOT: "111", STARTUP_SLOT: "222"}

    def test_empty_ids_are_omitted(self, tmp_path):
        path = tmp_path / "message_ids.json"
        path.write_text(json.dumps({"status_message_id": "111", "startup_message_id": ""}))
        assert HandleStore(str(path)).load() == {STATUS_SLOT: "111"}

    def test_corrupt_file_loads_empty(self, tmp_path):
        path = tmp_path / "message_ids.json"
        path.write_text("{not json")
        assert HandleStore(str(path)).load() == {}

    def test_wrong_shape_loads_empty(self, tmp_path):
        path = tmp_path / "message_ids.json"
        path.write_text(json.dumps({"status_message_id": ["a", "b"]}))
        assert HandleStore(str(path)).load() == {}


class TestHandleStoreSave:
    """Tests for saving the handle file."""

    def test_save_writes_both_fields(self, tmp_path):
        path = tmp_path / "message_ids.json"
        store = HandleStore(str(path))

        assert store.save({STATUS_SLOT: "111"}) is True

        data = json.loads(path.read_text())
        assert data == {"status_message_id": "111", "startup_message_id": ""}

    def test_save_then_load(self, tmp_path):
        store = HandleStore(str(tmp_path / "ids.json"))
        store.save({STATUS_SLOT: "1", STARTUP_SLOT: "2"})
        assert store.load() == {STATUS_SLOT: "1", STARTUP_SLOT: "2"}

    def test_save_creates_parent_directory(self, tmp_path):
        store = HandleStore(str(tmp_path / "state" / "ids.json"))
        assert store.save({STATUS_SLOT: "1"}) is True

    def test_save_leaves_no_temp_files(self, tmp_path):
        store = HandleStore(str(tmp_path / "ids.json"))
        store.save({STATUS_SLOT: "1"})
        store.save({STATUS_SLOT: "2"})
        assert [p.name for p in tmp_path.iterdir()] == ["ids.json"]

    def test_write_failure_returns_false(self, tmp_path):
        store = HandleStore(str(tmp_path / "ids.json"))
        with patch(
            "server_warden._shared.handle_store.os.replace",
            side_effect=PermissionError("read-only"),
        ):
            assert store.save({STATUS_SLOT: "1"}) is False
        assert list(tmp_path.iterdir()) == []
