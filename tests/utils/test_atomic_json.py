"""
Tests for atomic JSON file operations
"""

import json
import logging
import os
from unittest.mock import patch

import pytest

from delivery_metrics.utils.atomic_json import atomic_json_save, load_json_with_recovery


class TestAtomicJsonSave:
    """Test atomic_json_save()"""

    def test_writes_file(self, tmp_path):
        target = tmp_path / "out.json"

        atomic_json_save({"builds": [1, 2]}, str(target))

        assert json.loads(target.read_text(encoding="utf-8")) == {"builds": [1, 2]}

    def test_creates_parent_directories(self, tmp_path):
        target = tmp_path / "a" / "b" / "out.json"

        atomic_json_save({}, str(target))

        assert target.exists()

    def test_overwrites_existing_file(self, tmp_path):
        target = tmp_path / "out.json"
        target.write_text('{"old": true}', encoding="utf-8")

        atomic_json_save({"new": True}, str(target))

        assert json.loads(target.read_text(encoding="utf-8")) == {"new": True}

    def test_unserializable_data_leaves_no_temp_file(self, tmp_path):
        target = tmp_path / "out.json"

        with pytest.raises(TypeError):
            atomic_json_save({"bad": object()}, str(target))

        assert os.listdir(tmp_path) == []

    def test_failed_move_keeps_original(self, tmp_path):
        target = tmp_path / "out.json"
        target.write_text('{"old": true}', encoding="utf-8")

        with patch("delivery_metrics.utils.atomic_json.shutil.move", side_effect=OSError("disk full")):
            with pytest.raises(OSError):
                atomic_json_save({"new": True}, str(target))

        assert json.loads(target.read_text(encoding="utf-8")) == {"old": True}
        assert os.listdir(tmp_path) == ["out.json"]


class TestLoadJsonWithRecovery:
    """Test load_json_with_recovery()"""

    def test_missing_file_returns_default(self, tmp_path):
        assert load_json_with_recovery(str(tmp_path / "nope.json"), {"builds": []}) == {"builds": []}

    def test_missing_file_default_is_empty_dict(self, tmp_path):
        assert load_json_with_recovery(str(tmp_path / "nope.json")) == {}

    def test_loads_valid_file(self, tmp_path):
        target = tmp_path / "ok.json"
        target.write_text('{"builds": []}', encoding="utf-8")

        assert load_json_with_recovery(str(target)) == {"builds": []}

    def test_corrupted_file_returns_default_and_warns(self, tmp_path, caplog):
        target = tmp_path / "bad.json"
        target.write_text("{oops", encoding="utf-8")

        with caplog.at_level(logging.WARNING):
            result = load_json_with_recovery(str(target), {"builds": []})

        assert result == {"builds": []}
        assert "JSON file loading failed, using default value" in caplog.text

    def test_non_object_document_returns_default(self, tmp_path, caplog):
        target = tmp_path / "list.json"
        target.write_text("[1, 2, 3]", encoding="utf-8")

        with caplog.at_level(logging.WARNING):
            result = load_json_with_recovery(str(target), {"builds": []})

        assert result == {"builds": []}
        assert "expected a JSON object, got list" in caplog.text
