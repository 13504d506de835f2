"""
Tests for HistoryStore.

Tests cover:
- load() on missing, valid, corrupt and wrong-shape files
- strict mode raising HistoryError
- save() output format, atomic replace and write failures
"""

import json
from unittest.mock import patch

import pytest

from release_manager.exceptions import HistoryError
from release_manager.history import HistoryStore
from tests.helpers import make_release


@pytest.fixture
def history_file(tmp_path):
    """Path for a history file inside a temp directory."""
    return tmp_path / "releases.json"


class TestLoad:
    """Tests for HistoryStore.load()."""

    def test_missing_file_is_empty(self, history_file):
        """A missing file means no history."""
        assert HistoryStore(history_file).load() == []

    def test_loads_records_in_file_order(self, history_file):
        """Records are returned as written."""
        history_file.write_text(json.dumps([
            {"tag_name": "release-20240110-0000", "created_at": "2024-01-10T00:00:00Z", "release_id": 2},
            {"tag_name": "release-20240101-0000", "created_at": "2024-01-01T00:00:00Z", "release_id": 1},
        ]))

        records = HistoryStore(history_file).load()

        assert [r.release_id for r in records] == [2, 1]
        assert records[1].tag_name == "release-20240101-0000"

    def test_nanosecond_timestamps_load(self, history_file):
        """Histories written with nanosecond precision are not discarded."""
        history_file.write_text(json.dumps([
            {"tag_name": "release-20240101-1200", "created_at": "2024-01-01T12:00:00.123456789Z", "release_id": 1},
            {"tag_name": "release-20240110-1200", "created_at": "2024-01-10T12:00:00.000000001Z", "release_id": 2},
        ]))

        records = HistoryStore(history_file, strict=True).load()

        assert [r.release_id for r in records] == [1, 2]
        assert records[0].created_at.microsecond == 123456
        assert records[1].created_at.microsecond == 0

    def test_invalid_json_is_empty(self, history_file):
        """Unparseable JSON degrades to an empty history."""
        history_file.write_text("{not json")

        assert HistoryStore(history_file).load() == []

    def test_wrong_shape_is_empty(self, history_file):
        """A JSON object instead of an array degrades to empty."""
        history_file.write_text(json.dumps({"releases": []}))

        assert HistoryStore(history_file).load() == []

    def test_bad_record_is_empty(self, history_file):
        """One malformed record makes the whole file unusable."""
        history_file.write_text(json.dumps([
            {"tag_name": "ok", "created_at": "2024-01-01T00:00:00Z", "release_id": 1},
            {"tag_name": "bad", "created_at": "2024-01-01T00:00:00Z"},
        ]))

        assert HistoryStore(history_file).load() == []

    def test_corrupt_file_logs_warning(self, history_file):
        """Degrading to empty is reported, not silent."""
        history_file.write_text("[")

        with patch("release_manager.history.logger") as mock_logger:
            HistoryStore(history_file).load()

        mock_logger.warning.assert_called_once()
        assert str(history_file) in mock_logger.warning.call_args[0][0]

    def test_strict_mode_raises_on_corrupt(self, history_file):
        """strict=True surfaces corruption as HistoryError."""
        history_file.write_text("[")

        with pytest.raises(HistoryError, match="Could not read history"):
            HistoryStore(history_file, strict=True).load()

    def test_strict_mode_missing_file_is_empty(self, history_file):
        """strict=True still treats a missing file as empty."""
        assert HistoryStore(history_file, strict=True).load() == []

    def test_directory_path_is_empty(self, tmp_path):
        """A path that cannot be opened as a file degrades to empty."""
        assert HistoryStore(tmp_path).load() == []


class TestSave:
    """Tests for HistoryStore.save()."""

    def test_writes_pretty_json_array(self, history_file):
        """save() writes an indented JSON array."""
        records = [make_release(10, 1), make_release(0, 2)]

        HistoryStore(history_file).save(records)

        text = history_file.read_text()
        assert text.startswith("[\n  {")
        data = json.loads(text)
        assert [d["release_id"] for d in data] == [1, 2]
        assert data[0]["created_at"].endswith("Z")

    def test_save_then_load(self, history_file):
        """Saved records load back equal."""
        records = [make_release(10, 1), make_release(0, 2)]
        store = HistoryStore(history_file)

        store.save(records)

        assert store.load() == records

    def test_creates_parent_directories(self, tmp_path):
        """Missing parent directories are created."""
        path = tmp_path / "nested" / "dir" / "releases.json"

        HistoryStore(path).save([make_release(0, 1)])

        assert path.exists()

    def test_replaces_existing_file(self, history_file):
        """An existing history is overwritten."""
        history_file.write_text("garbage")

        HistoryStore(history_file).save([])

        assert json.loads(history_file.read_text()) == []

    def test_no_temp_files_left(self, history_file):
        """Only the history file remains after saving."""
        HistoryStore(history_file).save([make_release(0, 1)])

        assert [p.name for p in history_file.parent.iterdir()] == ["releases.json"]

    def test_write_failure_raises(self, history_file):
        """OS errors while writing become HistoryError."""
        with patch("release_manager.history.os.replace", side_effect=OSError("disk full")):
            with pytest.raises(HistoryError, match="disk full"):
                HistoryStore(history_file).save([make_release(0, 1)])

        assert not history_file.exists()
        assert list(history_file.parent.iterdir()) == []
