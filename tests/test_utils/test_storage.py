"""
Unit tests for the storage utility.
"""

import pytest
import json
import os
import tempfile
from critic_ledger.utils.storage import StorageManager


def test_initialization_creates_directories():
    """Test output and quarantine directories are created."""
    with tempfile.TemporaryDirectory() as tmpdir:
        output_root = os.path.join(tmpdir, "output")
        storage = StorageManager(output_root)

        assert os.path.isdir(output_root)
        assert os.path.isdir(storage.quarantine_dir)


def test_load_raw_records_forms():
    """Test a plain list and a {"reviews": [...]} wrapper both load."""
    with tempfile.TemporaryDirectory() as tmpdir:
        storage = StorageManager(tmpdir)

        list_path = os.path.join(tmpdir, "list.json")
        with open(list_path, 'w') as f:
            json.dump([{"showId": "cabaret-2024"}], f)

        wrapped_path = os.path.join(tmpdir, "wrapped.json")
        with open(wrapped_path, 'w') as f:
            json.dump({"reviews": [{"showId": "hamilton-2015"}]}, f)

        assert storage.load_raw_records(list_path) == [{"showId": "cabaret-2024"}]
        assert storage.load_raw_records(wrapped_path) == [{"showId": "hamilton-2015"}]


def test_load_missing_file_returns_none():
    """Test a missing input file is not an exception."""
    with tempfile.TemporaryDirectory() as tmpdir:
        storage = StorageManager(tmpdir)
        assert storage.load_raw_records(os.path.join(tmpdir, "nope.json")) is None


def test_load_rejects_other_shapes():
    """Test a JSON object without a reviews list is rejected."""
    with tempfile.TemporaryDirectory() as tmpdir:
        storage = StorageManager(tmpdir)
        path = os.path.join(tmpdir, "bad.json")
        with open(path, 'w') as f:
            json.dump({"shows": []}, f)

        with pytest.raises(ValueError):
            storage.load_raw_records(path)


def test_save_corpus_keeps_backup():
    """Test saving over an existing corpus leaves a backup of the old one."""
    with tempfile.TemporaryDirectory() as tmpdir:
        storage = StorageManager(tmpdir)

        storage.save_corpus("[]\n")
        path = storage.save_corpus('[{"showId": "cabaret-2024"}]\n')

        with open(path) as f:
            assert json.load(f) == [{"showId": "cabaret-2024"}]
        with open(f"{path}.backup") as f:
            assert json.load(f) == []
        assert not os.path.exists(f"{path}.tmp")


def test_save_report():
    """Test the report is written as JSON."""
    with tempfile.TemporaryDirectory() as tmpdir:
        storage = StorageManager(tmpdir)
        path = storage.save_report({"inputCount": 3, "outputCount": 2})

        with open(path) as f:
            assert json.load(f)["outputCount"] == 2


def test_save_quarantined_groups_by_show():
    """Test quarantined entries are written one file per show."""
    entries = [
        {"record": {"showId": "cabaret-2024"}, "decision": {"action": "quarantine"}},
        {"record": {"showId": "hamilton-2015"}, "decision": {"action": "quarantine"}},
        {"record": {"showId": "cabaret-2024"}, "decision": {"action": "quarantine"}},
    ]

    with tempfile.TemporaryDirectory() as tmpdir:
        storage = StorageManager(tmpdir)
        paths = storage.save_quarantined(entries)

        assert [os.path.basename(p) for p in paths] == ["cabaret-2024.json", "hamilton-2015.json"]
        with open(paths[0]) as f:
            assert len(json.load(f)) == 2


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
