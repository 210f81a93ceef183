"""Tests for the DataStore module."""

from __future__ import annotations

import json
from datetime import UTC, datetime
from pathlib import Path

import pytest

from wuweather.store import HOST_SNAPSHOT_PATH, DataStore


class TestDataStoreWrite:
    """Test writing data with metadata envelopes."""

    def test_write_envelope_format(self, tmp_path: Path) -> None:
        store = DataStore(tmp_path)
        valid = datetime(2026, 3, 1, tzinfo=UTC)
        store.write(HOST_SNAPSHOT_PATH, {"next_ref": 3}, source="wunderground.com", valid_until=valid)

        data = json.loads((tmp_path / "devices" / "host.json").read_text())
        assert data["meta"]["source"] == "wunderground.com"
        assert "fetched_at" in data["meta"]
        assert data["meta"]["valid_until"] == valid.isoformat()
        assert data["data"] == {"next_ref": 3}

    def test_write_extra_params(self, tmp_path: Path) -> None:
        store = DataStore(tmp_path)
        store.write(Path("devices/x.json"), {}, source="test", station="KXYZ1", unit="metric")
        meta = json.loads((tmp_path / "devices" / "x.json").read_text())["meta"]
        assert meta["station"] == "KXYZ1"
        assert meta["unit"] == "metric"

    def test_no_tmp_file_left_behind(self, tmp_path: Path) -> None:
        store = DataStore(tmp_path)
        store.write(HOST_SNAPSHOT_PATH, {"a": 1}, source="test")
        store.write(HOST_SNAPSHOT_PATH, {"a": 2}, source="test")
        assert sorted(p.name for p in (tmp_path / "devices").iterdir()) == ["host.json"]
        assert store.read(HOST_SNAPSHOT_PATH) == {"a": 2}

    def test_non_json_values_stringified(self, tmp_path: Path) -> None:
        store = DataStore(tmp_path)
        when = datetime(2026, 1, 2, tzinfo=UTC)
        store.write(Path("t.json"), {"when": when}, source="test")
        assert store.read(Path("t.json")) == {"when": str(when)}

    def test_rejects_path_outside_base(self, tmp_path: Path) -> None:
        store = DataStore(tmp_path / "data")
        with pytest.raises(ValueError, match="escapes"):
            store.write(Path("../outside.json"), {}, source="test")


class TestDataStoreRead:
    """Test reading data from the store."""

    def test_read_returns_data_payload(self, tmp_path: Path) -> None:
        store = DataStore(tmp_path)
        store.write(Path("devices/test.json"), {"key": "value"}, source="test")
        assert store.read(Path("devices/test.json")) == {"key": "value"}

    def test_read_missing_file(self, tmp_path: Path) -> None:
        assert DataStore(tmp_path).read(Path("nonexistent.json")) is None

    def test_read_meta(self, tmp_path: Path) -> None:
        store = DataStore(tmp_path)
        store.write(Path("devices/test.json"), {}, source="test", station="KXYZ1")
        assert store.read_meta(Path("devices/test.json"))["station"] == "KXYZ1"

    def test_read_meta_missing_file(self, tmp_path: Path) -> None:
        assert DataStore(tmp_path).read_meta(Path("nonexistent.json")) == {}
