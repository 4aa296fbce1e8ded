"""Tests for profile state loading and persistence."""

from __future__ import annotations

import json
from pathlib import Path

from sitesync.sync.state import AppStateSnapshot, FileActionSink, SyncInitData


def test_app_state_loads_sites_and_settings(tmp_path: Path):
    path = tmp_path / "app_state.json"
    path.write_text(
        json.dumps(
            {
                "sites": [
                    {"location": "https://a.com", "title": "A", "tags": ["bookmark"]},
                    {"location": "https://b.com", "tags": []},
                ],
                "siteSettings": {
                    "https://a.com": {"shieldsUp": True, "cookieControl": "block3rdPartyCookie"},
                },
            }
        ),
        encoding="utf-8",
    )

    state = AppStateSnapshot.load(path)

    assert [site.location for site in state.sites] == ["https://a.com", "https://b.com"]
    assert state.sites[0].tags == frozenset({"bookmark"})
    assert state.site_settings["https://a.com"].shields_up is True
    assert state.site_settings["https://a.com"].cookie_control == "block3rdPartyCookie"


def test_app_state_missing_or_corrupt_file_is_empty(tmp_path: Path):
    corrupt = tmp_path / "corrupt.json"
    corrupt.write_text("{not json", encoding="utf-8")
    undecodable = tmp_path / "undecodable.json"
    undecodable.write_bytes(b'{"sites": ["\xff\xfe"]}')

    for path in (tmp_path / "missing.json", corrupt, undecodable):
        state = AppStateSnapshot.load(path)
        assert state.sites == []
        assert state.site_settings == {}


def test_init_data_accepts_buffer_objects_and_hex():
    data = SyncInitData.from_dict(
        {"seed": {"type": "Buffer", "data": [1, 2, 3]}, "deviceId": "0a0b"}
    )

    assert data.seed == b"\x01\x02\x03"
    assert data.device_id == b"\x0a\x0b"
    assert data.is_first_run is False


def test_init_data_load_defaults_to_first_run(tmp_path: Path):
    assert SyncInitData.load(tmp_path / "missing.json").is_first_run


def test_file_action_sink_persists_and_keeps_existing_values(tmp_path: Path):
    path = tmp_path / "state" / "sync.json"
    sink = FileActionSink(path)

    sink.save_sync_init_data([5] * 32, [6] * 16)
    sink.save_sync_init_data([7] * 32, None)

    data = SyncInitData.load(path)
    assert data.seed == bytes([7] * 32)
    assert data.device_id == bytes([6] * 16)
    assert json.loads(path.read_text(encoding="utf-8"))["deviceId"] == [6] * 16
