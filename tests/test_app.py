"""Tests for the sitesync command-line entry point."""

from __future__ import annotations

import io
import json
import logging
from pathlib import Path

import pytest

from sitesync import app
from sitesync.configuration import load_runtime_configuration
from sitesync.sync.session import SyncSettings
from sitesync.sync.state import SyncInitData


@pytest.fixture(autouse=True)
def _reset_sitesync_logger():
    yield
    logger = logging.getLogger("sitesync")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.NOTSET)
    logger.propagate = True


def _profile(tmp_path: Path, overrides: str = "") -> Path:
    profile = tmp_path / "profile"
    (profile / "config").mkdir(parents=True)
    (profile / "state").mkdir()
    if overrides:
        (profile / "config" / "local.yml").write_text(overrides, encoding="utf-8")
    (profile / "state" / "app_state.json").write_text(
        json.dumps(
            {
                "sites": [
                    {"location": "https://a.com", "title": "A", "tags": ["bookmark"]},
                    {"location": "https://b.com", "tags": []},
                ],
                "siteSettings": {"https://a.com": {"shieldsUp": True}},
            }
        ),
        encoding="utf-8",
    )
    return profile


def test_status_command_renders_table(tmp_path: Path, capsys):
    profile = _profile(tmp_path)

    assert app.main(["--profile", str(profile), "status"]) == 0

    output = capsys.readouterr().out
    assert "Profile Sync Status" in output
    assert "Bookmarks" in output
    assert "(not set)" in output


def test_missing_profile_exits_with_error(tmp_path: Path, capsys):
    assert app.main(["--profile", str(tmp_path / "nope"), "status"]) == 1
    assert "does not exist" in capsys.readouterr().err


def test_run_with_sync_disabled_returns_immediately(tmp_path: Path):
    profile = _profile(tmp_path)
    assert app.main(["--profile", str(profile), "--log-level", "ERROR", "run"]) == 0


def test_run_host_bootstraps_over_stream(tmp_path: Path):
    profile = _profile(tmp_path, overrides="sync:\n  enabled: true\n  fetch_interval: 3600\n")
    bundle = load_runtime_configuration(profile)
    settings = SyncSettings.from_config(bundle.merged)
    device_id = list(range(16))
    reader = io.StringIO(
        "\n".join(
            json.dumps(message)
            for message in [
                {"type": "get-init-data", "args": []},
                {"type": "save-init-data", "args": [[3] * 32, device_id]},
                {"type": "sync-ready", "args": []},
            ]
        )
        + "\n"
    )
    writer = io.StringIO()

    assert app.run_host(bundle, settings, reader=reader, writer=writer) == 0

    sent = [json.loads(line) for line in writer.getvalue().splitlines()]
    assert [message["type"] for message in sent] == [
        "got-init-data",
        "send-sync-records",
        "send-sync-records",
        "send-sync-records",
    ]
    assert sent[0]["args"][:2] == [None, None]
    assert [message["args"][0] for message in sent[1:]] == [
        "PREFERENCES",
        "BOOKMARKS",
        "PREFERENCES",
    ]
    bookmarks = sent[2]["args"][1]
    assert len(bookmarks) == 1
    assert bookmarks[0]["deviceId"] == device_id
    assert bookmarks[0]["bookmark"]["site"]["location"] == "https://a.com"

    persisted = SyncInitData.load(profile / "state" / "sync.json")
    assert persisted.device_id == bytes(device_id)
    assert persisted.seed == bytes([3] * 32)
