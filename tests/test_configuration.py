"""Tests for the profile-aware configuration loader."""

from __future__ import annotations

from pathlib import Path

import pytest

from sitesync import configuration


def _prepare_repo_defaults(tmp_path: Path, content: str = "sync:\n  enabled: false\n") -> Path:
    config_dir = tmp_path / "config"
    config_dir.mkdir()
    (config_dir / "10-default.yml").write_text(content, encoding="utf-8")
    return config_dir


def test_resolve_profile_dir_uses_env_expansion(tmp_path: Path):
    env = {"SITESYNC_PROFILE_DIR": str(tmp_path / "profile")}
    path = configuration.resolve_profile_dir(env=env)
    assert path == tmp_path / "profile"


def test_load_runtime_configuration_merges_repo_and_profile(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    repo_dir = _prepare_repo_defaults(
        tmp_path,
        content="sync:\n  enabled: false\n  fetch_interval: 30\n",
    )
    profile_dir = tmp_path / "profile"
    overrides_dir = profile_dir / "config"
    overrides_dir.mkdir(parents=True)
    (overrides_dir / "20-overrides.yml").write_text(
        "sync:\n  enabled: true\n  device_name: work-laptop\n",
        encoding="utf-8",
    )

    monkeypatch.setattr(configuration, "DEFAULT_CONFIG_DIR", repo_dir)

    bundle = configuration.load_runtime_configuration(profile_dir)

    assert bundle.status == "ready"
    assert bundle.merged["sync"]["enabled"] is True
    assert bundle.merged["sync"]["fetch_interval"] == 30
    assert bundle.merged["sync"]["device_name"] == "work-laptop"
    assert len(bundle.files_loaded) == 2


def test_missing_sections_are_filled_with_defaults(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    repo_dir = _prepare_repo_defaults(tmp_path, content="{}\n")
    profile_dir = tmp_path / "profile"
    profile_dir.mkdir()
    monkeypatch.setattr(configuration, "DEFAULT_CONFIG_DIR", repo_dir)

    bundle = configuration.load_runtime_configuration(profile_dir)

    assert bundle.merged["sync"] == {
        "enabled": False,
        "fetch_interval": 60,
        "device_name": "browser-laptop",
        "state_file": "state/sync.json",
        "app_state_file": "state/app_state.json",
    }
    assert bundle.merged["logging"]["level"] == "INFO"


def test_load_runtime_configuration_reports_missing_profile(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    repo_dir = _prepare_repo_defaults(tmp_path)
    missing_profile = tmp_path / "missing"
    monkeypatch.setattr(configuration, "DEFAULT_CONFIG_DIR", repo_dir)

    bundle = configuration.load_runtime_configuration(missing_profile)

    assert bundle.status == "missing"
    assert any(diag.level == "error" for diag in bundle.diagnostics)


def test_load_runtime_configuration_handles_bad_yaml(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    repo_dir = _prepare_repo_defaults(tmp_path)
    profile_dir = tmp_path / "profile"
    overrides_dir = profile_dir / "config"
    overrides_dir.mkdir(parents=True)
    (overrides_dir / "broken.yml").write_text("sync: [\n", encoding="utf-8")

    monkeypatch.setattr(configuration, "DEFAULT_CONFIG_DIR", repo_dir)

    bundle = configuration.load_runtime_configuration(profile_dir)

    assert bundle.status == "invalid"
    assert any("Failed to parse" in diag.message for diag in bundle.diagnostics)


def test_profile_path_that_is_a_file_is_invalid(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    repo_dir = _prepare_repo_defaults(tmp_path)
    profile_file = tmp_path / "profile"
    profile_file.write_text("", encoding="utf-8")
    monkeypatch.setattr(configuration, "DEFAULT_CONFIG_DIR", repo_dir)

    bundle = configuration.load_runtime_configuration(profile_file)

    assert bundle.status == "invalid"
    assert any("not a directory" in diag.message for diag in bundle.diagnostics)
    assert bundle.merged["sync"]["enabled"] is False


def test_section_that_is_not_a_mapping_falls_back_to_defaults(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
):
    repo_dir = _prepare_repo_defaults(tmp_path, content="sync: 5\n")
    profile_dir = tmp_path / "profile"
    profile_dir.mkdir()
    monkeypatch.setattr(configuration, "DEFAULT_CONFIG_DIR", repo_dir)

    bundle = configuration.load_runtime_configuration(profile_dir)

    assert bundle.status == "invalid"
    assert any("'config.sync' must be a mapping" in diag.message for diag in bundle.diagnostics)
    assert bundle.merged["sync"] == {}
