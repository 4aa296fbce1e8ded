from pathlib import Path

from sitesync.configuration import load_runtime_configuration


def _write_override(profile: Path, content: str) -> None:
    cfg_dir = profile / "config"
    cfg_dir.mkdir(parents=True, exist_ok=True)
    (cfg_dir / "local.yml").write_text(content)


def test_invalid_types_raise_diagnostics(tmp_path: Path):
    profile = tmp_path / "profile"
    profile.mkdir()
    _write_override(
        profile,
        """
        sync:
          enabled: "yes"
        """,
    )

    bundle = load_runtime_configuration(profile)

    assert bundle.status == "invalid"
    assert any("sync.enabled" in diag.message for diag in bundle.diagnostics)
    assert bundle.merged["sync"]["enabled"] is False


def test_boolean_fetch_interval_is_rejected(tmp_path: Path):
    profile = tmp_path / "profile"
    profile.mkdir()
    _write_override(
        profile,
        """
        sync:
          fetch_interval: true
        """,
    )

    bundle = load_runtime_configuration(profile)

    assert bundle.status == "invalid"
    assert bundle.merged["sync"]["fetch_interval"] == 60


def test_unknown_keys_warn(tmp_path: Path):
    profile = tmp_path / "profile"
    profile.mkdir()
    _write_override(
        profile,
        """
        mystery:
          value: 1
        """,
    )

    bundle = load_runtime_configuration(profile)

    assert any("Unknown configuration key" in diag.message for diag in bundle.diagnostics)
