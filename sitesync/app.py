"""Command-line entry point for the sitesync host process."""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
import sys
from typing import List, Optional

from .configuration import ConfigurationBundle, load_runtime_configuration
from .logging_utils import setup_logging
from .status import render_status
from .sync.channel import StreamChannel
from .sync.session import SessionState, SyncSession, SyncSettings
from .sync.state import AppStateSnapshot, FileActionSink, SyncInitData

logger = logging.getLogger("sitesync")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sitesync",
        description="Sync host for browser bookmarks and site settings.",
    )
    parser.add_argument(
        "--profile",
        type=Path,
        default=None,
        help="Profile directory (defaults to $SITESYNC_PROFILE_DIR or ~/.sitesync)",
    )
    parser.add_argument("--log-level", default=None, help="Override logging.level")

    subparsers = parser.add_subparsers(dest="command", required=True)
    subparsers.add_parser("run", help="Serve the sync channel over stdin/stdout")
    subparsers.add_parser("status", help="Show sync configuration and local data")
    return parser


def run_host(
    bundle: ConfigurationBundle,
    settings: SyncSettings,
    reader=None,
    writer=None,
) -> int:
    """Start a session on a stdio channel and serve until input closes."""
    profile = bundle.profile_dir
    channel = StreamChannel(reader or sys.stdin, writer or sys.stdout)
    session = SyncSession(
        settings=settings,
        channel=channel,
        app_state=AppStateSnapshot.load(profile / settings.app_state_file),
        action_sink=FileActionSink(profile / settings.state_file),
    )

    state = session.init(SyncInitData.load(profile / settings.state_file))
    if state is SessionState.DISABLED:
        return 0

    try:
        channel.serve_forever()
    finally:
        session.scheduler.stop()
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    bundle = load_runtime_configuration(args.profile)
    if bundle.status == "missing":
        for diag in bundle.diagnostics:
            if diag.level == "error":
                print(f"[config] {diag.message}", file=sys.stderr)
        return 1

    log_config = bundle.merged.get("logging", {})
    bundle.log_path = setup_logging(
        bundle.profile_dir,
        level=args.log_level or log_config.get("level", "INFO"),
        structured=bool(log_config.get("structured", True)),
    )
    for diag in bundle.diagnostics:
        if diag.level != "info":
            logger.warning("[config] %s", diag.message)

    settings = SyncSettings.from_config(bundle.merged)

    if args.command == "status":
        profile = bundle.profile_dir
        print(
            render_status(
                bundle,
                settings,
                SyncInitData.load(profile / settings.state_file),
                AppStateSnapshot.load(profile / settings.app_state_file),
            )
        )
        return 0

    return run_host(bundle, settings)


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
