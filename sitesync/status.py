"""Rich rendering of the sync status report."""

from __future__ import annotations

from io import StringIO
import shutil
from typing import Callable

from rich.console import Console
from rich.table import Table

from .configuration import ConfigurationBundle
from .sync.records import filter_bookmarks
from .sync.session import SyncSettings
from .sync.state import AppStateSnapshot, SyncInitData


def render_status(
    bundle: ConfigurationBundle,
    settings: SyncSettings,
    init_data: SyncInitData,
    app_state: AppStateSnapshot,
) -> str:
    """Render configuration, identity and local data counts as a table."""

    def _render(console: Console) -> None:
        table = Table(title="Profile Sync Status", show_header=False)
        table.add_column("Property", style="bold")
        table.add_column("Value")

        table.add_row("Profile", str(bundle.profile_dir))
        table.add_row("Configuration", bundle.status)
        table.add_row("Enabled", str(settings.enabled))
        table.add_row("Fetch Interval", f"{settings.fetch_interval:g}s")
        table.add_row("Device Name", settings.device_name)
        table.add_row(
            "Device ID",
            init_data.device_id.hex() if init_data.device_id else "(not set)",
        )
        table.add_row("Seed", "present" if init_data.seed else "(not set)")
        table.add_row("First Run", str(init_data.is_first_run))

        bookmarks = filter_bookmarks(app_state.sites)
        table.add_row("Bookmarks", str(len(bookmarks)))
        table.add_row("History Entries", str(len(app_state.sites) - len(bookmarks)))
        table.add_row("Site Settings", str(len(app_state.site_settings)))

        console.print(table)

        problems = [diag for diag in bundle.diagnostics if diag.level != "info"]
        for diag in problems:
            style = "red" if diag.level == "error" else "yellow"
            console.print(f"[{style}]{diag.level}[/{style}] {diag.message}")

    return render_rich(_render)


def render_rich(render_fn: Callable[[Console], None]) -> str:
    """Render a Rich layout to an ANSI string without printing live."""

    terminal_size = shutil.get_terminal_size(fallback=(80, 24))
    width = max(20, terminal_size.columns)

    console = Console(
        record=True,
        force_terminal=True,
        color_system="auto",
        width=width,
        file=StringIO(),
    )
    render_fn(console)
    return console.export_text(clear=False, styles=True)


__all__ = ["render_status", "render_rich"]
