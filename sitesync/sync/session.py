"""Sync session controller: handshake, first-run bootstrap and fetch loop."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional, Sequence

from .categories import CATEGORY_NAMES, SyncAction, is_known_category
from .channel import Channel, Sender
from .dispatch import DispatchEngine
from .identity import DeviceIdentity, coerce_device_id
from .merge import MergeRegistry
from .messages import MessageType
from .records import (
    build_device_record,
    build_setting_record,
    build_site_record,
    filter_bookmarks,
)
from .scheduler import FetchScheduler
from .state import ActionSink, AppStateProvider, SyncInitData

logger = logging.getLogger("sitesync.sync.session")
client_logger = logging.getLogger("sitesync.sync.client")


@dataclass
class SyncSettings:
    """Static settings for the sync session."""

    enabled: bool = False
    fetch_interval: float = 60.0
    device_name: str = "browser-laptop"
    state_file: str = "state/sync.json"
    app_state_file: str = "state/app_state.json"

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> "SyncSettings":
        raw = config.get("sync", {}) if config else {}
        return cls(
            enabled=raw.get("enabled", False) is True,
            fetch_interval=float(raw.get("fetch_interval", 60)),
            device_name=str(raw.get("device_name", "browser-laptop")),
            state_file=str(raw.get("state_file", "state/sync.json")),
            app_state_file=str(raw.get("app_state_file", "state/app_state.json")),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "enabled": self.enabled,
            "fetchInterval": self.fetch_interval,
            "deviceName": self.device_name,
        }


class SessionState(str, Enum):
    """Lifecycle of a sync session."""
    UNINITIALIZED = "uninitialized"
    DISABLED = "disabled"
    AWAITING_HANDSHAKE = "awaiting_handshake"
    STEADY_STATE = "steady_state"


class SyncSession:
    """Drives the exchange between local state and the sync UI layer.

    All handlers run on the channel's delivery thread, one at a time.
    """

    def __init__(
        self,
        settings: SyncSettings,
        channel: Channel,
        app_state: AppStateProvider,
        action_sink: ActionSink,
        identity: Optional[DeviceIdentity] = None,
        scheduler: Optional[FetchScheduler] = None,
        merge_registry: Optional[MergeRegistry] = None,
    ):
        self.settings = settings
        self.channel = channel
        self.app_state = app_state
        self.action_sink = action_sink
        self.identity = identity or DeviceIdentity()
        self.dispatcher = DispatchEngine(self.identity)
        self.scheduler = scheduler or FetchScheduler()
        self.merge_registry = merge_registry or MergeRegistry()

        self.state = SessionState.UNINITIALIZED
        self.is_first_run = False
        self.bootstrapped = False
        self._persisted = SyncInitData()
        self._seed: Optional[bytes] = None
        self._intake_registered = False

    def init(self, persisted: Optional[SyncInitData] = None) -> SessionState:
        """Register the handshake handlers unless sync is disabled."""
        if self.state is not SessionState.UNINITIALIZED:
            return self.state
        if not self.settings.enabled:
            logger.info("Sync disabled via configuration.")
            self.state = SessionState.DISABLED
            return self.state

        self._persisted = persisted or SyncInitData()
        self._seed = self._persisted.seed
        self.is_first_run = self._persisted.is_first_run

        self.channel.on(MessageType.GET_INIT_DATA, self.on_get_init_data)
        self.channel.on(MessageType.SAVE_INIT_DATA, self.on_save_init_data)
        self.channel.on(MessageType.SYNC_READY, self.on_sync_ready)
        self.channel.on(MessageType.SYNC_DEBUG, self.on_debug)

        self.state = SessionState.AWAITING_HANDSHAKE
        logger.info("Sync session awaiting handshake (first run: %s)", self.is_first_run)
        return self.state

    def on_get_init_data(self, sender: Sender, *_args: Any) -> None:
        self.identity.initialize(self._persisted.device_id)
        sender.send(
            MessageType.GOT_INIT_DATA,
            self._seed,
            self.identity.get(),
            self.settings.to_dict(),
        )

    def on_save_init_data(
        self,
        sender: Sender,
        seed: Any = None,
        new_device_id: Any = None,
        *_args: Any,
    ) -> None:
        seed = coerce_device_id(seed)
        new_device_id = coerce_device_id(new_device_id)
        if not self.identity.is_set and new_device_id is not None:
            self.identity.adopt(new_device_id)
        if seed is not None:
            self._seed = seed
        self.action_sink.save_sync_init_data(seed, new_device_id)

    def on_sync_ready(self, sender: Sender, *_args: Any) -> None:
        if self.is_first_run and not self.bootstrapped:
            self.run_bootstrap(sender)

        if not self._intake_registered:
            self.channel.on(MessageType.RECEIVE_SYNC_RECORDS, self.on_receive_records)
            self._intake_registered = True

        if not self.scheduler.running:
            self.scheduler.start(self.settings.fetch_interval, lambda: self.fetch(sender))

        self.state = SessionState.STEADY_STATE

    def run_bootstrap(self, sender: Sender) -> None:
        """Upload this device's identity, bookmarks and site settings."""
        self.dispatcher.dispatch(
            sender,
            SyncAction.CREATE,
            [build_device_record(self.settings.device_name)],
        )

        # History is left out to save bandwidth
        bookmarks = filter_bookmarks(self.app_state.sites or [])
        self.dispatcher.dispatch(
            sender,
            SyncAction.CREATE,
            [build_site_record(entry) for entry in bookmarks],
        )

        site_settings = self.app_state.site_settings or {}
        self.dispatcher.dispatch(
            sender,
            SyncAction.CREATE,
            [build_setting_record(host, setting) for host, setting in site_settings.items()],
        )
        self.bootstrapped = True
        logger.info(
            "Bootstrap sent %d bookmark(s) and %d site setting(s)",
            len(bookmarks),
            len(site_settings),
        )

    def fetch(self, sender: Sender) -> None:
        sender.send(MessageType.FETCH_SYNC_RECORDS, list(CATEGORY_NAMES))

    def on_receive_records(
        self,
        sender: Sender,
        category_name: Any = None,
        records: Optional[Sequence[Any]] = None,
        *_args: Any,
    ) -> None:
        if (
            not is_known_category(category_name)
            or not isinstance(records, (list, tuple))
            or not records
        ):
            logger.debug("Dropping inbound batch for category %r", category_name)
            return
        self.merge_registry.merge(category_name, list(records))

    def on_debug(self, sender: Sender, message: Any = "", *_args: Any) -> None:
        client_logger.info("sync-client: %s", message)

    def get_status(self) -> Dict[str, Any]:
        return {
            "state": self.state.value,
            "first_run": self.is_first_run,
            "bootstrapped": self.bootstrapped,
            "device_id": self.identity.hex() or "(not set)",
            "fetch_interval": self.settings.fetch_interval,
            "fetch_ticks": self.scheduler.ticks,
        }


__all__ = ["SyncSettings", "SessionState", "SyncSession"]
