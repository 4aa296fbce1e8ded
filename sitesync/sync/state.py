"""Local profile state consumed and persisted by the sync session."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Protocol, Sequence

from .identity import DeviceIdLike, coerce_device_id
from .records import SiteEntry, SiteSetting

logger = logging.getLogger("sitesync.sync.state")


class AppStateProvider(Protocol):
    """Read-only source of the profile's sites and site settings."""

    @property
    def sites(self) -> Sequence[SiteEntry]:
        ...

    @property
    def site_settings(self) -> Mapping[str, SiteSetting]:
        ...


class ActionSink(Protocol):
    """Receives requests to persist newly learned sync init data."""

    def save_sync_init_data(
        self,
        seed: Optional[DeviceIdLike],
        device_id: Optional[DeviceIdLike],
    ) -> None:
        ...


@dataclass
class AppStateSnapshot:
    """An in-memory snapshot of the application state."""

    sites: List[SiteEntry] = field(default_factory=list)
    site_settings: Dict[str, SiteSetting] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "AppStateSnapshot":
        sites = [SiteEntry.from_dict(item) for item in data.get("sites") or []]
        settings = {
            host: SiteSetting.from_dict(value)
            for host, value in (data.get("siteSettings") or {}).items()
        }
        return cls(sites=sites, site_settings=settings)

    @classmethod
    def load(cls, path: Path) -> "AppStateSnapshot":
        """Load a snapshot from JSON; missing or corrupt files give an empty one."""
        if not path.exists():
            logger.info("No app state at %s; starting empty", path)
            return cls()
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
            return cls.from_dict(data)
        except (json.JSONDecodeError, UnicodeDecodeError, ValueError, AttributeError, TypeError) as e:
            logger.error("Failed to load app state from %s: %s", path, e)
            return cls()


@dataclass
class SyncInitData:
    """Seed and device id persisted from a previous session."""

    seed: Optional[bytes] = None
    device_id: Optional[bytes] = None

    @property
    def is_first_run(self) -> bool:
        return self.seed is None and self.device_id is None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "seed": list(self.seed) if self.seed is not None else None,
            "deviceId": list(self.device_id) if self.device_id is not None else None,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "SyncInitData":
        return cls(
            seed=coerce_device_id(data.get("seed")),
            device_id=coerce_device_id(data.get("deviceId")),
        )

    def save(self, path: Path) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            json.dump(self.to_dict(), f, indent=2)
        logger.debug("Saved sync init data to %s", path)

    @classmethod
    def load(cls, path: Path) -> "SyncInitData":
        if not path.exists():
            return cls()
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
            return cls.from_dict(data)
        except (json.JSONDecodeError, AttributeError, TypeError, ValueError) as e:
            logger.error("Failed to load sync init data from %s: %s", path, e)
            return cls()


class FileActionSink:
    """Persists sync init data to a JSON file in the profile."""

    def __init__(self, path: Path):
        self.path = path

    def save_sync_init_data(
        self,
        seed: Optional[DeviceIdLike],
        device_id: Optional[DeviceIdLike],
    ) -> None:
        current = SyncInitData.load(self.path)
        new_seed = coerce_device_id(seed)
        new_device_id = coerce_device_id(device_id)
        if new_seed is not None:
            current.seed = new_seed
        if new_device_id is not None:
            current.device_id = new_device_id
        current.save(self.path)


__all__ = [
    "AppStateProvider",
    "ActionSink",
    "AppStateSnapshot",
    "SyncInitData",
    "FileActionSink",
]
