"""Conversion of local browser state into sync record payloads."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, Iterable, Mapping, Optional, Union

logger = logging.getLogger("sitesync.sync.records")

BOOKMARK_TAG = "bookmark"
BOOKMARK_FOLDER_TAG = "bookmark-folder"

SITE_FIELDS = (
    "location",
    "title",
    "customTitle",
    "favicon",
    "lastAccessedTime",
    "creationTime",
)

SETTING_FIELDS = (
    "zoomLevel",
    "shieldsUp",
    "safeBrowsing",
    "noScript",
    "httpsEverywhere",
    "fingerprintingProtection",
    "ledgerPayments",
    "ledgerPaymentsShown",
)

# Absent values are omitted from records, never mapped to the zeroth entry.
AD_CONTROL_ENUM: Dict[str, int] = {
    "showBraveAds": 0,
    "blockAds": 1,
    "allowAdsAndTracking": 2,
}
COOKIE_CONTROL_ENUM: Dict[str, int] = {
    "block3rdPartyCookie": 0,
    "allowAllCookies": 1,
}


@dataclass
class SiteEntry:
    """A bookmark, bookmark folder or history entry from the site list."""

    location: Optional[str] = None
    title: Optional[str] = None
    custom_title: Optional[str] = None
    favicon: Optional[str] = None
    last_accessed_time: Optional[float] = None
    creation_time: Optional[float] = None
    tags: FrozenSet[str] = field(default_factory=frozenset)
    folder_id: Optional[int] = None
    parent_folder_id: Optional[int] = None

    def __post_init__(self):
        self.tags = frozenset(self.tags or ())

    def site_fields(self) -> Dict[str, Any]:
        return {
            "location": self.location,
            "title": self.title,
            "customTitle": self.custom_title,
            "favicon": self.favicon,
            "lastAccessedTime": self.last_accessed_time,
            "creationTime": self.creation_time,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "SiteEntry":
        return cls(
            location=data.get("location"),
            title=data.get("title"),
            custom_title=data.get("customTitle"),
            favicon=data.get("favicon"),
            last_accessed_time=data.get("lastAccessedTime"),
            creation_time=data.get("creationTime"),
            tags=frozenset(data.get("tags") or ()),
            folder_id=data.get("folderId"),
            parent_folder_id=data.get("parentFolderId"),
        )


@dataclass
class SiteSetting:
    """Per-host settings. ``None`` means the user never set the value."""

    zoom_level: Optional[float] = None
    shields_up: Optional[bool] = None
    safe_browsing: Optional[bool] = None
    no_script: Optional[bool] = None
    https_everywhere: Optional[bool] = None
    fingerprinting_protection: Optional[bool] = None
    ledger_payments: Optional[bool] = None
    ledger_payments_shown: Optional[bool] = None
    ad_control: Optional[str] = None
    cookie_control: Optional[str] = None

    def scalar_fields(self) -> Dict[str, Any]:
        return {
            "zoomLevel": self.zoom_level,
            "shieldsUp": self.shields_up,
            "safeBrowsing": self.safe_browsing,
            "noScript": self.no_script,
            "httpsEverywhere": self.https_everywhere,
            "fingerprintingProtection": self.fingerprinting_protection,
            "ledgerPayments": self.ledger_payments,
            "ledgerPaymentsShown": self.ledger_payments_shown,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "SiteSetting":
        return cls(
            zoom_level=data.get("zoomLevel"),
            shields_up=data.get("shieldsUp"),
            safe_browsing=data.get("safeBrowsing"),
            no_script=data.get("noScript"),
            https_everywhere=data.get("httpsEverywhere"),
            fingerprinting_protection=data.get("fingerprintingProtection"),
            ledger_payments=data.get("ledgerPayments"),
            ledger_payments_shown=data.get("ledgerPaymentsShown"),
            ad_control=data.get("adControl"),
            cookie_control=data.get("cookieControl"),
        )


@dataclass(frozen=True)
class RecordData:
    """A record kind and its payload, before dispatch stamps it."""

    name: str
    value: Dict[str, Any]


def is_bookmark(entry: SiteEntry) -> bool:
    """Check whether a site is a bookmark or a bookmark folder."""
    return BOOKMARK_TAG in entry.tags or BOOKMARK_FOLDER_TAG in entry.tags


def filter_bookmarks(entries: Iterable[SiteEntry]) -> list[SiteEntry]:
    return [entry for entry in entries if is_bookmark(entry)]


def build_site_record(entry: SiteEntry) -> RecordData:
    """Build a bookmark or history record from a site entry."""
    site = entry.site_fields()
    if is_bookmark(entry):
        return RecordData(
            name="bookmark",
            value={
                "site": site,
                "isFolder": BOOKMARK_FOLDER_TAG in entry.tags,
                "folderId": entry.folder_id,
                "parentFolderId": entry.parent_folder_id,
            },
        )
    return RecordData(name="historySite", value=site)


def build_setting_record(
    host_pattern: str,
    setting: Union[SiteSetting, Mapping[str, Any]],
) -> RecordData:
    """Build a preference record for the settings of one host pattern."""
    if not isinstance(setting, SiteSetting):
        setting = SiteSetting.from_dict(setting)

    value: Dict[str, Any] = {"hostPattern": host_pattern}
    value.update(setting.scalar_fields())

    ad_control = _lookup_enum("adControl", AD_CONTROL_ENUM, setting.ad_control, host_pattern)
    if ad_control is not None:
        value["adControl"] = ad_control
    cookie_control = _lookup_enum(
        "cookieControl", COOKIE_CONTROL_ENUM, setting.cookie_control, host_pattern
    )
    if cookie_control is not None:
        value["cookieControl"] = cookie_control

    return RecordData(name="siteSetting", value=value)


def build_device_record(name: str) -> RecordData:
    return RecordData(name="device", value={"name": name})


def _lookup_enum(
    field_name: str,
    table: Mapping[str, int],
    raw: Optional[str],
    host_pattern: str,
) -> Optional[int]:
    if raw is None:
        return None
    if raw not in table:
        logger.warning(
            "Ignoring unknown %s value %r for host pattern %s", field_name, raw, host_pattern
        )
        return None
    return table[raw]


__all__ = [
    "SiteEntry",
    "SiteSetting",
    "RecordData",
    "SITE_FIELDS",
    "SETTING_FIELDS",
    "AD_CONTROL_ENUM",
    "COOKIE_CONTROL_ENUM",
    "is_bookmark",
    "filter_bookmarks",
    "build_site_record",
    "build_setting_record",
    "build_device_record",
]
