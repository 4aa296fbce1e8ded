"""Browser profile synchronization for sitesync."""

from __future__ import annotations

from .categories import CATEGORY_MAP, CATEGORY_NAMES, Category, SyncAction, resolve_category
from .channel import Channel, LocalChannel, Outbox, StreamChannel
from .dispatch import DispatchEngine, SyncRecord
from .errors import DeviceIdentityUnsetError, SyncError, UnknownCategoryError
from .identity import DeviceIdentity
from .merge import DeferredMerge, MergeRegistry, MergeResult
from .messages import ChannelMessage, MessageType
from .records import (
    RecordData,
    SiteEntry,
    SiteSetting,
    build_device_record,
    build_setting_record,
    build_site_record,
    is_bookmark,
)
from .scheduler import FetchScheduler
from .session import SessionState, SyncSession, SyncSettings
from .state import AppStateSnapshot, FileActionSink, SyncInitData

__all__ = [
    # Records
    "SiteEntry",
    "SiteSetting",
    "RecordData",
    "is_bookmark",
    "build_site_record",
    "build_setting_record",
    "build_device_record",
    # Categories
    "Category",
    "SyncAction",
    "CATEGORY_MAP",
    "CATEGORY_NAMES",
    "resolve_category",
    # Identity and dispatch
    "DeviceIdentity",
    "DispatchEngine",
    "SyncRecord",
    # Channel
    "MessageType",
    "ChannelMessage",
    "Channel",
    "LocalChannel",
    "Outbox",
    "StreamChannel",
    # Session
    "SyncSession",
    "SyncSettings",
    "SessionState",
    "FetchScheduler",
    "MergeRegistry",
    "MergeResult",
    "DeferredMerge",
    # State
    "AppStateSnapshot",
    "SyncInitData",
    "FileActionSink",
    # Errors
    "SyncError",
    "DeviceIdentityUnsetError",
    "UnknownCategoryError",
]
