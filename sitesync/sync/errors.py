"""Exceptions raised by the sync subsystem."""

from __future__ import annotations


class SyncError(Exception):
    """Base class for sync failures."""


class DeviceIdentityUnsetError(SyncError, RuntimeError):
    """A record was dispatched before the device identity was established."""

    def __init__(self, message: str = "Cannot build a sync record because deviceId is not set"):
        super().__init__(message)


class UnknownCategoryError(SyncError, KeyError):
    """A record kind has no entry in the category table."""

    def __init__(self, key: str):
        super().__init__(key)
        self.key = key

    def __str__(self) -> str:
        return f"No sync category registered for record kind '{self.key}'"


__all__ = ["SyncError", "DeviceIdentityUnsetError", "UnknownCategoryError"]
