"""Device identity held by the sync host process."""

from __future__ import annotations

import logging
from typing import Any, Callable, Iterable, Mapping, Optional, Union

logger = logging.getLogger("sitesync.sync.identity")

DeviceIdLike = Union[bytes, bytearray, Iterable[int]]


def normalize_device_id(raw: Optional[DeviceIdLike]) -> Optional[bytes]:
    """Coerce a byte sequence or list of ints into ``bytes``.

    Empty values normalize to ``None`` so they never count as an identity.
    """
    if raw is None:
        return None
    value = bytes(raw)
    return value or None


def coerce_device_id(raw: Any) -> Optional[bytes]:
    """Unwrap an id or seed in any of the forms the client sends it.

    Accepts bytes, lists of ints, serialized Buffer objects and hex strings.
    Anything else is logged and treated as absent.
    """
    # Buffers serialized by the UI layer arrive as {"type": "Buffer", "data": [...]}
    if isinstance(raw, Mapping):
        raw = raw.get("data")
    if raw is not None and not isinstance(raw, (str, bytes, bytearray, list, tuple)):
        logger.warning("Ignoring byte sequence of type %s", type(raw).__name__)
        return None
    try:
        if isinstance(raw, str):
            raw = bytes.fromhex(raw)
        return normalize_device_id(raw)
    except (TypeError, ValueError) as e:
        logger.warning("Ignoring malformed byte sequence %r: %s", raw, e)
        return None


class DeviceIdentity:
    """Holds the identifier attached to every outgoing record.

    The identity starts unset and is set exactly once, either from persisted
    state (``initialize``) or from an id negotiated on first run (``adopt``).
    Once set it never changes for the life of the process. Access is not
    locked; callers must keep all mutation on the single event thread.
    """

    def __init__(self, on_adopt: Optional[Callable[[bytes], None]] = None):
        self._device_id: Optional[bytes] = None
        self._on_adopt = on_adopt

    @property
    def is_set(self) -> bool:
        return self._device_id is not None

    def get(self) -> Optional[bytes]:
        """Return the current identifier, or ``None`` while unset."""
        return self._device_id

    def hex(self) -> str:
        return self._device_id.hex() if self._device_id is not None else ""

    def initialize(self, saved_id: Optional[DeviceIdLike]) -> None:
        """Restore the identity from previously persisted state."""
        value = normalize_device_id(saved_id)
        if value is None:
            return
        if self._device_id is None:
            self._device_id = value
            logger.info("Resumed device identity %s", value.hex())
        elif self._device_id != value:
            logger.warning(
                "Ignoring persisted device id %s; identity already set to %s",
                value.hex(),
                self._device_id.hex(),
            )

    def adopt(self, new_id: Optional[DeviceIdLike]) -> bool:
        """Take a newly negotiated id if no identity exists yet.

        Returns True when the id was adopted. The ``on_adopt`` callback is
        notified without waiting on or checking its outcome.
        """
        value = normalize_device_id(new_id)
        if value is None or self._device_id is not None:
            return False
        self._device_id = value
        logger.info("Adopted new device identity %s", value.hex())
        if self._on_adopt is not None:
            self._on_adopt(value)
        return True


__all__ = ["DeviceIdentity", "coerce_device_id", "normalize_device_id"]
