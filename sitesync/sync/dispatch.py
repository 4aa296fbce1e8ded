"""Batching and stamping of outgoing sync records."""

from __future__ import annotations

import logging
import secrets
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Sequence

from .categories import SyncAction, resolve_category
from .channel import Sender
from .errors import DeviceIdentityUnsetError
from .identity import DeviceIdentity
from .messages import MessageType
from .records import RecordData

logger = logging.getLogger("sitesync.sync.dispatch")

OBJECT_ID_BYTES = 16


@dataclass(frozen=True)
class SyncRecord:
    """A record stamped and ready for the outbound channel."""

    action: SyncAction
    device_id: bytes
    object_id: bytes
    name: str
    value: Dict[str, Any]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "action": int(self.action),
            "deviceId": list(self.device_id),
            "objectId": list(self.object_id),
            self.name: self.value,
        }


class DispatchEngine:
    """Sends same-category record batches stamped with ids and an action."""

    def __init__(
        self,
        identity: DeviceIdentity,
        random_bytes: Callable[[int], bytes] = secrets.token_bytes,
    ):
        self.identity = identity
        self._random_bytes = random_bytes

    def stamp(self, action: SyncAction, records: Sequence[RecordData]) -> List[SyncRecord]:
        """Attach action, device id and a fresh object id to each record."""
        device_id = self.identity.get()
        if device_id is None:
            raise DeviceIdentityUnsetError()
        return [
            SyncRecord(
                action=SyncAction(action),
                device_id=device_id,
                object_id=self._random_bytes(OBJECT_ID_BYTES),
                name=record.name,
                value=record.value,
            )
            for record in records
        ]

    def dispatch(
        self,
        channel: Sender,
        action: SyncAction,
        records: Sequence[RecordData],
    ) -> None:
        """Send one batch over the channel.

        The whole batch takes the category of its first record; callers
        group records by category before calling. An empty list sends
        nothing.
        """
        if not self.identity.is_set:
            raise DeviceIdentityUnsetError()
        if not records:
            return

        category = resolve_category(records[0].name)
        batch = self.stamp(action, records)
        channel.send(MessageType.SEND_SYNC_RECORDS, category, batch)
        logger.debug(
            "Sent %d %s record(s) to %s",
            len(batch),
            SyncAction(action).name,
            category.name,
        )


__all__ = ["SyncRecord", "DispatchEngine", "OBJECT_ID_BYTES"]
