"""Messages exchanged between the sync host and the sync UI layer."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List


class MessageType(str, Enum):
    """Channel message names."""
    GET_INIT_DATA = "get-init-data"
    GOT_INIT_DATA = "got-init-data"
    SAVE_INIT_DATA = "save-init-data"
    SYNC_READY = "sync-ready"
    SYNC_DEBUG = "sync-debug"
    FETCH_SYNC_RECORDS = "fetch-sync-records"
    RECEIVE_SYNC_RECORDS = "receive-sync-records"
    SEND_SYNC_RECORDS = "send-sync-records"


@dataclass
class ChannelMessage:
    """A message name plus its positional arguments."""

    type: MessageType
    args: List[Any] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.type.value,
            "args": [_to_wire(arg) for arg in self.args],
        }

    def to_json(self) -> str:
        return json.dumps(self.to_dict())

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ChannelMessage":
        return cls(
            type=MessageType(data["type"]),
            args=list(data.get("args", [])),
        )

    @classmethod
    def from_json(cls, json_str: str) -> "ChannelMessage":
        return cls.from_dict(json.loads(json_str))


def _to_wire(value: Any) -> Any:
    """Convert bytes and enums into JSON-friendly values."""
    if isinstance(value, (bytes, bytearray)):
        return list(value)
    if isinstance(value, Enum):
        return value.name
    if hasattr(value, "to_dict"):
        return _to_wire(value.to_dict())
    if isinstance(value, dict):
        return {key: _to_wire(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_to_wire(item) for item in value]
    return value


__all__ = ["MessageType", "ChannelMessage"]
