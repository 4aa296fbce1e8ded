"""Message channels between the sync host and the UI process."""

from __future__ import annotations

import json
import logging
import threading
from typing import IO, Any, Callable, Dict, List, Optional, Protocol

from .messages import ChannelMessage, MessageType

logger = logging.getLogger("sitesync.sync.channel")


class Sender(Protocol):
    """Reply endpoint handed to every message handler."""

    def send(self, message_type: MessageType, *args: Any) -> None:
        ...


MessageHandler = Callable[..., None]


class Channel:
    """Handler registry shared by the concrete channels.

    Handlers are called as ``handler(sender, *args)``. Delivery holds the
    channel lock, so handlers run one at a time and to completion even when
    a timer thread is sending at the same moment.
    """

    def __init__(self) -> None:
        self._handlers: Dict[MessageType, List[MessageHandler]] = {}
        self._lock = threading.RLock()

    def on(self, message_type: MessageType, handler: MessageHandler) -> None:
        self._handlers.setdefault(MessageType(message_type), []).append(handler)
        logger.debug("Registered handler for '%s'.", MessageType(message_type).value)

    def handler_count(self, message_type: MessageType) -> int:
        return len(self._handlers.get(MessageType(message_type), []))

    def registered_types(self) -> List[MessageType]:
        return [key for key, handlers in self._handlers.items() if handlers]

    def dispatch_message(self, message: ChannelMessage, sender: Sender) -> int:
        """Run every handler registered for the message type."""
        with self._lock:
            handlers = list(self._handlers.get(message.type, []))
            if not handlers:
                logger.debug("No handler for '%s'; message dropped.", message.type.value)
            for handler in handlers:
                handler(sender, *message.args)
            return len(handlers)


class Outbox:
    """Sender that records outbound messages and can forward them."""

    def __init__(
        self,
        lock: Optional[threading.RLock] = None,
        listener: Optional[Callable[[ChannelMessage], None]] = None,
    ) -> None:
        self.messages: List[ChannelMessage] = []
        self._lock = lock or threading.RLock()
        self._listener = listener

    def send(self, message_type: MessageType, *args: Any) -> None:
        message = ChannelMessage(type=MessageType(message_type), args=list(args))
        with self._lock:
            self.messages.append(message)
            if self._listener is not None:
                self._listener(message)

    def of_type(self, message_type: MessageType) -> List[ChannelMessage]:
        return [message for message in self.messages if message.type == message_type]

    def clear(self) -> None:
        with self._lock:
            self.messages.clear()


class LocalChannel(Channel):
    """In-process channel; ``deliver`` simulates the UI process sending."""

    def __init__(self, listener: Optional[Callable[[ChannelMessage], None]] = None) -> None:
        super().__init__()
        self.outbox = Outbox(lock=self._lock, listener=listener)

    def deliver(
        self,
        message_type: MessageType,
        *args: Any,
        sender: Optional[Sender] = None,
    ) -> int:
        message = ChannelMessage(type=MessageType(message_type), args=list(args))
        return self.dispatch_message(message, sender or self.outbox)


class StreamSender:
    """Writes messages as JSON lines to a text stream."""

    def __init__(self, stream: IO[str], lock: Optional[threading.RLock] = None) -> None:
        self._stream = stream
        self._lock = lock or threading.RLock()

    def send(self, message_type: MessageType, *args: Any) -> None:
        message = ChannelMessage(type=MessageType(message_type), args=list(args))
        line = message.to_json()
        with self._lock:
            self._stream.write(line + "\n")
            self._stream.flush()


class StreamChannel(Channel):
    """JSON-lines channel over a pair of text streams (usually stdio)."""

    def __init__(self, reader: IO[str], writer: IO[str]) -> None:
        super().__init__()
        self._reader = reader
        self.sender = StreamSender(writer, lock=self._lock)

    def serve_forever(self) -> int:
        """Read and dispatch messages until the input stream closes.

        Returns the number of messages dispatched.
        """
        count = 0
        for raw in self._reader:
            line = raw.strip()
            if not line:
                continue
            try:
                message = ChannelMessage.from_json(line)
            except (json.JSONDecodeError, KeyError, ValueError, TypeError) as e:
                logger.warning("Skipping malformed channel message: %s", e)
                continue
            self.dispatch_message(message, self.sender)
            count += 1
        logger.info("Channel input closed after %d messages", count)
        return count


__all__ = [
    "Sender",
    "MessageHandler",
    "Channel",
    "Outbox",
    "LocalChannel",
    "StreamSender",
    "StreamChannel",
]
