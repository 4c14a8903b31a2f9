"""Funnels outgoing data from several named channels into a single consumer."""

from __future__ import annotations

import queue
import threading
from collections.abc import Iterator
from dataclasses import dataclass
from typing import Any

from .core import P2PError, PeerID

DEFAULT_SEND_CHANNEL = "default send channel"

_CLOSED = object()


@dataclass
class SendableData:
    """A buffer waiting to be sent on a topic."""

    buff: bytes = b""
    topic: str = ""
    sk: bytes = b""
    id: PeerID = PeerID()


class _SendChannel:
    """A named entry point that forwards data to the balancer's shared queue."""

    def __init__(self, name: str, sink: queue.Queue) -> None:
        self.name = name
        self._sink = sink
        self._closed = False
        self._lock = threading.Lock()

    def put(self, data: SendableData) -> None:
        """Queue data for collection; raise P2PError if the channel was removed."""
        with self._lock:
            if self._closed:
                raise P2PError(f"send on removed channel {self.name}")
            self._sink.put(data)

    def close(self) -> None:
        with self._lock:
            self._closed = True

    def __repr__(self) -> str:
        return f"_SendChannel({self.name!r})"


class OutgoingChannelLoadBalancer:
    """Holds named send channels and hands their data, one item at a time, to a consumer."""

    def __init__(self, logger: Any) -> None:
        if logger is None:
            raise P2PError("nil logger")
        self._log = logger
        self._lock = threading.RLock()
        self._queue: queue.Queue = queue.Queue()
        self._closed = threading.Event()
        self._channels: dict[str, _SendChannel] = {}
        self._append_channel(DEFAULT_SEND_CHANNEL)

    def _append_channel(self, channel: str) -> None:
        self._channels[channel] = _SendChannel(channel, self._queue)

    def add_channel(self, channel: str) -> None:
        """Add a new channel; adding an existing one does nothing."""
        if channel == DEFAULT_SEND_CHANNEL:
            raise P2PError("channel can not be re-added")
        with self._lock:
            if channel not in self._channels:
                self._append_channel(channel)

    def remove_channel(self, channel: str) -> None:
        """Remove an existing channel; data sent on it afterwards is rejected."""
        if channel == DEFAULT_SEND_CHANNEL:
            raise P2PError("channel can not be deleted")
        with self._lock:
            try:
                removed = self._channels.pop(channel)
            except KeyError:
                raise P2PError(f"channel does not exist: {channel}") from None
        removed.close()

    def get_channel_or_default(self, channel: str) -> _SendChannel:
        """Return the named channel, or the default channel if there is none by that name."""
        with self._lock:
            found = self._channels.get(channel)
            return found if found is not None else self._channels[DEFAULT_SEND_CHANNEL]

    def collect_one_element_from_channels(self, timeout: float | None = None) -> SendableData | None:
        """Block until one item is available and return it.

        Returns None once the balancer is closed or when the timeout expires.
        """
        if self._closed.is_set():
            return None
        try:
            item = self._queue.get(timeout=timeout)
        except queue.Empty:
            return None
        if item is _CLOSED:
            self._queue.put(_CLOSED)
            return None
        return item

    def close(self) -> None:
        """Stop handing out data and release any waiting consumer."""
        if self._closed.is_set():
            return
        self._closed.set()
        self._queue.put(_CLOSED)
        self._log.debug("closing OutgoingChannelLoadBalancer")

    def __enter__(self) -> OutgoingChannelLoadBalancer:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def __iter__(self) -> Iterator[str]:
        with self._lock:
            return iter(list(self._channels))

    def __len__(self) -> int:
        with self._lock:
            return len(self._channels)

    def __contains__(self, channel: object) -> bool:
        with self._lock:
            return channel in self._channels