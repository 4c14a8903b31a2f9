"""Caches the peers connected on each topic and refreshes stale entries in the background."""

from __future__ import annotations

import threading
import time
from collections.abc import Callable, Iterable
from typing import Any

from .core import P2PError, PeerID


class PeersOnChannel:
    """Keeps, per topic, the list of connected peers and refreshes it when it grows stale.

    Intervals are given in seconds; the clock returns the current time in seconds.
    """

    def __init__(
        self,
        fetch_peers_handler: Callable[[str], Iterable[bytes]] | None,
        refresh_interval: float,
        ttl_interval: float,
        logger: Any,
        clock: Callable[[], float] | None = None,
    ) -> None:
        if fetch_peers_handler is None:
            raise P2PError("nil fetch peers on topic handler")
        if refresh_interval <= 0 or ttl_interval <= 0:
            raise P2PError("invalid duration provided")
        if logger is None:
            raise P2PError("nil logger")

        self._fetch = fetch_peers_handler
        self._refresh_interval = refresh_interval
        self._ttl_interval = ttl_interval
        self._log = logger
        self._clock = clock if clock is not None else time.time
        self._lock = threading.RLock()
        self._peers: dict[str, list[PeerID]] = {}
        self._last_updated: dict[str, float] = {}
        self._stop = threading.Event()
        self._thread = threading.Thread(
            target=self._refresh_all_known_topics, name="peers-on-channel", daemon=True
        )
        self._thread.start()

    def connected_peers_on_channel(self, topic: str) -> list[PeerID]:
        """Return the known peers on a topic, fetching them if the topic is not known yet."""
        with self._lock:
            peers = self._peers.get(topic)
        if peers is not None:
            return list(peers)
        return self._refresh_topic(topic)

    def set_peers_on_topic(self, topic: str, last_updated: float, peers: Iterable[bytes]) -> None:
        """Store the peers of a topic together with the time they were obtained."""
        with self._lock:
            self._peers[topic] = [PeerID(pid) for pid in peers]
            self._last_updated[topic] = last_updated

    def peers_on_topic(self, topic: str) -> list[PeerID]:
        """Return the cached peers of a topic without fetching."""
        with self._lock:
            return list(self._peers.get(topic, ()))

    def _refresh_all_known_topics(self) -> None:
        while not self._stop.wait(self._refresh_interval):
            self._log.debug("peersOnChannel: checking for stale topics")
            with self._lock:
                stale = [
                    topic
                    for topic, last in self._last_updated.items()
                    if self._clock() - last > self._ttl_interval
                ]
            self._log.debug("peersOnChannel: topics to be refreshed: %s", ", ".join(stale))
            for topic in stale:
                if self._stop.is_set():
                    break
                self._refresh_topic(topic)
        self._log.debug("peersOnChannel refresh loop is stopping")

    def _refresh_topic(self, topic: str) -> list[PeerID]:
        connected = [PeerID(pid) for pid in self._fetch(topic)]
        with self._lock:
            self._peers[topic] = connected
            self._last_updated[topic] = self._clock()
        self._log.debug(
            "refreshed peers on topic %s: %s",
            topic,
            ", ".join(pid.pretty() for pid in connected),
        )
        return list(connected)

    def close(self) -> None:
        """Stop the background refresh."""
        self._stop.set()

    def __enter__(self) -> PeersOnChannel:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()