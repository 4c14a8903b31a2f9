"""Rating of peers by how useful they have been, kept in a top-rated and a bad-rated cache."""

from __future__ import annotations

import json
import logging
import threading
from collections.abc import Iterable
from typing import Any

from .core import P2PError, PeerID

DEFAULT_RATING = 0
MIN_RATING = -100
MAX_RATING = 100
INCREASE_FACTOR = 2
DECREASE_FACTOR = -1
MIN_NUM_OF_PEERS = 1
INT32_SIZE = 4
UNKNOWN_RATING = "unknown"

_TOP_RATED_TIER = "top rated tier"
_BAD_RATED_TIER = "bad rated tier"


class MemoryCache:
    """A simple thread-safe in-memory cache keyed by bytes."""

    def __init__(self) -> None:
        self._data: dict[bytes, Any] = {}
        self._lock = threading.Lock()

    def get(self, key: bytes) -> Any:
        """Return the value stored under key, or None if there is none."""
        with self._lock:
            return self._data.get(bytes(key))

    def put(self, key: bytes, value: Any, size_in_bytes: int) -> bool:
        """Store value under key; return True if something was evicted (never)."""
        with self._lock:
            self._data[bytes(key)] = value
        return False

    def has(self, key: bytes) -> bool:
        """Return True if key is stored."""
        with self._lock:
            return bytes(key) in self._data

    def remove(self, key: bytes) -> None:
        """Forget key, if stored."""
        with self._lock:
            self._data.pop(bytes(key), None)

    def keys(self) -> list[bytes]:
        """Return the stored keys."""
        with self._lock:
            return list(self._data)

    def __len__(self) -> int:
        with self._lock:
            return len(self._data)


def _compute_rating_tier(rating: int) -> str:
    return _TOP_RATED_TIER if rating >= DEFAULT_RATING else _BAD_RATED_TIER


def _as_rating(value: Any) -> int:
    return value if isinstance(value, int) and not isinstance(value, bool) else DEFAULT_RATING


class PeersRatingHandler:
    """Tracks peer ratings, moving peers between the top-rated and bad-rated caches."""

    def __init__(self, top_rated_cache: Any, bad_rated_cache: Any, logger: Any) -> None:
        if top_rated_cache is None:
            raise P2PError("nil cacher for TopRatedCache")
        if bad_rated_cache is None:
            raise P2PError("nil cacher for BadRatedCache")
        if logger is None:
            raise P2PError("nil logger")
        self._top = top_rated_cache
        self._bad = bad_rated_cache
        self._log = logger
        self._lock = threading.Lock()

    def increase_rating(self, pid: bytes) -> None:
        """Raise the rating of a peer by the increase factor."""
        with self._lock:
            self._update_rating(PeerID(pid), INCREASE_FACTOR)

    def decrease_rating(self, pid: bytes) -> None:
        """Lower the rating of a peer by the decrease factor."""
        with self._lock:
            self._update_rating(PeerID(pid), DECREASE_FACTOR)

    def _old_rating(self, key: bytes) -> int | None:
        for cache in (self._top, self._bad):
            value = cache.get(key)
            if value is not None:
                return _as_rating(value)
        return None

    def _update_rating(self, pid: PeerID, factor: int) -> None:
        key = bytes(pid)
        old_rating = self._old_rating(key)
        if old_rating is None:
            self._top.put(key, DEFAULT_RATING, INT32_SIZE)
            return

        new_rating = max(MIN_RATING, min(MAX_RATING, old_rating + factor))
        old_tier = _compute_rating_tier(old_rating)
        new_tier = _compute_rating_tier(new_rating)
        if new_tier == old_tier:
            target = self._top if new_tier == _TOP_RATED_TIER else self._bad
            target.put(key, new_rating, INT32_SIZE)
            return

        if new_tier == _TOP_RATED_TIER:
            self._bad.remove(key)
            self._top.put(key, new_rating, INT32_SIZE)
        else:
            self._top.remove(key)
            self._bad.put(key, new_rating, INT32_SIZE)

    def get_top_rated_peers_from_list(
        self, peers: Iterable[bytes] | None, min_num_of_peers_expected: int
    ) -> list[PeerID]:
        """Return the peers ordered by tier; bad-rated ones only when too few are top rated."""
        with self._lock:
            peer_list = [PeerID(p) for p in peers or ()]
            if min_num_of_peers_expected < MIN_NUM_OF_PEERS or not peer_list:
                result: list[PeerID] = []
            else:
                top_rated, bad_rated = self._split_by_tiers(peer_list)
                result = top_rated
                if len(top_rated) < min_num_of_peers_expected:
                    result = top_rated + bad_rated
            self._display_peers_rating(result, min_num_of_peers_expected)
            return result

    def _split_by_tiers(self, peers: list[PeerID]) -> tuple[list[PeerID], list[PeerID]]:
        top_rated: list[PeerID] = []
        bad_rated: list[PeerID] = []
        for peer in peers:
            key = bytes(peer)
            is_new = True
            if self._top.has(key):
                top_rated.append(peer)
                is_new = False
            if self._bad.has(key):
                bad_rated.append(peer)
                is_new = False
            if is_new:
                self._top.put(key, DEFAULT_RATING, INT32_SIZE)
                top_rated.append(peer)
        return top_rated, bad_rated

    def _display_peers_rating(self, peers: list[PeerID], min_expected: int) -> None:
        is_enabled = getattr(self._log, "isEnabledFor", None)
        if is_enabled is None or not is_enabled(logging.DEBUG):
            return
        lines = []
        for peer in peers:
            value = self._top.get(bytes(peer))
            if value is None:
                value = self._bad.get(bytes(peer))
            shown = str(value) if isinstance(value, int) else "invalid"
            lines.append(f"\n peerID: {peer.pretty()}, rating: {shown}")
        self._log.debug(
            "Best peers to request from, min requested %d, peers ratings %s",
            min_expected,
            "".join(lines),
        )


class PeersRatingMonitor:
    """Reports the ratings of the currently connected peers."""

    def __init__(self, top_rated_cache: Any, bad_rated_cache: Any) -> None:
        if top_rated_cache is None:
            raise P2PError("nil cacher for TopRatedCache")
        if bad_rated_cache is None:
            raise P2PError("nil cacher for BadRatedCache")
        self._top = top_rated_cache
        self._bad = bad_rated_cache

    def get_connected_peers_ratings(self, connections_handler: Any) -> str:
        """Return a JSON object mapping each connected peer to its rating."""
        if connections_handler is None:
            raise P2PError("nil connections handler")
        ratings = {
            PeerID(pid).pretty(): self._fetch_rating(PeerID(pid))
            for pid in connections_handler.connected_peers()
        }
        return json.dumps(ratings, sort_keys=True, separators=(",", ":"))

    def _fetch_rating(self, pid: PeerID) -> str:
        for cache in (self._top, self._bad):
            value = cache.get(bytes(pid))
            if value is not None:
                return str(value)
        return UNKNOWN_RATING