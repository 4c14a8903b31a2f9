"""Bookkeeping of connected peers that match the preferred connection addresses."""

from __future__ import annotations

import threading
from collections.abc import Iterable
from dataclasses import dataclass

from .core import ALL_SHARD_ID, P2PError, PeerID
from .validator import is_valid_connection_string


@dataclass
class _PeerInfo:
    pid: PeerID
    shard_id: int = ALL_SHARD_ID


@dataclass(frozen=True)
class _PeerIDData:
    connection_address: str
    shard_id: int


def _find_peer_info(peer_id: PeerID, peers_info: Iterable[_PeerInfo]) -> _PeerInfo | None:
    return next((info for info in peers_info if info.pid == peer_id), None)


class PeersHolder:
    """Holds the preferred peers, grouped by shard once their shard becomes known."""

    def __init__(self, preferred_connection_addresses: Iterable[str]) -> None:
        addresses = list(preferred_connection_addresses)
        for address in addresses:
            if not is_valid_connection_string(address):
                raise P2PError(f"invalid value for preferred connection address {address}")

        self._preferred = addresses
        self._conn_addr_to_peers_info: dict[str, list[_PeerInfo]] = {a: [] for a in addresses}
        self._waiting_for_shard: dict[PeerID, str] = {}
        self._peer_ids_per_shard: dict[int, list[PeerID]] = {}
        self._peer_ids: dict[PeerID, _PeerIDData] = {}
        self._lock = threading.Lock()

    def _known_connection(self, connection_address: str) -> str | None:
        return next((p for p in self._preferred if p in connection_address), None)

    def put_connection_address(self, peer_id: PeerID, connection_address: str) -> None:
        """Record the peer if its connection address contains a preferred address."""
        peer_id = PeerID(peer_id)
        with self._lock:
            known = self._known_connection(connection_address)
            if known is None:
                return
            peers_info = self._conn_addr_to_peers_info.setdefault(known, [])
            if _find_peer_info(peer_id, peers_info) is None:
                self._waiting_for_shard[peer_id] = known
                peers_info.append(_PeerInfo(peer_id))

    def put_shard_id(self, peer_id: PeerID, shard_id: int) -> None:
        """Assign a shard to a recorded preferred peer that was waiting for one."""
        peer_id = PeerID(peer_id)
        with self._lock:
            known = self._waiting_for_shard.get(peer_id)
            if known is None:
                return
            info = _find_peer_info(peer_id, self._conn_addr_to_peers_info.get(known, ()))
            if info is None:
                return

            info.shard_id = shard_id
            self._peer_ids_per_shard.setdefault(shard_id, []).append(peer_id)
            self._peer_ids[peer_id] = _PeerIDData(known, shard_id)
            del self._waiting_for_shard[peer_id]

    def get(self) -> dict[int, list[PeerID]]:
        """Return the preferred peers whose shard is known, keyed by shard."""
        with self._lock:
            return {shard: list(peers) for shard, peers in self._peer_ids_per_shard.items()}

    def contains(self, peer_id: PeerID) -> bool:
        """Return True if the peer is a preferred peer with a known shard."""
        with self._lock:
            return PeerID(peer_id) in self._peer_ids

    def remove(self, peer_id: PeerID) -> None:
        """Forget a preferred peer; the connection address stays available for reuse."""
        peer_id = PeerID(peer_id)
        with self._lock:
            data = self._peer_ids.pop(peer_id, None)
            if data is None:
                return

            shard_peers = self._peer_ids_per_shard.get(data.shard_id, [])
            if peer_id in shard_peers:
                shard_peers.remove(peer_id)
            if not shard_peers:
                self._peer_ids_per_shard.pop(data.shard_id, None)

            peers_info = self._conn_addr_to_peers_info.get(data.connection_address)
            if peers_info:
                self._conn_addr_to_peers_info[data.connection_address] = [
                    info for info in peers_info if info.pid != peer_id
                ]

            self._waiting_for_shard.pop(peer_id, None)

    def clear(self) -> None:
        """Forget every recorded peer."""
        with self._lock:
            self._waiting_for_shard = {}
            self._peer_ids_per_shard = {}
            self._peer_ids = {}
            self._conn_addr_to_peers_info = {}