"""Peer identities, peer information and the message type shared by the network components."""

from __future__ import annotations

import enum
from dataclasses import dataclass

ALL_SHARD_ID = 0xFFFFFFFF
"""Shard identifier meaning "every shard"; also used before a peer's shard is known."""

_B58_ALPHABET = "123456789ABCDEFGHJKLMNPQRSTUVWXYZabcdefghijkmnopqrstuvwxyz"
_B58_INDEX = {char: value for value, char in enumerate(_B58_ALPHABET)}


class P2PError(Exception):
    """Raised when a peer-to-peer component rejects an argument or an operation."""


def b58encode(data: bytes) -> str:
    """Encode bytes with the base58 (Bitcoin) alphabet."""
    raw = bytes(data)
    stripped = raw.lstrip(b"\0")
    leading_zeros = len(raw) - len(stripped)
    number = int.from_bytes(stripped, "big")
    digits = []
    while number:
        number, remainder = divmod(number, 58)
        digits.append(_B58_ALPHABET[remainder])
    return "1" * leading_zeros + "".join(reversed(digits))


def b58decode(text: str) -> bytes:
    """Decode a base58 (Bitcoin alphabet) string; raise ValueError on a bad character."""
    number = 0
    for char in text:
        try:
            digit = _B58_INDEX[char]
        except KeyError:
            raise ValueError(f"invalid base58 character {char!r}") from None
        number = number * 58 + digit
    leading_zeros = len(text) - len(text.lstrip("1"))
    body = number.to_bytes((number.bit_length() + 7) // 8, "big")
    return b"\0" * leading_zeros + body


class PeerID(bytes):
    """The raw bytes that identify a peer."""

    def __new__(cls, value: bytes | str = b"") -> PeerID:
        if isinstance(value, str):
            value = value.encode("utf-8")
        return super().__new__(cls, value)

    def pretty(self) -> str:
        """Return the human readable (base58) form of the identifier."""
        return b58encode(self)

    def __repr__(self) -> str:
        return f"PeerID({self.pretty()!r})"


class PeerType(str, enum.Enum):
    """The role a peer plays in the network."""

    UNKNOWN = "unknown"
    VALIDATOR = "validator"
    OBSERVER = "observer"


class PeerSubType(enum.IntEnum):
    """A finer classification of a peer."""

    REGULAR = 0
    FULL_HISTORY_OBSERVER = 1


class BroadcastMethod(str, enum.Enum):
    """How a message travelled: sent directly to one peer or broadcast on a topic."""

    DIRECT = "Direct"
    BROADCAST = "Broadcast"


@dataclass(frozen=True)
class P2PPeerInfo:
    """What is known about a peer: its type, sub-type, shard and public key."""

    peer_type: PeerType = PeerType.UNKNOWN
    peer_sub_type: PeerSubType = PeerSubType.REGULAR
    shard_id: int = 0
    pk_bytes: bytes = b""


@dataclass
class Message:
    """A message received from the network together with its metadata."""

    from_: bytes = b""
    data: bytes = b""
    payload: bytes = b""
    seq_no: bytes = b""
    topic: str = ""
    signature: bytes = b""
    key: bytes = b""
    peer: PeerID = PeerID()
    timestamp: int = 0
    broadcast_method: BroadcastMethod | None = None


class UnknownPeerShardResolver:
    """A shard resolver that knows nothing: every peer is an unknown, regular peer in shard 0."""

    def get_peer_info(self, pid: PeerID) -> P2PPeerInfo:
        """Return the unknown-peer information regardless of the peer asked about."""
        return P2PPeerInfo(
            peer_type=PeerType.UNKNOWN,
            peer_sub_type=PeerSubType.REGULAR,
            shard_id=0,
        )