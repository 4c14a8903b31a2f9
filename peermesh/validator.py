"""Validation of connection strings: IP addresses or peer identifiers."""

from __future__ import annotations

import ipaddress

from .core import b58decode

_MAX_VARINT_BYTES = 9


def _read_uvarint(buf: bytes) -> tuple[int, bytes]:
    """Read an unsigned varint from the start of buf; return it and the remaining bytes."""
    value = 0
    for count, byte in enumerate(buf[:_MAX_VARINT_BYTES], start=1):
        value |= (byte & 0x7F) << (7 * (count - 1))
        if byte < 0x80:
            if byte == 0 and count > 1:
                raise ValueError("varint not minimally encoded")
            return value, buf[count:]
    raise ValueError("invalid varint")


def _check_multihash(raw: bytes) -> None:
    """Raise ValueError unless raw is a well formed multihash."""
    _code, rest = _read_uvarint(raw)
    length, digest = _read_uvarint(rest)
    if len(digest) != length:
        raise ValueError("multihash length does not match its digest")


def is_valid_ip(text: str) -> bool:
    """Return True if text is an IPv4 or IPv6 address (without a zone)."""
    if "%" in text:
        return False
    try:
        ipaddress.ip_address(text)
    except ValueError:
        return False
    return True


def is_valid_peer_id(text: str) -> bool:
    """Return True if text is a peer identifier in its base58 multihash form."""
    if not (text.startswith("Qm") or text.startswith("1")):
        return False
    try:
        _check_multihash(b58decode(text))
    except ValueError:
        return False
    return True


def is_valid_connection_string(text: str) -> bool:
    """Return True if text is either a valid IP address or a valid peer identifier."""
    return is_valid_ip(text) or is_valid_peer_id(text)