"""Choosing the port to listen on, either fixed or picked at random from a range."""

from __future__ import annotations

import random
import re
import socket
from collections.abc import Callable
from typing import Any

from .core import P2PError

MIN_RANGE_PORT_VALUE = 1025

_INTEGER = re.compile(r"[+-]?[0-9]+")


def _atoi(text: str) -> int:
    if not _INTEGER.fullmatch(text):
        raise ValueError(f"not an integer: {text!r}")
    return int(text)


def get_port(port: str, handler: Callable[[int], object], logger: Any) -> int:
    """Resolve a port string: a single value, or a `start-end` range to pick a free port from.

    The handler is called with each candidate port of a range and raises if it cannot be used.
    """
    try:
        value = _atoi(port)
    except ValueError:
        pass
    else:
        if value < 0:
            raise P2PError(f"invalid port value, {value} does not represent a positive value for port")
        return value

    parts = port.split("-")
    if len(parts) != 2:
        raise P2PError(
            f"invalid ports range string, provided port string `{port}` is not in the "
            "correct format, expected `start-end`"
        )

    try:
        start_port = _atoi(parts[0])
    except ValueError:
        raise P2PError("invalid starting port value") from None
    try:
        end_port = _atoi(parts[1])
    except ValueError:
        raise P2PError("invalid ending port value") from None

    if start_port < MIN_RANGE_PORT_VALUE:
        raise P2PError(f"invalid value, provided starting port should be >= {MIN_RANGE_PORT_VALUE}")
    if end_port < start_port:
        raise P2PError("end port is smaller than start port")

    return choose_port(start_port, end_port, handler, logger)


def choose_port(start_port: int, end_port: int, handler: Callable[[int], object], logger: Any) -> int:
    """Try the ports of the range in random order and return the first the handler accepts."""
    if logger is None:
        raise P2PError("nil logger")

    logger.debug("generating random free port in range %d-%d", start_port, end_port)

    ports = list(range(start_port, end_port + 1))
    random.SystemRandom().shuffle(ports)
    for candidate in ports:
        try:
            handler(candidate)
        except Exception as err:  # noqa: BLE001 - any failure means the port is unusable
            logger.debug("opening port %d error: %s", candidate, err)
            continue
        logger.debug("free port chosen: %d", candidate)
        return candidate

    raise P2PError(f"no free port in range, range {start_port}-{end_port}")


def check_free_port(port: int) -> None:
    """Raise if a TCP listener cannot be opened on localhost at the given port."""
    if not 0 <= port <= 0xFFFF:
        raise ValueError(f"invalid port {port}")
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        sock.bind(("localhost", port))
        sock.listen()