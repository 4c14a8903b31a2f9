import logging
import socket

import pytest

from peermesh.core import P2PError
from peermesh.ports import check_free_port, choose_port, get_port

LOGGER = logging.getLogger("peermesh.test.ports")


class _PortTaken(Exception):
    pass


def test_invalid_string_should_err():
    with pytest.raises(P2PError, match="invalid ports range string"):
        get_port("NaN", check_free_port, LOGGER)


def test_invalid_port_number_should_err():
    with pytest.raises(P2PError, match="invalid port value"):
        get_port("-1", check_free_port, LOGGER)


def test_single_port_should_work():
    assert get_port("0", check_free_port, LOGGER) == 0
    assert get_port("3638", check_free_port, LOGGER) == 3638


def test_invalid_starting_port_should_err():
    with pytest.raises(P2PError, match="invalid starting port value"):
        get_port("NaN-10000", check_free_port, LOGGER)
    with pytest.raises(P2PError, match="invalid value"):
        get_port("1024-10000", check_free_port, LOGGER)


def test_invalid_ending_port_should_err():
    with pytest.raises(P2PError, match="invalid ending port value"):
        get_port("10000-NaN", check_free_port, LOGGER)


def test_end_port_smaller_than_start_port():
    with pytest.raises(P2PError, match="end port is smaller than start port"):
        get_port("10000-9999", check_free_port, LOGGER)


def test_range_of_one_should_work():
    calls = []

    def handler(p):
        calls.append(p)

    assert get_port("5000-5000", handler, LOGGER) == 5000
    assert calls == [5000]


def test_nil_logger_should_err():
    with pytest.raises(P2PError, match="nil logger"):
        get_port("8080-8090", lambda p: None, None)


def test_range_occupied_should_err():
    tried = set()

    def handler(p):
        tried.add(p)
        raise _PortTaken(p)

    with pytest.raises(P2PError, match="no free port in range"):
        get_port("5000-10000", handler, LOGGER)
    assert len(tried) == 10000 - 5000 + 1


def test_range_picks_the_accepted_port():
    def handler(p):
        if p != 2005:
            raise _PortTaken(p)

    assert get_port("2000-2010", handler, LOGGER) == 2005


def test_port_zero_always_works():
    assert choose_port(0, 0, check_free_port, LOGGER) == 0


def test_free_port_is_accepted():
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as probe:
        probe.bind(("localhost", 0))
        port = probe.getsockname()[1]
    assert choose_port(port, port, check_free_port, LOGGER) == port


def test_invalid_port_should_err():
    with pytest.raises(ValueError, match="invalid port"):
        check_free_port(-1)


def test_occupied_port_should_err():
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as listener:
        listener.bind(("localhost", 0))
        listener.listen()
        port = listener.getsockname()[1]
        with pytest.raises(OSError):
            check_free_port(port)