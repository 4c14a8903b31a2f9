import pytest

from peermesh.validator import is_valid_connection_string, is_valid_ip, is_valid_peer_id

VALID_PID = "16Uiu2HAm6yvbp1oZ6zjnWsn9FdRqBSaQkbhELyaThuq48ybdojvJ"


@pytest.mark.parametrize("text", ["invalid string", ""])
def test_connection_string_invalid(text):
    assert is_valid_connection_string(text) is False


@pytest.mark.parametrize("text", ["5.22.219.242", "2031:0:130F:0:0:9C0:876A:130B", VALID_PID])
def test_connection_string_valid(text):
    assert is_valid_connection_string(text) is True


@pytest.mark.parametrize(
    "text",
    [
        "invalid ip",
        "",
        "a.b.c.d",
        "10.0.0",
        "10.0",
        "10",
        "2031:0:130F:0:0:9C0:876A",
        "2031:0:130F:0:0:9C0",
        "2031:0:130F:0:0",
        "2031:0:130F:0",
        "2031:0:130F",
        "2031:0",
        VALID_PID,
    ],
)
def test_is_valid_ip_rejects(text):
    assert is_valid_ip(text) is False


@pytest.mark.parametrize("text", ["127.0.0.1", "5.22.219.242", "2031:0:130F:0:0:9C0:876A:130B"])
def test_is_valid_ip_accepts(text):
    assert is_valid_ip(text) is True


@pytest.mark.parametrize(
    "text",
    [
        "invalid peer id",
        "",
        "blaiu2HAm6yvbp1oZ6zjnWsn9FdRqBSaQkbhELyaThuq48ybdojvJ",
        "16Uiu2HAm6yvbp1oZ6zjnWsn9FdRqBSaQkbhELyaThuq48ybdobla",
        "16Uiu2HAm6yvbp1oZ6zjnWsn9FblaBSaQkbhELyaThuq48ybdojvJ",
        "5.22.219.242",
    ],
)
def test_is_valid_peer_id_rejects(text):
    assert is_valid_peer_id(text) is False


def test_is_valid_peer_id_accepts():
    assert is_valid_peer_id(VALID_PID) is True


def test_is_valid_peer_id_rejects_truncated_multihash():
    assert is_valid_peer_id(VALID_PID[:-2]) is False