import base64

import pytest

from xfon.util import base64_decode, hexlify


@pytest.mark.parametrize(
    "data",
    [b"", b"\x00", b"\x01\xab\xff", bytes(range(256))],
)
def test_hexlify_matches_upper_hex(data):
    assert hexlify(data) == data.hex().upper()


@pytest.mark.parametrize("data", [b"\x10\x20\x30", bytes(range(40))])
def test_hexlify_round_trip(data):
    assert bytes.fromhex(hexlify(data)) == data


def test_hexlify_is_upper_case():
    result = hexlify(b"\xab\xcd\xef")
    assert result == result.upper()
    assert len(result) == 6


def test_hexlify_limit_truncates_with_ellipsis():
    data = bytes(range(20))
    assert hexlify(data, 4) == hexlify(data[:4]) + "..."


def test_hexlify_limit_not_reached_has_no_ellipsis():
    data = bytes(range(4))
    assert hexlify(data, 4) == hexlify(data)
    assert not hexlify(data, 10).endswith("...")


def test_hexlify_zero_limit_means_unlimited():
    data = bytes(range(100))
    assert hexlify(data, 0) == hexlify(data)
    assert len(hexlify(data)) == 200


def test_hexlify_accepts_text():
    assert hexlify("AB") == hexlify(b"AB")


@pytest.mark.parametrize("length", range(0, 12))
def test_base64_round_trip_lengths(length):
    data = bytes((i * 37 + 11) % 256 for i in range(length))
    encoded = base64.b64encode(data).decode("ascii")
    assert base64_decode(encoded) == data


def test_base64_full_alphabet():
    data = bytes(range(256)) * 3
    encoded = base64.b64encode(data).decode("ascii")
    assert base64_decode(encoded) == data


def test_base64_stops_after_padding():
    encoded = base64.b64encode(b"ab").decode("ascii")
    assert base64_decode(encoded + "QUJD") == b"ab"


@pytest.mark.parametrize("text", ["=AAA", "A=AA", "AB=C", "AB=", "ABCD!"])
def test_base64_invalid_input_raises(text):
    with pytest.raises(ValueError):
        base64_decode(text)


def test_base64_rejects_whitespace():
    with pytest.raises(ValueError):
        base64_decode("QUJD\nQUJD")