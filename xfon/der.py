"""Decoding of the DER primitives used in X.509 certificates."""

from __future__ import annotations

from enum import IntEnum
from typing import NamedTuple, Union

from xfon.util import hexlify

Bytes = Union[bytes, bytearray, memoryview]

_INT_MAX = 0x7FFFFFFF
_UINT_MAX = 0xFFFFFFFF


class DecodeError(ValueError):
    """Raised when DER data cannot be decoded."""


class Tag(IntEnum):
    """Universal ASN.1 tag numbers (low five bits of the identifier)."""

    BOOLEAN = 1
    INTEGER = 2
    BIT_STRING = 3
    OCTET_STRING = 4
    OBJECT = 6
    UTF8STRING = 12
    SEQUENCE = 16
    SET = 17
    NUMERICSTRING = 18
    PRINTABLESTRING = 19
    T61STRING = 20
    IA5STRING = 22
    UTCTIME = 23
    GENERALIZEDTIME = 24
    VISIBLESTRING = 26


class TLV(NamedTuple):
    """A decoded element: its tag number, its payload and its encoded size."""

    tag: int
    value: bytes
    size: int


def read_tlv(data: Bytes) -> TLV:
    """Read the first tag-length-value element of ``data``.

    Bytes after the element are ignored; ``size`` tells how many were used.
    """
    raw = bytes(data)
    if not raw:
        raise DecodeError("empty")
    if len(raw) < 2:
        raise DecodeError("missing first byte")

    tag = raw[0] & 0x1F
    header_size = 2
    if raw[1] & 0x80:
        # length encoded on several bytes, big-endian
        n_bytes = raw[1] & 0x7F
        if n_bytes + 2 > len(raw):
            raise DecodeError(
                f"too short for extracting the size: n_bytes+2={n_bytes + 2}, "
                f"der_bytes.size={len(raw)}"
            )
        header_size += n_bytes
        length = 0
        for byte in raw[2 : 2 + n_bytes]:
            if length > (_INT_MAX >> 8):
                raise DecodeError("length overflow")
            length = (length << 8) + byte
    else:
        length = raw[1]

    if header_size + length > len(raw):
        raise DecodeError(
            f"too short for extracting the payload: size of input {len(raw)}, "
            f"size of tag & length {header_size}, size of payload {length}"
        )
    return TLV(tag, raw[header_size : header_size + length], header_size + length)


def decode_header(data: Bytes, expected_tag: int) -> tuple[bytes, int]:
    """Read an element that must carry ``expected_tag``.

    Returns the payload and the number of bytes consumed.
    """
    tag, value, size = read_tlv(data)
    if tag != expected_tag:
        raise DecodeError(f"Unexpected tag 0x{tag:X} (expected was 0x{int(expected_tag):X})")
    return value, size


def decode_integer(data: Bytes) -> tuple[str, int]:
    """Decode an INTEGER as a signed hex string such as ``0x05`` or ``-0x01``.

    The magnitude keeps the byte width of the encoding.
    """
    tag, value, size = read_tlv(data)
    if tag != Tag.INTEGER:
        raise DecodeError(f"not an integer. tag=0x{tag:X}")
    if not value:
        raise DecodeError("empty integer")

    if value[0] & 0x80:
        width = len(value)
        magnitude = (1 << (8 * width)) - int.from_bytes(value, "big")
        return "-0x" + hexlify(magnitude.to_bytes(width, "big")), size
    return "0x" + hexlify(value), size


def decode_boolean(data: Bytes) -> tuple[bool, int]:
    """Decode a BOOLEAN."""
    value, size = decode_header(data, Tag.BOOLEAN)
    if len(value) != 1:
        raise DecodeError(f"Invalid payload (size {len(value)})")
    return bool(value[0]), size


def decode_octet_string(data: Bytes) -> tuple[bytes, int]:
    """Decode an OCTET STRING."""
    return decode_header(data, Tag.OCTET_STRING)


def decode_bit_string(data: Bytes) -> tuple[bytes, int]:
    """Return the raw payload of a BIT STRING, unused-bits byte included."""
    return decode_header(data, Tag.BIT_STRING)


def decode_bit_list(data: Bytes) -> tuple[list[bool], int]:
    """Decode a BIT STRING into its bits, most significant first.

    The count of unused bits is dropped from the end of every byte.
    """
    value, size = decode_header(data, Tag.BIT_STRING)
    if not value:
        raise DecodeError("Empty value")
    unused_bits = value[0]
    if unused_bits > 8:
        raise DecodeError(f"Invalid number of unused bits: {unused_bits}")
    bits = [
        bool((byte >> (7 - position)) & 1)
        for byte in value[1:]
        for position in range(8 - unused_bits)
    ]
    return bits, size


def decode_object_identifier(data: Bytes) -> tuple[str, int]:
    """Decode an OBJECT IDENTIFIER into dotted decimal form."""
    value, size = decode_header(data, Tag.OBJECT)
    if not value:
        raise DecodeError("empty object identifier")

    arcs = [str(value[0] // 40), str(value[0] % 40)]
    current = 0
    for byte in value[1:]:
        if byte & 0x80:
            current += byte & 0x7F
            if (_UINT_MAX >> 3) < current:
                raise DecodeError("Integer overflow")
            current <<= 7
        else:
            current += byte
            arcs.append(str(current))
            current = 0
    return ".".join(arcs), size


def generalized_time_to_string(text: str) -> str:
    """Turn ``YYYYMMDDhhmmss...`` into ``YYYY-MM-DD hh:mm:ss...``.

    Text shorter than 14 characters is returned unchanged.
    """
    if len(text) < 14:
        return text
    return f"{text[0:4]}-{text[4:6]}-{text[6:8]} {text[8:10]}:{text[10:12]}:{text[12:]}"


def _text(value: bytes) -> str:
    return value.decode("latin-1")


def decode_generalized_time(data: Bytes) -> tuple[str, int]:
    """Decode a GeneralizedTime into ``YYYY-MM-DD hh:mm:ss...`` form."""
    value, size = decode_header(data, Tag.GENERALIZEDTIME)
    return generalized_time_to_string(_text(value)), size


def decode_time(data: Bytes) -> tuple[str, int]:
    """Decode a UTCTime or GeneralizedTime.

    A UTCTime year is taken to be in the 21st century.
    """
    tag, value, size = read_tlv(data)
    text = _text(value)
    if tag == Tag.UTCTIME:
        return generalized_time_to_string("20" + text), size
    if tag == Tag.GENERALIZEDTIME:
        return generalized_time_to_string(text), size
    raise DecodeError("cannot decode time")