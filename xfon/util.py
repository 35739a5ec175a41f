"""Hex formatting and base64 decoding of byte strings."""

from __future__ import annotations

_BASE64_ALPHABET = (
    "ABCDEFGHIJKLMNOPQRSTUVWXYZ"
    "abcdefghijklmnopqrstuvwxyz"
    "0123456789+/"
)
_BASE64_CODES = {char: code for code, char in enumerate(_BASE64_ALPHABET)}


def hexlify(data: bytes | bytearray | memoryview | str, limit: int = 0) -> str:
    """Return the upper-case hex form of ``data``.

    When ``limit`` is positive and the data is longer than ``limit`` bytes,
    only the first ``limit`` bytes are shown, followed by ``...``.
    """
    if isinstance(data, str):
        data = data.encode("utf-8")
    raw = bytes(data)
    if limit > 0 and len(raw) > limit:
        return raw[:limit].hex().upper() + "..."
    return raw.hex().upper()


def base64_decode(text: str) -> bytes:
    """Decode base64 text using the RFC 4648 alphabet.

    Decoding stops at the padding. Raises ValueError on a character outside
    the alphabet or on misplaced padding.
    """
    triplet = 0
    result = bytearray()
    for position, char in enumerate(text):
        if char == "=":
            phase = position % 4
            if phase == 0:
                raise ValueError("invalid character '=' aligned on 4")
            if phase == 1:
                raise ValueError("invalid character '=' aligned on 4 + 1")
            if phase == 2:
                if position + 1 >= len(text) or text[position + 1] != "=":
                    raise ValueError("invalid character '=' followed by other")
                # two base64 characters encode one byte
                result.append((triplet >> 4) & 0xFF)
            else:
                # three base64 characters encode two bytes
                result.append((triplet >> 10) & 0xFF)
                result.append((triplet >> 2) & 0xFF)
            return bytes(result)

        code = _BASE64_CODES.get(char)
        if code is None:
            raise ValueError(f"invalid base64 character: {char!r}")

        triplet = (triplet << 6) | code
        if position % 4 == 3:
            result.append((triplet >> 16) & 0xFF)
            result.append((triplet >> 8) & 0xFF)
            result.append(triplet & 0xFF)
            triplet = 0
    return bytes(result)