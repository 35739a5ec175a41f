"""Reading certificates from PEM or DER files and bundles."""

from __future__ import annotations

import sys
from typing import BinaryIO, Iterable

from xfon.der import DecodeError
from xfon.hierarchy import LinkedCertificate
from xfon.journal import journal
from xfon.util import base64_decode
from xfon.x509 import decode_certificate

_INT_MAX = 0x7FFFFFFF
_PEM_BEGIN = "-----BEGIN CERTIFICATE-----"
_PEM_END = "-----END CERTIFICATE-----"


class LoadError(Exception):
    """Raised when certificates cannot be read."""


def _read_line(stream: BinaryIO) -> str | None:
    raw = stream.readline()
    if not raw:
        return None
    if raw.endswith(b"\n"):
        raw = raw[:-1]
    return raw.decode("latin-1")


def read_pem_certificate(stream: BinaryIO) -> bytes:
    """Read one PEM certificate block and return its DER bytes."""
    if _read_line(stream) != _PEM_BEGIN:
        raise LoadError("get_pem_cert: invalid first line")
    lines = []
    while True:
        line = _read_line(stream)
        if line is None:
            raise LoadError("get_pem_cert: input error")
        if line == _PEM_END:
            break
        lines.append(line)
    try:
        return base64_decode("".join(lines))
    except ValueError as exc:
        raise LoadError(f"get_pem_cert: {exc}") from exc


def read_der_sequence(stream: BinaryIO) -> bytes:
    """Read one DER SEQUENCE, header included, leaving the stream after it."""
    header = stream.read(2)
    if len(header) < 2:
        raise LoadError("Cannot get first 2 bytes of DER SEQUENCE")
    der = bytearray(header)
    if header[1] & 0x80:
        length = 0
        for _ in range(header[1] & 0x7F):
            byte = stream.read(1)
            if not byte:
                raise LoadError("Cannot get next byte of DER SEQUENCE")
            if length > (_INT_MAX >> 8):
                raise LoadError("Length of DER SEQUENCE overflow")
            der += byte
            length = (length << 8) + byte[0]
    else:
        length = header[1]

    contents = stream.read(length)
    if len(contents) < length:
        raise LoadError(f"Cannot get {length} bytes of contents DER SEQUENCE")
    der += contents
    return bytes(der)


def _peek_byte(stream: BinaryIO) -> bytes:
    peek = getattr(stream, "peek", None)
    if peek is not None:
        return peek(1)[:1]
    position = stream.tell()
    byte = stream.read(1)
    stream.seek(position)
    return byte


def load_cert_file(stream: BinaryIO, filename: str) -> list[LinkedCertificate]:
    """Read every certificate of a PEM or DER stream, numbered from 0."""
    journal.debug(filename)
    certificates: list[LinkedCertificate] = []
    index = 0
    while True:
        first = _peek_byte(stream)
        if not first:
            break
        try:
            if first == b"-":
                der = read_pem_certificate(stream)
            elif first == b"\x30":
                der = read_der_sequence(stream)
            else:
                raise LoadError(f"Unknown certificate format: {filename}:{index}")
        except LoadError as exc:
            if str(exc).startswith("Unknown certificate format"):
                raise
            journal.error(str(exc))
            der = b""
        if not der:
            raise LoadError(f"Could not read PEM/DER: {filename}:{index}")

        try:
            cert = decode_certificate(der)
        except DecodeError as exc:
            journal.error(str(exc))
            raise LoadError(f"Cannot decode certificate: {filename}:{index}") from exc

        certificates.append(
            LinkedCertificate(**vars(cert), filename=filename, index_in_file=index)
        )
        index += 1

    if not certificates:
        journal.warning(f"No certificate read from '{filename}'")
    return certificates


def _single_file_index(certificates: list[LinkedCertificate]) -> list[LinkedCertificate]:
    if len(certificates) == 1:
        certificates[0].index_in_file = -1
    return certificates


def load_certificates(paths: Iterable[str] | None = None) -> list[LinkedCertificate]:
    """Load the certificates of every path in order, or of stdin if none.

    A file that holds a single certificate gives it the index -1.
    """
    paths = list(paths or [])
    if not paths:
        return _single_file_index(load_cert_file(sys.stdin.buffer, "(stdin)"))

    certificates: list[LinkedCertificate] = []
    for path in paths:
        try:
            handle = open(path, "rb")
        except OSError as exc:
            raise LoadError(f"Cannot read from '{path}': {exc.strerror}") from exc
        with handle:
            certificates.extend(_single_file_index(load_cert_file(handle, path)))
    return certificates