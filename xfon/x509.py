"""Decoding of X.509 certificates and their extensions from DER."""

from __future__ import annotations

import sys
from typing import Any, Callable, TypeVar

from xfon.certificate import (
    AlgorithmIdentifier,
    AttributeTypeAndValue,
    AuthorityKeyIdentifier,
    BasicConstraints,
    Certificate,
    Extension,
    GeneralNameKind,
    GeneralNames,
    SubjectPublicKeyInfo,
    TBSCertificate,
    Validity,
)
from xfon.der import (
    Bytes,
    DecodeError,
    Tag,
    decode_bit_list,
    decode_bit_string,
    decode_boolean,
    decode_generalized_time,
    decode_header,
    decode_integer,
    decode_object_identifier,
    decode_octet_string,
    decode_time,
    read_tlv,
)
from xfon.journal import journal
from xfon.oids import oid_get_name
from xfon.util import hexlify

T = TypeVar("T")

_STRING_TAGS = frozenset(
    {
        Tag.UTF8STRING,
        Tag.NUMERICSTRING,
        Tag.PRINTABLESTRING,
        Tag.T61STRING,
        Tag.IA5STRING,
        Tag.VISIBLESTRING,
    }
)

_KEY_USAGE_BITS = (
    "digitalSignature",
    "nonRepudiation",
    "keyEncipherment",
    "dataEncipherment",
    "keyAgreement",
    "keyCertSign",
    "cRLSign",
    "encipherOnly",
    "decipherOnly",
)


def _step(label: str, decoder: Callable[[bytes], tuple[T, int]], data: bytes) -> tuple[T, int]:
    """Run ``decoder`` on ``data``, naming ``label`` in any error raised."""
    try:
        return decoder(data)
    except DecodeError as exc:
        raise DecodeError(f"Cannot decode {label}: {exc}") from exc


def decode_algorithm_identifier(data: Bytes) -> tuple[AlgorithmIdentifier, int]:
    """Decode an AlgorithmIdentifier; parameters are kept as raw DER."""
    value, total = decode_header(data, Tag.SEQUENCE)
    algorithm, used = _step("algorithm", decode_object_identifier, value)
    return AlgorithmIdentifier(algorithm, value[used:]), total


def decode_attribute(data: Bytes) -> tuple[AttributeTypeAndValue, int]:
    """Decode an AttributeTypeAndValue.

    String values are decoded as text; any other value is shown as
    ``[der]`` followed by the hex of its encoding.
    """
    sequence, total = decode_header(data, Tag.SEQUENCE)
    oid, used = _step("OID", decode_object_identifier, sequence)
    rest = sequence[used:]
    tag, value, _ = read_tlv(rest)
    if tag in _STRING_TAGS:
        text = value.decode("utf-8", errors="replace")
    else:
        print(f"unsupported attribute value with tag=0x{tag:X}", file=sys.stderr)
        text = "[der]" + hexlify(rest)
    return AttributeTypeAndValue(oid, text), total


def _read_name_into(data: Bytes, name: list) -> int:
    sequence, total = decode_header(data, Tag.SEQUENCE)
    while sequence:
        setof, used = _step("SET OF", lambda d: decode_header(d, Tag.SET), sequence)
        attributes: set[AttributeTypeAndValue] = set()
        while setof:
            attribute, n_bytes = decode_attribute(setof)
            attributes.add(attribute)
            setof = setof[n_bytes:]
        name.append(tuple(sorted(attributes)))
        sequence = sequence[used:]
    return total


def decode_name(data: Bytes) -> tuple[list, int]:
    """Decode a Name into a list of relative distinguished names.

    Each relative distinguished name is a sorted tuple of distinct attributes.
    """
    name: list = []
    total = _read_name_into(data, name)
    return name, total


def decode_validity(data: Bytes) -> tuple[Validity, int]:
    """Decode the notBefore/notAfter pair."""
    value, total = decode_header(data, Tag.SEQUENCE)
    not_before, used = _step("notBefore", decode_time, value)
    not_after, _ = _step("notAfter", decode_time, value[used:])
    return Validity(not_before, not_after), total


def decode_subject_public_key_info(data: Bytes) -> tuple[SubjectPublicKeyInfo, int]:
    """Decode a SubjectPublicKeyInfo; the key keeps its unused-bits byte."""
    value, total = decode_header(data, Tag.SEQUENCE)
    algorithm, used = _step("algorithm", decode_algorithm_identifier, value)
    key, _ = _step("bit string", decode_bit_string, value[used:])
    return SubjectPublicKeyInfo(algorithm, key), total


def decode_basic_constraints(data: Bytes) -> tuple[BasicConstraints, int]:
    """Decode BasicConstraints; ``ca`` defaults to False."""
    sequence, total = decode_header(data, Tag.SEQUENCE)
    constraints = BasicConstraints()
    if sequence and sequence[0] == Tag.BOOLEAN:
        constraints.ca, used = _step("boolean", decode_boolean, sequence)
        sequence = sequence[used:]
    if sequence:
        constraints.path_len_constraint, _ = _step("integer", decode_integer, sequence)
    return constraints, total


def _read_general_names_into(data: Bytes, names: GeneralNames) -> int:
    sequence, total = decode_header(data, Tag.SEQUENCE)
    while sequence:
        tag, field, used = read_tlv(sequence)
        if tag in (0, 3, 5, 7, 8):
            names.kind = GeneralNameKind.OTHER
            names.other_value = sequence[:used]
        elif tag in (1, 2, 6):
            names.kind = GeneralNameKind.STR
            names.string_value = field.decode("latin-1")
        elif tag == 4:
            _step("Name", lambda d: (None, _read_name_into(d, names.name_value)), field)
            names.kind = GeneralNameKind.NAME
        else:
            raise DecodeError(f"invalid tag 0x{tag:x}")
        sequence = sequence[used:]
    return total


def decode_general_names(data: Bytes) -> tuple[GeneralNames, int]:
    """Decode GeneralNames; the last name of the sequence sets the kind."""
    names = GeneralNames()
    total = _read_general_names_into(data, names)
    return names, total


def decode_authority_key_identifier(data: Bytes) -> tuple[AuthorityKeyIdentifier, int]:
    """Decode AuthorityKeyIdentifier; absent fields stay empty."""
    akid = AuthorityKeyIdentifier()
    sequence, total = decode_header(data, Tag.SEQUENCE)
    while sequence:
        tag, field, used = read_tlv(sequence)
        if tag == 0:
            akid.key_identifier = field
        elif tag == 1:
            # give the implicit tag a universal SEQUENCE tag
            retagged = bytes([Tag.SEQUENCE]) + sequence[1:]
            _step(
                "general names",
                lambda d: (None, _read_general_names_into(d, akid.authority_cert_issuer)),
                retagged,
            )
        elif tag == 2:
            retagged = bytes([Tag.INTEGER]) + sequence[1:]
            akid.authority_cert_serial_number, _ = _step("integer", decode_integer, retagged)
        else:
            raise DecodeError(f"invalid tag {tag}")
        sequence = sequence[used:]
    return akid, total


def decode_key_usage(data: Bytes) -> tuple[set[str], int]:
    """Decode the KeyUsage bit string into the names of the bits set."""
    bits, total = _step("bit string", decode_bit_list, data)
    if len(bits) > len(_KEY_USAGE_BITS):
        raise DecodeError(f"Bit string too long: {len(bits)}")
    return {name for name, bit in zip(_KEY_USAGE_BITS, bits) if bit}, total


def _lenient_general_names(data: bytes) -> GeneralNames:
    names = GeneralNames()
    try:
        _read_general_names_into(data, names)
    except DecodeError as exc:
        journal.error(f"Cannot decode general names: {exc}")
    return names


def _decode_value(decoder: Callable[[bytes], tuple[Any, int]]) -> Callable[[bytes], Any]:
    return lambda data: decoder(data)[0]


_EXTENSION_DECODERS: dict[str, Callable[[bytes], Any]] = {
    "id-ce-subjectKeyIdentifier": _decode_value(decode_octet_string),
    "id-ce-keyUsage": _decode_value(decode_key_usage),
    "id-ce-subjectAltName": _lenient_general_names,
    "id-ce-issuerAltName": _lenient_general_names,
    "id-ce-certificateIssuer": _lenient_general_names,
    "id-ce-basicConstraints": _decode_value(decode_basic_constraints),
    "id-ce-invalidityDate": _decode_value(decode_generalized_time),
    "id-ce-authorityKeyIdentifier": _decode_value(decode_authority_key_identifier),
}


def decode_extension(data: Bytes) -> tuple[Extension, int]:
    """Decode one Extension.

    Known extensions get a decoded value; others keep the raw extnValue bytes.
    """
    sequence, total = decode_header(data, Tag.SEQUENCE)
    extn_id, used = _step("extnID", decode_object_identifier, sequence)
    sequence = sequence[used:]
    if not sequence:
        raise DecodeError("Missing field after extn_id")

    critical = False
    if sequence[0] == Tag.BOOLEAN:
        critical, used = _step("critical", decode_boolean, sequence)
        sequence = sequence[used:]

    extn_value, _ = _step("extnValue octet string", decode_octet_string, sequence)

    name = oid_get_name(extn_id)
    journal.debug(f"oid {name}")
    decoder = _EXTENSION_DECODERS.get(name)
    if decoder is not None:
        try:
            value: Any = decoder(extn_value)
        except DecodeError as exc:
            raise DecodeError(f"Cannot decode {name}: {exc}") from exc
    else:
        value = extn_value
    return Extension(extn_id, critical, value), total


def decode_extensions(data: Bytes) -> tuple[dict[str, Extension], int]:
    """Decode Extensions into a dict keyed by OID, ordered by OID string."""
    sequence, total = decode_header(data, Tag.SEQUENCE)
    items: dict[str, Extension] = {}
    while sequence:
        extension, used = _step("extension", decode_extension, sequence)
        items[extension.extn_id] = extension
        sequence = sequence[used:]
    return dict(sorted(items.items())), total


def decode_tbs_certificate(data: Bytes) -> tuple[TBSCertificate, int]:
    """Decode a TBSCertificate; the explicit version field is required."""
    value, total = decode_header(data, Tag.SEQUENCE)
    tbs = TBSCertificate()

    version, used = _step("version explicit tag", lambda d: decode_header(d, 0), value)
    tbs.version, _ = _step("version", decode_integer, version)
    value = value[used:]

    tbs.serial_number, used = _step("serial number", decode_integer, value)
    value = value[used:]
    tbs.signature, used = _step("signature", decode_algorithm_identifier, value)
    value = value[used:]
    tbs.issuer, used = _step("issuer", decode_name, value)
    value = value[used:]
    tbs.validity, used = _step("validity", decode_validity, value)
    value = value[used:]
    tbs.subject, used = _step("subject", decode_name, value)
    value = value[used:]
    tbs.subject_public_key_info, used = _step(
        "subject_public_key_info", decode_subject_public_key_info, value
    )
    value = value[used:]

    while value:
        tag, payload, used = read_tlv(value)
        if tag == 1:
            tbs.issuer_unique_id = payload
        elif tag == 2:
            tbs.subject_unique_id = payload
        elif tag == 3:
            tbs.extensions, _ = _step("extensions", decode_extensions, payload)
        else:
            raise DecodeError(f"cannot decode optional fields: tag=0x{tag:x}")
        value = value[used:]

    return tbs, total


def decode_certificate(der_bytes: Bytes) -> Certificate:
    """Decode a DER encoded certificate.

    Raises DecodeError when it cannot be decoded. Bytes left over inside the
    outer SEQUENCE are reported in the journal but are not an error.
    """
    raw = bytes(der_bytes)
    value, _ = decode_header(raw, Tag.SEQUENCE)

    tbs, used = _step("tbs_certificate", decode_tbs_certificate, value)
    value = value[used:]
    signature_algorithm, used = _step("signature_algorithm", decode_algorithm_identifier, value)
    value = value[used:]
    signature_value, used = _step("signature_value", decode_bit_string, value)
    value = value[used:]

    if value:
        journal.error("warning: trailing garbage bytes not decoded (too many bytes)")

    return Certificate(
        tbs_certificate=tbs,
        signature_algorithm=signature_algorithm,
        signature_value=signature_value,
        der_bytes=raw,
    )