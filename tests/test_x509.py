import datetime

import pytest
from cryptography import x509 as cx509
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import ec
from cryptography.x509.oid import NameOID

from xfon.certificate import (
    AlgorithmIdentifier,
    AttributeTypeAndValue,
    BasicConstraints,
    GeneralNameKind,
    GeneralNames,
)
from xfon.der import DecodeError, decode_header, decode_object_identifier
from xfon.journal import Level, journal
from xfon.oids import oid_get_id
from xfon.x509 import (
    decode_algorithm_identifier,
    decode_attribute,
    decode_authority_key_identifier,
    decode_basic_constraints,
    decode_certificate,
    decode_extension,
    decode_extensions,
    decode_general_names,
    decode_key_usage,
    decode_name,
    decode_subject_public_key_info,
    decode_tbs_certificate,
    decode_validity,
)


def _der_length(length):
    if length < 0x80:
        return bytes([length])
    body = length.to_bytes((length.bit_length() + 7) // 8, "big")
    return bytes([0x80 | len(body)]) + body


def _tlv(tag, payload):
    return bytes([tag]) + _der_length(len(payload)) + payload


@pytest.fixture(scope="module")
def generated():
    key = ec.generate_private_key(ec.SECP256R1())
    public_key = key.public_key()
    name = cx509.Name(
        [
            cx509.NameAttribute(NameOID.COUNTRY_NAME, "YY"),
            cx509.NameAttribute(NameOID.COMMON_NAME, "Root YY"),
        ]
    )
    builder = (
        cx509.CertificateBuilder()
        .subject_name(name)
        .issuer_name(name)
        .public_key(public_key)
        .serial_number(0x1234)
        .not_valid_before(datetime.datetime(2024, 1, 2, 3, 4, 5, tzinfo=datetime.timezone.utc))
        .not_valid_after(datetime.datetime(2051, 6, 7, 8, 9, 10, tzinfo=datetime.timezone.utc))
        .add_extension(cx509.BasicConstraints(ca=True, path_length=1), critical=True)
        .add_extension(cx509.SubjectKeyIdentifier.from_public_key(public_key), critical=False)
        .add_extension(
            cx509.AuthorityKeyIdentifier.from_issuer_public_key(public_key), critical=False
        )
        .add_extension(
            cx509.KeyUsage(
                digital_signature=True,
                content_commitment=False,
                key_encipherment=False,
                data_encipherment=False,
                key_agreement=False,
                key_cert_sign=True,
                crl_sign=True,
                encipher_only=False,
                decipher_only=False,
            ),
            critical=True,
        )
        .add_extension(
            cx509.SubjectAlternativeName([cx509.DNSName("ca.example.com")]), critical=False
        )
    )
    cert = builder.sign(key, hashes.SHA256())
    return cert, public_key


def test_certificate_fields(generated):
    cert, public_key = generated
    der = cert.public_bytes(serialization.Encoding.DER)
    decoded = decode_certificate(der)
    tbs = decoded.tbs_certificate

    assert decoded.der_bytes == der
    assert tbs.version == "0x02"
    assert tbs.serial_number == "0x1234"
    assert tbs.subject == [
        (AttributeTypeAndValue(oid_get_id("c"), "YY"),),
        (AttributeTypeAndValue(oid_get_id("cn"), "Root YY"),),
    ]
    assert tbs.issuer == tbs.subject
    assert tbs.signature == AlgorithmIdentifier(oid_get_id("ecdsa-with-SHA256"), b"")
    assert decoded.signature_algorithm == tbs.signature
    assert decoded.signature_value == b"\x00" + cert.signature


def test_certificate_validity(generated):
    cert, _ = generated
    tbs = decode_certificate(cert.public_bytes(serialization.Encoding.DER)).tbs_certificate
    assert tbs.validity.not_before == "2024-01-02 03:04:05Z"
    assert tbs.validity.not_after == "2051-06-07 08:09:10Z"


def test_certificate_public_key(generated):
    cert, public_key = generated
    tbs = decode_certificate(cert.public_bytes(serialization.Encoding.DER)).tbs_certificate
    spki = tbs.subject_public_key_info
    point = public_key.public_bytes(
        serialization.Encoding.X962, serialization.PublicFormat.UncompressedPoint
    )
    assert spki.subject_public_key == b"\x00" + point
    assert spki.algorithm.algorithm == oid_get_id("ecPublicKey")
    curve, used = decode_object_identifier(spki.algorithm.parameters)
    assert curve == "1.2.840.10045.3.1.7"
    assert used == len(spki.algorithm.parameters)


def test_certificate_extensions(generated):
    cert, public_key = generated
    tbs = decode_certificate(cert.public_bytes(serialization.Encoding.DER)).tbs_certificate
    extensions = tbs.extensions
    ski = cx509.SubjectKeyIdentifier.from_public_key(public_key).digest

    assert list(extensions) == sorted(extensions)
    bc = extensions[oid_get_id("basicConstraints")]
    assert bc.critical is True
    assert bc.extn_value == BasicConstraints(ca=True, path_len_constraint="0x01")
    assert extensions[oid_get_id("subjectKeyIdentifier")].extn_value == ski
    akid = extensions[oid_get_id("authorityKeyIdentifier")].extn_value
    assert akid.key_identifier == ski
    assert akid.authority_cert_serial_number == ""
    assert akid.authority_cert_issuer.is_empty()
    ku = extensions[oid_get_id("keyUsage")]
    assert ku.critical is True
    assert ku.extn_value == {"digitalSignature", "keyCertSign", "cRLSign"}
    san = extensions[oid_get_id("subjectAltName")]
    assert san.critical is False
    assert san.extn_value == GeneralNames(
        kind=GeneralNameKind.STR, string_value="ca.example.com"
    )


def test_tbs_certificate_consumes_whole_encoding(generated):
    cert, _ = generated
    tbs_bytes = cert.tbs_certificate_bytes
    tbs, used = decode_tbs_certificate(tbs_bytes)
    assert used == len(tbs_bytes)
    assert tbs.serial_number == "0x1234"


def test_validity_and_spki_sizes(generated):
    cert, _ = generated
    tbs_content, _ = decode_header(cert.tbs_certificate_bytes, 0x10)
    spki_der = cert.public_key().public_bytes(
        serialization.Encoding.DER, serialization.PublicFormat.SubjectPublicKeyInfo
    )
    spki, used = decode_subject_public_key_info(spki_der + b"\xff")
    assert used == len(spki_der)
    assert spki.subject_public_key[0] == 0
    assert spki_der in tbs_content


def test_decode_validity_handcrafted():
    data = _tlv(0x30, _tlv(0x17, b"240102030405Z") + _tlv(0x18, b"20510607080910Z"))
    validity, used = decode_validity(data)
    assert used == len(data)
    assert validity.not_before == "2024-01-02 03:04:05Z"
    assert validity.not_after == "2051-06-07 08:09:10Z"


def test_decode_validity_bad_time_tag():
    data = _tlv(0x30, _tlv(0x04, b"240102030405Z") + _tlv(0x18, b"20510607080910Z"))
    with pytest.raises(DecodeError):
        decode_validity(data)


def test_trailing_bytes_inside_certificate_are_reported(generated):
    cert, _ = generated
    der = cert.public_bytes(serialization.Encoding.DER)
    content, _ = decode_header(der, 0x10)
    padded = _tlv(0x30, content + b"\x05\x00")
    decoded = decode_certificate(padded)
    assert decoded.der_bytes == padded
    assert journal.lines[-1] == (
        Level.ERR,
        "warning: trailing garbage bytes not decoded (too many bytes)",
    )


def test_certificate_bytes_after_outer_sequence_are_kept(generated):
    cert, _ = generated
    der = cert.public_bytes(serialization.Encoding.DER)
    decoded = decode_certificate(der + b"\x00\x00")
    assert decoded.der_bytes == der + b"\x00\x00"
    assert decoded.tbs_certificate.serial_number == "0x1234"


@pytest.mark.parametrize("cut", [0, 1, 10, 100])
def test_truncated_certificate_raises(generated, cut):
    cert, _ = generated
    der = cert.public_bytes(serialization.Encoding.DER)
    with pytest.raises(DecodeError):
        decode_certificate(der[:cut])


def test_certificate_with_wrong_outer_tag_raises(generated):
    cert, _ = generated
    der = bytearray(cert.public_bytes(serialization.Encoding.DER))
    der[0] = 0x31
    with pytest.raises(DecodeError):
        decode_certificate(bytes(der))


def test_algorithm_identifier_keeps_parameters():
    data = bytes.fromhex("300706032A03040500")
    algorithm, used = decode_algorithm_identifier(data)
    assert algorithm == AlgorithmIdentifier("1.2.3.4", b"\x05\x00")
    assert used == len(data)


def test_attribute_with_unsupported_value():
    data = bytes.fromhex("3008060355040301 01FF".replace(" ", ""))
    attribute, used = decode_attribute(data)
    assert attribute.type == oid_get_id("cn")
    assert attribute.value == "[der]0101FF"
    assert used == len(data)


def test_name_sorts_attributes_within_a_set():
    cn = _tlv(0x30, bytes.fromhex("0603550403") + _tlv(0x0C, b"Root"))
    country = _tlv(0x30, bytes.fromhex("0603550406") + _tlv(0x13, b"YY"))
    data = _tlv(0x30, _tlv(0x31, country + cn))
    name, used = decode_name(data)
    assert used == len(data)
    assert name == [
        (
            AttributeTypeAndValue(oid_get_id("cn"), "Root"),
            AttributeTypeAndValue(oid_get_id("c"), "YY"),
        )
    ]


def test_name_drops_duplicate_attributes():
    cn = _tlv(0x30, bytes.fromhex("0603550403") + _tlv(0x0C, b"Root"))
    name, _ = decode_name(_tlv(0x30, _tlv(0x31, cn + cn)))
    assert name == [(AttributeTypeAndValue(oid_get_id("cn"), "Root"),)]


def test_name_requires_set():
    cn = _tlv(0x30, bytes.fromhex("0603550403") + _tlv(0x0C, b"Root"))
    with pytest.raises(DecodeError):
        decode_name(_tlv(0x30, _tlv(0x30, cn)))


def test_basic_constraints_defaults():
    constraints, used = decode_basic_constraints(b"\x30\x00")
    assert constraints == BasicConstraints(ca=False, path_len_constraint="")
    assert used == 2


def test_basic_constraints_ca_only():
    constraints, _ = decode_basic_constraints(bytes.fromhex("30030101FF"))
    assert constraints == BasicConstraints(ca=True, path_len_constraint="")


def test_key_usage_single_bit():
    usage, used = decode_key_usage(bytes.fromhex("03020780"))
    assert usage == {"digitalSignature"}
    assert used == 4


def test_key_usage_too_long():
    with pytest.raises(DecodeError):
        decode_key_usage(bytes.fromhex("030300FFFF"))


def test_general_names_invalid_tag():
    with pytest.raises(DecodeError):
        decode_general_names(bytes.fromhex("30028900"))


def test_general_names_last_one_wins():
    data = _tlv(0x30, _tlv(0x82, b"a.example.com") + _tlv(0x82, b"b.example.com"))
    names, used = decode_general_names(data)
    assert used == len(data)
    assert names.kind is GeneralNameKind.STR
    assert names.string_value == "b.example.com"


def test_general_names_other_keeps_encoding():
    field = _tlv(0x87, b"\x7f\x00\x00\x01")
    names, _ = decode_general_names(_tlv(0x30, field))
    assert names.kind is GeneralNameKind.OTHER
    assert names.other_value == field


def test_authority_key_identifier_short_example():
    data = bytes.fromhex("30168014EE5678837CBF5D942D231788D395370BE54723CC")
    akid, used = decode_authority_key_identifier(data)
    assert used == len(data)
    assert akid.key_identifier == bytes.fromhex("EE5678837CBF5D942D231788D395370BE54723CC")
    assert akid.authority_cert_serial_number == ""
    assert akid.authority_cert_issuer.is_empty()


def test_authority_key_identifier_full_example():
    data = bytes.fromhex(
        "308187"
        "8014BF5FB7D1CEDD1F86F45B55ACDCD710C20EA988E7"
        "A16CA46A3068"
        "310B3009060355040613025553"
        "3125"
        "3023060355040A131C537461726669656C6420546563686E6F6C6F676965732C20496E632E"
        "3132"
        "3030060355040B1329537461726669656C6420436C61737320322043657274696669636174696F6E"
        "20417574686F72697479"
        "820100"
    )
    akid, used = decode_authority_key_identifier(data)
    assert used == len(data)
    assert akid.key_identifier == bytes.fromhex("BF5FB7D1CEDD1F86F45B55ACDCD710C20EA988E7")
    assert akid.authority_cert_serial_number == "0x00"
    assert akid.authority_cert_issuer.kind is GeneralNameKind.NAME
    assert akid.authority_cert_issuer.name_value == [
        (AttributeTypeAndValue(oid_get_id("c"), "US"),),
        (AttributeTypeAndValue(oid_get_id("o"), "Starfield Technologies, Inc."),),
        (
            AttributeTypeAndValue(
                oid_get_id("ou"), "Starfield Class 2 Certification Authority"
            ),
        ),
    ]


def test_authority_key_identifier_invalid_tag():
    with pytest.raises(DecodeError):
        decode_authority_key_identifier(bytes.fromhex("3003830100"))


def test_unknown_extension_keeps_raw_value():
    data = bytes.fromhex("300A06032A03040403010203")
    extension, used = decode_extension(data)
    assert used == len(data)
    assert extension.extn_id == "1.2.3.4"
    assert extension.critical is False
    assert extension.extn_value == b"\x01\x02\x03"


def test_critical_extension():
    extension, _ = decode_extension(bytes.fromhex("300D06032A03040101FF0403010203"))
    assert extension.critical is True
    assert extension.extn_value == b"\x01\x02\x03"


def test_extension_missing_value():
    with pytest.raises(DecodeError):
        decode_extension(bytes.fromhex("300506032A0304"))


def test_broken_subject_alt_name_is_tolerated():
    data = bytes.fromhex("300B0603551D110404") + bytes.fromhex("30028900")
    extension, used = decode_extension(data)
    assert used == len(data)
    assert extension.extn_id == oid_get_id("subjectAltName")
    assert extension.extn_value.is_empty()


def test_broken_basic_constraints_raises():
    inner = bytes.fromhex("3003010101")
    data = _tlv(0x30, bytes.fromhex("0603551D13") + _tlv(0x04, inner[:-1] + b"\x01\x02"))
    with pytest.raises(DecodeError):
        decode_extension(data)


def test_invalidity_date_extension():
    value = _tlv(0x18, b"20240102030405Z")
    data = _tlv(0x30, bytes.fromhex("0603551D18") + _tlv(0x04, value))
    extension, _ = decode_extension(data)
    assert extension.extn_id == oid_get_id("invalidityDate")
    assert extension.extn_value == "2024-01-02 03:04:05Z"


def test_extensions_are_ordered_by_oid():
    first = bytes.fromhex("300A06032A03040403010203")
    second = bytes.fromhex("300A06032A03000403040506")
    data = _tlv(0x30, first + second)
    extensions, used = decode_extensions(data)
    assert used == len(data)
    assert list(extensions) == ["1.2.3.0", "1.2.3.4"]
    assert extensions["1.2.3.0"].extn_value == b"\x04\x05\x06"


def test_extensions_later_duplicate_wins():
    first = bytes.fromhex("300A06032A03040403010203")
    second = bytes.fromhex("300A06032A03040403040506")
    extensions, _ = decode_extensions(_tlv(0x30, first + second))
    assert list(extensions) == ["1.2.3.4"]
    assert extensions["1.2.3.4"].extn_value == b"\x04\x05\x06"