from xfon.certificate import (
    AttributeTypeAndValue,
    AuthorityKeyIdentifier,
    BasicConstraints,
    Certificate,
    Extension,
    GeneralNameKind,
    GeneralNames,
    TBSCertificate,
)


def test_attribute_ordering_by_type_first():
    a = AttributeTypeAndValue("2.5.4.3", "zzz")
    b = AttributeTypeAndValue("2.5.4.6", "aaa")
    assert a < b
    assert not b < a


def test_attribute_ordering_by_value_when_same_type():
    a = AttributeTypeAndValue("2.5.4.3", "alpha")
    b = AttributeTypeAndValue("2.5.4.3", "beta")
    assert a < b
    assert sorted([b, a]) == [a, b]


def test_attribute_equality_and_set_dedup():
    a = AttributeTypeAndValue("2.5.4.3", "x")
    b = AttributeTypeAndValue("2.5.4.3", "x")
    c = AttributeTypeAndValue("2.5.4.3", "y")
    assert a == b
    assert not a == c
    assert len({a, b, c}) == 2


def test_general_names_empty_by_default():
    assert GeneralNames().is_empty() is True


def test_general_names_with_string_not_empty():
    assert GeneralNames(kind=GeneralNameKind.STR, string_value="host").is_empty() is False


def test_general_names_with_name_not_empty():
    name = [(AttributeTypeAndValue("2.5.4.3", "x"),)]
    assert GeneralNames(kind=GeneralNameKind.NAME, name_value=name).is_empty() is False


def test_general_names_with_other_not_empty():
    assert GeneralNames(kind=GeneralNameKind.OTHER, other_value=b"\x87\x01\x01").is_empty() is False


def test_authority_key_identifier_defaults_empty():
    akid = AuthorityKeyIdentifier()
    assert akid.key_identifier == b""
    assert akid.authority_cert_issuer.is_empty()
    assert akid.authority_cert_serial_number == ""


def test_basic_constraints_default_not_ca():
    constraints = BasicConstraints()
    assert constraints.ca is False
    assert constraints.path_len_constraint == ""


def test_extension_default_not_critical():
    ext = Extension(extn_id="2.5.29.19")
    assert ext.critical is False
    assert ext.extn_value == b""


def test_default_containers_not_shared():
    first = TBSCertificate()
    second = TBSCertificate()
    first.extensions["2.5.29.14"] = Extension(extn_id="2.5.29.14")
    first.subject.append((AttributeTypeAndValue("2.5.4.3", "a"),))
    assert second.extensions == {}
    assert second.subject == []


def test_certificates_compare_by_value():
    first = Certificate(der_bytes=b"\x30\x00")
    second = Certificate(der_bytes=b"\x30\x00")
    assert first == second
    second.tbs_certificate.serial_number = "0x01"
    assert not first == second