"""Names of the object identifiers the tool knows about."""

from __future__ import annotations

from typing import NamedTuple


class _Oid(NamedTuple):
    oid: str
    long_name: str
    short_name: str | None


_OID_NAMES: tuple[_Oid, ...] = (
    _Oid("0.9.2342.19200300.100.1.1", "userid", "uid"),
    _Oid("0.9.2342.19200300.100.1.25", "id-domainComponent", "dc"),
    _Oid("1.2.840.10045.2.1", "ecPublicKey", None),
    _Oid("1.2.840.10045.4.3.2", "ecdsa-with-SHA256", None),
    _Oid("1.2.840.10045.4.3.3", "ecdsa-with-SHA384", None),
    _Oid("1.2.840.113549.1.1.1", "rsaEncryption", None),
    _Oid("1.2.840.113549.1.1.5", "sha1-with-rsa-signature", None),
    _Oid("1.2.840.113549.1.1.11", "sha256WithRSAEncryption", None),
    _Oid("1.2.840.113549.1.1.12", "sha384WithRSAEncryption", None),
    _Oid("1.2.840.113549.1.1.13", "sha512WithRSAEncryption", None),
    _Oid("1.2.840.113549.1.9.1", "id-emailAddress", "email"),
    _Oid("2.5.4.3", "id-at-commonName", "cn"),
    _Oid("2.5.4.4", "id-at-surname", "sn"),
    _Oid("2.5.4.5", "id-at-serialNumber", "serial"),
    _Oid("2.5.4.6", "id-at-countryName", "c"),
    _Oid("2.5.4.7", "id-at-localityName", "l"),
    _Oid("2.5.4.8", "id-at-stateOrProvinceName", "st"),
    _Oid("2.5.4.10", "id-at-organizationName", "o"),
    _Oid("2.5.4.11", "id-at-organizationalUnitName", "ou"),
    _Oid("2.5.4.12", "id-at-title", "title"),
    _Oid("2.5.4.41", "id-at-name", "name"),
    _Oid("2.5.4.42", "id-at-givenName", "givenName"),
    _Oid("2.5.4.43", "id-at-initials", "initials"),
    _Oid("2.5.4.44", "id-at-generationQualifier", "generationQualifier"),
    _Oid("2.5.4.46", "id-at-dnQualifier", "dnQualifier"),
    _Oid("2.5.4.65", "id-at-pseudonym", "pseudonym"),
    _Oid("2.5.29.14", "id-ce-subjectKeyIdentifier", "subjectKeyIdentifier"),
    _Oid("2.5.29.15", "id-ce-keyUsage", "keyUsage"),
    _Oid("2.5.29.16", "id-ce-privateKeyUsagePeriod", "privateKeyUsagePeriod"),
    _Oid("2.5.29.17", "id-ce-subjectAltName", "subjectAltName"),
    _Oid("2.5.29.18", "id-ce-issuerAltName", "issuerAltName"),
    _Oid("2.5.29.19", "id-ce-basicConstraints", "basicConstraints"),
    _Oid("2.5.29.20", "id-ce-cRLNumber", "cRLNumber"),
    _Oid("2.5.29.21", "id-ce-cRLReasons", "cRLReasons"),
    _Oid("2.5.29.22", "id-ce-instructionCode", "instructionCode"),
    _Oid("2.5.29.23", "id-ce-holdInstructionCode", "holdInstructionCode"),
    _Oid("2.5.29.24", "id-ce-invalidityDate", "invalidityDate"),
    _Oid("2.5.29.27", "id-ce-deltaCRLIndicator", "deltaCRLIndicator"),
    _Oid("2.5.29.28", "id-ce-issuingDistributionPoint", "issuingDistributionPoint"),
    _Oid("2.5.29.29", "id-ce-certificateIssuer", "certificateIssuer"),
    _Oid("2.5.29.30", "id-ce-nameConstraints", "nameConstraints"),
    _Oid("2.5.29.31", "id-ce-cRLDistributionPoints", "cRLDistributionPoints"),
    _Oid("2.5.29.32", "id-ce-certificatePolicies", "certificatePolicies"),
    _Oid("2.5.29.33", "id-ce-policyMappings", "policyMappings"),
    _Oid("2.5.29.35", "id-ce-authorityKeyIdentifier", "authorityKeyIdentifier"),
    _Oid("2.5.29.36", "id-ce-policyConstraints", "policyConstraints"),
    _Oid("2.5.29.37", "id-ce-extKeyUsage", "extKeyUsage"),
)


def oid_get_name(oid: str, shortname: bool = False) -> str:
    """Return the name of a numeric OID, or the OID itself if unknown.

    With ``shortname`` the short name is preferred when there is one.
    """
    for entry in _OID_NAMES:
        if entry.oid == oid:
            if shortname and entry.short_name:
                return entry.short_name
            return entry.long_name
    return oid


def oid_get_id(name: str) -> str:
    """Return the numeric OID for a long name, short name or numeric OID.

    Returns an empty string when nothing matches.
    """
    for entry in _OID_NAMES:
        if name in (entry.long_name, entry.short_name, entry.oid):
            return entry.oid
    return ""