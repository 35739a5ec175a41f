"""Data model of a decoded X.509 certificate."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


@dataclass(frozen=True, order=True)
class AttributeTypeAndValue:
    """One attribute of a distinguished name; ordered by type then value."""

    type: str
    value: str


# A Name is a list of relative distinguished names; each one is a tuple of
# distinct attributes kept in sorted order.
Name = list


class GeneralNameKind(Enum):
    STR = "str"
    NAME = "name"
    OTHER = "other"


@dataclass
class GeneralNames:
    """The last decoded GeneralName of a GeneralNames sequence."""

    kind: GeneralNameKind = GeneralNameKind.STR
    string_value: str = ""
    name_value: list = field(default_factory=list)
    other_value: bytes = b""

    def is_empty(self) -> bool:
        return not self.string_value and not self.name_value and not self.other_value


@dataclass
class AuthorityKeyIdentifier:
    """Fields are empty when absent from the extension."""

    key_identifier: bytes = b""
    authority_cert_issuer: GeneralNames = field(default_factory=GeneralNames)
    authority_cert_serial_number: str = ""


@dataclass
class BasicConstraints:
    ca: bool = False
    path_len_constraint: str = ""


@dataclass
class Extension:
    extn_id: str = ""
    critical: bool = False
    extn_value: Any = b""


@dataclass
class AlgorithmIdentifier:
    algorithm: str = ""
    parameters: bytes = b""


@dataclass
class Validity:
    """Times in the form YYYY-MM-DD hh:mm:ss followed by any remainder."""

    not_before: str = ""
    not_after: str = ""


@dataclass
class SubjectPublicKeyInfo:
    algorithm: AlgorithmIdentifier = field(default_factory=AlgorithmIdentifier)
    subject_public_key: bytes = b""


@dataclass
class TBSCertificate:
    version: str = ""
    serial_number: str = ""
    signature: AlgorithmIdentifier = field(default_factory=AlgorithmIdentifier)
    issuer: list = field(default_factory=list)
    validity: Validity = field(default_factory=Validity)
    subject: list = field(default_factory=list)
    subject_public_key_info: SubjectPublicKeyInfo = field(default_factory=SubjectPublicKeyInfo)
    issuer_unique_id: bytes = b""
    subject_unique_id: bytes = b""
    extensions: dict[str, Extension] = field(default_factory=dict)


@dataclass
class Certificate:
    """A decoded certificate together with its full DER encoding."""

    tbs_certificate: TBSCertificate = field(default_factory=TBSCertificate)
    signature_algorithm: AlgorithmIdentifier = field(default_factory=AlgorithmIdentifier)
    signature_value: bytes = b""
    der_bytes: bytes = b""