"""Text rendering of certificates: property listings and trees."""

from __future__ import annotations

import sys
from typing import Any, Callable, Iterable, Iterator, Sequence, TextIO

from xfon.certificate import (
    AlgorithmIdentifier,
    AuthorityKeyIdentifier,
    BasicConstraints,
    Extension,
    GeneralNameKind,
    GeneralNames,
)
from xfon.hierarchy import LinkedCertificate
from xfon.journal import journal
from xfon.oids import oid_get_id, oid_get_name
from xfon.util import hexlify

_RULE = "─" * 65


def name_to_string(name: Iterable[Iterable[Any]]) -> str:
    """Render a Name as ``short:value`` pairs separated by commas."""
    return ", ".join(
        f"{oid_get_name(attribute.type, True)}:{attribute.value}"
        for relative_dn in name
        for attribute in relative_dn
    )


def bool_to_string(value: Any) -> str:
    """Render the truth of ``value`` as ``true`` or ``false``."""
    return str(bool(value)).lower()


def basic_constraints_to_string(constraints: BasicConstraints) -> str:
    result = "cA:" + bool_to_string(constraints.ca)
    if constraints.path_len_constraint:
        result += ", pathLenConstraint: " + constraints.path_len_constraint
    return result


def algorithm_to_string(algorithm: AlgorithmIdentifier) -> str:
    """Render the algorithm name, followed by the hex of any parameters."""
    result = oid_get_name(algorithm.algorithm)
    if algorithm.parameters:
        result += f" ({hexlify(algorithm.parameters)})"
    return result


def general_names_to_string(names: GeneralNames) -> str:
    if names.kind is GeneralNameKind.STR:
        return names.string_value
    if names.kind is GeneralNameKind.NAME:
        return name_to_string(names.name_value)
    if names.kind is GeneralNameKind.OTHER:
        return hexlify(names.other_value)
    journal.error(f"Unexpected type of GeneralNames: {names.kind}")
    return "(error)"


def authority_key_identifier_to_string(akid: AuthorityKeyIdentifier) -> str:
    """Render the fields present, separated by commas."""
    parts = []
    if akid.key_identifier:
        parts.append(hexlify(akid.key_identifier))
    if not akid.authority_cert_issuer.is_empty():
        parts.append(general_names_to_string(akid.authority_cert_issuer))
    if akid.authority_cert_serial_number:
        parts.append("serial:" + akid.authority_cert_serial_number)
    return ", ".join(parts)


_EXTENSION_RENDERERS: dict[str, Callable[[Any], str]] = {
    "id-ce-keyUsage": lambda usage: "|".join(sorted(usage)),
    "id-ce-subjectAltName": general_names_to_string,
    "id-ce-issuerAltName": general_names_to_string,
    "id-ce-certificateIssuer": general_names_to_string,
    "id-ce-basicConstraints": basic_constraints_to_string,
    "id-ce-invalidityDate": str,
    "id-ce-authorityKeyIdentifier": authority_key_identifier_to_string,
}


def extension_to_string(extension: Extension) -> str:
    """Render an extension value; undecoded values are shown in hex."""
    renderer = _EXTENSION_RENDERERS.get(oid_get_name(extension.extn_id), hexlify)
    return renderer(extension.extn_value)


def rich_node(cert: LinkedCertificate, lineage: Sequence[bool]) -> str:
    """Render a certificate as a boxed node of a detailed tree.

    ``lineage`` holds, for each ancestor level, whether more siblings follow.
    """
    journal.debug(f"indent_level={len(lineage)}")
    if lineage:
        base = "".join("   │  " if more else "      " for more in lineage[:-1])
        if lineage[-1]:
            first, second, last = base + "   ├──┤ ", base + "   │  │ ", base + "   │  └─"
        else:
            first, second, last = base + "   └──┤ ", base + "      │ ", base + "      └─"
    else:
        first, second, last = "│ ", "│ ", "└─"

    tbs = cert.tbs_certificate
    closing = "─┬" + _RULE if cert.children else "──" + _RULE
    return (
        f"{first}{name_to_string(tbs.subject)}\n"
        f"{second}{tbs.validity.not_before} .. {tbs.validity.not_after}\n"
        f"{second}{cert.file_location()}\n"
        f"{last}{closing}\n"
    )


def minimal_node(cert: LinkedCertificate, lineage: Sequence[bool]) -> str:
    """Render a certificate as one line of a compact tree."""
    journal.debug(f"indent_level={len(lineage)}")
    indent = ""
    if lineage:
        indent = "".join("│   " if more else "    " for more in lineage[:-1])
        indent += "├── " if lineage[-1] else "└── "
    return f"{indent}{name_to_string(cert.tbs_certificate.subject)}({cert.file_location()})\n"


def _walk(cert: LinkedCertificate, lineage: list[bool], minimal: bool) -> Iterator[str]:
    yield minimal_node(cert, lineage) if minimal else rich_node(cert, lineage)
    last = len(cert.children) - 1
    for position, child in enumerate(cert.children):
        yield from _walk(child, lineage + [position < last], minimal)


def format_tree(certs: Iterable[LinkedCertificate], minimal: bool = False) -> str:
    """Render the descendants of every certificate that has no parent."""
    return "".join(
        node
        for cert in certs
        if not cert.parents
        for node in _walk(cert, [], minimal)
    )


def print_tree(
    certs: Iterable[LinkedCertificate], minimal: bool = False, out: TextIO | None = None
) -> None:
    (out if out is not None else sys.stdout).write(format_tree(certs, minimal))


def format_cert(cert: LinkedCertificate, single: bool) -> str:
    """Render every property of a certificate, one ``name: value`` per line.

    Unless ``single``, each line starts with the certificate's location.
    """
    prefix = "" if single else cert.file_location() + ": "
    tbs = cert.tbs_certificate
    properties: list[tuple[str, str]] = [
        ("subject", name_to_string(tbs.subject)),
        ("version", tbs.version),
        ("serial", tbs.serial_number),
        ("tbssignaturealgo", algorithm_to_string(tbs.signature)),
        ("issuer", name_to_string(tbs.issuer)),
        ("notbefore", tbs.validity.not_before),
        ("notafter", tbs.validity.not_after),
        ("pubkeyalgo", algorithm_to_string(tbs.subject_public_key_info.algorithm)),
        ("pubkeybytes", hexlify(tbs.subject_public_key_info.subject_public_key)),
    ]
    if tbs.issuer_unique_id:
        properties.append(("pubkeybytes", hexlify(tbs.issuer_unique_id)))
    if tbs.subject_unique_id:
        properties.append(("pubkeybytes", hexlify(tbs.subject_unique_id)))
    for oid, extension in tbs.extensions.items():
        properties.append((oid_get_name(oid, True), extension_to_string(extension)))
    properties.append(("signaturealgo", algorithm_to_string(cert.signature_algorithm)))
    properties.append(("signaturebytes", hexlify(cert.signature_value)))
    return "".join(f"{prefix}{name}: {value}\n" for name, value in properties)


def print_cert(cert: LinkedCertificate, single: bool, out: TextIO | None = None) -> None:
    (out if out is not None else sys.stdout).write(format_cert(cert, single))


__all__ = [
    "name_to_string",
    "bool_to_string",
    "basic_constraints_to_string",
    "algorithm_to_string",
    "general_names_to_string",
    "authority_key_identifier_to_string",
    "extension_to_string",
    "rich_node",
    "minimal_node",
    "format_tree",
    "print_tree",
    "format_cert",
    "print_cert",
    "oid_get_id",
]