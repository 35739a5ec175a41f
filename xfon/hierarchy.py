"""Parent/child links between certificates."""

from __future__ import annotations

from dataclasses import dataclass, field
from itertools import combinations

from xfon.certificate import Certificate
from xfon.journal import journal
from xfon.oids import oid_get_id
from xfon.verify import verify_signature


@dataclass(eq=False)
class LinkedCertificate(Certificate):
    """A certificate with where it came from and its links to others.

    ``index_in_file`` is -1 when its file holds a single certificate.
    """

    filename: str = ""
    index_in_file: int = -1
    parents: list[LinkedCertificate] = field(default_factory=list, repr=False)
    children: list[LinkedCertificate] = field(default_factory=list, repr=False)

    def file_location(self) -> str:
        if self.index_in_file < 0:
            return self.filename
        return f"{self.filename}:{self.index_in_file}"


def is_issuer(issuer: LinkedCertificate, child: LinkedCertificate) -> bool:
    """Tell whether ``issuer`` issued ``child``.

    Names must match, the key identifiers must agree when the child names
    one, and the signature must verify.
    """
    if issuer.tbs_certificate.subject != child.tbs_certificate.issuer:
        return False

    akid_ext = child.tbs_certificate.extensions.get(oid_get_id("id-ce-authorityKeyIdentifier"))
    if akid_ext is not None:
        akid = akid_ext.extn_value
        if akid.key_identifier:
            skid_ext = issuer.tbs_certificate.extensions.get(
                oid_get_id("id-ce-subjectKeyIdentifier")
            )
            if skid_ext is None:
                journal.info(
                    f"Issuer with no subjectKeyIdentifier (issuer {issuer.file_location()}, "
                    f"child {child.file_location()})"
                )
                return False
            if skid_ext.extn_value != akid.key_identifier:
                journal.info(
                    f"Issuer with different subjectKeyIdentifier (issuer {issuer.file_location()}, "
                    f"child {child.file_location()})"
                )
                return False

    if not verify_signature(issuer, child):
        journal.error(
            f"Claimed child {child.file_location()} not verified by authority "
            f"certificate {issuer.file_location()}"
        )
        return False
    return True


def is_self_signed(cert: LinkedCertificate) -> bool:
    return is_issuer(cert, cert)


def prune_duplicates(certs: list[LinkedCertificate]) -> None:
    """Remove in place certificates whose DER encoding appeared earlier."""
    kept: dict[bytes, LinkedCertificate] = {}
    for cert in certs:
        first = kept.get(cert.der_bytes)
        if first is None:
            kept[cert.der_bytes] = cert
        else:
            journal.warning(
                f"Duplicate certificate {cert.filename}:{cert.index_in_file} ignored "
                f"(same as {first.filename}:{first.index_in_file})"
            )
    certs[:] = list(kept.values())


def compute_hierarchy(certs: list[LinkedCertificate]) -> None:
    """Drop duplicates, then link every issuer to the certificates it issued."""
    prune_duplicates(certs)
    for first, second in combinations(certs, 2):
        if is_issuer(first, second):
            first.children.append(second)
            second.parents.append(first)
        if is_issuer(second, first):
            second.children.append(first)
            first.parents.append(second)