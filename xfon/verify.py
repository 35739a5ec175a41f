"""Verification of a certificate's signature with its issuer's public key."""

from __future__ import annotations

from typing import TYPE_CHECKING

from cryptography import x509
from cryptography.exceptions import InvalidSignature, UnsupportedAlgorithm
from cryptography.hazmat.primitives.asymmetric import dsa, ec, ed448, ed25519, padding, rsa

from xfon.journal import journal

if TYPE_CHECKING:
    from xfon.hierarchy import LinkedCertificate


def _load(cert: LinkedCertificate) -> x509.Certificate | None:
    try:
        return x509.load_der_x509_certificate(bytes(cert.der_bytes))
    except ValueError:
        journal.error(f"Cannot load certificate {cert.file_location()}")
        return None


def _check_signature(public_key: object, child: x509.Certificate) -> None:
    """Raise when the signature of ``child`` does not verify with ``public_key``."""
    signature = child.signature
    data = child.tbs_certificate_bytes
    if isinstance(public_key, rsa.RSAPublicKey):
        params = getattr(child, "signature_algorithm_parameters", None)
        if not isinstance(params, (padding.PSS, padding.PKCS1v15)):
            params = padding.PKCS1v15()
        public_key.verify(signature, data, params, child.signature_hash_algorithm)
    elif isinstance(public_key, ec.EllipticCurvePublicKey):
        public_key.verify(signature, data, ec.ECDSA(child.signature_hash_algorithm))
    elif isinstance(public_key, dsa.DSAPublicKey):
        public_key.verify(signature, data, child.signature_hash_algorithm)
    elif isinstance(public_key, (ed25519.Ed25519PublicKey, ed448.Ed448PublicKey)):
        public_key.verify(signature, data)
    else:
        raise TypeError(f"unsupported public key type {type(public_key).__name__}")


def verify_signature(issuer: LinkedCertificate, child: LinkedCertificate) -> bool:
    """Tell whether ``child`` is signed by the key of ``issuer``.

    Only the signature is checked; names and extensions are not compared.
    """
    issuer_cert = _load(issuer)
    if issuer_cert is None:
        return False
    child_cert = _load(child)
    if child_cert is None:
        return False

    try:
        public_key = issuer_cert.public_key()
    except (ValueError, UnsupportedAlgorithm):
        journal.error(f"Cannot get public key of certificate {issuer.file_location()}")
        return False

    try:
        _check_signature(public_key, child_cert)
    except (InvalidSignature, UnsupportedAlgorithm, TypeError, ValueError):
        return False
    return True