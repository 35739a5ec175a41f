"""Decode X.509 certificates from PEM or DER, show their properties and arrange them by issuer."""

__version__ = "1.0.0"