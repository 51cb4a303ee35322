"""
Humanity Notary — Issuance & Redemption

The two-stage protocol: issue a signed certificate for content, then
redeem it to publish that exact content to the feed.
"""

from notary.systems.notary.errors import (
    KeyProvisioningError,
    MissingCredentialError,
    NotaryError,
    PersistenceError,
    SignatureInvalidError,
    TamperError,
    ThresholdError,
)
from notary.systems.notary.issuer import CertificateIssuer
from notary.systems.notary.types import IssuedCertificate, SubmissionResult
from notary.systems.notary.verifier import CertificateVerifier

__all__ = [
    "CertificateIssuer",
    "CertificateVerifier",
    "IssuedCertificate",
    "KeyProvisioningError",
    "MissingCredentialError",
    "NotaryError",
    "PersistenceError",
    "SignatureInvalidError",
    "SubmissionResult",
    "TamperError",
    "ThresholdError",
]
