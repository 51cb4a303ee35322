"""
Humanity Notary — Content Certificate

A Certificate is a signed attestation that a specific piece of content
(identified by its SHA-256 hash) was submitted at a given time, under a
claimed humanity score, by a pseudonymous signer.

The server never stores issued certificates. The client carries the
certificate and its signature forward and hands both back when it
publishes, so the signature must be checked against a re-encoding of the
certificate that is byte-identical to the one signed at issuance.
``canonical_payload()`` is that single encoding; issuance and verification
both go through it.

Signing uses RSA PKCS#1 v1.5 with SHA-256; signatures travel as lowercase
hex.
"""

from __future__ import annotations

import json
from typing import Any

import structlog
from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import padding
from cryptography.hazmat.primitives.asymmetric.rsa import RSAPrivateKey, RSAPublicKey
from pydantic import Field

from notary.primitives.common import NotaryBaseModel, WellFormedStr, epoch_ms, sha256_hex

logger = structlog.get_logger("notary.identity.certificate")


# --- The Certificate Model ---------------------------------------------------


class Certificate(NotaryBaseModel):
    """
    Immutable content certificate.

    Only these four fields are signed. Anything else a client attaches to
    the certificate object is dropped before verification.
    """

    model_config = {"frozen": True, "extra": "ignore"}

    content_hash: WellFormedStr               # Lowercase hex SHA-256 of the content
    timestamp: int                            # Issuance time, epoch milliseconds
    humanity_score: float                     # Client-claimed score, trusted above threshold
    signer_id: WellFormedStr = Field(min_length=1)  # Pseudonymous identity of the author

    def canonical_payload(self) -> bytes:
        """
        Deterministic JSON payload for signing/verification.

        Sorted keys, compact separators, UTF-8. Floats use Python's
        shortest round-trip repr, so a score that survives a JSON round
        trip re-encodes to the same bytes.
        """
        payload = {
            "content_hash": self.content_hash,
            "humanity_score": self.humanity_score,
            "signer_id": self.signer_id,
            "timestamp": self.timestamp,
        }
        return json.dumps(
            payload, sort_keys=True, separators=(",", ":"), ensure_ascii=False,
        ).encode("utf-8")

    def matches_content(self, content: str) -> bool:
        """True if ``content`` hashes to this certificate's ``content_hash``."""
        return compute_content_hash(content) == self.content_hash


# --- Utility Functions -------------------------------------------------------


def compute_content_hash(content: str) -> str:
    """SHA-256 of the raw content (UTF-8), lowercase hex."""
    return sha256_hex(content)


def sign_certificate(certificate: Certificate, private_key: RSAPrivateKey) -> str:
    """Sign a certificate's canonical payload and return the hex signature."""
    raw_sig = private_key.sign(
        certificate.canonical_payload(),
        padding.PKCS1v15(),
        hashes.SHA256(),
    )
    return raw_sig.hex()


def verify_certificate_signature(
    certificate: Certificate,
    signature: str,
    public_key: RSAPublicKey,
) -> bool:
    """
    Verify a hex signature over the certificate's canonical payload.

    Returns True if the signature is valid, False otherwise (including
    signatures that are not valid hex).
    """
    if not signature:
        return False

    try:
        raw_sig = bytes.fromhex(signature)
    except ValueError:
        logger.warning(
            "certificate_signature_malformed",
            signer_id=certificate.signer_id,
            signature_prefix=signature[:16],
        )
        return False

    try:
        public_key.verify(
            raw_sig,
            certificate.canonical_payload(),
            padding.PKCS1v15(),
            hashes.SHA256(),
        )
        return True
    except InvalidSignature:
        logger.warning(
            "certificate_signature_verification_failed",
            signer_id=certificate.signer_id,
            content_hash=certificate.content_hash[:16],
        )
        return False


def build_certificate(
    content: str,
    humanity_score: float,
    signer_id: str,
    timestamp: int | None = None,
) -> Certificate:
    """Assemble an unsigned certificate for ``content``."""
    return Certificate(
        content_hash=compute_content_hash(content),
        timestamp=epoch_ms() if timestamp is None else timestamp,
        humanity_score=humanity_score,
        signer_id=signer_id,
    )


def parse_certificate(raw: Certificate | dict[str, Any]) -> Certificate:
    """Validate a client-returned certificate object into a Certificate."""
    if isinstance(raw, Certificate):
        return raw
    return Certificate.model_validate(raw)
