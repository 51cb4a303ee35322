"""
Humanity Notary — Certificate Verifier

Second stage of the protocol: redeem a certificate to publish content.

Checks, in order:
  1. Both a certificate and a signature were supplied.
  2. The signature verifies over the canonical certificate payload with
     the server's public key. Only this server holds the private key, so
     a valid signature proves the certificate was issued here and has not
     been altered since.
  3. The submitted content hashes to ``certificate.content_hash``. The
     signature attests to the content seen at issuance, not to whatever
     is resubmitted; a mismatch means the text was edited afterwards.

Only then is a post created and written through to the feed.

Nothing here marks a certificate as spent. The same certificate and
signature can be redeemed again and will publish a second post.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import structlog
from pydantic import ValidationError

from notary.systems.identity.certificate import (
    Certificate,
    compute_content_hash,
    parse_certificate,
    verify_certificate_signature,
)
from notary.systems.notary.errors import (
    MissingCredentialError,
    SignatureInvalidError,
    TamperError,
)
from notary.systems.notary.types import SubmissionResult

if TYPE_CHECKING:
    from notary.systems.feed.store import FeedStore
    from notary.systems.identity.keys import KeyProvider

logger = structlog.get_logger("notary.notary.verifier")


class CertificateVerifier:
    """Validates redeemed certificates and publishes their content."""

    def __init__(self, keys: KeyProvider, feed: FeedStore) -> None:
        self._keys = keys
        self._feed = feed
        self._accepted = 0
        self._rejected: dict[str, int] = {}
        self._logger = logger.bind(component="certificate_verifier")

    def verify(
        self,
        content: str,
        certificate: Certificate | dict[str, Any] | None,
        signature: str | None,
    ) -> Certificate:
        """
        Run every check without publishing.

        Returns the parsed certificate; raises MissingCredentialError,
        SignatureInvalidError or TamperError.
        """
        if not certificate or not signature:
            self._count("missing_signature")
            self._logger.info(
                "submission_rejected",
                reason="missing_signature",
                has_certificate=bool(certificate),
                has_signature=bool(signature),
            )
            raise MissingCredentialError()

        try:
            cert = parse_certificate(certificate)
        except ValidationError as exc:
            self._count("invalid_signature")
            self._logger.warning(
                "submission_rejected",
                reason="malformed_certificate",
                errors=exc.error_count(),
            )
            raise SignatureInvalidError() from exc

        if not verify_certificate_signature(cert, signature, self._keys.public_key):
            self._count("invalid_signature")
            self._logger.warning(
                "submission_rejected",
                reason="invalid_signature",
                signer_id=cert.signer_id,
            )
            raise SignatureInvalidError()

        content_hash = compute_content_hash(content)
        if content_hash != cert.content_hash:
            self._count("tamper_detected")
            self._logger.warning(
                "tamper_detected",
                signer_id=cert.signer_id,
                content_hash=content_hash[:16],
                certificate_hash=cert.content_hash[:16],
            )
            raise TamperError()

        return cert

    async def verify_and_submit(
        self,
        content: str,
        certificate: Certificate | dict[str, Any] | None,
        signature: str | None,
    ) -> SubmissionResult:
        """
        Verify a certificate and, on success, publish ``content``.

        Raises PersistenceError (from the store) if the feed cannot be
        written; the submission is then not accepted.
        """
        cert = self.verify(content, certificate, signature)

        post = await self._feed.publish(content, author_id=cert.signer_id)
        self._accepted += 1
        self._logger.info(
            "post_published",
            post_id=post.id,
            author_id=post.author_id,
            humanity_score=cert.humanity_score,
        )
        return SubmissionResult(post=post, feed=self._feed.snapshot())

    def _count(self, reason: str) -> None:
        self._rejected[reason] = self._rejected.get(reason, 0) + 1

    @property
    def stats(self) -> dict[str, Any]:
        return {
            "accepted": self._accepted,
            "rejected": dict(self._rejected),
        }
