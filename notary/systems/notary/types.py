"""
Humanity Notary — Protocol Types

Results of the two protocol stages: issuance (certificate + signature)
and redemption (published post + feed snapshot).
"""

from __future__ import annotations

from notary.primitives.common import NotaryBaseModel
from notary.systems.feed.types import Post
from notary.systems.identity.certificate import Certificate


class IssuedCertificate(NotaryBaseModel):
    """A freshly signed certificate. The client is its custodian."""

    certificate: Certificate
    signature: str          # Lowercase hex RSA/SHA-256 signature


class SubmissionResult(NotaryBaseModel):
    """Outcome of a successful redemption."""

    post: Post
    feed: list[Post]
