"""
Humanity Notary — Certificate Issuer

First stage of the protocol. Given content, behavioral telemetry and a
client-claimed humanity score, the issuer:

  1. Rejects scores that do not parse or fall below the threshold.
  2. Hashes the content (SHA-256, hex).
  3. Derives the signer identity.
  4. Stamps the certificate with the current epoch-millisecond time.
  5. Signs the canonical payload with the server's private key.

The score is trusted as claimed. Re-deriving it from raw telemetry is out
of scope; the signature only attests that *this server* saw *this
content* with *this claim*.

Issuance is stateless: nothing is recorded and the feed is untouched.
"""

from __future__ import annotations

import math
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

import structlog

from notary.primitives.common import epoch_ms
from notary.primitives.submission import Telemetry
from notary.systems.identity.certificate import build_certificate, sign_certificate
from notary.systems.identity.signer import IdentityDeriver
from notary.systems.notary.errors import ThresholdError
from notary.systems.notary.types import IssuedCertificate

if TYPE_CHECKING:
    from notary.systems.identity.keys import KeyProvider

logger = structlog.get_logger("notary.notary.issuer")

DEFAULT_HUMANITY_THRESHOLD = 0.8


class CertificateIssuer:
    """Builds and signs content certificates."""

    def __init__(
        self,
        keys: KeyProvider,
        deriver: IdentityDeriver | None = None,
        *,
        humanity_threshold: float = DEFAULT_HUMANITY_THRESHOLD,
        clock: Callable[[], int] = epoch_ms,
    ) -> None:
        self._keys = keys
        self._deriver = deriver or IdentityDeriver()
        self._threshold = humanity_threshold
        self._clock = clock
        self._issued = 0
        self._rejected = 0
        self._logger = logger.bind(component="certificate_issuer")

    @property
    def humanity_threshold(self) -> float:
        return self._threshold

    def issue(
        self,
        content: str,
        telemetry: Telemetry | None,
        score: Any,
        persistent_id: str | None = None,
    ) -> IssuedCertificate:
        """
        Issue a signed certificate for ``content``.

        ``persistent_id`` falls back to ``telemetry.human_id``.
        Raises ThresholdError if the score is unusable or too low.
        """
        self._logger.info(
            "certification_requested",
            content_length=len(content),
            score_claim=str(score),
        )

        humanity_score = parse_score(score)
        if humanity_score is None or humanity_score < self._threshold:
            self._rejected += 1
            self._logger.info(
                "certification_rejected",
                reason="score_below_threshold",
                score_claim=str(score),
                threshold=self._threshold,
            )
            raise ThresholdError()

        if persistent_id is None and telemetry is not None:
            persistent_id = telemetry.human_id

        signer_id = self._deriver.derive(telemetry, persistent_id)
        certificate = build_certificate(
            content,
            humanity_score=humanity_score,
            signer_id=signer_id,
            timestamp=self._clock(),
        )
        signature = sign_certificate(certificate, self._keys.private_key)

        self._issued += 1
        self._logger.info(
            "certificate_issued",
            signer_id=signer_id,
            humanity_score=humanity_score,
            content_hash=certificate.content_hash[:16],
        )
        return IssuedCertificate(certificate=certificate, signature=signature)

    @property
    def stats(self) -> dict[str, Any]:
        return {
            "issued": self._issued,
            "rejected": self._rejected,
            "humanity_threshold": self._threshold,
        }


# ─── Utility Functions ───────────────────────────────────────────


def parse_score(score: Any) -> float | None:
    """
    Parse a claimed score from a number or numeric string.

    Returns None for anything that is not a finite number. Booleans are
    not scores.
    """
    if score is None or isinstance(score, bool):
        return None
    if isinstance(score, (int, float)):
        value = float(score)
    elif isinstance(score, str):
        try:
            value = float(score.strip())
        except ValueError:
            return None
    else:
        return None
    return value if math.isfinite(value) else None
