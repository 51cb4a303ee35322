"""
Humanity Notary -- Error Hierarchy

All exceptions raised by the issuance/verification protocol and its
collaborators.

Namespace: notary.systems.notary.errors

Every rejection is local to the failing request; none of these leave
shared state (keypair, feed) modified. The HTTP layer renders them as
``{"error": message, "code": code}`` with ``status_code``.

Severity guide:
  ThresholdError         LOW      -- client may retry with different telemetry
  MissingCredentialError LOW      -- client-side defect, never retried here
  SignatureInvalidError  MEDIUM   -- forged or corrupted certificate
  TamperError            MEDIUM   -- content edited after certification
  PersistenceError       HIGH     -- feed could not be written; submission failed
  KeyProvisioningError   CRITICAL -- no usable keypair; process must not serve
"""

from __future__ import annotations


class NotaryError(RuntimeError):
    """Base for all notary protocol errors."""

    code: str = "notary_error"
    status_code: int = 500
    default_message: str = "Notary request failed."

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.default_message)

    @property
    def message(self) -> str:
        return str(self)


class ThresholdError(NotaryError):
    """Humanity score missing, unparsable or below the configured minimum."""

    code = "score_too_low"
    status_code = 403
    default_message = "Humanity score too low for certification."


class MissingCredentialError(NotaryError):
    """Submission arrived without a certificate or without a signature."""

    code = "missing_signature"
    status_code = 401
    default_message = "REJECTED: No Human Signature Found."


class SignatureInvalidError(NotaryError):
    """
    The signature does not verify against the canonical certificate bytes.

    Raised for forged, altered or malformed certificates alike: a
    certificate that cannot be parsed was never issued by this service.
    """

    code = "invalid_signature"
    status_code = 403
    default_message = "REJECTED: Invalid Signature. Are you a bot?"


class TamperError(NotaryError):
    """Signature is valid but the submitted content no longer matches its hash."""

    code = "tamper_detected"
    status_code = 403
    default_message = "TAMPER DETECTED: Content changed after signing."


class KeyProvisioningError(NotaryError):
    """Signing keypair could not be loaded, parsed, generated or persisted."""

    code = "key_provisioning_failed"
    status_code = 500
    default_message = "Signing keypair unavailable."


class PersistenceError(NotaryError):
    """The feed could not be written to durable storage."""

    code = "persistence_failed"
    status_code = 503
    default_message = "Feed could not be persisted; submission not accepted."
