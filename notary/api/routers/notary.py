"""
Humanity Notary — Notary REST Router

Thin HTTP adapter over the issuance/redemption protocol. All decisions
live in CertificateIssuer and CertificateVerifier; rejections surface as
NotaryError subclasses and are rendered by the app-level handler.

Endpoints:
  POST /certify      — Issue a signed certificate for content + telemetry + score
  POST /submit-post  — Redeem a certificate and publish the content
  GET  /feed         — Current feed, most recent first
  GET  /public-key   — Verification key and its fingerprint
"""

from __future__ import annotations

from typing import Any

import structlog
from fastapi import APIRouter, Request
from pydantic import BaseModel, Field

from notary.primitives.common import WellFormedStr
from notary.primitives.submission import Telemetry

logger = structlog.get_logger("notary.api.notary")

router = APIRouter()


# ─── Request Bodies ──────────────────────────────────────────────


class CertifyMetadata(BaseModel):
    model_config = {"extra": "ignore"}

    score: Any = None       # Number or numeric string; validated by the issuer


class CertifyRequest(BaseModel):
    content: WellFormedStr
    telemetry: Telemetry | None = None
    metadata: CertifyMetadata = Field(default_factory=CertifyMetadata)


class SubmitPostRequest(BaseModel):
    content: WellFormedStr
    signature: str | None = None
    # Kept raw: a malformed certificate is a forgery, not a 422.
    certificate: dict[str, Any] | None = None


# ─── Endpoints ───────────────────────────────────────────────────


@router.post("/certify")
async def certify(body: CertifyRequest, request: Request) -> dict[str, Any]:
    """Issue a certificate, or 403 if the humanity score is too low."""
    issuer = request.app.state.issuer
    issued = issuer.issue(body.content, body.telemetry, body.metadata.score)
    logger.debug("certify_request_served", signer_id=issued.certificate.signer_id)
    return {
        "can_proceed": True,
        "certificate": issued.certificate.model_dump(),
        "signature": issued.signature,
    }


@router.post("/submit-post")
async def submit_post(body: SubmitPostRequest, request: Request) -> dict[str, Any]:
    """Verify a redeemed certificate and publish the content."""
    verifier = request.app.state.verifier
    result = await verifier.verify_and_submit(body.content, body.certificate, body.signature)
    logger.debug("submit_request_served", post_id=result.post.id)
    return {
        "success": True,
        "feed": [post.model_dump() for post in result.feed],
    }


@router.get("/feed")
async def get_feed(request: Request) -> list[dict[str, Any]]:
    """Return the feed, most recent first."""
    feed = request.app.state.feed
    return [post.model_dump() for post in feed.snapshot()]


@router.get("/public-key")
async def get_public_key(request: Request) -> dict[str, Any]:
    """Return the PEM public key used to verify certificates."""
    keypair = request.app.state.keys.keypair
    return {
        "public_key_pem": keypair.public_key_pem,
        "fingerprint": keypair.fingerprint,
        "algorithm": "RSA-PKCS1v15-SHA256",
    }
