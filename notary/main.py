"""
Humanity Notary — Application Entry Point

FastAPI application wiring the notary systems together.

`uvicorn notary.main:app` (or `notary-serve`)

Every stateful component is constructed once in the lifespan and hung on
``app.state``; routers reach them through the request. Tests build their
own app with ``create_app(config)`` pointed at a temp directory.
"""

from __future__ import annotations

import os
from contextlib import asynccontextmanager
from typing import Any

import structlog
from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

# Load .env file before any configuration is loaded
load_dotenv()

from notary import __version__
from notary.api.routers.notary import router as notary_router
from notary.config import NotaryConfig, load_config
from notary.systems.feed.store import FeedStore
from notary.systems.identity.keys import KeyProvider
from notary.systems.identity.signer import IdentityDeriver
from notary.systems.notary.errors import NotaryError
from notary.systems.notary.issuer import CertificateIssuer
from notary.systems.notary.verifier import CertificateVerifier
from notary.telemetry.logging import setup_logging

logger = structlog.get_logger("notary.main")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Startup and shutdown sequence.

    A KeyProvisioningError raised here aborts startup: the service never
    serves without a keypair.
    """
    # ── 1. Configuration ──────────────────────────────────────
    config: NotaryConfig = app.state.config

    # ── 2. Set up logging ─────────────────────────────────────
    if app.state.configure_logging:
        setup_logging(config.logging)
    logger.info("notary_starting", version=__version__, port=config.server.port)

    # ── 3. Signing keypair ────────────────────────────────────
    keys = KeyProvider(
        config.keys.private_key_path,
        config.keys.public_key_path,
        key_size=config.keys.key_size,
    )
    keys.load_or_create()
    app.state.keys = keys

    # ── 4. Feed ───────────────────────────────────────────────
    feed = FeedStore(config.feed.path, timestamp_format=config.feed.timestamp_format)
    feed.load()
    app.state.feed = feed

    # ── 5. Protocol ───────────────────────────────────────────
    app.state.issuer = CertificateIssuer(
        keys,
        IdentityDeriver(max_keystrokes=config.issuance.max_keystrokes),
        humanity_threshold=config.issuance.humanity_threshold,
    )
    app.state.verifier = CertificateVerifier(keys, feed)

    logger.info(
        "notary_ready",
        key_fingerprint=keys.keypair.fingerprint[:16],
        feed_size=len(feed),
        humanity_threshold=config.issuance.humanity_threshold,
    )

    yield

    logger.info(
        "notary_stopping",
        issuer=app.state.issuer.stats,
        verifier=app.state.verifier.stats,
    )


# ─── FastAPI Application ─────────────────────────────────────────


def create_app(config: NotaryConfig | None = None, *, configure_logging: bool = True) -> FastAPI:
    """
    Build the application.

    ``config=None`` loads it from ``NOTARY_CONFIG_PATH`` (default
    ``config/default.yaml``) plus environment overrides.
    """
    if config is None:
        config = load_config(os.environ.get("NOTARY_CONFIG_PATH", "config/default.yaml"))

    app = FastAPI(
        title="Humanity Notary",
        description="Signed attestations of human-authored content",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.config = config
    app.state.configure_logging = configure_logging

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.server.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(NotaryError)
    async def _notary_error(request: Request, exc: NotaryError) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": exc.message, "code": exc.code},
        )

    @app.get("/health")
    async def health(request: Request) -> dict[str, Any]:
        state = request.app.state
        return {
            "status": "healthy",
            "version": __version__,
            "keys": state.keys.stats,
            "feed": state.feed.stats,
            "issuer": state.issuer.stats,
            "verifier": state.verifier.stats,
        }

    app.include_router(notary_router)
    return app


app = create_app()
