"""
Humanity Notary — Observability

Structured logging.
"""

from notary.telemetry.logging import setup_logging

__all__ = ["setup_logging"]
