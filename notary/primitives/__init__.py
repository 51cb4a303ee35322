"""
Humanity Notary — Shared Primitives
"""

from notary.primitives.common import (
    NotaryBaseModel,
    WellFormedStr,
    epoch_ms,
    sha256_hex,
    to_well_formed,
    utc_now,
)
from notary.primitives.submission import Keystroke, Telemetry

__all__ = [
    "Keystroke",
    "NotaryBaseModel",
    "Telemetry",
    "WellFormedStr",
    "epoch_ms",
    "sha256_hex",
    "to_well_formed",
    "utc_now",
]
