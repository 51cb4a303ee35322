"""
Humanity Notary — Common Primitives

Shared base classes and time utilities used across all systems.
"""

from __future__ import annotations

import hashlib
from datetime import datetime, timezone
from typing import Annotated, Any

from pydantic import BaseModel, BeforeValidator


def utc_now() -> datetime:
    """Current UTC time, timezone-aware."""
    return datetime.now(timezone.utc)


def epoch_ms(moment: datetime | None = None) -> int:
    """Milliseconds since the Unix epoch for ``moment`` (default: now)."""
    moment = moment or utc_now()
    return int(moment.timestamp() * 1000)


def to_well_formed(text: str) -> str:
    """
    Replace lone UTF-16 surrogates with U+FFFD.

    JSON may carry escaped surrogates (``"\\ud800"``) that have no UTF-8
    encoding. Browser clients hash such text with U+FFFD in their place.
    Well-formed surrogate pairs are joined into their code point.
    """
    return text.encode("utf-16-le", "surrogatepass").decode("utf-16-le", "replace")


def _well_formed_input(value: Any) -> Any:
    return to_well_formed(value) if isinstance(value, str) else value


# Always UTF-8 encodable. Used for every string that reaches a hash or disk.
# Runs before str validation so length constraints see the replaced text.
WellFormedStr = Annotated[str, BeforeValidator(_well_formed_input)]


def sha256_hex(data: str | bytes) -> str:
    """Lowercase hex SHA-256 of ``data`` (strings are UTF-8 encoded)."""
    if isinstance(data, str):
        data = to_well_formed(data).encode("utf-8")
    return hashlib.sha256(data).hexdigest()


# ─── Base Models ──────────────────────────────────────────────────


class NotaryBaseModel(BaseModel):
    """Base model for all notary primitives."""

    model_config = {"populate_by_name": True, "from_attributes": True}
