"""
Humanity Notary — Feed Types
"""

from __future__ import annotations

from pydantic import Field

from notary.primitives.common import NotaryBaseModel, WellFormedStr


class Post(NotaryBaseModel):
    """A published, verified submission. Never mutated after creation."""

    model_config = {"frozen": True}

    id: int = Field(ge=1)
    content: WellFormedStr
    author_id: WellFormedStr
    timestamp: str          # Human-readable publication time
