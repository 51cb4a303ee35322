"""
Humanity Notary — Submission Primitives

Behavioral telemetry as sent by the capture client alongside content.
Field names follow the client's wire format (``flightTime``).
"""

from __future__ import annotations

from pydantic import Field

from notary.primitives.common import NotaryBaseModel, WellFormedStr


class Keystroke(NotaryBaseModel):
    """One captured keystroke. Only the flight time feeds identity derivation."""

    model_config = {"extra": "ignore"}

    flight_time: float | None = Field(default=None, alias="flightTime")


class Telemetry(NotaryBaseModel):
    """
    Behavioral telemetry attached to a certification request.

    ``human_id`` is a persistent identity token the client may already hold;
    when present it is used as the signer identity verbatim.
    """

    model_config = {"extra": "ignore"}

    keystrokes: list[Keystroke] | None = None
    human_id: WellFormedStr | None = None

    @property
    def flight_times(self) -> list[float | None]:
        return [k.flight_time for k in self.keystrokes or []]
