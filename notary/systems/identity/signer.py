"""
Humanity Notary — Signer Identity Derivation

Computes the pseudonymous ``signer_id`` embedded in every certificate.

A client that already holds a persistent identity token gets it back
verbatim. Otherwise the identity is derived from *how* the content was
typed: the keystroke flight times are joined into a seed string and
hashed, giving a ``0x`` + 8 uppercase hex character token.

This is advisory pseudonymity, not authentication. No secret is involved,
so anyone replaying the same flight times gets the same identity, and the
32-bit truncation makes collisions plausible at scale.
"""

from __future__ import annotations

import hashlib
import math
from collections.abc import Sequence
from decimal import Decimal

import structlog

from notary.primitives.submission import Telemetry

logger = structlog.get_logger("notary.identity.signer")

UNKNOWN_SEED = "unknown"
SEED_SEPARATOR = ","
IDENTITY_PREFIX = "0x"
IDENTITY_HEX_LENGTH = 8


class IdentityDeriver:
    """Derives the signer identity from telemetry or a persistent id."""

    def __init__(self, *, max_keystrokes: int | None = None) -> None:
        if max_keystrokes is not None and max_keystrokes < 1:
            raise ValueError("max_keystrokes must be positive or None")
        self._max_keystrokes = max_keystrokes

    def derive(self, telemetry: Telemetry | None, persistent_id: str | None = None) -> str:
        """
        Return the signer identity for a certification request.

        A non-empty ``persistent_id`` is trusted and returned unchanged;
        callers are responsible for sanitising it.
        """
        if persistent_id:
            return persistent_id

        flight_times = telemetry.flight_times if telemetry is not None else []
        if self._max_keystrokes is not None:
            flight_times = flight_times[: self._max_keystrokes]

        return identity_from_seed(build_seed(flight_times))


# ─── Utility Functions ───────────────────────────────────────────


def build_seed(flight_times: Sequence[float | None]) -> str:
    """Join flight times into the hash seed; empty input yields the sentinel."""
    if not flight_times:
        return UNKNOWN_SEED
    return SEED_SEPARATOR.join(_format_flight_time(v) for v in flight_times)


def identity_from_seed(seed: str) -> str:
    digest = hashlib.sha256(seed.encode("utf-8")).hexdigest()
    return IDENTITY_PREFIX + digest[:IDENTITY_HEX_LENGTH].upper()


def _format_flight_time(value: float | None) -> str:
    """
    Render a flight time the way the capture client serialises numbers
    (ECMAScript Number-to-String).

    Shortest round-trip digits, no decimal point on integral values
    (``120.0`` -> ``"120"``), plain notation for magnitudes in
    ``[1e-6, 1e21)`` and ``1e-7`` / ``1.5e+21`` style exponents outside it.
    Missing values render as empty strings.
    """
    if value is None:
        return ""
    value = float(value)
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    if value == 0:
        return "0"

    sign = "-" if value < 0 else ""
    _, digit_tuple, exponent = Decimal(repr(abs(value))).as_tuple()
    digits = "".join(map(str, digit_tuple)).rstrip("0")
    exponent += len(digit_tuple) - len(digits)
    k = len(digits)
    n = exponent + k            # value == 0.<digits> * 10**n

    if k <= n <= 21:
        text = digits + "0" * (n - k)
    elif 0 < n <= 21:
        text = digits[:n] + "." + digits[n:]
    elif -6 < n <= 0:
        text = "0." + "0" * -n + digits
    else:
        e = n - 1
        mantissa = digits if k == 1 else digits[0] + "." + digits[1:]
        text = f"{mantissa}e{'+' if e >= 0 else '-'}{abs(e)}"
    return sign + text
