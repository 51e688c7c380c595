"""Rounding and display helpers for segment timestamps."""

from __future__ import annotations

import math
from decimal import ROUND_HALF_UP, Decimal

_TWO_PLACES = Decimal("0.01")


def round2(value: float) -> float:
    """Round ``value`` half-up to two decimal places.

    The float is converted through its shortest ``repr`` so ``2.675`` rounds
    to ``2.68`` rather than the binary-floor ``2.67``. Non-finite values are
    returned unchanged.
    """

    number = float(value)
    if not math.isfinite(number):
        return number
    rounded = Decimal(repr(number)).quantize(_TWO_PLACES, rounding=ROUND_HALF_UP)
    return float(rounded)


def millis_to_seconds(timestamp_ms: float) -> float:
    """Convert a cue timestamp in milliseconds to rounded seconds."""

    return round2(float(timestamp_ms) / 1000)


def format_time(seconds: float) -> str:
    """Render ``seconds`` as ``MM:SS.xx`` for synthesized segment labels."""

    if seconds is None or not math.isfinite(seconds) or seconds < 0:
        return "00:00.00"
    hundredths = int(Decimal(repr(round2(seconds))) * 100)
    minutes, remainder = divmod(hundredths, 6000)
    whole, fraction = divmod(remainder, 100)
    return f"{minutes:02d}:{whole:02d}.{fraction:02d}"


__all__ = ["round2", "millis_to_seconds", "format_time"]
