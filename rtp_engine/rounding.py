"""Rounding helpers."""

from __future__ import annotations

from math import floor


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves going up (``2.5 -> 3``)."""

    return int(floor(value + 0.5))
