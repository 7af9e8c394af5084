"""Severity bands for the UV index and the band-change rule."""

from __future__ import annotations

from enum import Enum
from typing import Optional

MODERATE_THRESHOLD = 3.0
HIGH_THRESHOLD = 8.0


class SeverityBand(str, Enum):
    """Lower-inclusive bands: [0, 3), [3, 8), [8, inf)."""

    low = "low"
    moderate = "moderate"
    high = "high"


def classify(uv_index: float) -> SeverityBand:
    if uv_index < MODERATE_THRESHOLD:
        return SeverityBand.low
    if uv_index < HIGH_THRESHOLD:
        return SeverityBand.moderate
    return SeverityBand.high


def changed(previous: Optional[float], current: float) -> bool:
    """Return True when ``current`` should be reported given the last reported value.

    ``None`` means nothing has been reported yet. A previous value of exactly
    ``0`` is treated the same way so a location whose last report read zero is
    always re-announced.
    """
    if previous is None or previous == 0:
        return True
    return classify(previous) is not classify(current)
