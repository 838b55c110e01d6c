"""Compass heading to Vastu zone classification."""

from __future__ import annotations

import math

ZONES_16 = (
    "N", "NNE", "NE", "ENE", "E", "ESE", "SE", "SSE",
    "S", "SSW", "SW", "WSW", "W", "WNW", "NW", "NNW",
)

ZONE_ARC_DEGREES = 360.0 / len(ZONES_16)
# Shifts boundaries off the zone centres so N is centred on 0 degrees.
ZONE_OFFSET_DEGREES = ZONE_ARC_DEGREES / 2

# Order of the numbered findings in the visual assessment. The prompt text and
# the tagging step both read this; item k of the model output is zone k-1 here.
CANONICAL_ZONE_ORDER = ("N", "NE", "E", "SE", "S", "SW", "W", "NW")


def normalize_degrees(degrees: float) -> float:
    return degrees % 360.0


def classify_zone(degrees: float) -> str:
    shifted = normalize_degrees(degrees + ZONE_OFFSET_DEGREES)
    index = math.floor(shifted / ZONE_ARC_DEGREES)
    return ZONES_16[index % len(ZONES_16)]
