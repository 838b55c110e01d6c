"""Cusp (zone boundary) ambiguity detection for the room location angle."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from numbers import Real
from typing import Any

from vastu_scan.pipeline.zones import classify_zone, normalize_degrees

logger = logging.getLogger(__name__)

DEFAULT_CUSP_MARGIN = 10.0


@dataclass(frozen=True)
class CuspWarning:
    angle: float
    zone: str
    other_zone: str
    margin: float = DEFAULT_CUSP_MARGIN

    def describe(self) -> str:
        return (
            f"CUSP WARNING: The room's location angle of {self.angle:.1f}° places it in the "
            f"{self.zone} zone, but it lies within {self.margin:g}° of the boundary with the "
            f"{self.other_zone} zone. Compass readings carry a few degrees of error, so the room "
            f"may actually sit in {self.other_zone}. Address this ambiguity before anything else "
            f"and explain how the assessment changes if the room belongs to {self.other_zone}."
        )


def _is_angle(value: Any) -> bool:
    return isinstance(value, Real) and not isinstance(value, bool) and math.isfinite(value)


def detect_cusp(location: Any, margin: float = DEFAULT_CUSP_MARGIN) -> CuspWarning | None:
    """Return a warning when a small compass error could move the room to a neighbouring zone.

    Non-numeric locations (free-text tags, ``None``) and an angle of exactly zero
    are treated as unset and never produce a warning. When both perturbed
    readings land in a different zone the ``+margin`` neighbour is reported.
    """
    if not _is_angle(location) or location == 0:
        return None

    angle = float(location)
    zone = classify_zone(angle)
    zone_plus = classify_zone(angle + margin)
    zone_minus = classify_zone(normalize_degrees(angle - margin))

    if zone_plus != zone:
        other = zone_plus
    elif zone_minus != zone:
        other = zone_minus
    else:
        return None

    logger.info("Cusp detected at %.2f degrees: %s / %s", angle, zone, other)
    return CuspWarning(angle=angle, zone=zone, other_zone=other, margin=margin)
