"""Distance and text similarity helpers shared by the scoring services.

Note: This is pure domain logic with no infrastructure dependencies.
"""

from __future__ import annotations

import math
import re
from datetime import datetime

from tip_triage.domain.models.tip import GeoPoint

EARTH_RADIUS_KM: float = 6371.0

_WORD_PATTERN = re.compile(r"[a-z0-9']+")


def haversine_km(a: GeoPoint, b: GeoPoint) -> float:
    """Great-circle distance between two points in kilometres."""
    lat1, lat2 = math.radians(a.latitude), math.radians(b.latitude)
    d_lat = lat2 - lat1
    d_lon = math.radians(b.longitude - a.longitude)
    h = (
        math.sin(d_lat / 2) ** 2
        + math.cos(lat1) * math.cos(lat2) * math.sin(d_lon / 2) ** 2
    )
    return 2 * EARTH_RADIUS_KM * math.atan2(math.sqrt(h), math.sqrt(1 - h))


def word_set(text: str) -> frozenset[str]:
    return frozenset(_WORD_PATTERN.findall(text.lower()))


def jaccard_similarity(text_a: str, text_b: str) -> float:
    """Word-set Jaccard similarity in [0, 1].

    Two texts without any words are not considered similar.
    """
    words_a = word_set(text_a)
    words_b = word_set(text_b)
    union = words_a | words_b
    if not union:
        return 0.0
    return len(words_a & words_b) / len(union)


def hours_between(a: datetime, b: datetime) -> float:
    """Absolute number of hours between two timestamps."""
    return abs((b - a).total_seconds()) / 3600.0


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero for positives."""
    return int(math.floor(value + 0.5))


def clamp_score(value: float) -> int:
    """Round half-up and clamp into [0, 100]."""
    return max(0, min(100, round_half_up(value)))
