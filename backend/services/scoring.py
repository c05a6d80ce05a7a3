"""
Explainable scoring for nearby food places.

Each place gets a bounded closeness score plus small bonuses for being well
documented in OSM. A preference mode weights the two parts, and every weighted
contribution is reported as a breakdown row so the ranking can be explained.
"""
from __future__ import annotations

import math
from dataclasses import fields
from typing import Dict, Iterable, List, NamedTuple, Optional, Sequence, Tuple

from domain.models import (
    Place,
    PreferenceMode,
    ScoreBreakdownRow,
    ScoredPlace,
    SearchCenter,
    SearchPreferences,
)

EARTH_RADIUS_KM = 6371.0
MAX_CLOSENESS_SCORE = 5.0


class PreferenceWeights(NamedTuple):
    distance: float
    info: float


# "info" deliberately uses a weight above 1: raw info bonuses are at most 0.5 each.
PREFERENCE_WEIGHTS: Dict[PreferenceMode, PreferenceWeights] = {
    PreferenceMode.CLOSE: PreferenceWeights(distance=0.8, info=0.2),
    PreferenceMode.BALANCED: PreferenceWeights(distance=0.5, info=0.5),
    PreferenceMode.INFO: PreferenceWeights(distance=0.1, info=4.0),
}

# (Place attribute, row label, raw bonus), in breakdown order
INFO_SIGNALS: Tuple[Tuple[str, str, float], ...] = (
    ("opening_hours", "Has opening hours", 0.5),
    ("website", "Has website", 0.3),
    ("phone", "Has phone number", 0.2),
    ("cuisine", "Has cuisine tag", 0.1),
    ("address", "Has address info", 0.1),
)


def haversine_distance_km(origin: SearchCenter, target: SearchCenter) -> float:
    """Compute distance in kilometers between two lat/lon points."""
    dlat = math.radians(target.lat - origin.lat)
    dlon = math.radians(target.lon - origin.lon)
    a = (
        math.sin(dlat / 2) ** 2
        + math.cos(math.radians(origin.lat))
        * math.cos(math.radians(target.lat))
        * math.sin(dlon / 2) ** 2
    )
    a = min(1.0, max(0.0, a))  # float error near antipodes
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_KM * c


def closeness_score(distance_km: float) -> float:
    """5 at the center, decaying towards 0 with distance."""
    return MAX_CLOSENESS_SCORE / (1.0 + distance_km)


def info_signals(place: Place) -> List[Tuple[str, float]]:
    """(label, raw bonus) for every documented field the place carries."""
    signals = []
    for attr, label, bonus in INFO_SIGNALS:
        if getattr(place, attr):
            signals.append((label, bonus))
    return signals


def weights_for(mode: PreferenceMode | str) -> PreferenceWeights:
    return PREFERENCE_WEIGHTS[PreferenceMode(mode)]


def score_place(place: Place, center: SearchCenter, mode: PreferenceMode | str) -> ScoredPlace:
    weights = weights_for(mode)
    distance_km = haversine_distance_km(center, SearchCenter(lat=place.lat, lon=place.lon))
    closeness = closeness_score(distance_km)
    distance_contribution = weights.distance * closeness

    signals = info_signals(place)
    info_sum = sum(bonus for _, bonus in signals)
    total = distance_contribution + weights.info * info_sum

    breakdown = [
        ScoreBreakdownRow(
            label="Close to you",
            value=round(distance_contribution, 2),
            reason=f"{distance_km:.2f} km away (scaled distance score {closeness:.2f})",
        )
    ]
    for label, bonus in signals:
        breakdown.append(
            ScoreBreakdownRow(
                label=label,
                value=round(weights.info * bonus, 2),
                reason=f"{label} (+{bonus:.2f} raw info score)",
            )
        )
    if not signals:
        breakdown.append(
            ScoreBreakdownRow(
                label="Information tags",
                value=0.0,
                reason="No extra info such as hours, contact, cuisine, or address",
            )
        )

    return ScoredPlace(
        **{f.name: getattr(place, f.name) for f in fields(Place)},
        distance_km=distance_km,
        score=round(total, 2),
        breakdown=tuple(breakdown),
    )


def score_places(
    places: Iterable[Place],
    center: SearchCenter,
    preferences: SearchPreferences,
) -> List[ScoredPlace]:
    """
    Score every place and order them by score, highest first.

    Never drops a place. ``sorted`` is stable, so ties keep input order.
    """
    scored = [score_place(place, center, preferences.preference_mode) for place in places]
    return sorted(scored, key=lambda item: item.score, reverse=True)


def top_places(scored: Sequence[ScoredPlace], limit: Optional[int]) -> List[ScoredPlace]:
    if limit is None or limit < 0:
        return list(scored)
    return list(scored[:limit])
