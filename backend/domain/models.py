"""
Core domain models for the food picker.
These are framework-agnostic and shared by retrieval, scoring and the controller.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Optional, Tuple


MIN_RADIUS_M = 250
MAX_RADIUS_M = 5000
UNNAMED_PLACE = "Unnamed place"


class ClassificationAxis(str, Enum):
    """OSM tag key a food place is classified under."""
    AMENITY = "amenity"
    SHOP = "shop"


class PreferenceMode(str, Enum):
    """Weighting presets for the scoring engine."""
    CLOSE = "close"
    BALANCED = "balanced"
    INFO = "info"

    @property
    def label(self) -> str:
        return {
            PreferenceMode.CLOSE: "Prefer close",
            PreferenceMode.BALANCED: "Balanced",
            PreferenceMode.INFO: "Prefer info-rich",
        }[self]


class SearchStatus(str, Enum):
    """Lifecycle of a search as seen by the controller."""
    IDLE = "idle"
    LOADING = "loading"
    SUCCESS = "success"
    EMPTY = "empty"
    ERROR = "error"


@dataclass(frozen=True)
class SearchCenter:
    lat: float
    lon: float


@dataclass(frozen=True)
class SearchPreferences:
    """
    Snapshot of the user's selection for one retrieval + scoring cycle.

    Empty amenity_types / shop_types mean "no restriction": every value implied
    by the selected groups is searched.
    """
    radius: int
    group_ids: Tuple[str, ...]
    amenity_types: Tuple[str, ...] = ()
    shop_types: Tuple[str, ...] = ()
    preference_mode: PreferenceMode = PreferenceMode.BALANCED


@dataclass(frozen=True)
class FoodFilter:
    axis: ClassificationAxis
    values: Tuple[str, ...]


@dataclass(frozen=True)
class FoodCategory:
    id: str
    label: str
    description: str
    filters: Tuple[FoodFilter, ...]


@dataclass(frozen=True)
class Place:
    """A normalized OSM food place."""
    id: str  # "{element_type}-{element_id}", stable across fetches
    name: str
    lat: float
    lon: float
    axis: ClassificationAxis
    type: str
    tags: Dict[str, str] = field(default_factory=dict)
    cuisine: Optional[str] = None
    opening_hours: Optional[str] = None
    website: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None


@dataclass(frozen=True)
class ScoreBreakdownRow:
    label: str
    value: float
    reason: str


@dataclass(frozen=True)
class ScoredPlace(Place):
    distance_km: float = 0.0
    score: float = 0.0
    breakdown: Tuple[ScoreBreakdownRow, ...] = ()
