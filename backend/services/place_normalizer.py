"""
Turn raw Overpass elements into normalized ``Place`` records.

Elements that cannot be classified or located are dropped (``None``); a partly
tagged OSM extract is normal, so nothing here raises or logs per element.
"""
from __future__ import annotations

from typing import Any, Dict, Mapping, Optional, Tuple

from pydantic import ValidationError

from domain.models import UNNAMED_PLACE, ClassificationAxis, Place
from services.overpass_types import OverpassElement

DEFAULT_ELEMENT_TYPE = "element"
ADDRESS_TAGS = ("addr:housenumber", "addr:street", "addr:city")


def build_address(tags: Mapping[str, str]) -> Optional[str]:
    """Join house number, street and city with single spaces, or None."""
    parts = [(tags.get(key) or "").strip() for key in ADDRESS_TAGS]
    joined = " ".join(p for p in parts if p)
    return joined or None


def place_id_for(element_type: Optional[str], element_id: int) -> str:
    return f"{element_type or DEFAULT_ELEMENT_TYPE}-{element_id}"


def _resolve_location(element: OverpassElement) -> Optional[Tuple[float, float]]:
    if element.center is not None:
        return element.center.lat, element.center.lon
    if element.lat is not None and element.lon is not None:
        return element.lat, element.lon
    return None


def _resolve_classification(tags: Mapping[str, str]) -> Optional[Tuple[ClassificationAxis, str]]:
    if ClassificationAxis.AMENITY.value in tags:
        axis = ClassificationAxis.AMENITY
    elif ClassificationAxis.SHOP.value in tags:
        axis = ClassificationAxis.SHOP
    else:
        return None
    value = (tags.get(axis.value) or "").strip()
    if not value:
        return None
    return axis, value


def _optional(tags: Mapping[str, str], key: str) -> Optional[str]:
    value = (tags.get(key) or "").strip()
    return value or None


def normalize_element(raw: Dict[str, Any] | OverpassElement) -> Optional[Place]:
    if isinstance(raw, OverpassElement):
        element = raw
    else:
        try:
            element = OverpassElement.model_validate(raw)
        except ValidationError:
            return None

    tags = element.tags
    if not tags:
        return None

    location = _resolve_location(element)
    if location is None:
        return None

    classification = _resolve_classification(tags)
    if classification is None:
        return None
    axis, food_type = classification
    lat, lon = location

    return Place(
        id=place_id_for(element.type, element.id),
        name=tags.get("name") or UNNAMED_PLACE,
        lat=lat,
        lon=lon,
        axis=axis,
        type=food_type,
        tags=dict(tags),
        cuisine=_optional(tags, "cuisine"),
        opening_hours=_optional(tags, "opening_hours"),
        website=_optional(tags, "website"),
        phone=_optional(tags, "phone"),
        address=build_address(tags),
    )
