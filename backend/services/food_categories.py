"""
Static registry of food categories and the OSM tag values behind them.

Two groups exist: places to eat and drink out (``amenity=*``) and places to buy
food (``shop=*``). All lookups are pure.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, Optional, Sequence, Tuple

from domain.models import ClassificationAxis, FoodCategory, FoodFilter

EAT_AND_DRINK_CATEGORY_ID = "eat-drink"
BUY_FOOD_CATEGORY_ID = "buy-food"

EAT_AND_DRINK_VALUES = (
    "restaurant",
    "cafe",
    "fast_food",
    "bar",
    "pub",
    "biergarten",
    "ice_cream",
    "food_court",
)

BUY_FOOD_VALUES = (
    "alcohol",
    "bakery",
    "beverages",
    "brewing_supplies",
    "butcher",
    "cheese",
    "chocolate",
    "coffee",
    "confectionery",
    "convenience",
    "dairy",
    "deli",
    "farm",
    "food",
    "frozen_food",
    "greengrocer",
    "health_food",
    "ice_cream",
    "nuts",
    "pasta",
    "pastry",
    "seafood",
    "spices",
    "tea",
    "tortilla",
    "water",
    "wine",
    "supermarket",
)

FOOD_CATEGORIES: Tuple[FoodCategory, ...] = (
    FoodCategory(
        id=EAT_AND_DRINK_CATEGORY_ID,
        label="Eat & Drink Out",
        description="Restaurants, cafes, pubs, and quick bites.",
        filters=(FoodFilter(axis=ClassificationAxis.AMENITY, values=EAT_AND_DRINK_VALUES),),
    ),
    FoodCategory(
        id=BUY_FOOD_CATEGORY_ID,
        label="Buy Food",
        description="Groceries and specialty food shops.",
        filters=(FoodFilter(axis=ClassificationAxis.SHOP, values=BUY_FOOD_VALUES),),
    ),
)

_CATEGORIES_BY_ID: Dict[str, FoodCategory] = {category.id: category for category in FOOD_CATEGORIES}

DEFAULT_FOOD_CATEGORY_IDS: Tuple[str, ...] = tuple(category.id for category in FOOD_CATEGORIES)


@dataclass(frozen=True)
class CategoryFilters:
    amenity: Tuple[str, ...] = ()
    shop: Tuple[str, ...] = ()

    def for_axis(self, axis: ClassificationAxis) -> Tuple[str, ...]:
        return self.amenity if axis is ClassificationAxis.AMENITY else self.shop

    @property
    def is_empty(self) -> bool:
        return not self.amenity and not self.shop


def _unique(values: Iterable[str]) -> Tuple[str, ...]:
    # dict keeps first-seen order
    return tuple(dict.fromkeys(values))


def get_category(group_id: str) -> Optional[FoodCategory]:
    return _CATEGORIES_BY_ID.get(group_id)


def filters_for_groups(group_ids: Iterable[str]) -> CategoryFilters:
    """Union the tag values of every selected category, per axis.

    Unknown ids are ignored. Values keep registry order.
    """
    selected = set(group_ids)
    amenity: list[str] = []
    shop: list[str] = []
    for category in FOOD_CATEGORIES:
        if category.id not in selected:
            continue
        for food_filter in category.filters:
            target = amenity if food_filter.axis is ClassificationAxis.AMENITY else shop
            target.extend(food_filter.values)
    return CategoryFilters(amenity=_unique(amenity), shop=_unique(shop))


def amenity_options_for_groups(group_ids: Iterable[str]) -> Tuple[str, ...]:
    return filters_for_groups(group_ids).amenity


def shop_options_for_groups(group_ids: Iterable[str]) -> Tuple[str, ...]:
    return filters_for_groups(group_ids).shop


def ensure_selection(group_ids: Iterable[str]) -> Tuple[str, ...]:
    """Drop unknown ids; an empty result falls back to every registered group."""
    filtered = _unique(gid for gid in group_ids if gid in _CATEGORIES_BY_ID)
    return filtered or DEFAULT_FOOD_CATEGORY_IDS


def resolve_subtype_selection(requested: Optional[Iterable[str]], available: Sequence[str]) -> Tuple[str, ...]:
    """
    Intersect a sub-type allow-list with what the selected groups offer.

    An empty intersection means "no filter", so the whole available set is used.
    """
    allowed = set(available)
    sanitized = _unique(value for value in (requested or ()) if value in allowed)
    return sanitized or tuple(available)


def format_food_type(axis: ClassificationAxis, food_type: str) -> str:
    friendly = food_type.replace("_", " ")
    prefix = "Amenity" if axis is ClassificationAxis.AMENITY else "Shop"
    return f"{prefix} • {friendly}"
