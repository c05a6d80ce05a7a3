"""
Mutable preference state that feeds retrieval and scoring.

The profile is only changed between searches; each search reads an immutable
``SearchPreferences`` snapshot from ``PreferenceProfile.preferences``.
"""
from __future__ import annotations

import logging
from dataclasses import replace
from typing import Iterable, Optional, Tuple

from domain.models import MAX_RADIUS_M, MIN_RADIUS_M, PreferenceMode, SearchPreferences
from services.food_categories import (
    DEFAULT_FOOD_CATEGORY_IDS,
    amenity_options_for_groups,
    ensure_selection,
    shop_options_for_groups,
)

DEFAULT_RADIUS_M = 1500

logger = logging.getLogger(__name__)


def clamp_radius(radius_m: float) -> int:
    return int(min(max(radius_m, MIN_RADIUS_M), MAX_RADIUS_M))


def _keep_offered(values: Iterable[str], offered: Tuple[str, ...]) -> Tuple[str, ...]:
    allowed = set(offered)
    return tuple(dict.fromkeys(v for v in values if v in allowed))


def default_preferences() -> SearchPreferences:
    return SearchPreferences(
        radius=DEFAULT_RADIUS_M,
        group_ids=DEFAULT_FOOD_CATEGORY_IDS,
        amenity_types=(),
        shop_types=(),
        preference_mode=PreferenceMode.BALANCED,
    )


class PreferenceProfile:
    def __init__(self, preferences: Optional[SearchPreferences] = None):
        self._prefs = default_preferences()
        if preferences is not None:
            self._prefs = replace(self._prefs, preference_mode=PreferenceMode(preferences.preference_mode))
            self.set_radius(preferences.radius)
            self.set_groups(preferences.group_ids)
            self.set_amenity_types(preferences.amenity_types)
            self.set_shop_types(preferences.shop_types)

    @property
    def preferences(self) -> SearchPreferences:
        return self._prefs

    @property
    def amenity_options(self) -> Tuple[str, ...]:
        return amenity_options_for_groups(self._prefs.group_ids)

    @property
    def shop_options(self) -> Tuple[str, ...]:
        return shop_options_for_groups(self._prefs.group_ids)

    def set_radius(self, radius_m: float) -> SearchPreferences:
        self._prefs = replace(self._prefs, radius=clamp_radius(radius_m))
        return self._prefs

    def set_mode(self, mode: PreferenceMode | str) -> SearchPreferences:
        self._prefs = replace(self._prefs, preference_mode=PreferenceMode(mode))
        return self._prefs

    def set_groups(self, group_ids: Iterable[str]) -> SearchPreferences:
        """
        Select category groups, never leaving the selection empty.

        Sub-type overrides for an axis that no selected group covers are
        cleared, and values the new groups no longer offer are dropped.
        """
        groups = ensure_selection(group_ids)
        amenity_offered = amenity_options_for_groups(groups)
        shop_offered = shop_options_for_groups(groups)
        amenity_types = _keep_offered(self._prefs.amenity_types, amenity_offered)
        shop_types = _keep_offered(self._prefs.shop_types, shop_offered)
        if amenity_types != self._prefs.amenity_types or shop_types != self._prefs.shop_types:
            logger.debug(
                "Cleared stale sub-type overrides for groups %s (amenity=%d shop=%d)",
                ",".join(groups),
                len(amenity_types),
                len(shop_types),
            )
        self._prefs = replace(
            self._prefs,
            group_ids=groups,
            amenity_types=amenity_types,
            shop_types=shop_types,
        )
        return self._prefs

    def toggle_group(self, group_id: str) -> SearchPreferences:
        current = list(self._prefs.group_ids)
        if group_id in current:
            if len(current) == 1:
                return self._prefs
            current.remove(group_id)
        else:
            current.append(group_id)
        return self.set_groups(current)

    def set_amenity_types(self, values: Iterable[str]) -> SearchPreferences:
        self._prefs = replace(self._prefs, amenity_types=_keep_offered(values, self.amenity_options))
        return self._prefs

    def set_shop_types(self, values: Iterable[str]) -> SearchPreferences:
        self._prefs = replace(self._prefs, shop_types=_keep_offered(values, self.shop_options))
        return self._prefs
