from __future__ import annotations

import logging
from typing import Callable, List, Optional

from domain.models import ScoredPlace, SearchCenter, SearchStatus
from services.errors import SearchError
from services.geocoding import GeocodeResult, geocode_address
from services.overpass_client import OverpassClient, get_default_overpass_client
from services.preferences import PreferenceProfile
from services.scoring import score_places, top_places
from settings import settings

DEFAULT_CENTER = SearchCenter(lat=52.3728, lon=4.8936)  # Amsterdam

logger = logging.getLogger(__name__)


class SearchController:
    """
    Holds the center, preferences and last results between searches.

    Each ``run_search`` reads a snapshot of the preferences, fetches places and
    scores them; results are replaced wholesale on every search or center change.
    """

    def __init__(
        self,
        client: Optional[OverpassClient] = None,
        profile: Optional[PreferenceProfile] = None,
        center: SearchCenter = DEFAULT_CENTER,
        geocoder: Callable[[str], Optional[GeocodeResult]] = geocode_address,
        top_n: Optional[int] = None,
    ):
        self.client = client or get_default_overpass_client()
        self.profile = profile or PreferenceProfile()
        self.center = center
        self.geocoder = geocoder
        self.top_n = top_n if top_n is not None else settings.SEARCH_TOP_N
        self.status = SearchStatus.IDLE
        self.results: List[ScoredPlace] = []
        self.error: Optional[str] = None
        self.selected_id: Optional[str] = None

    def clear_results(self) -> None:
        self.results = []
        self.selected_id = None
        self.error = None

    def _fail(self, message: str) -> None:
        self.results = []
        self.selected_id = None
        self.status = SearchStatus.ERROR
        self.error = message

    def set_center(self, center: SearchCenter) -> None:
        self.center = center
        if self.status is not SearchStatus.LOADING:
            self.clear_results()
            self.status = SearchStatus.IDLE

    def geocode(self, query: str) -> Optional[str]:
        """Move the center to the best match for ``query``; returns its label."""
        hit = self.geocoder(query)
        if hit is None:
            return None
        self.set_center(hit.center)
        return hit.label

    def run_search(self) -> SearchStatus:
        center = self.center
        prefs = self.profile.preferences
        self.status = SearchStatus.LOADING
        self.error = None
        try:
            places = self.client.fetch_places(
                center,
                prefs.radius,
                prefs.group_ids,
                prefs.amenity_types,
                prefs.shop_types,
            )
            scored = score_places(places, center, prefs)
        except SearchError as exc:
            logger.warning("Search failed: %s", exc)
            self._fail(str(exc))
            return self.status
        except Exception as exc:
            logger.exception("Search failed unexpectedly")
            self._fail(str(exc) or exc.__class__.__name__)
            raise

        if not scored:
            self.clear_results()
            self.status = SearchStatus.EMPTY
            return self.status

        self.results = scored
        self.selected_id = self.results[0].id
        self.status = SearchStatus.SUCCESS
        logger.info(
            "Search at %.5f,%.5f r=%dm mode=%s: %d places",
            center.lat,
            center.lon,
            prefs.radius,
            prefs.preference_mode.value,
            len(self.results),
        )
        return self.status

    def select(self, place_id: Optional[str]) -> None:
        self.selected_id = place_id

    @property
    def visible_places(self) -> List[ScoredPlace]:
        if self.status is not SearchStatus.SUCCESS:
            return []
        return top_places(self.results, self.top_n)

    @property
    def selected_place(self) -> Optional[ScoredPlace]:
        if self.status is not SearchStatus.SUCCESS:
            return None
        for place in self.results:
            if place.id == self.selected_id:
                return place
        return None
