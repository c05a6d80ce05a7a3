"""
Overpass client for nearby food places, with sequential fallback across mirrors.

Endpoints are tried strictly in order with a growing delay before each attempt.
The first successful response wins; if every endpoint fails, the per-endpoint
messages are aggregated into a single ``OverpassUnavailableError``.
"""
from __future__ import annotations

import logging
import time
from typing import Any, Callable, Iterable, List, Optional, Sequence
from urllib.parse import urlparse

import requests
from pydantic import ValidationError

from domain.models import ClassificationAxis, Place, SearchCenter
from services.errors import NoCategorySelectedError, OverpassUnavailableError
from services.food_categories import CategoryFilters, filters_for_groups, resolve_subtype_selection
from services.overpass_types import OverpassResponse
from services.place_normalizer import normalize_element
from settings import settings

logger = logging.getLogger(__name__)

QUERY_TIMEOUT_SECONDS = 25


def resolve_filters(
    group_ids: Iterable[str],
    amenity_types: Optional[Iterable[str]] = None,
    shop_types: Optional[Iterable[str]] = None,
) -> CategoryFilters:
    """Effective tag values per axis after applying the sub-type overrides."""
    available = filters_for_groups(group_ids)
    return CategoryFilters(
        amenity=resolve_subtype_selection(amenity_types, available.amenity),
        shop=resolve_subtype_selection(shop_types, available.shop),
    )


def build_overpass_query(center: SearchCenter, radius_m: int, filters: CategoryFilters) -> str:
    """Build one Overpass QL query covering both axes; areas come back with a center."""
    around = f"(around:{int(radius_m)},{center.lat:.7f},{center.lon:.7f})"
    statements: List[str] = []
    for axis in ClassificationAxis:
        values = filters.for_axis(axis)
        if not values:
            continue
        selector = f'["{axis.value}"~"^({"|".join(values)})$"]'
        statements.append(f"  node{selector}{around};")
        statements.append(f"  way{selector}{around};")
    body = "\n".join(statements)
    return f"[out:json][timeout:{QUERY_TIMEOUT_SECONDS}];\n(\n{body}\n);\nout center tags;"


def dedupe_places(elements: Iterable[Any]) -> List[Place]:
    """Normalize raw elements, dropping rejects and repeated ids (first one wins)."""
    places: List[Place] = []
    seen: set[str] = set()
    for element in elements:
        place = normalize_element(element)
        if place is None or place.id in seen:
            continue
        seen.add(place.id)
        places.append(place)
    return places


def _endpoint_host(url: str) -> str:
    return urlparse(url).netloc or url


class OverpassClient:
    def __init__(
        self,
        endpoints: Optional[Sequence[str]] = None,
        retry_delays_ms: Optional[Sequence[int]] = None,
        timeout: Optional[float] = None,
        session: Optional[requests.Session] = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.endpoints = list(endpoints if endpoints is not None else settings.OVERPASS_ENDPOINTS)
        self.retry_delays_ms = list(
            retry_delays_ms if retry_delays_ms is not None else settings.OVERPASS_RETRY_DELAYS_MS
        )
        self.timeout = timeout if timeout is not None else settings.OVERPASS_TIMEOUT_SECONDS
        self.session = session or requests.Session()
        self.sleep = sleep
        self.headers = {
            "Accept": "application/json",
            "User-Agent": settings.OVERPASS_USER_AGENT,
        }

    def _delay_for_attempt(self, index: int) -> float:
        """Seconds to wait before attempt ``index``; the last delay repeats."""
        if not self.retry_delays_ms:
            return 0.0
        delay_ms = self.retry_delays_ms[min(index, len(self.retry_delays_ms) - 1)]
        return max(delay_ms, 0) / 1000.0

    def _post(self, endpoint: str, query: str) -> List[Any]:
        resp = self.session.post(
            endpoint,
            data={"data": query},
            headers=self.headers,
            timeout=self.timeout,
        )
        if not resp.ok:
            raise _EndpointFailure(f"HTTP {resp.status_code}")
        try:
            payload = OverpassResponse.model_validate(resp.json())
        except (ValueError, ValidationError) as exc:
            raise _EndpointFailure(f"invalid response ({exc})") from exc
        return payload.elements

    def run_query(self, query: str) -> List[Any]:
        """POST ``query`` to each endpoint in turn; return the first good element list."""
        errors: List[str] = []
        for index, endpoint in enumerate(self.endpoints):
            delay = self._delay_for_attempt(index)
            if delay > 0:
                self.sleep(delay)
            host = _endpoint_host(endpoint)
            try:
                elements = self._post(endpoint, query)
            except _EndpointFailure as exc:
                message = str(exc)
            except requests.RequestException as exc:
                message = str(exc) or exc.__class__.__name__
            else:
                logger.debug(
                    "Overpass %s answered with %d elements (attempt %d)",
                    host,
                    len(elements),
                    index + 1,
                )
                return elements
            logger.warning("Overpass endpoint %s failed: %s", host, message)
            errors.append(f"{host}: {message}")
        raise OverpassUnavailableError(errors)

    def fetch_places(
        self,
        center: SearchCenter,
        radius_m: int,
        group_ids: Iterable[str],
        amenity_types: Optional[Iterable[str]] = None,
        shop_types: Optional[Iterable[str]] = None,
    ) -> List[Place]:
        filters = resolve_filters(group_ids, amenity_types, shop_types)
        if filters.is_empty:
            raise NoCategorySelectedError()

        query = build_overpass_query(center, radius_m, filters)
        logger.debug(
            "Overpass query: lat=%.6f lon=%.6f radius_m=%d amenity=%d shop=%d",
            center.lat,
            center.lon,
            int(radius_m),
            len(filters.amenity),
            len(filters.shop),
        )
        places = dedupe_places(self.run_query(query))
        logger.debug("OverpassClient.fetch_places: %d unique places", len(places))
        return places


class _EndpointFailure(Exception):
    """A reachable endpoint returned something unusable."""


_default_overpass_client: Optional[OverpassClient] = None


def get_default_overpass_client() -> OverpassClient:
    global _default_overpass_client
    if _default_overpass_client is None:
        _default_overpass_client = OverpassClient()
    return _default_overpass_client


def fetch_places(
    center: SearchCenter,
    radius_m: int,
    group_ids: Iterable[str],
    amenity_types: Optional[Iterable[str]] = None,
    shop_types: Optional[Iterable[str]] = None,
) -> List[Place]:
    return get_default_overpass_client().fetch_places(
        center, radius_m, group_ids, amenity_types, shop_types
    )
