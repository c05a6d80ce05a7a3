"""Forward geocoding helper using OpenStreetMap Nominatim.

Moves the search center to a typed address. Requests share a session, a
global rate limit and an identifying User-Agent as Nominatim's usage policy asks.
"""

from __future__ import annotations

import logging
import re
import threading
import time
from dataclasses import dataclass
from typing import Any, Optional

import requests

from domain.models import SearchCenter
from services.errors import GeocodingError
from settings import FALLBACK_UA, settings

logger = logging.getLogger(__name__)
_session = requests.Session()
_last_request_ts: float = 0.0
_lock = threading.Lock()
_logged_ua = False

if settings.NOMINATIM_USER_AGENT is None:
    logger.warning(
        "NOMINATIM_USER_AGENT not set in environment; using fallback UA. "
        "This may violate Nominatim usage policy."
    )

_ua_value = settings.NOMINATIM_USER_AGENT or FALLBACK_UA
NOMINATIM_HEADERS = {
    "User-Agent": _ua_value,
    "Accept": "application/json",
}


def _redact_email(ua: str) -> str:
    if "@" not in ua:
        return ua
    return re.sub(r"\S+@\S+", "<redacted>", ua)


@dataclass(frozen=True)
class GeocodeResult:
    lat: float
    lon: float
    label: str

    @property
    def center(self) -> SearchCenter:
        return SearchCenter(lat=self.lat, lon=self.lon)


def _throttled_get(
    url: str,
    *,
    params: dict[str, Any],
    headers: dict[str, str],
    timeout: float,
) -> requests.Response:
    """Perform a GET request with a simple global rate limit."""
    global _last_request_ts
    with _lock:
        now = time.time()
        delta = now - _last_request_ts
        if delta < settings.NOMINATIM_MIN_INTERVAL:
            time.sleep(settings.NOMINATIM_MIN_INTERVAL - delta)
        _last_request_ts = time.time()
    return _session.get(url, params=params, headers=headers, timeout=timeout)


def geocode_address(query: str) -> Optional[GeocodeResult]:
    """Resolve free text to the single best Nominatim match.

    Returns None for blank input (no request is made) and when nothing matches.
    Raises GeocodingError when the lookup itself fails.
    """
    text = (query or "").strip()
    if not text:
        return None

    global _logged_ua
    if not _logged_ua:
        logger.debug("Nominatim User-Agent: %s", _redact_email(_ua_value))
        _logged_ua = True

    params = {
        "format": "jsonv2",
        "limit": "1",
        "q": text,
    }
    try:
        resp = _throttled_get(
            settings.NOMINATIM_SEARCH_URL, params=params, headers=NOMINATIM_HEADERS, timeout=5.0
        )
    except requests.RequestException as exc:
        logger.warning("Nominatim search error for %r: %s", text, exc)
        raise GeocodingError("Nominatim lookup failed") from exc

    if not resp.ok:
        logger.warning("Nominatim search for %r returned HTTP %s", text, resp.status_code)
        raise GeocodingError("Nominatim lookup failed")

    try:
        results = resp.json()
    except ValueError as exc:
        logger.warning("Nominatim search JSON error for %r: %s", text, exc)
        raise GeocodingError("Nominatim lookup failed") from exc

    if not isinstance(results, list) or not results:
        return None

    best = results[0]
    try:
        return GeocodeResult(
            lat=float(best["lat"]),
            lon=float(best["lon"]),
            label=str(best.get("display_name") or text),
        )
    except (KeyError, TypeError, ValueError) as exc:
        logger.warning("Nominatim search returned an unusable match for %r: %s", text, exc)
        return None
