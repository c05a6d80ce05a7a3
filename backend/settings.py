import os
from typing import List, Tuple

# Basic settings helper to read environment configuration.

DEFAULT_OVERPASS_ENDPOINTS = (
    "https://overpass-api.de/api/interpreter",
    "https://overpass.kumi.systems/api/interpreter",
    "https://z.overpass-api.de/api/interpreter",
)
DEFAULT_RETRY_DELAYS_MS = (0, 400, 900)
FALLBACK_UA = "osm-food-picker/0.1 (contact: example@example.com)"


def _as_list(val: str | None, default: Tuple[str, ...]) -> List[str]:
    if not val:
        return list(default)
    items = [item.strip() for item in val.split(",") if item.strip()]
    return items or list(default)


def _as_int_list(val: str | None, default: Tuple[int, ...]) -> List[int]:
    if not val:
        return list(default)
    try:
        return [int(item) for item in _as_list(val, ())]
    except ValueError:
        return list(default)


def _as_float(val: str | None, default: float) -> float:
    if val is None:
        return default
    try:
        return float(val)
    except ValueError:
        return default


def _as_int(val: str | None, default: int) -> int:
    if val is None:
        return default
    try:
        return int(val)
    except ValueError:
        return default


class Settings:
    def __init__(self) -> None:
        self.OVERPASS_ENDPOINTS: List[str] = _as_list(
            os.getenv("OVERPASS_ENDPOINTS"), DEFAULT_OVERPASS_ENDPOINTS
        )
        self.OVERPASS_RETRY_DELAYS_MS: List[int] = _as_int_list(
            os.getenv("OVERPASS_RETRY_DELAYS_MS"), DEFAULT_RETRY_DELAYS_MS
        )
        self.OVERPASS_TIMEOUT_SECONDS: float = _as_float(os.getenv("OVERPASS_TIMEOUT_SECONDS"), 25.0)
        self.OVERPASS_USER_AGENT: str = os.getenv("OVERPASS_USER_AGENT") or FALLBACK_UA
        self.NOMINATIM_SEARCH_URL: str = os.getenv(
            "NOMINATIM_SEARCH_URL", "https://nominatim.openstreetmap.org/search"
        )
        self.NOMINATIM_USER_AGENT: str | None = os.getenv("NOMINATIM_USER_AGENT")
        self.NOMINATIM_MIN_INTERVAL: float = _as_float(os.getenv("NOMINATIM_MIN_INTERVAL"), 1.1)
        self.SEARCH_TOP_N: int = _as_int(os.getenv("SEARCH_TOP_N"), 15)


settings = Settings()
