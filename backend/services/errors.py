"""Failure signals raised by the search pipeline."""

from __future__ import annotations

from typing import List, Sequence


class SearchError(Exception):
    """Base class for failures surfaced verbatim to the user."""


class NoCategorySelectedError(SearchError):
    """The selection resolves to no amenity and no shop values."""

    def __init__(self, message: str = "No food category selected") -> None:
        super().__init__(message)


class OverpassUnavailableError(SearchError):
    """Every Overpass endpoint failed; carries one message per endpoint."""

    def __init__(self, errors: Sequence[str]) -> None:
        self.errors: List[str] = list(errors)
        super().__init__(" | ".join(self.errors) or "No Overpass endpoint configured")


class GeocodingError(SearchError):
    """The Nominatim lookup failed (not the same as "no match")."""
