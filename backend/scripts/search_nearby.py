"""Rank food places around a point from the command line.

Usage:
    python -m scripts.search_nearby --lat 52.3728 --lon 4.8936 [--radius 1500] [--mode balanced]
    python -m scripts.search_nearby --address "Dam, Amsterdam" --group buy-food --shop bakery --explain

Prints the top picks with distance and score. With --explain each pick is
followed by its score breakdown. Exits 1 when the search fails or finds nothing.
"""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv

# Load environment variables from backend/.env (optional) before imports that read settings
env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(env_path)

from domain.models import PreferenceMode, SearchCenter, SearchStatus
from services.errors import GeocodingError
from services.food_categories import DEFAULT_FOOD_CATEGORY_IDS, format_food_type
from services.preferences import DEFAULT_RADIUS_M
from services.search_controller import DEFAULT_CENTER, SearchController

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Find and rank nearby food places from OpenStreetMap.")
    parser.add_argument("--lat", type=float, default=None, help="Search center latitude.")
    parser.add_argument("--lon", type=float, default=None, help="Search center longitude.")
    parser.add_argument("--address", default=None, help="Geocode this address with Nominatim and search there.")
    parser.add_argument("--radius", type=int, default=DEFAULT_RADIUS_M, help="Search radius in meters (250-5000).")
    parser.add_argument(
        "--group",
        action="append",
        choices=list(DEFAULT_FOOD_CATEGORY_IDS),
        help="Category group to search; repeatable. Defaults to all groups.",
    )
    parser.add_argument("--amenity", action="append", default=[], help="Restrict to this amenity type; repeatable.")
    parser.add_argument("--shop", action="append", default=[], help="Restrict to this shop type; repeatable.")
    parser.add_argument(
        "--mode",
        choices=[mode.value for mode in PreferenceMode],
        default=PreferenceMode.BALANCED.value,
        help="Weighting preset.",
    )
    parser.add_argument("--limit", type=int, default=None, help="How many picks to print (default: SEARCH_TOP_N).")
    parser.add_argument("--explain", action="store_true", help="Print the score breakdown for each pick.")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging.")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if (args.lat is None) != (args.lon is None):
        parser.error("--lat and --lon must be given together")

    controller = SearchController(top_n=args.limit)
    profile = controller.profile
    profile.set_radius(args.radius)
    profile.set_groups(args.group or DEFAULT_FOOD_CATEGORY_IDS)
    profile.set_amenity_types(args.amenity)
    profile.set_shop_types(args.shop)
    profile.set_mode(args.mode)

    if args.address:
        try:
            label = controller.geocode(args.address)
        except GeocodingError as exc:
            print(f"Error: {exc}")
            return 1
        if label is None:
            print(f"No match for address: {args.address}")
            return 1
        print(f"Moved to {label}")
    elif args.lat is not None:
        controller.set_center(SearchCenter(lat=args.lat, lon=args.lon))
    else:
        controller.set_center(DEFAULT_CENTER)

    prefs = profile.preferences
    status = controller.run_search()
    if status is SearchStatus.ERROR:
        print(f"Error: {controller.error}")
        return 1
    if status is SearchStatus.EMPTY:
        print("No results found in this radius. Try widening your search.")
        return 1

    picks = controller.visible_places
    print(
        f"Top {len(picks)} picks within {prefs.radius} m "
        f"({prefs.preference_mode.label}) of {controller.center.lat:.5f},{controller.center.lon:.5f}"
    )
    for rank, place in enumerate(picks, start=1):
        print(
            f"#{rank:<3} {place.score:>5.2f}  {place.distance_km:.2f} km  "
            f"{place.name} [{format_food_type(place.axis, place.type)}]"
        )
        if args.explain:
            for row in place.breakdown:
                print(f"       {row.value:+.2f}  {row.label}: {row.reason}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
