import pytest

from domain.models import ClassificationAxis, Place, PreferenceMode, SearchCenter, SearchPreferences
from services.food_categories import DEFAULT_FOOD_CATEGORY_IDS
from services.scoring import (
    PREFERENCE_WEIGHTS,
    closeness_score,
    haversine_distance_km,
    score_place,
    score_places,
    top_places,
)

CENTER = SearchCenter(lat=52.3728, lon=4.8936)


def _place(pid: str, lat: float = 52.3728, lon: float = 4.8936, **extra) -> Place:
    return Place(
        id=pid,
        name=pid,
        lat=lat,
        lon=lon,
        axis=ClassificationAxis.AMENITY,
        type="restaurant",
        **extra,
    )


def _prefs(mode: PreferenceMode) -> SearchPreferences:
    return SearchPreferences(radius=1500, group_ids=DEFAULT_FOOD_CATEGORY_IDS, preference_mode=mode)


def test_haversine_zero_for_same_point():
    assert haversine_distance_km(CENTER, CENTER) == 0


def test_haversine_one_degree_latitude():
    d = haversine_distance_km(SearchCenter(0.0, 0.0), SearchCenter(1.0, 0.0))
    assert d == pytest.approx(111.19, abs=0.01)


def test_closeness_is_bounded_and_decreasing():
    assert closeness_score(0.0) == 5.0
    assert closeness_score(1.0) == 2.5
    assert closeness_score(10.0) < closeness_score(2.0)


def test_preference_weights_table():
    assert PREFERENCE_WEIGHTS[PreferenceMode.CLOSE] == (0.8, 0.2)
    assert PREFERENCE_WEIGHTS[PreferenceMode.BALANCED] == (0.5, 0.5)
    assert PREFERENCE_WEIGHTS[PreferenceMode.INFO] == (0.1, 4.0)


def test_balanced_example_breakdown():
    place = _place("node-1", opening_hours="Mo-Su 09:00-22:00", website="https://example.com")
    scored = score_place(place, CENTER, PreferenceMode.BALANCED)

    assert scored.distance_km == 0
    assert scored.score == 2.9
    assert [row.label for row in scored.breakdown] == ["Close to you", "Has opening hours", "Has website"]
    assert [row.value for row in scored.breakdown] == [2.5, 0.25, 0.15]
    assert scored.breakdown[0].reason == "0.00 km away (scaled distance score 5.00)"
    assert scored.id == "node-1"
    assert scored.website == "https://example.com"


def test_placeholder_row_when_no_info():
    scored = score_place(_place("node-2"), CENTER, PreferenceMode.CLOSE)
    assert scored.score == 4.0
    assert len(scored.breakdown) == 2
    assert scored.breakdown[1].label == "Information tags"
    assert scored.breakdown[1].value == 0


def test_info_rows_follow_signal_order():
    place = _place(
        "node-3",
        address="1 Damrak Amsterdam",
        cuisine="pizza",
        phone="+31",
        website="https://x",
        opening_hours="24/7",
    )
    scored = score_place(place, CENTER, PreferenceMode.INFO)
    assert [row.label for row in scored.breakdown[1:]] == [
        "Has opening hours",
        "Has website",
        "Has phone number",
        "Has cuisine tag",
        "Has address info",
    ]
    assert [row.value for row in scored.breakdown[1:]] == [2.0, 1.2, 0.8, 0.4, 0.4]
    assert scored.score == pytest.approx(0.5 + 4.0 * 1.2)


def test_score_places_sorts_descending_and_keeps_every_place():
    places = [
        _place("far", lat=52.45, lon=4.95),
        _place("near", lat=52.373, lon=4.894),
        _place("documented", lat=52.40, lon=4.90, opening_hours="24/7", website="https://x", phone="1"),
    ]
    scored = score_places(places, CENTER, _prefs(PreferenceMode.BALANCED))

    assert len(scored) == len(places)
    assert {p.id for p in scored} == {"far", "near", "documented"}
    assert all(scored[i].score >= scored[i + 1].score for i in range(len(scored) - 1))
    assert scored[0].id == "near"


def test_info_mode_prefers_documented_places():
    places = [
        _place("near", lat=52.373, lon=4.894),
        _place("documented", lat=52.39, lon=4.90, opening_hours="24/7", website="https://x"),
    ]
    scored = score_places(places, CENTER, _prefs(PreferenceMode.INFO))
    assert scored[0].id == "documented"


def test_ties_keep_input_order():
    places = [_place("a"), _place("b"), _place("c")]
    scored = score_places(places, CENTER, _prefs(PreferenceMode.BALANCED))
    assert [p.id for p in scored] == ["a", "b", "c"]


def test_score_places_is_idempotent():
    places = [
        _place("x", lat=52.38, lon=4.90, cuisine="thai"),
        _place("y", lat=52.36, lon=4.88, phone="123"),
    ]
    prefs = _prefs(PreferenceMode.CLOSE)
    assert score_places(places, CENTER, prefs) == score_places(places, CENTER, prefs)


def test_top_places_limit():
    scored = score_places([_place(str(i)) for i in range(20)], CENTER, _prefs(PreferenceMode.BALANCED))
    assert len(top_places(scored, 15)) == 15
    assert len(top_places(scored, None)) == 20


def test_haversine_near_antipodal_points():
    d = haversine_distance_km(SearchCenter(-87.5, 0.0), SearchCenter(87.5, 180.0))
    assert d == pytest.approx(6371.0 * 3.141592653589793, rel=1e-6)


def test_score_place_on_far_side_of_the_globe():
    scored = score_place(_place("antipode", lat=87.5, lon=180.0), SearchCenter(-87.5, 0.0), PreferenceMode.CLOSE)
    assert scored.distance_km > 20000
    assert scored.score >= 0
