from domain.models import PreferenceMode, SearchPreferences
from services.food_categories import BUY_FOOD_CATEGORY_ID, DEFAULT_FOOD_CATEGORY_IDS, EAT_AND_DRINK_CATEGORY_ID
from services.preferences import DEFAULT_RADIUS_M, PreferenceProfile


def test_defaults():
    prefs = PreferenceProfile().preferences
    assert prefs.radius == DEFAULT_RADIUS_M
    assert prefs.group_ids == DEFAULT_FOOD_CATEGORY_IDS
    assert prefs.amenity_types == ()
    assert prefs.shop_types == ()
    assert prefs.preference_mode is PreferenceMode.BALANCED


def test_radius_is_clamped():
    profile = PreferenceProfile()
    assert profile.set_radius(10).radius == 250
    assert profile.set_radius(99999).radius == 5000
    assert profile.set_radius(1750).radius == 1750


def test_mode_accepts_string_values():
    profile = PreferenceProfile()
    assert profile.set_mode("info").preference_mode is PreferenceMode.INFO
    assert profile.set_mode(PreferenceMode.CLOSE).preference_mode is PreferenceMode.CLOSE


def test_dropping_a_group_clears_its_axis_overrides():
    profile = PreferenceProfile()
    profile.set_amenity_types(["cafe", "pub"])
    profile.set_shop_types(["bakery"])

    prefs = profile.set_groups([EAT_AND_DRINK_CATEGORY_ID])
    assert prefs.amenity_types == ("cafe", "pub")
    assert prefs.shop_types == ()

    # Re-adding the shop group must not bring the stale override back
    prefs = profile.set_groups(DEFAULT_FOOD_CATEGORY_IDS)
    assert prefs.shop_types == ()


def test_empty_group_selection_falls_back_to_all():
    profile = PreferenceProfile()
    assert profile.set_groups([]).group_ids == DEFAULT_FOOD_CATEGORY_IDS


def test_toggle_group_never_empties_selection():
    profile = PreferenceProfile()
    profile.toggle_group(EAT_AND_DRINK_CATEGORY_ID)
    assert profile.preferences.group_ids == (BUY_FOOD_CATEGORY_ID,)
    profile.toggle_group(BUY_FOOD_CATEGORY_ID)
    assert profile.preferences.group_ids == (BUY_FOOD_CATEGORY_ID,)
    profile.toggle_group(EAT_AND_DRINK_CATEGORY_ID)
    assert profile.preferences.group_ids == (BUY_FOOD_CATEGORY_ID, EAT_AND_DRINK_CATEGORY_ID)


def test_subtype_overrides_limited_to_offered_values():
    profile = PreferenceProfile()
    profile.set_groups([BUY_FOOD_CATEGORY_ID])
    assert profile.set_amenity_types(["cafe"]).amenity_types == ()
    assert profile.set_shop_types(["bakery", "nonsense"]).shop_types == ("bakery",)
    assert "restaurant" not in profile.amenity_options
    assert "cheese" in profile.shop_options


def test_snapshot_is_not_affected_by_later_changes():
    profile = PreferenceProfile()
    snapshot = profile.preferences
    profile.set_radius(500)
    assert snapshot.radius == DEFAULT_RADIUS_M


def test_initial_preferences_are_validated():
    profile = PreferenceProfile(
        SearchPreferences(
            radius=100,
            group_ids=(EAT_AND_DRINK_CATEGORY_ID,),
            amenity_types=("bar",),
            shop_types=("bakery",),
            preference_mode=PreferenceMode.INFO,
        )
    )
    prefs = profile.preferences
    assert prefs.radius == 250
    assert prefs.group_ids == (EAT_AND_DRINK_CATEGORY_ID,)
    assert prefs.amenity_types == ("bar",)
    assert prefs.shop_types == ()
    assert prefs.preference_mode is PreferenceMode.INFO
