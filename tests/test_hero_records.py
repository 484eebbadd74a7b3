import pytest

from hero_town.heroes import (
    ALL_POWERS,
    VIEW_CARD,
    VIEW_LIST,
    Hero,
    HeroDraft,
    HeroValidationError,
    ViewState,
    derive_view,
)


def test_from_dict_coerces_string_scores_and_keeps_id():
    hero = Hero.from_dict(
        {"id": 7, "name": "Alice", "superpower": "Flying", "humilityScore": "8.5"}
    )
    assert hero == Hero("Alice", "Flying", 8.5, id=7)
    assert hero.power_key == "flying"


def test_from_dict_accepts_mongo_style_id():
    hero = Hero.from_dict(
        {"_id": "abc", "name": "Bob", "superpower": "Healing", "humilityScore": 3}
    )
    assert hero.id == "abc"
    assert hero.humility_score == 3.0


def test_to_payload_uses_wire_field_names():
    assert Hero("Cara", "Strength", 5.0).to_payload() == {
        "name": "Cara",
        "superpower": "Strength",
        "humilityScore": 5.0,
    }


def test_draft_validate_strips_and_rounds():
    hero = HeroDraft("  Alice ", " Flying", "7.26").validate()
    assert hero == Hero("Alice", "Flying", 7.3)


@pytest.mark.parametrize(
    "draft, message",
    [
        (HeroDraft("", "Flying", 5), "Name is required"),
        (HeroDraft("Alice", "   ", 5), "Superpower is required"),
        (HeroDraft("Alice", "Flying", None), "Humility Score is required"),
        (HeroDraft("Alice", "Flying", ""), "Humility Score is required"),
        (HeroDraft("Alice", "Flying", "lots"), "must be a number"),
        (HeroDraft("Alice", "Flying", 0.5), "between 1 and 10"),
        (HeroDraft("Alice", "Flying", 10.1), "between 1 and 10"),
        (HeroDraft("Alice", "Flying", 10.06), "got 10.1"),
        (HeroDraft("Alice", "Flying", 0.94), "got 0.9"),
    ],
)
def test_draft_validate_rejects_bad_input(draft, message):
    with pytest.raises(HeroValidationError, match=message):
        draft.validate()


def test_validation_error_is_a_value_error():
    with pytest.raises(ValueError):
        HeroDraft().validate()


def test_view_state_defaults_and_transitions_are_pure():
    state = ViewState()
    assert state == ViewState(VIEW_CARD, False, True, ALL_POWERS)

    toggled = state.toggle_view_mode().toggle_sort().toggle_panel()
    assert toggled.view_mode == VIEW_LIST
    assert toggled.sort_ascending is True
    assert toggled.panel_open is False
    # original untouched
    assert state == ViewState()

    assert toggled.toggle_view_mode().view_mode == VIEW_CARD
    assert state.select_power("flying").selected_power == "flying"
    assert state.select_power(None).selected_power == ALL_POWERS


def test_reconcile_resets_missing_power():
    heroes = [Hero("Alice", "Flying", 8.0)]
    kept = ViewState(selected_power="flying")
    assert kept.reconcile(heroes) is kept
    assert ViewState(selected_power="healing").reconcile(heroes).selected_power == ALL_POWERS


def test_derive_view_all_and_grouped():
    heroes = [
        Hero("Alice", "Flying", 8.0),
        Hero("Bob", "flying", 3.0),
        Hero("Cara", "Strength", 5.0),
    ]
    all_view = derive_view(heroes, ViewState(sort_ascending=True))
    assert all_view.heading is None
    assert [h.name for h in all_view.heroes] == ["Bob", "Cara", "Alice"]
    assert all_view.title == "3 Superheroes in our Town 🔥"

    grouped = derive_view(heroes, ViewState(view_mode=VIEW_LIST, selected_power="flying"))
    assert grouped.heading == "2 which can flying!"
    assert [h.name for h in grouped.heroes] == ["Alice", "Bob"]
    assert grouped.view_mode == VIEW_LIST


@pytest.mark.parametrize("raw, expected", [(0.96, 1.0), ("10.04", 10.0), (1, 1.0)])
def test_draft_range_check_applies_to_rounded_score(raw, expected):
    # Both ends of the range see the same one-decimal value that gets posted.
    hero = HeroDraft("Alice", "Flying", raw).validate()
    assert hero.humility_score == expected
