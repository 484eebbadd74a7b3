import copy

from hero_town.heroes import (
    ALL_POWERS,
    Hero,
    collection_title,
    filter_and_sort,
    group_by_power,
    group_heading,
    power_label,
    suggest_powers,
    unique_powers,
)


def _town():
    return [
        Hero("Alice", "Flying", 8.0, id=1),
        Hero("Bob", "flying", 3.0, id=2),
        Hero("Cara", "Strength", 5.0, id=3),
    ]


def _names(heroes):
    return [h.name for h in heroes]


def test_worked_example():
    town = _town()
    assert unique_powers(town) == ["all", "flying", "strength"]
    assert _names(filter_and_sort(town, "flying", False)) == ["Alice", "Bob"]
    assert _names(filter_and_sort(town, "all", True)) == ["Bob", "Cara", "Alice"]


def test_unique_powers_empty_collection():
    assert unique_powers([]) == [ALL_POWERS]
    assert group_by_power([]) == {}
    assert filter_and_sort([], ALL_POWERS, False) == []


def test_all_descending_contains_every_hero():
    town = _town()
    out = filter_and_sort(town, ALL_POWERS, False)
    assert sorted(_names(out)) == sorted(_names(town))
    scores = [h.humility_score for h in out]
    assert scores == sorted(scores, reverse=True)


def test_ties_keep_collection_order_in_both_directions():
    """
    Equal scores must stay in source order whether sorting up or down; the
    ascending result is not the reverse of the descending one.
    """
    heroes = [
        Hero("A", "x", 5.0),
        Hero("B", "x", 7.0),
        Hero("C", "x", 5.0),
        Hero("D", "x", 7.0),
        Hero("E", "x", 5.0),
    ]
    desc = filter_and_sort(heroes, ALL_POWERS, False)
    asc = filter_and_sort(heroes, ALL_POWERS, True)
    assert _names(desc) == ["B", "D", "A", "C", "E"]
    assert _names(asc) == ["A", "C", "E", "B", "D"]
    assert _names(asc) != list(reversed(_names(desc)))


def test_filter_and_sort_does_not_mutate_input_and_is_idempotent():
    town = _town()
    before = copy.deepcopy(town)
    first = filter_and_sort(town, "flying", True)
    second = filter_and_sort(town, "flying", True)
    assert first == second
    assert first is not second
    assert town == before


def test_unknown_power_yields_empty_view():
    assert filter_and_sort(_town(), "time travel", False) == []


def test_case_insensitive_grouping():
    heroes = [
        Hero("Zed", "Flying", 2.0),
        Hero("Yan", "Healing", 4.0),
        Hero("Xu", "FLYING", 9.0),
    ]
    groups = group_by_power(heroes)
    assert list(groups) == ["flying", "healing"]
    assert _names(groups["flying"]) == ["Zed", "Xu"]


def test_groups_partition_collection_with_keys_from_unique_powers():
    heroes = _town() + [Hero("Dee", "STRENGTH", 6.5), Hero("Eve", "Healing", 1.0)]
    groups = group_by_power(heroes)
    assert list(groups) == [p for p in unique_powers(heroes) if p != ALL_POWERS]
    union = [h for members in groups.values() for h in members]
    assert sorted(_names(union)) == sorted(_names(heroes))
    assert len(union) == len(heroes)


def test_labels_and_headings():
    assert power_label("all") == "All Powers"
    assert power_label("super strength") == "Super strength"
    assert group_heading("flying", 2) == "2 which can flying!"
    assert collection_title(_town()) == "3 Superheroes in our Town 🔥"


def test_suggest_powers_matches_substrings_case_insensitively():
    assert suggest_powers("") == []
    assert suggest_powers("   ") == []
    assert suggest_powers(None) == []
    assert suggest_powers("TELE") == ["Telekinesis", "Teleportation"]
    assert suggest_powers("ing") == [
        "Flying",
        "Healing",
        "Mind Reading",
        "Shape Shifting",
    ]
