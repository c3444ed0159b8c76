"""
Tests for the favorite combos store.
"""

import pytest

from gagsim.storage.favorites import (
    FavoriteCombo,
    FavoritesStore,
    favorite_id,
    scenario_signature,
)


@pytest.fixture
def store(tmp_path):
    return FavoritesStore(tmp_path / "nested" / "favorites.json")


@pytest.fixture
def combo(repo):
    added = [repo.get_gag_by_name("Whole Cream Pie"), repo.get_gag_by_name("Fire Hose")]
    return FavoriteCombo(
        id=favorite_id(10, 2, 142, added),
        added_gags=added,
        toons=2,
        total=142,
        over=10,
        max_cog_level=10,
    )


def test_scenario_signature():
    assert scenario_signature(10, None, False, 2) == "lvl:10|hp:full|lured:0|toons:2"
    assert scenario_signature(10, 50, True, 4) == "lvl:10|hp:50|lured:1|toons:4"


def test_favorite_id_ignores_order(repo):
    pie = repo.get_gag_by_name("Whole Cream Pie")
    hose = repo.get_gag_by_name("Fire Hose")
    assert favorite_id(10, 2, 142, [pie, hose]) == favorite_id(10, 2, 142, [hose, pie])
    assert favorite_id(10, 2, 142, [pie, hose]) == (
        "10|2|142|Squirt:5:Fire Hose|Throw:5:Whole Cream Pie"
    )


def test_missing_file_is_empty(store):
    assert store.load("anything") == []


def test_toggle_adds_then_removes(store, combo):
    key = scenario_signature(10, None, False, 2)
    assert store.toggle(key, combo) == [combo]
    assert store.path.is_file()
    assert store.load(key) == [combo]
    assert store.toggle(key, combo) == []
    assert store.load(key) == []


def test_new_favorites_go_first(store, combo):
    other = combo.model_copy(update={"id": "other"})
    store.toggle("k", combo)
    assert [f.id for f in store.toggle("k", other)] == ["other", combo.id]


def test_scenarios_are_separate(store, combo):
    store.save("a", [combo])
    store.save("b", [])
    assert store.load("a") == [combo]
    assert store.load("b") == []


def test_file_uses_camel_case(store, combo):
    store.save("a", [combo])
    text = store.path.read_text(encoding="utf-8")
    assert '"addedGags"' in text
    assert '"maxCogLevel"' in text


def test_corrupt_file_is_empty(store):
    store.path.parent.mkdir(parents=True)
    store.path.write_text("{not json", encoding="utf-8")
    assert store.load("a") == []
