"""
Tests for the gag catalog repository and the input-coercion helpers.
"""

import math

import pytest

from gagsim.core.constants import GagTrack, adapt_keys_to_enum
from gagsim.core.error_handling import (
    ensure_int_in_range,
    ensure_non_negative_float,
    ensure_optional_hp,
)
from gagsim.items.gag import GagInstance, committed, new_instance


def test_catalog_is_complete(repo):
    assert len(repo.tracks) == 7
    assert len(repo.gags) == 49
    for track in repo.tracks.values():
        assert [g.level for g in track.gags] == list(range(1, 8))


def test_track_order(repo):
    assert repo.track_order() == [
        GagTrack.TOONUP,
        GagTrack.TRAP,
        GagTrack.LURE,
        GagTrack.SOUND,
        GagTrack.THROW,
        GagTrack.SQUIRT,
        GagTrack.DROP,
    ]


def test_gags_inherit_track_data(repo):
    cake = repo.get_gag(GagTrack.THROW, 6, "Birthday Cake")
    assert cake is not None
    assert cake.track == GagTrack.THROW
    assert cake.dmg_type.value == "Damage"
    assert cake.max_dmg == 100


def test_lookup_by_name_is_case_insensitive(repo):
    assert repo.get_gag_by_name("whole cream pie").key == (GagTrack.THROW, 5, "Whole Cream Pie")


def test_missing_gag_warns(repo, mocker):
    warn = mocker.patch("gagsim.core.content.log_warning")
    assert repo.get_gag(GagTrack.THROW, 5, "Lemon Meringue") is None
    assert repo.get_gag_by_name("Lemon Meringue") is None
    assert warn.call_count == 2


def test_find_canonical_gag(repo):
    catalog = repo.get_gag_by_name("Fire Hose")
    instance = new_instance(catalog, organic=True)
    assert repo.find_canonical_gag(instance) == catalog


def test_reload_rejects_missing_catalog(repo, tmp_path):
    with pytest.raises(ValueError):
        repo.reload(tmp_path)
    # A failed reload leaves the loaded catalog untouched.
    assert len(repo.gags) == 49


def test_new_instance_and_committed(repo):
    catalog = repo.get_gag_by_name("Cupcake")
    first = new_instance(catalog)
    preview = new_instance(catalog, preview=True)
    assert isinstance(first, GagInstance)
    assert first.id != preview.id
    assert not first.is_organic
    assert committed([first, preview]) == [first]
    assert first.to_info() == catalog


def test_adapt_keys_to_enum():
    adapted = adapt_keys_to_enum(GagTrack, {"Throw": 1, "DROP": 2, "Bogus": 3})
    assert adapted == {GagTrack.THROW: 1, GagTrack.DROP: 2}


def test_ensure_non_negative_float():
    assert ensure_non_negative_float("2.5", "w", 1.0) == 2.5
    assert ensure_non_negative_float(-3, "w", 1.0) == 0.0
    assert ensure_non_negative_float(math.inf, "w", 1.0) == 1.0
    assert ensure_non_negative_float(None, "w", 1.0) == 1.0


def test_ensure_int_in_range():
    assert ensure_int_in_range(7.9, "n", 0, 5) == 5
    assert ensure_int_in_range(-2, "n", 0) == 0
    assert ensure_int_in_range(3.7, "n", 0) == 3
    assert ensure_int_in_range("x", "n", 0, default=4) == 4


def test_ensure_optional_hp():
    assert ensure_optional_hp(None, 1) is None
    assert ensure_optional_hp("abc", 1) is None
    assert ensure_optional_hp(12.7, 1) == 12
    assert ensure_optional_hp(0, 1) == 1
    assert ensure_optional_hp(0, 0) == 0
