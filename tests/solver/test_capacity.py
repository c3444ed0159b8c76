"""
Tests for toon restrictions, track capacity and gag assignment.
"""

import pytest

from gagsim.core.constants import GagTrack, ToonRestriction
from gagsim.solver.capacity import (
    build_track_capacity,
    can_assign_gags_to_toons,
    normalize_toon_restrictions,
    toon_allows,
)

NONE = ToonRestriction.NONE
LURELESS = ToonRestriction.LURELESS
SOUNDLESS = ToonRestriction.SOUNDLESS


@pytest.mark.parametrize("restriction", list(ToonRestriction))
def test_throw_and_squirt_always_allowed(restriction):
    assert toon_allows(GagTrack.THROW, restriction)
    assert toon_allows(GagTrack.SQUIRT, restriction)


def test_missing_track_is_not_allowed():
    assert not toon_allows(GagTrack.LURE, LURELESS)
    assert toon_allows(GagTrack.LURE, SOUNDLESS)
    assert not toon_allows(GagTrack.TOONUP, ToonRestriction.TOONUP_LESS)
    assert not toon_allows(GagTrack.DROP, ToonRestriction.DROPLESS)
    assert not toon_allows(GagTrack.TRAP, ToonRestriction.TRAPLESS)


def test_normalize_pads_and_truncates():
    assert normalize_toon_restrictions(["lureless"], 3) == [LURELESS, NONE, NONE]
    assert normalize_toon_restrictions(None, 2) == [NONE, NONE]
    assert normalize_toon_restrictions([LURELESS, SOUNDLESS, LURELESS], 2) == [
        LURELESS,
        SOUNDLESS,
    ]


def test_capacity_without_restrictions():
    capacity = build_track_capacity([NONE] * 4)
    assert capacity[GagTrack.TRAP] == 1
    for track in (GagTrack.LURE, GagTrack.SOUND, GagTrack.THROW, GagTrack.DROP):
        assert capacity[track] == 4


def test_capacity_with_restrictions_and_disabled_tracks():
    capacity = build_track_capacity(
        [LURELESS, LURELESS, SOUNDLESS, NONE],
        {GagTrack.DROP: False, GagTrack.THROW: True},
    )
    assert capacity[GagTrack.LURE] == 2
    assert capacity[GagTrack.SOUND] == 3
    assert capacity[GagTrack.THROW] == 4
    assert capacity[GagTrack.DROP] == 0


def test_assignment(gag):
    restrictions = [LURELESS, LURELESS, NONE, NONE]
    assert can_assign_gags_to_toons([gag("$10 Bill"), gag("$10 Bill")], restrictions)
    assert not can_assign_gags_to_toons([gag("$10 Bill")] * 3, restrictions)


def test_assignment_needs_the_right_toon_for_each_gag(gag):
    # The lure must go to the soundless toon and the sound to the lureless one.
    restrictions = [LURELESS, SOUNDLESS]
    assert can_assign_gags_to_toons([gag("Bike Horn"), gag("$1 Bill")], restrictions)
    assert not can_assign_gags_to_toons([gag("$1 Bill"), gag("$5 Bill")], restrictions)


def test_assignment_rejects_too_many_gags(gag):
    assert not can_assign_gags_to_toons([gag("Cupcake")] * 3, [NONE, NONE])
    assert can_assign_gags_to_toons([], [])
