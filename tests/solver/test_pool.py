"""
Tests for the candidate pool builder.
"""

import pytest

from gagsim.core.constants import GagTrack, ToonRestriction
from gagsim.solver.capacity import build_track_capacity
from gagsim.solver.pool import compute_candidate_pool, is_level_excluded
from gagsim.solver.request import ExcludeLevels, FillRequest


@pytest.fixture
def full_capacity():
    return build_track_capacity([ToonRestriction.NONE] * 4)


def pool(repo, capacity, **fields):
    request = FillRequest(available_gags=repo.all_gags(), **fields)
    return compute_candidate_pool(request, capacity)


def test_pool_order(repo, full_capacity):
    names = [g.name for g in pool(repo, full_capacity)[:6]]
    assert names == [
        "Flower Pot",
        "$1 Bill",
        "Bike Horn",
        "Squirting Flower",
        "Cupcake",
        "Banana Peel",
    ]


def test_pool_excludes_toonup(repo, full_capacity):
    candidates = pool(repo, full_capacity)
    assert len(candidates) == 42
    assert all(g.track != GagTrack.TOONUP for g in candidates)


def test_lured_cog_skips_lure_and_trap(repo, full_capacity):
    candidates = pool(repo, full_capacity, is_target_already_lured=True)
    assert {g.track for g in candidates} == {
        GagTrack.SOUND,
        GagTrack.THROW,
        GagTrack.SQUIRT,
        GagTrack.DROP,
    }


def test_level_exclusions(repo, full_capacity):
    candidates = pool(
        repo,
        full_capacity,
        exclude_levels=ExcludeLevels(low1to3=True, level7=True, level6_by_track={GagTrack.THROW: True}),
    )
    levels = {g.level for g in candidates}
    assert levels == {4, 5, 6}
    names = {g.name for g in candidates}
    assert "Birthday Cake" not in names
    assert "Storm Cloud" in names


def test_disabled_track(repo, full_capacity):
    candidates = pool(repo, full_capacity, enabled_tracks={GagTrack.DROP: False})
    assert all(g.track != GagTrack.DROP for g in candidates)


def test_track_without_capacity(repo):
    capacity = build_track_capacity([ToonRestriction.SOUNDLESS] * 2)
    candidates = pool(repo, capacity)
    assert all(g.track != GagTrack.SOUND for g in candidates)


def test_missing_available_gags(full_capacity):
    assert compute_candidate_pool(FillRequest(), full_capacity) == []


def test_is_level_excluded():
    assert not is_level_excluded(7, GagTrack.DROP, None)
    rules = ExcludeLevels(level6=True)
    assert is_level_excluded(6, GagTrack.SOUND, rules)
    assert not is_level_excluded(5, GagTrack.SOUND, rules)
    rules = ExcludeLevels(low1to3=True)
    assert is_level_excluded(3, GagTrack.LURE, rules)
    assert not is_level_excluded(4, GagTrack.LURE, rules)
