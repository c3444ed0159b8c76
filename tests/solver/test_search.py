"""
Tests for the combination search.
"""

from gagsim.combat.health import cog_health
from gagsim.core.constants import GagTrack, ToonRestriction
from gagsim.solver.capacity import build_track_capacity, normalize_toon_restrictions
from gagsim.solver.pool import compute_candidate_pool
from gagsim.solver.request import FillRequest
from gagsim.solver.search import exact_key, generate_options


def run_search(request: FillRequest):
    restrictions = normalize_toon_restrictions(request.toon_restrictions, request.max_toons)
    capacity = build_track_capacity(restrictions, request.enabled_tracks)
    candidates = compute_candidate_pool(request, capacity)
    hp = request.target_hp_override or cog_health(request.target_level)
    return generate_options(request, candidates, hp, restrictions, capacity)


def test_exact_key_ignores_order(gag):
    pie, hose = gag("Whole Cream Pie"), gag("Fire Hose")
    assert exact_key([pie, hose, pie]) == exact_key([pie, pie, hose])
    assert exact_key([pie, hose]) != exact_key([pie, hose, hose])
    assert exact_key([]) == ()
    assert dict(exact_key([pie, pie]))[(GagTrack.THROW, 5, "Whole Cream Pie")] == 2


def test_single_slot_search(gag):
    request = FillRequest(
        target_level=1,
        max_toons=1,
        available_gags=[gag("Cupcake"), gag("Bike Horn"), gag("Flower Pot")],
    )
    options = run_search(request)
    assert [o.added_gags[0].name for o in options] == ["Flower Pot", "Cupcake"]
    assert [o.overkill for o in options] == [4, 0]
    assert all(o.total_damage >= 6 for o in options)


def test_already_kills_comes_first(gag):
    request = FillRequest(
        target_level=1,
        max_toons=2,
        current_gags=[gag("Whole Cream Pie")],
        available_gags=[gag("Cupcake")],
    )
    options = run_search(request)
    assert options[0].added_gags == ()
    assert options[0].total_damage == 40
    assert 0.0 < options[0].accuracy <= 1.0
    assert len(options) == 2


def test_options_never_fall_short_or_overflow(repo, gag):
    request = FillRequest(
        target_level=9,
        max_toons=3,
        current_gags=[gag("Fire Hose")],
        available_gags=repo.all_gags(),
        max_generated=2000,
    )
    options = run_search(request)
    assert options
    for option in options:
        assert option.total_damage >= cog_health(9)
        assert 1 + len(option.added_gags) <= 3
        assert 0.0 <= option.accuracy <= 1.0
    keys = [exact_key(o.added_gags) for o in options]
    assert len(keys) == len(set(keys))


def test_only_one_trap(gag):
    request = FillRequest(
        target_level=2,
        max_toons=3,
        available_gags=[gag("Banana Peel"), gag("Rake"), gag("$1 Bill")],
    )
    options = run_search(request)
    assert options
    for option in options:
        assert sum(1 for g in option.added_gags if g.track == GagTrack.TRAP) <= 1


def test_restrictions_are_respected(repo):
    request = FillRequest(
        target_level=6,
        max_toons=2,
        toon_restrictions=[ToonRestriction.LURELESS, ToonRestriction.LURELESS],
        available_gags=repo.all_gags(),
    )
    options = run_search(request)
    assert options
    assert all(g.track != GagTrack.LURE for o in options for g in o.added_gags)


def test_generation_cap_stops_the_search(repo):
    request = FillRequest(
        target_level=1,
        max_toons=4,
        available_gags=repo.all_gags(),
        max_generated=50,
    )
    assert len(run_search(request)) == 50


def test_no_free_slot(gag):
    request = FillRequest(
        target_level=12,
        max_toons=1,
        current_gags=[gag("Cupcake")],
        available_gags=[gag("Grand Piano")],
    )
    assert run_search(request) == []
