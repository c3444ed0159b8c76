"""
Tests for the KO probability engine and its explanation.
"""

import pytest

from gagsim.combat.accuracy import (
    MAX_EXPLAIN_LEAVES,
    MAX_EXPLAIN_LINES,
    BranchStep,
    LeafStep,
    TrackStep,
    accuracy_cap,
    calculate_combo_accuracy,
    evaluate_combo,
    explain_combo_accuracy,
    lure_combo_bonus,
    target_defense,
)
from gagsim.core.constants import GagTrack


@pytest.mark.parametrize(
    "level, expected",
    [(-1, 0), (0, 0), (1, -2), (10, -45), (12, -55), (13, -60), (19, -60), (20, -65)],
)
def test_target_defense(level, expected):
    assert target_defense(level) == expected


def test_accuracy_cap():
    assert accuracy_cap(200) == 95
    assert accuracy_cap(-40) == 5
    assert accuracy_cap(60) == 60


def test_lure_combo_bonus(gag):
    assert lure_combo_bonus([gag("$10 Bill")]) == 0
    assert lure_combo_bonus([gag("$10 Bill"), gag("$10 Bill")]) == 20
    assert lure_combo_bonus([gag("$10 Bill"), gag("$5 Bill")]) == 10
    assert lure_combo_bonus([gag("$1 Bill"), gag("$10 Bill")]) == 10
    # Single-target and group lures do not back each other up.
    assert lure_combo_bonus([gag("Big Magnet"), gag("$10 Bill")]) == 0


def test_empty_selection():
    assert calculate_combo_accuracy([], 10) == 0.0
    assert explain_combo_accuracy([], 10) == "No gags selected."


def test_single_throw_is_capped(gag):
    assert calculate_combo_accuracy([gag("Whole Cream Pie")], 1) == pytest.approx(0.95)


def test_drop_against_defense(gag):
    # 50 base + 60 exp - 45 defense.
    assert calculate_combo_accuracy([gag("Grand Piano")], 10) == pytest.approx(0.65)


def test_no_ko_when_damage_is_short(gag):
    assert calculate_combo_accuracy([gag("Flower Pot")], 10) == 0.0


def test_lured_cog_auto_hit_and_auto_miss(gag):
    assert calculate_combo_accuracy([gag("Whole Cream Pie")], 1, initial_lured=True) == 1.0
    assert calculate_combo_accuracy([gag("Grand Piano")], 1, initial_lured=True) == 0.0


def test_lure_springs_trap(gag):
    # 70 base + 60 exp - 45 defense + 10 trap bonus, capped at 95.
    probability = calculate_combo_accuracy([gag("$10 Bill"), gag("TNT")], 10)
    assert probability == pytest.approx(0.95)


def test_trap_without_lure_never_kills(gag):
    assert calculate_combo_accuracy([gag("TNT")], 1) == 0.0


def test_stun_carries_to_later_tracks(gag):
    # Sound hits 95%: Drop then rolls 90% (stunned) instead of 65%.
    probability = calculate_combo_accuracy([gag("Elephant Trunk"), gag("Grand Piano")], 10)
    assert probability == pytest.approx(0.95 * 0.90 + 0.05 * 0.65)


def test_hp_override(gag):
    gags = [gag("Flower Pot")]
    assert calculate_combo_accuracy(gags, 10) == 0.0
    assert calculate_combo_accuracy(gags, 10, hp_override=10.9) == pytest.approx(0.65)
    # Nothing left to take down: every branch is a KO.
    assert calculate_combo_accuracy(gags, 10, hp_override=-5) == pytest.approx(1.0)
    # Unusable overrides are ignored.
    assert calculate_combo_accuracy(gags, 10, hp_override=float("nan")) == 0.0


def test_probability_is_a_probability(gag):
    combos = [
        [gag("$10 Bill"), gag("TNT"), gag("Fire Hose"), gag("Grand Piano")],
        [gag("Big Magnet"), gag("$10 Bill"), gag("Elephant Trunk"), gag("Safe")],
        [gag("Bike Horn"), gag("Cupcake"), gag("Squirting Flower"), gag("Flower Pot")],
    ]
    for combo in combos:
        for level in (1, 8, 12, 20):
            assert 0.0 <= calculate_combo_accuracy(combo, level) <= 1.0


def test_trace_structure(gag):
    trace = evaluate_combo([gag("Elephant Trunk"), gag("Grand Piano")], 10)
    assert trace.tracks == [GagTrack.SOUND, GagTrack.DROP]
    assert trace.hp == 132
    assert trace.defense == -45
    assert isinstance(trace.steps[0], TrackStep)
    assert isinstance(trace.steps[1], BranchStep) and trace.steps[1].hit
    leaves = trace.leaves
    assert len(leaves) == 4
    assert all(isinstance(leaf, LeafStep) for leaf in leaves)
    assert sum(leaf.prob for leaf in leaves) == pytest.approx(1.0)
    assert sum(leaf.prob for leaf in leaves if leaf.ko) == pytest.approx(trace.probability)


def test_zero_probability_branches_are_pruned(gag):
    trace = evaluate_combo([gag("Grand Piano")], 1, initial_lured=True)
    # The hit branch of the auto-missing Drop has no leaf.
    assert len(trace.leaves) == 1
    assert trace.leaves[0].damage == 0


def test_explain_matches_scalar(gag):
    combos = [
        [gag("Elephant Trunk"), gag("Grand Piano")],
        [gag("$10 Bill"), gag("TNT"), gag("Whole Cream Pie")],
        [gag("Fire Hose"), gag("Fire Hose")],
    ]
    for combo in combos:
        probability = calculate_combo_accuracy(combo, 10)
        text = explain_combo_accuracy(combo, 10)
        assert text.splitlines()[0] == f"One-turn KO probability: {probability * 100:.2f}%"


def test_explain_content(gag):
    text = explain_combo_accuracy([gag("Elephant Trunk"), gag("Grand Piano")], 10)
    assert "Target level: 10 (HP 132, defense -45)" in text
    assert "Initial status: Not lured" in text
    assert "Tracks resolved: Sound -> Drop" in text
    assert "Drop hit% = cap(base 50 + exp 60 + def -45 + stun 25) = 90%" in text
    assert "Leaf: damage 191 >= HP 132 => KO ✓" in text
    assert "One-turn KO probability: 88.75%" in text


def test_explain_mentions_trap_and_override(gag):
    text = explain_combo_accuracy([gag("$10 Bill"), gag("TNT")], 10, hp_override=50)
    assert "Trap triggers only if Lure hits" in text
    assert "Remaining HP override" in text
    assert "(HP 50," in text


def test_explain_is_bounded(gag):
    combo = [
        gag("$10 Bill"),
        gag("Elephant Trunk"),
        gag("Cupcake"),
        gag("Squirting Flower"),
        gag("Flower Pot"),
    ]
    lines = explain_combo_accuracy(combo, 12).splitlines()
    assert len(lines) <= MAX_EXPLAIN_LINES + 1
    assert sum(1 for line in lines if line.strip().startswith("Leaf:")) <= MAX_EXPLAIN_LEAVES
