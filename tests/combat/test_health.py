"""
Tests for the cog health model.
"""

import pytest

from gagsim.combat.health import cog_health, max_cog_level
from gagsim.core.error_handling import InvalidLevelError


@pytest.mark.parametrize("level", range(1, 12))
def test_health_below_threshold(level):
    assert cog_health(level) == (level + 1) * (level + 2)


@pytest.mark.parametrize(
    "level, expected",
    [(1, 6), (11, 156), (12, 196), (13, 224), (20, 476)],
)
def test_health_reference_values(level, expected):
    assert cog_health(level) == expected


@pytest.mark.parametrize("level", [0, -1, -20])
def test_health_rejects_low_levels(level):
    with pytest.raises(InvalidLevelError) as exc_info:
        cog_health(level)
    assert exc_info.value.level == level


def test_invalid_level_is_a_value_error():
    with pytest.raises(ValueError):
        cog_health(0)


def test_max_cog_level_without_gags():
    assert max_cog_level([]) == 0


def test_max_cog_level_grand_piano(gag):
    # 170 damage: level 11 has 156 hp, level 12 has 196.
    assert max_cog_level([gag("Grand Piano")]) == 11


def test_max_cog_level_is_capped(gag):
    gags = [gag("Opera Singer") for _ in range(4)]
    # 360 base + 72 group bonus: level 18 has 394 hp, level 19 has 434.
    assert max_cog_level(gags) == 18
    gags = [gag("Toontanic") for _ in range(4)]
    assert max_cog_level(gags) == 20
