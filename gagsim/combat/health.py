"""
Cog health formulas.
"""

from collections.abc import Sequence

from gagsim.combat.damage import CogStatus, calculate_total_damage
from gagsim.core.constants import HIGH_LEVEL_HP_BONUS, HIGH_LEVEL_HP_THRESHOLD, MAX_COG_LEVEL
from gagsim.core.error_handling import InvalidLevelError
from gagsim.items.gag import GagInfo


def cog_health(level: int) -> int:
    """
    Returns the hit points of a cog.

    Levels 1-11 have ``(level + 1) * (level + 2)`` hit points, higher levels
    get a flat +14 on top of that.

    Args:
        level (int):
            The cog level.

    Raises:
        InvalidLevelError:
            If ``level`` is lower than 1.

    Returns:
        int:
            The hit points.

    """
    if level < 1:
        raise InvalidLevelError(level)
    health = (level + 1) * (level + 2)
    if level >= HIGH_LEVEL_HP_THRESHOLD:
        health += HIGH_LEVEL_HP_BONUS
    return health


def max_cog_level(gags: Sequence[GagInfo], status: CogStatus | None = None) -> int:
    """
    Returns the highest cog level the gags defeat when every gag hits.

    Accuracy is ignored. Returns 0 when not even a level 1 cog goes down.
    """
    total = calculate_total_damage(gags, status).total_damage
    for level in range(1, MAX_COG_LEVEL + 1):
        if total < cog_health(level):
            return level - 1
    return MAX_COG_LEVEL
