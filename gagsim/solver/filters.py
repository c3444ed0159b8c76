"""
Filters that hide redundant fill-to-kill options.

Both filters compare KO probabilities as displayed, i.e. rounded to 0.1%.
"""

import math
from collections import Counter
from collections.abc import Sequence
from itertools import combinations

from gagsim.core.constants import COMPOSITION_ORDER
from gagsim.items.gag import GagInfo
from gagsim.solver.request import FillOption
from gagsim.solver.search import exact_key


def displayed_accuracy(option: FillOption) -> int:
    """The KO probability in 0.1% bins, halves rounded up."""
    return math.floor(option.accuracy * 1000 + 0.5)


def track_count_key(gags: Sequence[GagInfo]) -> tuple[tuple[str, int], ...]:
    """Returns the per-track gag counts, in composition order."""
    counts = Counter(gag.track for gag in gags)
    return tuple(
        (track.value, counts[track]) for track in COMPOSITION_ORDER if counts[track] > 0
    )


def best_of_equivalent(a: FillOption, b: FillOption) -> FillOption:
    """
    Picks the option that spends lower-level gags.

    Compares the highest level used, then the level sum, then overkill, then
    total damage. ``a`` wins a full tie.
    """
    for metric in (
        lambda o: o.max_level,
        lambda o: o.level_sum,
        lambda o: o.overkill,
        lambda o: o.total_damage,
    ):
        if metric(a) != metric(b):
            return a if metric(a) < metric(b) else b
    return a


def filter_equivalent_overkill(options: Sequence[FillOption]) -> list[FillOption]:
    """
    Collapses options that look the same to the player.

    Options with the same number of added gags, the same track composition
    and the same displayed KO probability are reduced to the best one.
    """
    best: dict[tuple, FillOption] = {}
    for option in options:
        key = (
            len(option.added_gags),
            track_count_key(option.added_gags),
            displayed_accuracy(option),
        )
        previous = best.get(key)
        best[key] = option if previous is None else best_of_equivalent(previous, option)
    return list(best.values())


def filter_supersets_with_no_displayed_accuracy_gain(
    options: Sequence[FillOption],
) -> list[FillOption]:
    """
    Hides options that only pad another option with extra gags.

    An option is dropped when some proper sub-multiset of its additions
    (the empty one included, meaning the current gags already kill) is itself
    an option with an equal or better displayed KO probability. Options adding
    nothing are always kept.
    """
    accuracy_by_key = {exact_key(o.added_gags): displayed_accuracy(o) for o in options}

    def is_padded(option: FillOption) -> bool:
        own = displayed_accuracy(option)
        added = option.added_gags
        checked = set()
        for size in range(len(added)):
            for subset in combinations(added, size):
                key = exact_key(subset)
                if key in checked:
                    continue
                checked.add(key)
                other = accuracy_by_key.get(key)
                if other is not None and other >= own:
                    return True
        return False

    return [o for o in options if not o.added_gags or not is_padded(o)]
