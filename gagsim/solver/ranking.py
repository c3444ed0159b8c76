"""
Ranking of fill-to-kill options.

Three sort modes are supported:

* ``accuracy``: highest KO probability first;
* ``conserve``: lowest-level gags first;
* ``weighted``: a weighted sum of normalized accuracy, conserve and track
  scores.

Every mode ends its tie-break chain on overkill and total damage, so the
order is total and deterministic.
"""

import math
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from functools import cmp_to_key

from gagsim.core.constants import SortMode
from gagsim.core.defaults import DEFAULT_GAG_CONSERVE_WEIGHTS, DEFAULT_RETAIN_WEIGHT
from gagsim.items.gag import GagInfo, GagKey
from gagsim.solver.request import FillOption, SortWeights


def _sign(value: float) -> int:
    return (value > 0) - (value < 0)


def compare_options(a: FillOption, b: FillOption, prefer_accuracy: bool) -> int:
    """
    Compares two options for the accuracy and conserve sort modes.

    Returns a negative number when ``a`` sorts first.
    """
    if prefer_accuracy and a.accuracy != b.accuracy:
        return _sign(b.accuracy - a.accuracy)
    if a.max_level != b.max_level:
        return _sign(a.max_level - b.max_level)
    # Several low gags may beat fewer high ones: average, not sum.
    if a.average_level != b.average_level:
        return _sign(a.average_level - b.average_level)
    if a.accuracy != b.accuracy:
        return _sign(b.accuracy - a.accuracy)
    if a.overkill != b.overkill:
        return _sign(a.overkill - b.overkill)
    return _sign(a.total_damage - b.total_damage)


@dataclass(frozen=True)
class WeightedMetrics:
    """Raw (lower is better) components of the weighted sort."""

    level_metric: float
    track_count: int


def clamp01(value: float) -> float:
    if not math.isfinite(value):
        return 0.0
    return max(0.0, min(1.0, value))


def retain_weight(
    gag: GagInfo,
    conserve_weights: Mapping[GagKey, float],
) -> float:
    """
    Returns how strongly a gag should be kept in stock, in [0, 1].

    Caller weights win over the default table; unknown gags get 0.5.
    """
    weight = conserve_weights.get(gag.key)
    if weight is not None and math.isfinite(weight):
        return clamp01(weight)
    return clamp01(DEFAULT_GAG_CONSERVE_WEIGHTS.get(gag.key, DEFAULT_RETAIN_WEIGHT))


def compute_weighted_metrics(
    current: Sequence[GagInfo],
    option: FillOption,
    conserve_weights: Mapping[GagKey, float],
) -> WeightedMetrics:
    """
    Computes the level and track metrics of an option.

    Each added gag costs its level times its retain weight. The level metric
    is ``10 * max + average`` of those costs. The track count covers the
    current gags as well as the added ones.
    """
    costs = [gag.level * retain_weight(gag, conserve_weights) for gag in option.added_gags]
    max_cost = max(costs, default=0.0)
    avg_cost = sum(costs) / len(costs) if costs else 0.0
    tracks = {gag.track for gag in current} | {gag.track for gag in option.added_gags}
    return WeightedMetrics(level_metric=max_cost * 10 + avg_cost, track_count=len(tracks))


def normalize01(value: float, low: float, high: float) -> float:
    """Min-max normalization; 1 when there is no spread, 0 for non-finite input."""
    if not all(math.isfinite(v) for v in (value, low, high)):
        return 0.0
    if high <= low:
        return 1.0
    return (value - low) / (high - low)


def sort_options_weighted(
    options: Sequence[FillOption],
    current: Sequence[GagInfo],
    weights: SortWeights,
    conserve_weights: Mapping[GagKey, float] | None = None,
) -> list[FillOption]:
    """Sorts options by descending weighted score."""
    if not options:
        return []
    conserve_weights = conserve_weights or {}
    metrics = [compute_weighted_metrics(current, o, conserve_weights) for o in options]
    level_min = min(m.level_metric for m in metrics)
    level_max = max(m.level_metric for m in metrics)
    track_min = min(m.track_count for m in metrics)
    track_max = max(m.track_count for m in metrics)

    def score(option: FillOption, m: WeightedMetrics) -> float:
        accuracy_score = max(0.0, min(1.0, option.accuracy))
        conserve_score = 1 - normalize01(m.level_metric, level_min, level_max)
        track_score = 1 - normalize01(m.track_count, track_min, track_max)
        return (
            weights.accuracy * accuracy_score
            + weights.conserve * conserve_score
            + weights.tracks * track_score
        )

    ranked = [(score(o, m), o, m) for o, m in zip(options, metrics)]
    ranked.sort(
        key=lambda r: (
            -r[0],
            -r[1].accuracy,
            r[2].level_metric,
            r[2].track_count,
            r[1].overkill,
            r[1].total_damage,
        )
    )
    return [option for _, option, _ in ranked]


def sort_options(
    options: Sequence[FillOption],
    mode: SortMode,
    current: Sequence[GagInfo] = (),
    weights: SortWeights | None = None,
    conserve_weights: Mapping[GagKey, float] | None = None,
) -> list[FillOption]:
    """
    Sorts options according to ``mode``.

    Args:
        options (Sequence[FillOption]):
            The options to sort.
        mode (SortMode):
            The sort mode.
        current (Sequence[GagInfo]):
            The gags already committed, used by the weighted track score.
        weights (SortWeights | None):
            The weighted sort weights, 1/1/1 when omitted.
        conserve_weights (Mapping[GagKey, float] | None):
            Per-gag retain weights overriding the default table.

    Returns:
        list[FillOption]:
            A new, sorted list.

    """
    if mode == SortMode.WEIGHTED:
        return sort_options_weighted(options, current, weights or SortWeights(), conserve_weights)
    prefer_accuracy = mode == SortMode.ACCURACY
    return sorted(
        options,
        key=cmp_to_key(lambda a, b: compare_options(a, b, prefer_accuracy)),
    )
