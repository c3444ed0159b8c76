"""
Next-gag kill hints.

Highlights the catalog gags that would bring the current selection to a
kill (all hits) if added next, scored by the resulting KO probability.
"""

from collections.abc import Mapping, Sequence

from gagsim.combat.accuracy import calculate_combo_accuracy
from gagsim.combat.damage import CogStatus, calculate_total_damage
from gagsim.combat.health import cog_health
from gagsim.core.constants import GagTrack
from gagsim.core.content import GagRepository
from gagsim.core.error_handling import ensure_optional_hp
from gagsim.items.gag import GagInfo, GagKey


def kill_hint_strengths(
    current: Sequence[GagInfo],
    target_level: int,
    max_toons: int,
    enabled_tracks: Mapping[GagTrack, bool] | None = None,
    lured: bool = False,
    hp_override: float | None = None,
    catalog: Sequence[GagInfo] | None = None,
) -> dict[GagKey, float]:
    """
    Scores the gags that would complete a kill.

    Args:
        current (Sequence[GagInfo]):
            The gags selected so far.
        target_level (int):
            The cog level.
        max_toons (int):
            Number of toons; no hints once every toon has a gag.
        enabled_tracks (Mapping[GagTrack, bool] | None):
            Tracks disabled with False are skipped.
        lured (bool):
            Whether the cog starts the round lured.
        hp_override (float | None):
            Remaining hit points, used instead of the level's full health.
        catalog (Sequence[GagInfo] | None):
            The gags to try; the bundled catalog when omitted.

    Returns:
        dict[GagKey, float]:
            A strength in [0, 1] per completing gag: 1 for the best KO
            probability, 0 for the worst, and 1 for all when they tie.
            Empty when the selection is full or already kills.

    """
    if len(current) >= max_toons:
        return {}
    enabled_tracks = enabled_tracks or {}
    override = ensure_optional_hp(hp_override, 1)
    hp = override if override is not None else cog_health(target_level)
    status = CogStatus(lured=lured)

    if calculate_total_damage(current, status).total_damage >= hp:
        return {}

    if catalog is None:
        catalog = GagRepository().all_gags()

    scored: dict[GagKey, float] = {}
    for gag in catalog:
        if gag.track == GagTrack.TOONUP or enabled_tracks.get(gag.track) is False:
            continue
        combo = [*current, gag.as_organic(False)]
        if calculate_total_damage(combo, status).total_damage < hp:
            continue
        scored[gag.key] = calculate_combo_accuracy(
            combo, target_level, initial_lured=lured, hp_override=override
        )

    if not scored:
        return {}
    low = min(scored.values())
    high = max(scored.values())
    if high == low:
        return {key: 1.0 for key in scored}
    return {key: max(0.0, min(1.0, (p - low) / (high - low))) for key, p in scored.items()}
