"""
Candidate pool of the fill-to-kill search.
"""

from collections.abc import Mapping

from gagsim.core.constants import AffectsType, GagDmgType, GagTrack
from gagsim.items.gag import GagInfo
from gagsim.solver.request import ExcludeLevels, FillRequest


def is_level_excluded(level: int, track: GagTrack, exclude: ExcludeLevels | None) -> bool:
    """Returns True if the exclusion rules forbid a gag of this level and track."""
    if exclude is None:
        return False
    return exclude.excludes(level, track)


def _candidate_sort_key(gag: GagInfo) -> tuple[int, str, str]:
    return (gag.level, gag.track.value, gag.name)


def compute_candidate_pool(
    request: FillRequest,
    track_capacity: Mapping[GagTrack, int],
    available: list[GagInfo] | None = None,
) -> list[GagInfo]:
    """
    Lists the gags the search may add, in a deterministic order.

    Only cog-targeting damage and lure gags of enabled, non-excluded tracks
    with some toon able to use them are kept. A cog that is already lured has
    nothing to gain from Lure or Trap.

    Args:
        request (FillRequest):
            The normalized request.
        track_capacity (Mapping[GagTrack, int]):
            How many toons can use each track.
        available (list[GagInfo] | None):
            The gags to choose from; defaults to ``request.available_gags``.

    Returns:
        list[GagInfo]:
            The candidates, sorted by level, then track, then name. The
            search relies on this order to enumerate each multiset once.

    """
    if available is None:
        available = request.available_gags or []
    lured = request.is_target_already_lured

    pool = [
        gag
        for gag in available
        if gag.affects_type == AffectsType.COG
        and gag.dmg_type != GagDmgType.HEAL
        and request.enabled_tracks.get(gag.track) is not False
        and not is_level_excluded(gag.level, gag.track, request.exclude_levels)
        and gag.track != GagTrack.TOONUP
        and not (lured and gag.track in (GagTrack.LURE, GagTrack.TRAP))
        and track_capacity.get(gag.track, 0) > 0
    ]
    return sorted(pool, key=_candidate_sort_key)
