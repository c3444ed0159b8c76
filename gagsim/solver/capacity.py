"""
Attacker capacity and track-assignment feasibility.

Each toon may lack at most one track. A set of gags is usable only if every
gag can be handed to a distinct toon that carries its track.
"""

from collections.abc import Iterable, Mapping, Sequence

from gagsim.core.constants import ALWAYS_AVAILABLE_TRACKS, GagTrack, ToonRestriction
from gagsim.core.error_handling import log_warning
from gagsim.items.gag import GagInfo


def toon_allows(track: GagTrack, restriction: ToonRestriction) -> bool:
    """Returns True if a toon with the given restriction can use ``track``."""
    if track in ALWAYS_AVAILABLE_TRACKS:
        return True
    return restriction.missing_track != track


def coerce_restriction(value) -> ToonRestriction:
    """Converts a raw restriction, treating unknown values as no restriction."""
    if isinstance(value, ToonRestriction):
        return value
    try:
        return ToonRestriction(value)
    except ValueError:
        log_warning(
            f"Unknown toon restriction {value!r}, treating it as 'none'",
            {"restriction": value},
        )
        return ToonRestriction.NONE


def normalize_toon_restrictions(
    incoming: Iterable | None,
    max_toons: int,
) -> list[ToonRestriction]:
    """
    Returns exactly ``max_toons`` restrictions.

    Missing entries are padded with ``none`` and extra entries are ignored.
    """
    restrictions = [coerce_restriction(r) for r in (incoming or [])]
    padded = restrictions[:max_toons]
    padded.extend([ToonRestriction.NONE] * (max_toons - len(padded)))
    return padded


def build_track_capacity(
    restrictions: Sequence[ToonRestriction],
    enabled_tracks: Mapping[GagTrack, bool] | None = None,
) -> dict[GagTrack, int]:
    """
    Counts, per track, how many toons could use it.

    Disabled tracks get no capacity at all. Trap is capped at one: a single
    cog can only have one trap placed under it.
    """
    enabled_tracks = enabled_tracks or {}
    capacity: dict[GagTrack, int] = {}
    for track in GagTrack:
        if enabled_tracks.get(track) is False:
            capacity[track] = 0
            continue
        capacity[track] = sum(1 for r in restrictions if toon_allows(track, r))
    capacity[GagTrack.TRAP] = min(capacity[GagTrack.TRAP], 1)
    return capacity


def can_assign_gags_to_toons(
    gags: Sequence[GagInfo],
    restrictions: Sequence[ToonRestriction],
) -> bool:
    """
    Checks whether every gag can be used by a different toon.

    Exact backtracking over a bitmask of used toons. The most constrained gags
    are placed first, so dead ends are found early.
    """
    if len(gags) > len(restrictions):
        return False

    def choices(track: GagTrack) -> int:
        return sum(1 for r in restrictions if toon_allows(track, r))

    tracks = sorted((gag.track for gag in gags), key=choices)

    def assign(i: int, used_mask: int) -> bool:
        if i >= len(tracks):
            return True
        for toon, restriction in enumerate(restrictions):
            if used_mask & (1 << toon):
                continue
            if not toon_allows(tracks[i], restriction):
                continue
            if assign(i + 1, used_mask | (1 << toon)):
                return True
        return False

    return assign(0, 0)
