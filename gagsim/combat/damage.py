"""
Damage module for the gag simulator.

Resolves the all-hit damage of a set of gags against a single cog. Tracks are
resolved in their canonical order, and each gag threads an immutable
``CogStatus`` (lured, pending trap, trap already triggered) to the next one.
"""

import math
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, replace

from gagsim.core.constants import (
    ACCURACY_CAP,
    ORGANIC_LURE_ACCURACY_BONUS,
    GagDmgType,
    GagTrack,
)
from gagsim.core.error_handling import UnknownTrackError
from gagsim.items.gag import GagInfo
from gagsim.items.track import TrackInfo


@dataclass(frozen=True)
class CogStatus:
    """Transient status of the target cog during one damage resolution pass."""

    lured: bool = False
    trap_gag: GagInfo | None = None
    # A cog whose trap went off this round cannot be lured again.
    trap_triggered_this_round: bool = False


@dataclass(frozen=True)
class DamageResult:
    """Damage subtotals of a resolution pass."""

    base_damage: int = 0
    group_bonus: int = 0
    lure_bonus: int = 0

    @property
    def total_damage(self) -> int:
        return self.base_damage + self.group_bonus + self.lure_bonus


def get_gag_damage(gag: GagInfo) -> int:
    """
    Returns the damage dealt by a gag, including its organic bonus.

    Args:
        gag (GagInfo):
            The gag.

    Returns:
        int:
            The damage, never lower than 1.

    """
    max_dmg = gag.max_dmg or 0
    organic_bonus = (
        max(1, math.ceil(max_dmg * gag.organic_bonus)) if gag.is_organic else 0
    )
    return max(1, max_dmg + organic_bonus)


def get_gag_accuracy(gag: GagInfo) -> int:
    """Returns the base accuracy of a gag; organic lures gain +10 (capped at 95)."""
    if gag.dmg_type == GagDmgType.LURE and gag.is_organic:
        return min(ACCURACY_CAP, gag.accuracy + ORGANIC_LURE_ACCURACY_BONUS)
    return gag.accuracy


def default_tracks() -> Mapping[GagTrack, TrackInfo]:
    """Returns the track metadata of the bundled catalog."""
    from gagsim.core.content import GagRepository

    return GagRepository().tracks


def _resolve_gag(
    track: TrackInfo,
    gag: GagInfo,
    status: CogStatus,
) -> tuple[int, CogStatus]:
    """Resolves a single gag, returning its damage and the next cog status."""
    if track.name == GagTrack.TRAP:
        # A lured cog cannot have a trap placed under it.
        if status.lured:
            return 0, status
        # Only the first trap counts, the rest are redundant.
        if status.trap_gag is not None:
            return 0, status
        return 0, replace(status, trap_gag=gag)

    if track.name == GagTrack.DROP and status.lured:
        return 0, status

    if track.dmg_type == GagDmgType.DAMAGE:
        return get_gag_damage(gag), status

    if track.dmg_type == GagDmgType.LURE:
        if status.lured or status.trap_triggered_this_round:
            return 0, status
        if status.trap_gag is not None:
            # The trap consumes the lure: the cog takes the trap damage and
            # is not left lured.
            return get_gag_damage(status.trap_gag), replace(
                status,
                trap_gag=None,
                trap_triggered_this_round=True,
            )
        return 0, replace(status, lured=True)

    return 0, status


def calculate_total_damage(
    gags: Iterable[GagInfo],
    initial_status: CogStatus | None = None,
    tracks: Mapping[GagTrack, TrackInfo] | None = None,
) -> DamageResult:
    """
    Computes the damage dealt by a set of gags, assuming every gag hits.

    Args:
        gags (Iterable[GagInfo]):
            The gags used this round, in any order.
        initial_status (CogStatus | None):
            Status of the cog at the start of the round.
        tracks (Mapping[GagTrack, TrackInfo] | None):
            Track metadata; the bundled catalog is used when omitted.

    Raises:
        UnknownTrackError:
            If a gag belongs to a track missing from ``tracks``.

    Returns:
        DamageResult:
            The base, group and lure damage.

    """
    tracks = default_tracks() if tracks is None else tracks
    status = initial_status or CogStatus()

    by_track: dict[GagTrack, list[GagInfo]] = {}
    for gag in gags:
        by_track.setdefault(gag.track, []).append(gag)

    track_infos: list[TrackInfo] = []
    for track in by_track:
        info = tracks.get(track)
        if info is None:
            raise UnknownTrackError(track)
        track_infos.append(info)
    track_infos.sort(key=lambda t: t.order)

    base_damage = 0
    group_bonus = 0
    lure_bonus = 0
    for info in track_infos:
        track_gags = by_track[info.name]

        track_damage = 0
        for gag in track_gags:
            damage, status = _resolve_gag(info, gag, status)
            track_damage += damage

        if status.lured and info.dmg_type == GagDmgType.DAMAGE and track_damage > 0:
            status = replace(status, lured=False)
            # Sound wakes the cog without the knockback bonus.
            if info.name != GagTrack.SOUND:
                lure_bonus = math.ceil(track_damage / 2)

        if sum(1 for g in track_gags if g.track != GagTrack.LURE) > 1:
            group_bonus += math.ceil(track_damage / 5)

        base_damage += track_damage

    return DamageResult(
        base_damage=base_damage,
        group_bonus=group_bonus,
        lure_bonus=lure_bonus,
    )
