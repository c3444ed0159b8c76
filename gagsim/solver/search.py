"""
Combination search of the fill-to-kill solver.

Enumerates multisets of candidate gags (combinations with repetition) of
growing size, keeping those that are usable by the toons and reach the cog's
hit points when every gag hits.
"""

from collections import Counter
from collections.abc import Iterable, Mapping, Sequence

from gagsim.combat.accuracy import calculate_combo_accuracy
from gagsim.combat.damage import CogStatus, calculate_total_damage
from gagsim.core.constants import GagTrack, ToonRestriction
from gagsim.core.logging import get_logger
from gagsim.items.gag import GagInfo, GagKey
from gagsim.solver.capacity import can_assign_gags_to_toons
from gagsim.solver.request import FillOption, FillRequest

logger = get_logger(__name__)

ExactKey = tuple[tuple[GagKey, int], ...]


def exact_key(gags: Iterable[GagInfo]) -> ExactKey:
    """
    Returns the multiset identity of a list of gags.

    Two lists share a key when they hold the same gags (by track, level and
    name) the same number of times, regardless of order.
    """
    counts = Counter(gag.key for gag in gags)
    return tuple(
        sorted(counts.items(), key=lambda item: (item[0][0].value, *item[0][1:]))
    )


def make_option(
    request: FillRequest,
    added: Sequence[GagInfo],
    total_damage: int,
    hp: int,
) -> FillOption:
    """Builds an option, evaluating the KO probability of current + added."""
    return FillOption(
        added_gags=tuple(added),
        total_damage=total_damage,
        overkill=total_damage - hp,
        accuracy=calculate_combo_accuracy(
            [*request.current_gags, *added],
            request.target_level,
            initial_lured=request.is_target_already_lured,
            hp_override=request.target_hp_override,
        ),
    )


def already_kills_option(
    request: FillRequest,
    hp: int,
    restrictions: Sequence[ToonRestriction],
) -> FillOption | None:
    """Returns the zero-addition option if the current gags already reach ``hp``."""
    total = calculate_total_damage(
        request.current_gags,
        CogStatus(lured=request.is_target_already_lured),
    ).total_damage
    if total < hp or not can_assign_gags_to_toons(request.current_gags, restrictions):
        return None
    return make_option(request, [], total, hp)


class ComboSearch:
    """
    Depth-first enumeration of the additions of a single size.

    Candidate indices never decrease along a branch, so every multiset is
    visited once. A branch is pruned as soon as a track would exceed the
    number of toons able to use it.
    """

    def __init__(
        self,
        request: FillRequest,
        candidates: Sequence[GagInfo],
        hp: int,
        restrictions: Sequence[ToonRestriction],
        track_capacity: Mapping[GagTrack, int],
        options: list[FillOption],
        seen: set[ExactKey],
    ):
        self.request = request
        self.candidates = candidates
        self.hp = hp
        self.restrictions = restrictions
        self.track_capacity = track_capacity
        self.options = options
        self.seen = seen
        self.generation_cap = request.generation_cap
        self.base_counts = Counter(gag.track for gag in request.current_gags)
        self.added_counts: Counter[GagTrack] = Counter()
        self.chosen: list[GagInfo] = []

    def would_exceed_capacity(self, track: GagTrack) -> bool:
        used = self.base_counts[track] + self.added_counts[track]
        if track == GagTrack.TRAP:
            return used >= 1
        return used + 1 > self.track_capacity.get(track, 0)

    def run(self, size: int) -> None:
        """Appends every new kill option with ``size`` added gags."""
        self._recurse(0, 0, size)

    def _recurse(self, start: int, depth: int, size: int) -> None:
        if len(self.options) >= self.generation_cap:
            return

        if depth == size:
            self._accept(list(self.chosen))
            return

        for i in range(start, len(self.candidates)):
            gag = self.candidates[i]
            if self.would_exceed_capacity(gag.track):
                continue
            self.chosen.append(gag)
            self.added_counts[gag.track] += 1
            self._recurse(i, depth + 1, size)
            self.added_counts[gag.track] -= 1
            self.chosen.pop()

    def _accept(self, added: list[GagInfo]) -> None:
        combined = [*self.request.current_gags, *added]
        if len(combined) > self.request.max_toons:
            return
        if not can_assign_gags_to_toons(combined, self.restrictions):
            return
        total = calculate_total_damage(
            combined,
            CogStatus(lured=self.request.is_target_already_lured),
        ).total_damage
        if total < self.hp:
            return
        key = exact_key(added)
        if key in self.seen:
            return
        self.seen.add(key)
        self.options.append(make_option(self.request, added, total, self.hp))


def generate_options(
    request: FillRequest,
    candidates: Sequence[GagInfo],
    hp: int,
    restrictions: Sequence[ToonRestriction],
    track_capacity: Mapping[GagTrack, int],
) -> list[FillOption]:
    """
    Generates every kill option for the free toon slots.

    The zero-addition option comes first when the current gags already kill.
    The search stops once ``request.generation_cap`` options exist; options
    past the cap are never generated.

    Args:
        request (FillRequest):
            The normalized request.
        candidates (Sequence[GagInfo]):
            The candidate pool, in deterministic order.
        hp (int):
            The hit points to reach.
        restrictions (Sequence[ToonRestriction]):
            One restriction per toon slot.
        track_capacity (Mapping[GagTrack, int]):
            How many toons can use each track.

    Returns:
        list[FillOption]:
            The options, in generation order.

    """
    options: list[FillOption] = []
    seen: set[ExactKey] = set()

    current = already_kills_option(request, hp, restrictions)
    if current is not None:
        options.append(current)
        seen.add(exact_key([]))

    remaining = max(0, request.max_toons - len(request.current_gags))
    search = ComboSearch(
        request, candidates, hp, restrictions, track_capacity, options, seen
    )
    for size in range(1, remaining + 1):
        search.run(size)

    logger.debug(
        f"Generated {len(options)} kill options from {len(candidates)} candidates "
        f"(cap {search.generation_cap}, {remaining} free slots)"
    )
    return options
