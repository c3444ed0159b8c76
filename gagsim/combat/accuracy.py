"""
Accuracy module for the gag simulator.

Computes the probability that a set of gags knocks out a cog in one round.
Every used track (except Trap and Toon-Up) is a single hit/miss trial: all
gags of a track hit or miss together. The evaluator walks the binary tree of
track outcomes in resolution order and records each decision as a step of a
``ComboTrace``. The scalar probability and the human-readable explanation are
both read from that trace.
"""

import math
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field, replace

from gagsim.combat.damage import (
    CogStatus,
    calculate_total_damage,
    default_tracks,
    get_gag_accuracy,
)
from gagsim.combat.health import cog_health
from gagsim.core.constants import (
    ACCURACY_CAP,
    ACCURACY_FLOOR,
    DAMAGE_TRACKS,
    DEFAULT_TARGET_DEFENSE,
    EXTRA_TRAP_ACCURACY_BONUS,
    LURED_AUTO_HIT_TRACKS,
    MAX_TRACK_EXP,
    MID_TARGET_DEFENSE,
    STUN_CAP,
    STUN_PER_HIT,
    STUN_TRACKS,
    TARGET_DEFENSE,
    TOONUP_TRACK_EXP,
    TRAP_ACCURACY_BONUS,
    TRAP_STUN_BONUS,
    AffectsNum,
    GagTrack,
)
from gagsim.core.error_handling import ensure_optional_hp
from gagsim.items.gag import GagInfo
from gagsim.items.track import TrackInfo

MAX_EXPLAIN_LINES = 100
MAX_EXPLAIN_LEAVES = 20

RULES_SUMMARY = (
    "Rules summary:",
    "- Same track + same target: all gags in that track either hit or miss together.",
    "- Stun: each hit from Throw/Squirt/Sound adds +25 accuracy (capped at +75). Trap activation adds +50.",
    "- Lured target: Throw/Squirt/Sound auto-hit; Drop auto-miss; first successful damage ends lure.",
)


# =============================================================================
# Trace records
# =============================================================================


@dataclass(frozen=True)
class TrackStep:
    """The hit chance of a track at some node of the tree."""

    depth: int
    track: GagTrack
    hit_prob: float
    formula: str


@dataclass(frozen=True)
class BranchStep:
    """Entering the hit or the miss branch of a track."""

    depth: int
    hit: bool
    prob: float


@dataclass(frozen=True)
class LeafStep:
    """A fully resolved outcome of the round."""

    depth: int
    damage: int
    hp: int
    ko: bool
    prob: float


TraceStep = TrackStep | BranchStep | LeafStep


@dataclass
class ComboTrace:
    """Structured record of a KO probability evaluation."""

    level: int
    hp: int
    defense: int
    initial_lured: bool
    tracks: list[GagTrack]
    has_trap: bool
    hp_overridden: bool
    steps: list[TraceStep] = field(default_factory=list)
    probability: float = 0.0

    @property
    def leaves(self) -> list[LeafStep]:
        return [step for step in self.steps if isinstance(step, LeafStep)]


@dataclass(frozen=True)
class _BranchState:
    stun_bonus: int = 0
    lured: bool = False


# =============================================================================
# Accuracy helpers
# =============================================================================


def target_defense(level: int) -> int:
    """Returns the (negative) accuracy modifier of a cog level."""
    if level <= 0:
        return 0
    if level in TARGET_DEFENSE:
        return TARGET_DEFENSE[level]
    if 13 <= level <= 19:
        return MID_TARGET_DEFENSE
    return DEFAULT_TARGET_DEFENSE


def accuracy_cap(value: int) -> int:
    """Clamps an attack accuracy to [5, 95]."""
    return max(ACCURACY_FLOOR, min(ACCURACY_CAP, value))


def clamp_stun_bonus(stun_bonus: int) -> int:
    return min(STUN_CAP, stun_bonus)


def track_exp_bonus(gags: Sequence[GagInfo]) -> dict[GagTrack, int]:
    """
    Returns the experience bonus of every track used by the gags.

    Every toon is assumed to have maxed out the tracks it carries.
    """
    return {
        gag.track: TOONUP_TRACK_EXP if gag.track == GagTrack.TOONUP else MAX_TRACK_EXP
        for gag in gags
    }


def lure_combo_bonus(lure_gags: Sequence[GagInfo]) -> int:
    """
    Returns the accuracy bonus for stacking lures of the same kind.

    Lures affecting the same number of cogs back each other up: every lure
    after the highest adds ``max(10, 20 - 5 * level_gap)``.
    """
    if len(lure_gags) <= 1:
        return 0
    groups: dict[AffectsNum, list[GagInfo]] = {AffectsNum.ALL: [], AffectsNum.SINGLE: []}
    for gag in lure_gags:
        groups[gag.affects_num].append(gag)

    bonus = 0
    for group in groups.values():
        if len(group) <= 1:
            continue
        ordered = sorted(group, key=lambda g: g.level, reverse=True)
        highest = ordered[0]
        for gag in ordered[1:]:
            gap = max(0, highest.level - gag.level)
            bonus += max(10, 20 - gap * 5)
    return bonus


def _best_accuracy(gags: Sequence[GagInfo]) -> int:
    return max((get_gag_accuracy(gag) for gag in gags), default=0)


# =============================================================================
# Evaluator
# =============================================================================


class ComboEvaluator:
    """
    Enumerates the hit/miss outcomes of every used track.

    The tree has at most ``2 ** tracks`` leaves; each leaf resolves the damage
    of the gags that hit and checks it against the cog's hit points.
    """

    def __init__(
        self,
        gags: Sequence[GagInfo],
        target_level: int | None = 1,
        initial_lured: bool = False,
        hp_override: float | None = None,
        tracks: Mapping[GagTrack, TrackInfo] | None = None,
    ):
        self.gags = list(gags)
        self.tracks = default_tracks() if tracks is None else tracks
        self.level = 1 if target_level is None else target_level
        self.initial_lured = bool(initial_lured)

        override = ensure_optional_hp(hp_override, 0)
        self.hp_overridden = override is not None
        self.hp = override if override is not None else cog_health(self.level)
        self.defense = target_defense(self.level)

        self.by_track: dict[GagTrack, list[GagInfo]] = {}
        for gag in self.gags:
            self.by_track.setdefault(gag.track, []).append(gag)

        # Only one trap can be active on a cog; extra traps are redundant.
        self.trap_gags = self.by_track.get(GagTrack.TRAP, [])[:1]
        self.lure_gags = self.by_track.get(GagTrack.LURE, [])
        self.exp = track_exp_bonus(self.gags)

        order = {track: info.order for track, info in self.tracks.items()}
        self.ordered_tracks = sorted(
            (
                track
                for track in self.by_track
                if track not in (GagTrack.TRAP, GagTrack.TOONUP)
            ),
            key=lambda t: order.get(t, len(order)),
        )

    def evaluate(self) -> ComboTrace:
        """Walks the outcome tree and returns its trace."""
        self._trace = ComboTrace(
            level=self.level,
            hp=self.hp,
            defense=self.defense,
            initial_lured=self.initial_lured,
            tracks=list(self.ordered_tracks),
            has_trap=bool(self.trap_gags),
            hp_overridden=self.hp_overridden,
        )
        self._walk(0, _BranchState(lured=self.initial_lured), 1.0, [])
        if not math.isfinite(self._trace.probability):
            self._trace.probability = 0.0
        return self._trace

    def _walk(
        self,
        idx: int,
        state: _BranchState,
        prob: float,
        hit_gags: list[GagInfo],
    ) -> None:
        if prob == 0:
            return

        if idx >= len(self.ordered_tracks):
            damage = calculate_total_damage(
                hit_gags,
                CogStatus(lured=self.initial_lured),
                self.tracks,
            ).total_damage
            ko = damage >= self.hp
            if ko:
                self._trace.probability += prob
            self._trace.steps.append(
                LeafStep(depth=idx, damage=damage, hp=self.hp, ko=ko, prob=prob)
            )
            return

        track = self.ordered_tracks[idx]
        hit_prob, formula = self.track_hit_chance(track, state)
        hit_state, hit_list = self._on_hit(track, state, hit_gags)

        self._trace.steps.append(
            TrackStep(depth=idx, track=track, hit_prob=hit_prob, formula=formula)
        )
        self._trace.steps.append(BranchStep(depth=idx, hit=True, prob=hit_prob))
        self._walk(idx + 1, hit_state, prob * hit_prob, hit_list)
        self._trace.steps.append(BranchStep(depth=idx, hit=False, prob=1 - hit_prob))
        self._walk(idx + 1, state, prob * (1 - hit_prob), hit_gags)

    def track_hit_chance(self, track: GagTrack, state: _BranchState) -> tuple[float, str]:
        """Returns the hit probability of a track and the formula behind it."""
        stun = state.stun_bonus

        if track == GagTrack.LURE:
            if state.lured:
                return 1.0, "Lure: target already lured => treated as no-op (100%)"
            base = _best_accuracy(self.lure_gags)
            trap_bonus = (
                TRAP_ACCURACY_BONUS
                + max(0, len(self.trap_gags) - 1) * EXTRA_TRAP_ACCURACY_BONUS
                if self.trap_gags
                else 0
            )
            combo = lure_combo_bonus(self.lure_gags)
            exp = self.exp.get(GagTrack.LURE, 0)
            acc = accuracy_cap(base + exp + self.defense + trap_bonus + combo + stun)
            return acc / 100, (
                f"Lure hit% = cap(base {base} + exp {exp} + def {self.defense} "
                f"+ trapBonus {trap_bonus} + lureCombo {combo} + stun {stun}) = {acc}%"
            )

        if state.lured and track in LURED_AUTO_HIT_TRACKS:
            return 1.0, f"{track.value}: target is lured => auto-hit (100%)"
        if state.lured and track == GagTrack.DROP:
            return 0.0, "Drop: target is lured => auto-miss (0%)"

        base = _best_accuracy(self.by_track.get(track, []))
        exp = self.exp.get(track, 0)
        acc = accuracy_cap(base + exp + self.defense + stun)
        return acc / 100, (
            f"{track.value} hit% = cap(base {base} + exp {exp} "
            f"+ def {self.defense} + stun {stun}) = {acc}%"
        )

    def _on_hit(
        self,
        track: GagTrack,
        state: _BranchState,
        hit_gags: list[GagInfo],
    ) -> tuple[_BranchState, list[GagInfo]]:
        """Returns the branch state and hit list after ``track`` hits."""
        if track == GagTrack.LURE:
            if state.lured:
                return state, hit_gags + self.lure_gags
            if self.trap_gags:
                # The lure springs the trap: the cog is stunned, not lured.
                return (
                    replace(
                        state,
                        stun_bonus=clamp_stun_bonus(state.stun_bonus + TRAP_STUN_BONUS),
                        lured=False,
                    ),
                    hit_gags + self.lure_gags + self.trap_gags,
                )
            return replace(state, lured=True), hit_gags + self.lure_gags

        track_gags = self.by_track.get(track, [])
        next_state = state
        if track in STUN_TRACKS:
            next_state = replace(
                next_state,
                stun_bonus=clamp_stun_bonus(
                    next_state.stun_bonus + len(track_gags) * STUN_PER_HIT
                ),
            )
        if state.lured and track in DAMAGE_TRACKS:
            next_state = replace(next_state, lured=False)
        return next_state, hit_gags + track_gags


def evaluate_combo(
    gags: Sequence[GagInfo],
    target_level: int | None = 1,
    initial_lured: bool = False,
    hp_override: float | None = None,
    tracks: Mapping[GagTrack, TrackInfo] | None = None,
) -> ComboTrace:
    """Builds the outcome trace of a set of gags against a cog."""
    return ComboEvaluator(
        gags,
        target_level=target_level,
        initial_lured=initial_lured,
        hp_override=hp_override,
        tracks=tracks,
    ).evaluate()


def calculate_combo_accuracy(
    gags: Sequence[GagInfo],
    target_level: int | None = 1,
    initial_lured: bool = False,
    hp_override: float | None = None,
    tracks: Mapping[GagTrack, TrackInfo] | None = None,
) -> float:
    """
    Returns the one-turn KO probability of a set of gags.

    Args:
        gags (Sequence[GagInfo]):
            The gags used this round.
        target_level (int | None):
            The cog level, None is treated as level 1.
        initial_lured (bool):
            Whether the cog starts the round lured.
        hp_override (float | None):
            Remaining hit points to use instead of the level's full health.
        tracks (Mapping[GagTrack, TrackInfo] | None):
            Track metadata; the bundled catalog is used when omitted.

    Returns:
        float:
            The probability, in [0, 1]. Zero when no gags are given.

    """
    if not gags:
        return 0.0
    return evaluate_combo(gags, target_level, initial_lured, hp_override, tracks).probability


def render_trace(trace: ComboTrace) -> str:
    """
    Renders a trace as line-oriented text.

    The output starts with the overall probability, followed by the scenario
    and at most ``MAX_EXPLAIN_LINES`` lines of the outcome tree, printing no
    more than ``MAX_EXPLAIN_LEAVES`` leaves.
    """
    lines: list[str] = [
        f"Target level: {trace.level} (HP {trace.hp}, defense {trace.defense})",
        f"Initial status: {'Already lured' if trace.initial_lured else 'Not lured'}",
        "Tracks resolved: "
        + (" -> ".join(t.value for t in trace.tracks) or "(none)"),
        *RULES_SUMMARY,
    ]
    if trace.has_trap:
        lines.append("- Trap triggers only if Lure hits (Trap itself is not an accuracy roll).")
    if trace.hp_overridden:
        lines.append("- KO check uses Remaining HP override.")

    printed_leaves = 0
    for step in trace.steps:
        if len(lines) >= MAX_EXPLAIN_LINES:
            break
        indent = "  " * step.depth
        if isinstance(step, TrackStep):
            lines.append(f"{indent}{step.formula}")
        elif isinstance(step, BranchStep):
            label = "Hit" if step.hit else "Miss"
            lines.append(f"{indent}↳ {label} branch: p={step.prob * 100:.1f}%")
        elif printed_leaves < MAX_EXPLAIN_LEAVES:
            printed_leaves += 1
            verdict = "KO ✓" if step.ko else "no KO"
            lines.append(
                f"{indent}Leaf: damage {step.damage} {'>=' if step.ko else '<'} "
                f"HP {step.hp} => {verdict} (branch p={step.prob * 100:.2f}%)"
            )

    lines.insert(0, f"One-turn KO probability: {trace.probability * 100:.2f}%")
    return "\n".join(lines)


def explain_combo_accuracy(
    gags: Sequence[GagInfo],
    target_level: int | None = 1,
    initial_lured: bool = False,
    hp_override: float | None = None,
    tracks: Mapping[GagTrack, TrackInfo] | None = None,
) -> str:
    """Returns a human-readable explanation of the one-turn KO probability."""
    if not gags:
        return "No gags selected."
    return render_trace(evaluate_combo(gags, target_level, initial_lured, hp_override, tracks))
