"""
Constants and enumerations for the gag simulator.

Defines the gag tracks, damage/target classifications, per-toon track
restrictions, sort modes and the fixed numeric rules of one combat round
(accuracy caps, stun accumulation, cog defense).
"""

from enum import Enum
from typing import Any


class NiceEnum(Enum):
    """An enumeration that provides a nicer string representation."""

    def __str__(self) -> str:
        return self.name

    @property
    def display_name(self) -> str:
        return self.name.lower().capitalize()


class GagTrack(NiceEnum):
    """Defines the seven gag tracks."""

    TOONUP = "Toonup"
    TRAP = "Trap"
    LURE = "Lure"
    SOUND = "Sound"
    THROW = "Throw"
    SQUIRT = "Squirt"
    DROP = "Drop"

    @property
    def display_name(self) -> str:
        if self is GagTrack.TOONUP:
            return "Toon-Up"
        return self.value

    @property
    def emoji(self) -> str:
        """Returns the emoji associated with this gag track."""
        return {
            GagTrack.TOONUP: "💚",
            GagTrack.TRAP: "🍌",
            GagTrack.LURE: "💵",
            GagTrack.SOUND: "📯",
            GagTrack.THROW: "🥧",
            GagTrack.SQUIRT: "💦",
            GagTrack.DROP: "🪨",
        }.get(self, "❔")

    @property
    def color(self) -> str:
        """Returns the color string associated with this gag track."""
        return {
            GagTrack.TOONUP: "bold magenta",
            GagTrack.TRAP: "bold yellow",
            GagTrack.LURE: "bold green",
            GagTrack.SOUND: "bold blue",
            GagTrack.THROW: "bold orange3",
            GagTrack.SQUIRT: "bold deep_pink2",
            GagTrack.DROP: "bold cyan",
        }.get(self, "dim white")

    @property
    def colored_name(self) -> str:
        return self.colorize(self.display_name)

    def colorize(self, message: str) -> str:
        """Applies track color formatting to a message."""
        return f"[{self.color}]{message}[/]"


class GagDmgType(NiceEnum):
    """Defines what a gag does to its target."""

    DAMAGE = "Damage"
    HEAL = "Heal"
    LURE = "Lure"


class AffectsType(NiceEnum):
    """Defines who a gag is used on."""

    COG = "Cog"
    TOON = "Toon"


class AffectsNum(NiceEnum):
    """Defines how many targets a gag affects."""

    ALL = "All"
    SINGLE = "Single"


class ToonRestriction(NiceEnum):
    """Defines the single track a toon may be missing."""

    NONE = "none"
    TOONUP_LESS = "toonup-less"
    TRAPLESS = "trapless"
    LURELESS = "lureless"
    SOUNDLESS = "soundless"
    DROPLESS = "dropless"

    @property
    def missing_track(self) -> GagTrack | None:
        """Returns the track this toon lacks, if any."""
        return {
            ToonRestriction.TOONUP_LESS: GagTrack.TOONUP,
            ToonRestriction.TRAPLESS: GagTrack.TRAP,
            ToonRestriction.LURELESS: GagTrack.LURE,
            ToonRestriction.SOUNDLESS: GagTrack.SOUND,
            ToonRestriction.DROPLESS: GagTrack.DROP,
        }.get(self)


class SortMode(NiceEnum):
    """Defines how fill-to-kill options are ranked."""

    ACCURACY = "accuracy"
    CONSERVE = "conserve"
    WEIGHTED = "weighted"


# =============================================================================
# COMBAT RULES
# =============================================================================

ACCURACY_CAP = 95
ACCURACY_FLOOR = 5
STUN_CAP = 75
STUN_PER_HIT = 25
TRAP_STUN_BONUS = 50
TRAP_ACCURACY_BONUS = 10
EXTRA_TRAP_ACCURACY_BONUS = 5
ORGANIC_LURE_ACCURACY_BONUS = 10
DEFAULT_ORGANIC_BONUS = 0.1

# Assume every toon has maxed experience in any track it carries.
MAX_TRACK_EXP = 60
TOONUP_TRACK_EXP = 30

# Health formula gains a flat bonus from this level on.
HIGH_LEVEL_HP_THRESHOLD = 12
HIGH_LEVEL_HP_BONUS = 14

MAX_COG_LEVEL = 20

TARGET_DEFENSE: dict[int, int] = {
    1: -2,
    2: -5,
    3: -10,
    4: -12,
    5: -15,
    6: -25,
    7: -30,
    8: -35,
    9: -40,
    10: -45,
    11: -50,
    12: -55,
}
MID_TARGET_DEFENSE = -60
DEFAULT_TARGET_DEFENSE = -65

# Tracks whose hits add stun to the tracks that follow.
STUN_TRACKS: frozenset[GagTrack] = frozenset(
    {GagTrack.SOUND, GagTrack.THROW, GagTrack.SQUIRT, GagTrack.DROP}
)
# Tracks whose successful hit wakes a lured cog.
DAMAGE_TRACKS: frozenset[GagTrack] = STUN_TRACKS
# Tracks that never miss a lured cog.
LURED_AUTO_HIT_TRACKS: frozenset[GagTrack] = frozenset(
    {GagTrack.SOUND, GagTrack.THROW, GagTrack.SQUIRT}
)
# Every toon carries these regardless of its restriction.
ALWAYS_AVAILABLE_TRACKS: frozenset[GagTrack] = frozenset(
    {GagTrack.THROW, GagTrack.SQUIRT}
)

# Order used when describing the per-track composition of an addition.
COMPOSITION_ORDER: tuple[GagTrack, ...] = (
    GagTrack.LURE,
    GagTrack.TRAP,
    GagTrack.SOUND,
    GagTrack.THROW,
    GagTrack.SQUIRT,
    GagTrack.DROP,
    GagTrack.TOONUP,
)


def adapt_keys_to_enum(enum_class: Any, data: dict[Any, Any]) -> dict[Any, Any]:
    """
    Converts dictionary keys to the specified enumeration type.

    Accepts both member names ("THROW") and values ("Throw"); keys that match
    neither are dropped.

    Args:
        enum_class (Any):
            The enumeration class to convert keys to.
        data (dict[Any, Any]):
            The input dictionary with keys to convert.

    Returns:
        dict[Any, Any]:
            A new dictionary with keys converted to the specified enum type.
    """
    result: dict[Any, Any] = {}
    for key, value in data.items():
        if isinstance(key, enum_class):
            result[key] = value
        elif isinstance(key, str) and key in enum_class.__members__:
            result[enum_class[key]] = value
        else:
            try:
                result[enum_class(key)] = value
            except ValueError:
                continue
    return result
