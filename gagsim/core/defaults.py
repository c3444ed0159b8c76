"""
Default settings of the fill-to-kill solver.

Retain weights range from 0 (spend freely) to 1 (strongly conserve). They
only feed the conserve portion of the weighted sort.
"""

from pathlib import Path
from types import MappingProxyType
from typing import Mapping

from gagsim.core.constants import GagTrack, SortMode

DEFAULT_SORT_MODE = SortMode.WEIGHTED
DEFAULT_SORT_WEIGHTS: Mapping[str, float] = MappingProxyType(
    {"accuracy": 0.5, "conserve": 0.05, "tracks": 0.3}
)
# Used for any weight a request leaves out.
FALLBACK_SORT_WEIGHTS: Mapping[str, float] = MappingProxyType(
    {"accuracy": 1.0, "conserve": 1.0, "tracks": 1.0}
)

DEFAULT_TARGET_LEVEL = 10
DEFAULT_MAX_TOONS = 4
DEFAULT_MAX_RESULTS = 12
DEFAULT_MAX_GENERATED = 50000

# The generation cap defaults to this many options per requested result.
GENERATION_CAP_PER_RESULT = 30
GENERATION_CAP_MIN = 50
GENERATION_CAP_MAX = 50000

DEFAULT_RETAIN_WEIGHT = 0.5

DEFAULT_FAVORITES_PATH = Path.home() / ".gagsim" / "favorites.json"


def _weights(track: GagTrack, names: tuple[str, ...], values: tuple[float, ...]):
    return {
        (track, level, name): value
        for level, (name, value) in enumerate(zip(names, values), start=1)
    }


DEFAULT_GAG_CONSERVE_WEIGHTS: Mapping[tuple[GagTrack, int, str], float] = MappingProxyType(
    {
        # Healing is valuable.
        **_weights(
            GagTrack.TOONUP,
            ("Feather", "Megaphone", "Lipstick", "Bamboo Cane", "Pixie Dust", "Juggling Balls", "High Dive"),
            (0.05, 0.08, 0.12, 0.18, 0.25, 0.35, 1.0),
        ),
        **_weights(
            GagTrack.TRAP,
            ("Banana Peel", "Rake", "Marbles", "Quicksand", "Trapdoor", "TNT", "Railroad"),
            (0.0, 0.0, 0.01, 0.02, 0.03, 0.05, 1.0),
        ),
        **_weights(
            GagTrack.LURE,
            ("$1 Bill", "Small Magnet", "$5 Bill", "Big Magnet", "$10 Bill", "Hypno Goggles", "Presentation"),
            (0.0, 0.0, 0.01, 0.02, 0.05, 0.06, 1.0),
        ),
        **_weights(
            GagTrack.SOUND,
            ("Bike Horn", "Whistle", "Bugle", "Aoogah", "Elephant Trunk", "Foghorn", "Opera Singer"),
            (0.0, 0.0, 0.01, 0.02, 0.04, 0.10, 1.0),
        ),
        # Cream pies are worth more than hoses for boiler fights.
        **_weights(
            GagTrack.THROW,
            ("Cupcake", "Fruit Pie Slice", "Cream Pie Slice", "Whole Fruit Pie", "Whole Cream Pie", "Birthday Cake", "Wedding Cake"),
            (0.02, 0.04, 0.06, 0.10, 0.18, 0.30, 1.0),
        ),
        **_weights(
            GagTrack.SQUIRT,
            ("Squirting Flower", "Glass of Water", "Squirt Gun", "Seltzer Bottle", "Fire Hose", "Storm Cloud", "Geyser"),
            (0.005, 0.02, 0.04, 0.07, 0.1, 0.2, 1.0),
        ),
        **_weights(
            GagTrack.DROP,
            ("Flower Pot", "Sandbag", "Anvil", "Big Weight", "Safe", "Grand Piano", "Toontanic"),
            (0.02, 0.03, 0.05, 0.08, 0.12, 0.2, 1.0),
        ),
    }
)
