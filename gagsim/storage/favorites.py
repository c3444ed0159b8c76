"""
Favorite combos, stored per battle scenario in a JSON file.
"""

import json
import time
from collections.abc import Sequence
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError
from pydantic.alias_generators import to_camel

from gagsim.core.logging import get_logger
from gagsim.items.gag import GagInfo

logger = get_logger(__name__)


def _now_ms() -> int:
    return int(time.time() * 1000)


class FavoriteCombo(BaseModel):
    """A fill-to-kill option the player starred."""

    model_config = ConfigDict(
        populate_by_name=True,
        alias_generator=to_camel,
    )

    id: str = Field(
        description="Identity of the combo within its scenario.",
    )
    added_gags: list[GagInfo] = Field(
        default_factory=list,
        description="The gags the combo adds, as catalog entries.",
    )
    toons: int = Field(
        description="Number of toons used, current gags included.",
    )
    total: int = Field(
        description="All-hit damage of the combo.",
    )
    over: int = Field(
        description="Overkill of the combo.",
    )
    max_cog_level: int = Field(
        description="The cog level the combo was found for.",
    )
    created_at: int = Field(
        default_factory=_now_ms,
        description="Creation time, in milliseconds since the epoch.",
    )


def scenario_signature(
    target_level: int,
    hp_override: int | None,
    lured: bool,
    toons: int,
) -> str:
    """Returns the key favorites are grouped by."""
    hp = "full" if hp_override is None else hp_override
    return f"lvl:{target_level}|hp:{hp}|lured:{int(bool(lured))}|toons:{toons}"


def favorite_id(target_level: int, toons: int, total: int, added: Sequence[GagInfo]) -> str:
    """Returns the identity of a combo; the order of ``added`` is irrelevant."""
    signature = "|".join(sorted(f"{g.track.value}:{g.level}:{g.name}" for g in added))
    return f"{target_level}|{toons}|{total}|{signature}"


_FAVORITES = TypeAdapter(dict[str, list[FavoriteCombo]])


class FavoritesStore:
    """
    Reads and writes favorite combos.

    The whole file is re-read on every call, so several stores may share it.
    Unreadable files behave as empty; failed writes are logged, not raised.
    """

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)

    def _read_all(self) -> dict[str, list[FavoriteCombo]]:
        if not self.path.is_file():
            return {}
        try:
            with open(self.path, encoding="utf-8") as f:
                return _FAVORITES.validate_python(json.load(f))
        except (OSError, json.JSONDecodeError, ValidationError) as e:
            logger.warning(f"Ignoring unreadable favorites file {self.path}: {e}")
            return {}

    def _write_all(self, favorites: dict[str, list[FavoriteCombo]]) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.path, "w", encoding="utf-8") as f:
                f.write(_FAVORITES.dump_json(favorites, by_alias=True, indent=2).decode())
        except OSError as e:
            logger.error(f"Could not save favorites to {self.path}: {e}")

    def load(self, key: str) -> list[FavoriteCombo]:
        """Returns the favorites of a scenario."""
        return self._read_all().get(key, [])

    def save(self, key: str, favorites: list[FavoriteCombo]) -> None:
        """Replaces the favorites of a scenario."""
        everything = self._read_all()
        everything[key] = list(favorites)
        self._write_all(everything)

    def toggle(self, key: str, favorite: FavoriteCombo) -> list[FavoriteCombo]:
        """
        Removes a favorite with the same id, or adds it in front.

        Returns:
            list[FavoriteCombo]:
                The updated favorites of the scenario.
        """
        everything = self._read_all()
        favorites = everything.get(key, [])
        remaining = [f for f in favorites if f.id != favorite.id]
        if len(remaining) == len(favorites):
            remaining.insert(0, favorite)
        everything[key] = remaining
        self._write_all(everything)
        return remaining
