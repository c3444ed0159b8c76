"""
Request and response models of the fill-to-kill solver.

Requests arrive in two shapes: flat (every field at the top level) or with
the fields nested in a ``toggles`` object. Both are normalized into a single
``FillRequest``; a field present at the top level wins over its ``toggles``
counterpart. Malformed values are coerced to defaults, never rejected.
"""

import math
from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from gagsim.core.constants import GagTrack, SortMode, ToonRestriction, adapt_keys_to_enum
from gagsim.core.defaults import (
    DEFAULT_MAX_RESULTS,
    DEFAULT_MAX_TOONS,
    DEFAULT_TARGET_LEVEL,
    FALLBACK_SORT_WEIGHTS,
    GENERATION_CAP_MAX,
    GENERATION_CAP_MIN,
    GENERATION_CAP_PER_RESULT,
)
from gagsim.core.error_handling import (
    _as_number,
    ensure_int_in_range,
    ensure_non_negative_float,
    ensure_optional_hp,
    log_warning,
)
from gagsim.items.gag import GagInfo, GagKey
from gagsim.solver.capacity import coerce_restriction

# Legacy toggle names for the level exclusions.
_EXCLUDE_TOGGLES = {
    "excludeLow": "low1to3",
    "exclude_low": "low1to3",
    "excludeLevel7": "level7",
    "exclude_level7": "level7",
    "excludeLevel6": "level6",
    "exclude_level6": "level6",
    "excludeLevel6ByTrack": "level6_by_track",
    "exclude_level6_by_track": "level6_by_track",
}


def parse_gag_key(key: Any) -> GagKey | None:
    """
    Parses a gag identity.

    Accepts a ``(track, level, name)`` sequence or a ``"Track:level:name"``
    string. Returns None when the key cannot be understood.
    """
    if isinstance(key, str):
        parts = key.split(":", 2)
    elif isinstance(key, (tuple, list)):
        parts = list(key)
    else:
        return None
    if len(parts) != 3:
        return None
    track, level, name = parts
    tracks = adapt_keys_to_enum(GagTrack, {track: None})
    if not tracks:
        return None
    try:
        level = int(level)
    except (TypeError, ValueError):
        return None
    return (next(iter(tracks)), level, str(name))


def _field_names(model: type[BaseModel], data: Mapping[str, Any]) -> dict[str, Any]:
    """Renames camelCase keys to the field names of ``model``."""
    names: dict[str, str] = {}
    for name, info in model.model_fields.items():
        names[name] = name
        if info.alias:
            names[info.alias] = name
    return {names.get(k, k): v for k, v in data.items()}


class _RequestModel(BaseModel):
    model_config = ConfigDict(
        populate_by_name=True,
        alias_generator=to_camel,
        extra="ignore",
    )


class ExcludeLevels(_RequestModel):
    """Gag levels the solver must not suggest."""

    low1to3: bool = Field(
        default=False,
        description="Exclude levels 1 to 3.",
    )
    level7: bool = Field(
        default=False,
        description="Exclude level 7 gags.",
    )
    level6: bool = Field(
        default=False,
        description="Exclude level 6 gags of every track.",
    )
    level6_by_track: dict[GagTrack, bool] = Field(
        default_factory=dict,
        description="Exclude level 6 gags of specific tracks.",
    )

    @field_validator("level6_by_track", mode="before")
    @classmethod
    def _adapt_tracks(cls, value: Any) -> dict[GagTrack, bool]:
        if not isinstance(value, Mapping):
            return {}
        return adapt_keys_to_enum(GagTrack, dict(value))

    def excludes(self, level: int, track: GagTrack) -> bool:
        """Returns True if a gag of this level and track is excluded."""
        if self.level7 and level == 7:
            return True
        if level == 6 and (self.level6 or self.level6_by_track.get(track, False)):
            return True
        return self.low1to3 and 1 <= level <= 3


class SortWeights(_RequestModel):
    """Non-negative weights of the weighted sort components."""

    accuracy: float = Field(
        default=FALLBACK_SORT_WEIGHTS["accuracy"],
        description="Weight of the KO probability.",
    )
    conserve: float = Field(
        default=FALLBACK_SORT_WEIGHTS["conserve"],
        description="Weight of keeping high-level gags in stock.",
    )
    tracks: float = Field(
        default=FALLBACK_SORT_WEIGHTS["tracks"],
        description="Weight of using few distinct tracks.",
    )

    @model_validator(mode="before")
    @classmethod
    def _clean(cls, data: Any) -> dict[str, float]:
        if isinstance(data, BaseModel):
            data = data.model_dump()
        elif not isinstance(data, Mapping):
            data = {}
        return {
            name: ensure_non_negative_float(
                data.get(name, fallback),
                f"sort_weights.{name}",
                fallback,
            )
            for name, fallback in FALLBACK_SORT_WEIGHTS.items()
        }


class FillRequest(_RequestModel):
    """
    The input of a fill-to-kill solve.

    Gags already committed this round go in ``current_gags``; the solver
    chooses additions from ``available_gags`` (the whole catalog when
    omitted).
    """

    target_level: int = Field(
        default=DEFAULT_TARGET_LEVEL,
        description="Level of the target cog.",
    )
    target_hp_override: int | None = Field(
        default=None,
        description="Remaining hit points, used instead of the level's full health.",
    )
    is_target_already_lured: bool = Field(
        default=False,
        description="Whether the cog starts the round lured.",
    )
    current_gags: list[GagInfo] = Field(
        default_factory=list,
        description="Gags already committed this round.",
    )
    available_gags: list[GagInfo] | None = Field(
        default=None,
        description="Gags the solver may add; None means the whole catalog.",
    )
    max_toons: int = Field(
        default=DEFAULT_MAX_TOONS,
        description="Number of toons (one gag each) in the battle.",
    )
    toon_restrictions: list[ToonRestriction] = Field(
        default_factory=list,
        description="The track each toon lacks, by toon slot.",
    )
    enabled_tracks: dict[GagTrack, bool] = Field(
        default_factory=dict,
        description="Tracks explicitly disabled with False; missing means enabled.",
    )
    exclude_levels: ExcludeLevels = Field(
        default_factory=ExcludeLevels,
        description="Level exclusion rules.",
    )
    prefer_accuracy: bool = Field(
        default=True,
        description="Fallback sort preference when no sort mode is given.",
    )
    sort_mode: SortMode | None = Field(
        default=None,
        description="How the options are ranked.",
    )
    sort_weights: SortWeights = Field(
        default_factory=SortWeights,
        description="Weights of the weighted sort.",
    )
    gag_conserve_weights: dict[GagKey, float] = Field(
        default_factory=dict,
        description="Per-gag retain weights (0 spend freely, 1 strongly conserve).",
    )
    hide_overkill_additions: bool = Field(
        default=False,
        description="Hide options that add gags without a displayed KO gain.",
    )
    max_results: int = Field(
        default=DEFAULT_MAX_RESULTS,
        description="Maximum number of options returned.",
    )
    max_generated: float | None = Field(
        default=None,
        description="Stop the search after this many kill options.",
    )

    @model_validator(mode="before")
    @classmethod
    def _merge_toggles(cls, data: Any) -> Any:
        if not isinstance(data, Mapping):
            return data
        top = _field_names(cls, data)
        toggles = top.pop("toggles", None) or {}
        if not isinstance(toggles, Mapping):
            log_warning(
                "Ignoring malformed toggles in fill request",
                {"toggles": toggles},
            )
            toggles = {}
        toggles = _field_names(cls, toggles)

        merged = {k: v for k, v in toggles.items() if k not in _EXCLUDE_TOGGLES}
        merged.update({k: v for k, v in top.items() if v is not None})

        if merged.get("exclude_levels") is None:
            legacy = {
                field: toggles[name]
                for name, field in _EXCLUDE_TOGGLES.items()
                if toggles.get(name) is not None
            }
            if legacy:
                merged["exclude_levels"] = legacy
        return merged

    @field_validator("target_hp_override", mode="before")
    @classmethod
    def _clean_hp(cls, value: Any) -> int | None:
        return ensure_optional_hp(value, 1)

    @field_validator("max_toons", mode="before")
    @classmethod
    def _clean_max_toons(cls, value: Any) -> int:
        return ensure_int_in_range(value, "max_toons", 0, default=DEFAULT_MAX_TOONS)

    @field_validator("max_results", mode="before")
    @classmethod
    def _clean_max_results(cls, value: Any) -> int:
        return ensure_int_in_range(value, "max_results", 0, default=DEFAULT_MAX_RESULTS)

    @field_validator("max_generated", mode="before")
    @classmethod
    def _clean_max_generated(cls, value: Any) -> float | None:
        if value is None:
            return None
        try:
            return float(value)
        except (TypeError, ValueError):
            return math.nan

    @field_validator("toon_restrictions", mode="before")
    @classmethod
    def _clean_restrictions(cls, value: Any) -> list[ToonRestriction]:
        if not isinstance(value, (list, tuple)):
            return []
        return [coerce_restriction(r) for r in value]

    @field_validator("enabled_tracks", mode="before")
    @classmethod
    def _clean_enabled_tracks(cls, value: Any) -> dict[GagTrack, bool]:
        if not isinstance(value, Mapping):
            return {}
        return adapt_keys_to_enum(GagTrack, dict(value))

    @field_validator("sort_mode", mode="before")
    @classmethod
    def _clean_sort_mode(cls, value: Any) -> SortMode | None:
        if value is None or isinstance(value, SortMode):
            return value
        try:
            return SortMode(value)
        except ValueError:
            log_warning(f"Unknown sort mode {value!r}, using the default", {"sort_mode": value})
            return None

    @field_validator("gag_conserve_weights", mode="before")
    @classmethod
    def _clean_conserve_weights(cls, value: Any) -> dict[GagKey, float]:
        if not isinstance(value, Mapping):
            return {}
        weights: dict[GagKey, float] = {}
        for raw_key, raw_weight in value.items():
            key = parse_gag_key(raw_key)
            weight = _as_number(raw_weight)
            # Unusable entries fall back to the default table.
            if key is None or weight is None:
                continue
            weights[key] = weight
        return weights

    @property
    def resolved_sort_mode(self) -> SortMode:
        """The requested sort mode, or the ``prefer_accuracy`` fallback."""
        if self.sort_mode is not None:
            return self.sort_mode
        return SortMode.ACCURACY if self.prefer_accuracy else SortMode.CONSERVE

    @property
    def generation_cap(self) -> int:
        """
        How many kill options the search may accept before stopping.

        Defaults to ``max_results * 30``; a given value is floored and kept
        within [50, 50000].
        """
        fallback = self.max_results * GENERATION_CAP_PER_RESULT
        raw = self.max_generated
        if raw is None:
            raw = fallback
        elif not math.isfinite(raw):
            # Unusable values fall back without clamping.
            return fallback
        return max(GENERATION_CAP_MIN, min(GENERATION_CAP_MAX, math.floor(raw)))


class FillOption(BaseModel):
    """A set of gags that, added to the current ones, reaches the cog's hp."""

    model_config = ConfigDict(frozen=True)

    added_gags: tuple[GagInfo, ...] = Field(
        description="The gags to add to the current selection.",
    )
    total_damage: int = Field(
        description="All-hit damage of the current plus added gags.",
    )
    overkill: int = Field(
        description="Damage beyond the cog's hit points.",
    )
    accuracy: float = Field(
        description="One-turn KO probability of the current plus added gags.",
    )

    @property
    def max_level(self) -> int:
        return max((g.level for g in self.added_gags), default=0)

    @property
    def level_sum(self) -> int:
        return sum(g.level for g in self.added_gags)

    @property
    def average_level(self) -> float:
        if not self.added_gags:
            return 0.0
        return self.level_sum / len(self.added_gags)
