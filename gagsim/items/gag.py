from typing import Any
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from gagsim.core.constants import (
    DEFAULT_ORGANIC_BONUS,
    AffectsNum,
    AffectsType,
    GagDmgType,
    GagTrack,
)

GagKey = tuple[GagTrack, int, str]


class GagInfo(BaseModel):
    """
    Immutable catalog entry describing a single gag.

    Gags are identified by their (track, level, name) triple. Fields accept
    both snake_case and the camelCase names used by web callers.
    """

    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        alias_generator=to_camel,
    )

    name: str = Field(
        description="The name of the gag.",
    )
    track: GagTrack = Field(
        description="The track the gag belongs to.",
    )
    level: int = Field(
        ge=1,
        le=7,
        description="The level of the gag within its track (1-7).",
    )
    accuracy: int = Field(
        description="Base accuracy of the gag, in percent.",
    )
    affects_type: AffectsType = Field(
        description="Whether the gag is used on cogs or toons.",
    )
    affects_num: AffectsNum = Field(
        description="Whether the gag affects a single target or all of them.",
    )
    dmg_type: GagDmgType = Field(
        description="Damage, heal or lure classification.",
    )
    min_dmg: int | None = Field(
        default=None,
        description="Minimum damage (or heal) of the gag.",
    )
    max_dmg: int | None = Field(
        default=None,
        description="Maximum damage (or heal) of the gag.",
    )
    organic_bonus: float = Field(
        default=DEFAULT_ORGANIC_BONUS,
        description="Fraction of max damage added by the organic variant.",
    )
    min_xp: int = Field(
        default=0,
        description="Track experience at which the gag unlocks.",
    )
    max_xp: int = Field(
        default=0,
        description="Track experience at which the next gag unlocks.",
    )
    is_organic: bool = Field(
        default=False,
        description="Whether this is the organic variant of the gag.",
    )

    @property
    def key(self) -> GagKey:
        """Returns the (track, level, name) identity of the gag."""
        return (self.track, self.level, self.name)

    @property
    def colored_name(self) -> str:
        prefix = "🌱 " if self.is_organic else ""
        return self.track.colorize(f"{prefix}{self.name}")

    def as_organic(self, organic: bool = True) -> "GagInfo":
        """Returns a copy of this gag with the organic flag set."""
        return self.model_copy(update={"is_organic": organic})

    def __str__(self) -> str:
        return f"{self.track.display_name}:{self.level}:{self.name}"


class GagInstance(GagInfo):
    """
    A gag selected by a toon (or by the solver).

    Instances carry a caller-generated id and may be marked as a transient
    preview that must never be committed to a selection.
    """

    id: str | int = Field(
        description="Unique id of this selection.",
    )
    is_preview: bool = Field(
        default=False,
        description="True for temporary previews that are not part of the selection.",
    )

    def to_info(self) -> GagInfo:
        """Strips the instance fields, keeping only the catalog data."""
        return GagInfo(**self.model_dump(exclude={"id", "is_preview"}))


def new_instance(
    gag: GagInfo,
    organic: bool | None = None,
    instance_id: str | int | None = None,
    preview: bool = False,
) -> GagInstance:
    """
    Creates a selection instance of a catalog gag.

    Args:
        gag (GagInfo):
            The catalog gag.
        organic (bool | None):
            Overrides the organic flag when given.
        instance_id (str | int | None):
            Id of the instance, a random one is generated if omitted.
        preview (bool):
            Marks the instance as a transient preview.

    Returns:
        GagInstance:
            The new instance.

    """
    data: dict[str, Any] = gag.model_dump(exclude={"id", "is_preview"})
    if organic is not None:
        data["is_organic"] = organic
    return GagInstance(
        **data,
        id=instance_id if instance_id is not None else uuid4().hex,
        is_preview=preview,
    )


def committed(gags: list[GagInstance]) -> list[GagInstance]:
    """Drops preview instances from a selection."""
    return [gag for gag in gags if not gag.is_preview]
