from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from gagsim.core.constants import GagDmgType, GagTrack
from gagsim.items.gag import GagInfo


class TrackInfo(BaseModel):
    """
    Static metadata of a gag track.

    The ``order`` field defines the sequence in which tracks resolve within a
    round; lower orders resolve first.
    """

    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        alias_generator=to_camel,
    )

    name: GagTrack = Field(
        description="The track.",
    )
    order: int = Field(
        description="Resolution order of the track within a round.",
    )
    color: str = Field(
        default="#ffffff",
        description="Display color of the track.",
    )
    dmg_type: GagDmgType = Field(
        description="Damage, heal or lure classification of the track.",
    )
    gags: tuple[GagInfo, ...] = Field(
        default=(),
        description="The gags of this track, sorted by level.",
    )
