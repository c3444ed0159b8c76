import json
from collections.abc import Callable
from pathlib import Path
from typing import Any

from catchery import log_warning

from gagsim.core.constants import GagTrack
from gagsim.core.error_handling import UnknownTrackError
from gagsim.core.logging import get_logger
from gagsim.core.utils import Singleton
from gagsim.items.gag import GagInfo, GagKey
from gagsim.items.track import TrackInfo

logger = get_logger(__name__)

DEFAULT_DATA_DIR = Path(__file__).resolve().parent.parent / "data"


class GagRepository(metaclass=Singleton):
    """
    One-stop registry for the gag catalog and the track metadata.

    The repository is read-only once loaded. Gags are keyed by their
    (track, level, name) triple for exact-match lookup.
    """

    tracks: dict[GagTrack, TrackInfo]
    gags: dict[GagKey, GagInfo]

    def __init__(self, data_dir: Path | None = None) -> None:
        """
        Initialize the GagRepository.

        Args:
            data_dir (Path | None):
                The directory containing ``gags.json``. The catalog bundled
                with the package is used when omitted.

        """
        self.reload(data_dir or DEFAULT_DATA_DIR)

    def reload(self, root: Path) -> None:
        """
        (Re)load the catalog from disk.

        Args:
            root (Path):
                The directory containing ``gags.json``.
        """
        self.tracks = _load_json_file(
            root / "gags.json",
            self._load_tracks,
            "gag tracks",
        )
        self.gags = {
            gag.key: gag for track in self.tracks.values() for gag in track.gags
        }

    def get_track(self, track: GagTrack) -> TrackInfo:
        """Get the metadata of a track, raising UnknownTrackError if absent."""
        info = self.tracks.get(track)
        if info is None:
            raise UnknownTrackError(track)
        return info

    def track_order(self) -> list[GagTrack]:
        """Returns the tracks sorted by resolution order."""
        return [t.name for t in sorted(self.tracks.values(), key=lambda t: t.order)]

    def get_gag(self, track: GagTrack, level: int, name: str) -> GagInfo | None:
        """Get a gag by its (track, level, name) identity, or None if not found."""
        gag = self.gags.get((track, level, name))
        if gag is None:
            log_warning(
                f"Gag '{name}' not found in GagRepository.",
                {"track": track, "level": level, "name": name},
            )
        return gag

    def get_gag_by_name(self, name: str) -> GagInfo | None:
        """Get a gag by name alone, or None if not found."""
        for gag in self.gags.values():
            if gag.name.lower() == name.lower():
                return gag
        log_warning(
            f"Gag '{name}' not found in GagRepository.",
            {"name": name},
        )
        return None

    def find_canonical_gag(self, gag: GagInfo) -> GagInfo | None:
        """Returns the catalog entry sharing the identity of ``gag``."""
        return self.gags.get(gag.key)

    def all_gags(self) -> list[GagInfo]:
        """Returns every gag, in track order then level."""
        return [
            gag
            for track in sorted(self.tracks.values(), key=lambda t: t.order)
            for gag in track.gags
        ]

    @staticmethod
    def _load_tracks(data: list[dict]) -> dict[GagTrack, TrackInfo]:
        """
        Load the track metadata and their gags from JSON data.

        The track and damage type of each gag are inherited from its track.

        Args:
            data (list[dict]): List of track data dictionaries.

        Returns:
            dict[GagTrack, TrackInfo]: Dictionary mapping tracks to their metadata.

        Raises:
            ValueError: If duplicate tracks are found.

        """
        tracks: dict[GagTrack, TrackInfo] = {}
        for track_data in data:
            gags = [
                GagInfo(
                    **{
                        "track": track_data["name"],
                        "dmg_type": track_data["dmg_type"],
                        **gag_data,
                    }
                )
                for gag_data in track_data.get("gags", [])
            ]
            track = TrackInfo(
                **{
                    **track_data,
                    "gags": tuple(sorted(gags, key=lambda g: g.level)),
                }
            )
            if track.name in tracks:
                raise ValueError(f"Duplicate track: {track.name}")
            tracks[track.name] = track
        return tracks


def _load_json_file(
    filepath: Path,
    loader_func: Callable[[list[dict]], dict[Any, Any]],
    description: str,
) -> dict[Any, Any]:
    """Helper to load and validate JSON files"""
    try:
        logger.debug(f"Loading {description} using {loader_func.__name__}...")
        if not filepath.exists():
            raise FileNotFoundError(f"File not found: {filepath}")
        if not filepath.is_file():
            raise ValueError(f"Not a file: {filepath}")
        with open(filepath, encoding="utf-8") as f:
            data = json.load(f)
        if not data:
            raise ValueError(f"Empty data list in {filepath}")
        if not isinstance(data, list):
            raise ValueError(f"Expected list in {filepath}, got {type(data).__name__}")
        return loader_func(data)
    except (json.JSONDecodeError, FileNotFoundError, ValueError) as e:
        raise ValueError(f"File {filepath} raised an error: {e}")
