# core/models.py
from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from typing import Optional

UNKNOWN_ARTIST = "Unknown Artist"
UNKNOWN_ALBUM = "Unknown Album"

# uuid5 namespace for album ids derived from (album, artist)
_ALBUM_NAMESPACE = uuid.UUID("6f1d2f5e-0c4b-4c59-9b5e-2a7c9d3e8f10")


def _new_id() -> str:
    return str(uuid.uuid4())


def album_id_for(album: str, artist: str) -> str:
    return str(uuid.uuid5(_ALBUM_NAMESPACE, f"{album}\x00{artist}"))


@dataclass(frozen=True)
class TrackMetadata:
    title: Optional[str] = None
    artist: Optional[str] = None
    album: Optional[str] = None
    track_number: Optional[int] = None
    artwork: Optional[bytes] = None


@dataclass(frozen=True)
class Track:
    title: str
    artist: str
    album: str
    file_path: str
    track_number: Optional[int] = None
    artwork: Optional[bytes] = field(default=None, repr=False)
    id: str = field(default_factory=_new_id)


@dataclass(frozen=True)
class Album:
    id: str
    title: str
    artist: str
    tracks: tuple[Track, ...]
    artwork: Optional[bytes] = field(default=None, repr=False)

    @property
    def track_count(self) -> int:
        return len(self.tracks)
