# src/cdcase/library/scan_library.py
from __future__ import annotations

import base64
import logging
import os
from dataclasses import dataclass
from typing import Callable, Iterable, Optional

from mutagen import File as MutagenFile
from mutagen._util import MutagenError
from mutagen.flac import FLAC, Picture
from mutagen.mp4 import MP4

from cdcase.core.models import Track, TrackMetadata, UNKNOWN_ALBUM, UNKNOWN_ARTIST

logger = logging.getLogger(__name__)

AUDIO_EXTS = {".mp3", ".m4a", ".aac", ".flac", ".ogg", ".oga", ".opus", ".wav", ".aiff", ".aif"}


@dataclass
class ScanProgress:
    files_scanned: int
    files_count: int


def is_audio_path(path: str) -> bool:
    return os.path.splitext(path)[1].lower() in AUDIO_EXTS


def iter_audio_paths(references: Iterable[str]) -> list[str]:
    """
    Expand files and folders into audio file paths. Folders are walked
    recursively; missing references are skipped.
    """
    paths: list[str] = []
    seen: set[str] = set()

    def _add(p: str) -> None:
        p = os.path.abspath(p)
        if p not in seen and is_audio_path(p):
            seen.add(p)
            paths.append(p)

    for ref in references:
        if not ref:
            continue
        if os.path.isfile(ref):
            _add(ref)
        elif os.path.isdir(ref):
            for dirpath, dirnames, filenames in os.walk(ref):
                dirnames.sort()
                for fn in sorted(filenames):
                    _add(os.path.join(dirpath, fn))
        else:
            logger.debug("Skipping missing reference %s", ref)
    return paths


def _first(easy, key: str) -> str | None:
    v = easy.get(key)
    if not v:
        return None
    if isinstance(v, list):
        return (str(v[0]).strip() if v else None) or None
    s = str(v).strip()
    return s or None


def _parse_track_number(raw: str | None) -> int | None:
    if not raw:
        return None
    try:
        head = str(raw).split("/")[0].strip()
        return int(head)
    except ValueError:
        return None


def read_artwork(path: str) -> Optional[bytes]:
    """
    First embedded picture, or None.
      - MP3: ID3 APIC frames
      - FLAC: picture blocks
      - MP4/M4A: 'covr' atom
      - Ogg Vorbis/Opus: base64 'metadata_block_picture' comments
    """
    audio = MutagenFile(path)
    if audio is None:
        return None

    if isinstance(audio, FLAC):
        return bytes(audio.pictures[0].data) if audio.pictures else None

    tags = getattr(audio, "tags", None)
    if not tags:
        return None

    if isinstance(audio, MP4):
        covers = tags.get("covr")
        return bytes(covers[0]) if covers else None

    if hasattr(tags, "getall"):
        frames = tags.getall("APIC")
        return bytes(frames[0].data) if frames else None

    blocks = tags.get("metadata_block_picture") if hasattr(tags, "get") else None
    if blocks:
        try:
            return bytes(Picture(base64.b64decode(blocks[0])).data)
        except (ValueError, MutagenError):
            return None
    return None


def read_metadata(path: str) -> TrackMetadata:
    """Raw tags of an audio file. Raises ValueError if mutagen can't parse it."""
    try:
        audio = MutagenFile(path, easy=True)
    except MutagenError as e:
        raise ValueError(f"Cannot parse file: {path}") from e
    if audio is None:
        raise ValueError(f"Cannot parse file: {path}")

    try:
        artwork = read_artwork(path)
    except MutagenError:
        logger.debug("Failed to read artwork from %s", path, exc_info=True)
        artwork = None

    return TrackMetadata(
        title=_first(audio, "title"),
        artist=_first(audio, "artist"),
        album=_first(audio, "album"),
        track_number=_parse_track_number(_first(audio, "tracknumber")),
        artwork=artwork,
    )


def track_from_metadata(path: str, meta: TrackMetadata) -> Track:
    return Track(
        title=meta.title or os.path.splitext(os.path.basename(path))[0],
        artist=meta.artist or UNKNOWN_ARTIST,
        album=meta.album or UNKNOWN_ALBUM,
        track_number=meta.track_number,
        artwork=meta.artwork,
        file_path=path,
    )


def new_track_from_path(path: str) -> Track | None:
    try:
        meta = read_metadata(path)
    except (ValueError, OSError) as e:
        logger.debug("Skipping %s: %s", path, e)
        return None
    return track_from_metadata(path, meta)


def load_tracks(
    paths: Iterable[str],
    progress: Callable[[ScanProgress], None] | None = None,
    reader: Callable[[str], Track | None] = new_track_from_path,
) -> list[Track]:
    paths = list(paths)
    total = len(paths)
    tracks: list[Track] = []

    for scanned, p in enumerate(paths, start=1):
        t = reader(p)
        if t is not None:
            tracks.append(t)
        if progress is not None and (scanned % 50 == 0 or scanned == total):
            progress(ScanProgress(files_scanned=scanned, files_count=total))

    logger.info("Read %d of %d audio file(s)", len(tracks), total)
    return tracks
