# library/library.py
from __future__ import annotations

import logging
import os
from typing import Iterable, Optional

from PySide6.QtCore import QObject, Signal

from cdcase.core.models import Album, Track
from cdcase.library.organizer import build_albums

logger = logging.getLogger(__name__)


def is_under(path: str, root: str) -> bool:
    path = os.path.abspath(path)
    root = os.path.abspath(root)
    if path == root:
        return True
    return path.startswith(root.rstrip(os.sep) + os.sep)


class Library(QObject):
    """
    The current track set. Albums are rebuilt from scratch after every change.
    """
    tracksChanged = Signal(object)   # tuple[Track, ...]
    albumsChanged = Signal(object)   # tuple[Album, ...]

    def __init__(self, tracks: Iterable[Track] = (), parent=None):
        super().__init__(parent)
        self._tracks: list[Track] = list(tracks)
        self._albums: tuple[Album, ...] = tuple(build_albums(self._tracks))

    @property
    def tracks(self) -> tuple[Track, ...]:
        return tuple(self._tracks)

    @property
    def albums(self) -> tuple[Album, ...]:
        return self._albums

    def find_album(self, album_id: str) -> Optional[Album]:
        for album in self._albums:
            if album.id == album_id:
                return album
        return None

    def import_tracks(self, tracks: Iterable[Track]) -> int:
        known = {t.file_path for t in self._tracks}
        added = 0
        for track in tracks:
            if track.file_path in known:
                continue
            known.add(track.file_path)
            self._tracks.append(track)
            added += 1

        if added:
            logger.info("Imported %d track(s), library now has %d", added, len(self._tracks))
            self._rebuild()
        return added

    def remove_track(self, track_id: str) -> bool:
        kept = [t for t in self._tracks if t.id != track_id]
        if len(kept) == len(self._tracks):
            return False
        self._tracks = kept
        self._rebuild()
        return True

    def remove_under(self, path: str) -> int:
        kept = [t for t in self._tracks if not is_under(t.file_path, path)]
        removed = len(self._tracks) - len(kept)
        if removed:
            self._tracks = kept
            self._rebuild()
        return removed

    def clear(self) -> None:
        if not self._tracks:
            return
        self._tracks = []
        self._rebuild()

    def _rebuild(self) -> None:
        self._albums = tuple(build_albums(self._tracks))
        self.tracksChanged.emit(self.tracks)
        self.albumsChanged.emit(self._albums)
