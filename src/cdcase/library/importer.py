# library/importer.py
from __future__ import annotations

import logging
import os
from typing import Callable, Iterable

from cdcase.core.models import Track
from cdcase.db.bookmarks import KIND_FILE, KIND_FOLDER, BookmarkStore
from cdcase.library.library import Library, is_under
from cdcase.library.scan_library import is_audio_path, iter_audio_paths, load_tracks, new_track_from_path

logger = logging.getLogger(__name__)


class LibraryImporter:
    """
    Remembers the files and folders the user picked and loads them into the
    library. Anything that can't be read is skipped.
    """

    def __init__(
        self,
        library: Library,
        store: BookmarkStore,
        reader: Callable[[str], Track | None] = new_track_from_path,
    ):
        self.library = library
        self.store = store
        self.reader = reader

    def remember(self, references: Iterable[str]) -> list[str]:
        stored: list[str] = []
        for ref in references:
            if not ref:
                continue
            path = os.path.abspath(ref)
            if os.path.isdir(path):
                kind = KIND_FOLDER
            elif os.path.isfile(path) and is_audio_path(path):
                kind = KIND_FILE
            else:
                logger.debug("Not remembering %s", path)
                continue
            self.store.set(path, kind)
            stored.append(path)
        return stored

    def stored_references(self) -> list[str]:
        refs: list[str] = []
        for key in self.store.keys():
            if os.path.exists(key):
                refs.append(key)
            else:
                logger.info("Dropping vanished reference %s", key)
                self.store.delete(key)
        return refs

    def scan(self, references: Iterable[str], progress=None) -> list[Track]:
        return load_tracks(iter_audio_paths(references), progress=progress, reader=self.reader)

    def covering_reference(self, reference: str) -> str | None:
        """The stored folder that still brings `reference` back on the next scan, if any."""
        path = os.path.abspath(reference)
        for key in self.store.keys():
            if key != path and is_under(path, key):
                return key
        return None

    def forget(self, reference: str) -> int:
        """
        Drops every stored reference at or under `reference` and removes the
        matching tracks. Nothing happens while a stored parent folder still
        covers it.
        """
        path = os.path.abspath(reference)
        parent = self.covering_reference(path)
        if parent is not None:
            logger.info("Not forgetting %s: still covered by %s", path, parent)
            return 0

        for key in self.store.keys():
            if is_under(key, path):
                self.store.delete(key)
        return self.library.remove_under(path)
