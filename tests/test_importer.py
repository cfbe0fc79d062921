import os

import pytest

from cdcase.core.models import Track
from cdcase.db.bookmarks import KIND_FILE, KIND_FOLDER, MemoryBookmarkStore
from cdcase.library.importer import LibraryImporter
from cdcase.library.library import Library


def _reader(path):
    if "broken" in os.path.basename(path):
        return None
    name = os.path.splitext(os.path.basename(path))[0]
    return Track(title=name, artist="Artist", album=os.path.basename(os.path.dirname(path)), file_path=path)


def _import(importer, references):
    return importer.library.import_tracks(importer.scan(importer.remember(references)))


def _relaunch(importer):
    """A fresh library filled from the same store, as on the next launch."""
    again = LibraryImporter(Library(), importer.store, reader=_reader)
    again.library.import_tracks(again.scan(again.stored_references()))
    return again


@pytest.fixture
def music(tmp_path):
    root = tmp_path / "music"
    (root / "Album A").mkdir(parents=True)
    (root / "Album B").mkdir()
    for p in ("Album A/01.mp3", "Album A/02.mp3", "Album A/broken.mp3", "Album B/x.flac", "Album B/cover.jpg"):
        (root / p).write_bytes(b"")
    return root


@pytest.fixture
def importer():
    return LibraryImporter(Library(), MemoryBookmarkStore(), reader=_reader)


def test_import_folder_remembers_and_loads(importer, music):
    added = _import(importer, [str(music)])

    assert added == 3
    assert importer.store.get(str(music)) == KIND_FOLDER
    assert [(a.title, a.track_count) for a in importer.library.albums] == [("Album A", 2), ("Album B", 1)]


def test_import_single_file(importer, music):
    path = str(music / "Album B" / "x.flac")

    _import(importer, [path])

    assert importer.store.get(path) == KIND_FILE
    assert [t.title for t in importer.library.tracks] == ["x"]


def test_missing_reference_is_not_remembered(importer, tmp_path):
    assert importer.remember([str(tmp_path / "gone"), ""]) == []
    assert importer.store.keys() == []


def test_scan_reports_progress(importer, music):
    seen = []

    tracks = importer.scan([str(music)], progress=seen.append)

    assert len(tracks) == 3
    assert (seen[-1].files_scanned, seen[-1].files_count) == (4, 4)


def test_relaunch_reloads_from_store_and_drops_vanished(music, tmp_path):
    store = MemoryBookmarkStore({str(music / "Album A"): KIND_FOLDER, str(tmp_path / "gone"): KIND_FOLDER})
    importer = LibraryImporter(Library(), store, reader=_reader)

    again = _relaunch(importer)

    assert len(again.library.tracks) == 2
    assert store.keys() == [str(music / "Album A")]


def test_reimport_does_not_duplicate(importer, music):
    _import(importer, [str(music)])

    assert _import(importer, [str(music / "Album A")]) == 0
    assert len(importer.library.tracks) == 3


def test_forget_removes_bookmark_and_tracks(importer, music):
    _import(importer, [str(music / "Album A"), str(music / "Album B")])

    removed = importer.forget(str(music / "Album A"))

    assert removed == 2
    assert importer.store.keys() == [str(music / "Album B")]
    assert [a.title for a in importer.library.albums] == ["Album B"]


def test_forget_folder_of_individually_added_files_stays_forgotten(importer, music):
    album = music / "Album A"
    _import(importer, [str(album / "01.mp3"), str(album / "02.mp3"), str(music / "Album B" / "x.flac")])

    removed = importer.forget(str(album))

    assert removed == 2
    assert importer.store.keys() == [str(music / "Album B" / "x.flac")]
    assert [t.title for t in _relaunch(importer).library.tracks] == ["x"]


def test_forget_under_a_stored_parent_is_refused(importer, music):
    _import(importer, [str(music)])
    album = str(music / "Album A")

    assert importer.covering_reference(album) == str(music)
    assert importer.forget(album) == 0

    assert importer.store.keys() == [str(music)]
    assert len(importer.library.tracks) == 3
    assert len(_relaunch(importer).library.tracks) == 3


def test_forget_parent_drops_references_inside_it(importer, music):
    _import(importer, [str(music / "Album A"), str(music / "Album B" / "x.flac")])

    assert importer.covering_reference(str(music)) is None
    assert importer.forget(str(music)) == 3

    assert importer.store.keys() == []
    assert importer.library.tracks == ()
