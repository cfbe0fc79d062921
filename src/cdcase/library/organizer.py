# library/organizer.py
from __future__ import annotations

from typing import Iterable

from cdcase.core.models import Album, Track, album_id_for


def track_sort_key(track: Track) -> tuple:
    """
    Numbered tracks first, by number; then title. Unnumbered tracks by title.
    File path is the last resort so equal tracks keep a fixed order.
    """
    if track.track_number is not None:
        return (0, track.track_number, track.title, track.file_path)
    return (1, 0, track.title, track.file_path)


def album_sort_key(album: Album) -> tuple[str, str]:
    return (album.artist, album.title)


def build_albums(tracks: Iterable[Track]) -> list[Album]:
    """
    Group tracks by (album, artist) and return the albums sorted by artist,
    then title. Album-level fields come from the first track after sorting.
    """
    groups: dict[tuple[str, str], list[Track]] = {}
    for track in tracks:
        groups.setdefault((track.album, track.artist), []).append(track)

    albums: list[Album] = []
    for (album_name, artist), group in groups.items():
        ordered = sorted(group, key=track_sort_key)
        first = ordered[0]
        albums.append(
            Album(
                id=album_id_for(album_name, artist),
                title=first.album,
                artist=first.artist,
                artwork=first.artwork,
                tracks=tuple(ordered),
            )
        )

    albums.sort(key=album_sort_key)
    return albums
