# src/cdcase/player/media_session.py
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from PySide6.QtCore import QObject, Signal

from cdcase.player.queue import PlaybackQueue, QueueSnapshot

logger = logging.getLogger(__name__)


class TransportCommand(Enum):
    PLAY = "play"
    PAUSE = "pause"
    TOGGLE = "toggle"
    NEXT = "next"
    PREVIOUS = "previous"


@dataclass(frozen=True)
class NowPlayingInfo:
    title: str
    artist: str
    album: str
    track_number: Optional[int]
    is_playing: bool
    queue_position: int   # 1-based
    queue_length: int
    artwork: Optional[bytes] = field(default=None, repr=False)


def now_playing_from(snapshot: QueueSnapshot) -> Optional[NowPlayingInfo]:
    track = snapshot.current_track
    if track is None:
        return None
    return NowPlayingInfo(
        title=track.title,
        artist=track.artist,
        album=track.album,
        track_number=track.track_number,
        is_playing=snapshot.is_playing,
        queue_position=snapshot.index + 1,
        queue_length=len(snapshot.tracks),
        artwork=track.artwork,
    )


class MediaSession(QObject):
    """
    Bridge between the queue and desktop transport controls (media keys,
    now-playing displays).
    """
    nowPlayingChanged = Signal(object)  # NowPlayingInfo | None

    def __init__(self, queue: PlaybackQueue, parent=None):
        super().__init__(parent)
        self.queue = queue
        self.now_playing: Optional[NowPlayingInfo] = now_playing_from(queue.snapshot())
        queue.stateChanged.connect(self._on_queue_changed)

    def _on_queue_changed(self, snapshot: QueueSnapshot) -> None:
        info = now_playing_from(snapshot)
        if info == self.now_playing:
            return
        self.now_playing = info
        self.nowPlayingChanged.emit(info)

    def handle_command(self, command: TransportCommand) -> bool:
        if not self.queue.has_queue:
            logger.debug("Ignoring %s: nothing queued", command.value)
            return False

        if command == TransportCommand.PLAY:
            self.queue.play()
        elif command == TransportCommand.PAUSE:
            self.queue.pause()
        elif command == TransportCommand.TOGGLE:
            self.queue.toggle()
        elif command == TransportCommand.NEXT:
            self.queue.advance()
        elif command == TransportCommand.PREVIOUS:
            self.queue.retreat()
        return True
