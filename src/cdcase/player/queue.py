# src/cdcase/player/queue.py
from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass
from enum import Enum, auto
from typing import Callable, Iterable, Optional

from PySide6.QtCore import QObject, Signal

from cdcase.core.models import Track

logger = logging.getLogger(__name__)


class QueueState(Enum):
    EMPTY = auto()
    PAUSED = auto()
    PLAYING = auto()


@dataclass(frozen=True)
class QueueSnapshot:
    tracks: tuple[Track, ...]
    index: Optional[int]
    state: QueueState

    @property
    def current_track(self) -> Optional[Track]:
        if self.index is None:
            return None
        return self.tracks[self.index]

    @property
    def has_queue(self) -> bool:
        return bool(self.tracks)

    @property
    def is_playing(self) -> bool:
        return self.state == QueueState.PLAYING


class PlaybackQueue(QObject):
    """
    Ordered tracks plus a cursor.

    Every operation, including end-of-track reports from the output, goes
    through one dispatcher. A report that arrives while another operation is
    running waits for it to finish, then runs once.
    """
    stateChanged = Signal(object)  # QueueSnapshot

    def __init__(self, player=None, parent=None):
        super().__init__(parent)
        self.player = player

        self._tracks: tuple[Track, ...] = ()
        self._index: Optional[int] = None
        self._playing = False

        self._pending: deque[Callable[[], bool]] = deque()
        self._busy = False

        ended = getattr(player, "ended", None)
        if ended is not None:
            ended.connect(self.handle_track_finished)

    # ----------------------------
    # Read-only state
    # ----------------------------

    @property
    def tracks(self) -> tuple[Track, ...]:
        return self._tracks

    @property
    def index(self) -> Optional[int]:
        return self._index

    @property
    def current_track(self) -> Optional[Track]:
        if self._index is None:
            return None
        return self._tracks[self._index]

    @property
    def has_queue(self) -> bool:
        return bool(self._tracks)

    @property
    def is_playing(self) -> bool:
        return self._playing

    @property
    def state(self) -> QueueState:
        if not self._tracks:
            return QueueState.EMPTY
        return QueueState.PLAYING if self._playing else QueueState.PAUSED

    def snapshot(self) -> QueueSnapshot:
        return QueueSnapshot(tracks=self._tracks, index=self._index, state=self.state)

    # ----------------------------
    # Public API
    # ----------------------------

    def start(self, tracks: Iterable[Track]) -> None:
        snapshot = tuple(tracks)
        self._dispatch(lambda: self._start(snapshot))

    def play(self) -> None:
        self._dispatch(self._play)

    def pause(self) -> None:
        self._dispatch(self._pause)

    def toggle(self) -> None:
        self._dispatch(lambda: self._pause() if self._playing else self._play())

    def advance(self) -> None:
        self._dispatch(self._advance)

    def retreat(self) -> None:
        self._dispatch(self._retreat)

    def handle_track_finished(self, file_path: str | None = None) -> None:
        self._dispatch(lambda: self._finished(file_path))

    # ----------------------------
    # Dispatcher
    # ----------------------------

    def _dispatch(self, op: Callable[[], bool]) -> None:
        self._pending.append(op)
        if self._busy:
            return

        self._busy = True
        try:
            while self._pending:
                changed = self._pending.popleft()()
                if changed:
                    self.stateChanged.emit(self.snapshot())
        finally:
            self._busy = False

    # ----------------------------
    # Transitions (return True when something changed)
    # ----------------------------

    def _start(self, tracks: tuple[Track, ...]) -> bool:
        self._tracks = tracks
        if not tracks:
            self._index = None
            self._playing = False
            if self.player is not None:
                self.player.stop()
            logger.debug("Queue cleared")
            return True

        self._index = 0
        self._playing = True
        self._load_current(start_playing=True)
        logger.debug("Queue started with %d track(s)", len(tracks))
        return True

    def _play(self) -> bool:
        if not self._tracks or self._playing:
            return False
        self._playing = True
        if self.player is not None:
            self.player.play()
        return True

    def _pause(self) -> bool:
        if not self._tracks or not self._playing:
            return False
        self._playing = False
        if self.player is not None:
            self.player.pause()
        return True

    def _advance(self) -> bool:
        if self._index is None or self._index + 1 >= len(self._tracks):
            return False
        self._index += 1
        self._load_current(start_playing=self._playing)
        return True

    def _retreat(self) -> bool:
        if self._index is None:
            return False
        if self._index == 0:
            if self.player is not None:
                self.player.seek_ms(0)
            return True
        self._index -= 1
        self._playing = True
        self._load_current(start_playing=True)
        return True

    def _finished(self, file_path: str | None) -> bool:
        current = self.current_track
        if current is None:
            return False
        if file_path is not None and file_path != current.file_path:
            logger.debug("Ignoring stale end-of-track for %s", file_path)
            return False

        if self._index + 1 < len(self._tracks):
            self._index += 1
            self._playing = True
            self._load_current(start_playing=True)
            return True

        if not self._playing:
            return False
        self._playing = False
        logger.debug("Reached end of queue")
        return True

    def _load_current(self, start_playing: bool) -> None:
        track = self.current_track
        if track is None or self.player is None:
            return
        self.player.load(track.file_path, start_playing=start_playing)
