import os

import pytest

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from PySide6.QtCore import QCoreApplication

from cdcase.core.models import Track


@pytest.fixture(scope="session", autouse=True)
def qapp():
    app = QCoreApplication.instance() or QCoreApplication([])
    yield app


@pytest.fixture
def make_track():
    def _make(title, album="X", artist="Y", num=None, path=None, artwork=None):
        return Track(
            title=title,
            artist=artist,
            album=album,
            track_number=num,
            artwork=artwork,
            file_path=path or f"/music/{artist}/{album}/{title}.mp3",
        )
    return _make


class FakeOutput:
    """Records what the queue asks the audio output to do."""

    def __init__(self):
        self.calls = []
        self.on_load = None

    def load(self, path, start_playing=True):
        self.calls.append(("load", path, start_playing))
        if self.on_load is not None:
            self.on_load(path)

    def play(self):
        self.calls.append(("play",))

    def pause(self):
        self.calls.append(("pause",))

    def stop(self):
        self.calls.append(("stop",))

    def seek_ms(self, ms):
        self.calls.append(("seek", ms))


@pytest.fixture
def output():
    return FakeOutput()
