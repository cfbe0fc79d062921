# ui/workers/library_scanner.py
from PySide6.QtCore import QThread, Signal

from cdcase.library.scan_library import ScanProgress


class LibraryScanner(QThread):
    """
    Runs the importer's scan off the UI thread. The tracks are handed back
    through tracks_ready; adding them to the library is up to the receiver.
    """
    progress_signal = Signal(int, int)     # scanned, total
    tracks_ready = Signal(object)          # list[Track]
    finished_signal = Signal(bool, str)    # ok, message

    def __init__(self, scan, references: list[str], parent=None):
        super().__init__(parent)
        self.scan = scan
        self.references = list(references)
        self._total = 0

    def _emit_progress(self, progress: ScanProgress):
        self._total = progress.files_count
        self.progress_signal.emit(progress.files_scanned, progress.files_count)

    def run(self):
        try:
            self.progress_signal.emit(0, 0)
            tracks = self.scan(self.references, progress=self._emit_progress)

            self.tracks_ready.emit(tracks)
            self.finished_signal.emit(True, f"Read {len(tracks)} of {self._total} file(s)")
        except Exception as e:
            self.finished_signal.emit(False, f"Scan failed: {e}")
