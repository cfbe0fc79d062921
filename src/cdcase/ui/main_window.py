from PySide6.QtWidgets import (
    QMainWindow, QWidget, QVBoxLayout, QLabel, QProgressBar, QHBoxLayout,
    QFileDialog, QToolButton, QStyle,
)
from PySide6.QtCore import Qt, QKeyCombination
from PySide6.QtGui import QShortcut, QKeySequence

from cdcase.library.scan_library import AUDIO_EXTS
from cdcase.player.media_session import TransportCommand
from cdcase.ui.player_bar import PlayerBar
from cdcase.ui.toast import ToastManager
from cdcase.ui.widgets.album_list_widget import AlbumListWidget
from cdcase.ui.workers.library_scanner import LibraryScanner

AUDIO_FILTER = "Audio files ({})".format(" ".join(f"*{ext}" for ext in sorted(AUDIO_EXTS)))

MEDIA_KEYS = (
    (Qt.Key.Key_MediaPlay, TransportCommand.PLAY),
    (Qt.Key.Key_MediaPause, TransportCommand.PAUSE),
    (Qt.Key.Key_MediaTogglePlayPause, TransportCommand.TOGGLE),
    (Qt.Key.Key_MediaNext, TransportCommand.NEXT),
    (Qt.Key.Key_MediaPrevious, TransportCommand.PREVIOUS),
)


class MainWindow(QMainWindow):
    def __init__(self, app_state):
        super().__init__()
        self.setWindowTitle("Library")
        self.resize(900, 600)
        self.app_state = app_state
        self._scanner = None

        session = self.app_state.media_session

        # --- Shortcuts ---
        QShortcut(QKeySequence("Space"), self, activated=lambda: session.handle_command(TransportCommand.TOGGLE))
        QShortcut(QKeySequence("Ctrl+Right"), self, activated=lambda: session.handle_command(TransportCommand.NEXT))
        QShortcut(QKeySequence("Ctrl+Left"), self, activated=lambda: session.handle_command(TransportCommand.PREVIOUS))
        for key, command in MEDIA_KEYS:
            QShortcut(QKeySequence(QKeyCombination(key)), self, activated=lambda c=command: session.handle_command(c))

        self.central_widget = QWidget()
        self.setCentralWidget(self.central_widget)
        self.layout = QVBoxLayout(self.central_widget)

        self.toasts = ToastManager(self)
        self.app_state.notification.connect(self._on_notify)

        # --- Top bar ---
        top_bar = QHBoxLayout()

        self.btn_add_files = QToolButton()
        self.btn_add_files.setText("Add Files")
        self.btn_add_files.setToolButtonStyle(Qt.ToolButtonStyle.ToolButtonTextBesideIcon)
        self.btn_add_files.setIcon(self.style().standardIcon(QStyle.StandardPixmap.SP_FileIcon))
        self.btn_add_files.clicked.connect(self.add_files)

        self.btn_add_folder = QToolButton()
        self.btn_add_folder.setText("Add Folder")
        self.btn_add_folder.setToolButtonStyle(Qt.ToolButtonStyle.ToolButtonTextBesideIcon)
        self.btn_add_folder.setIcon(self.style().standardIcon(QStyle.StandardPixmap.SP_DirIcon))
        self.btn_add_folder.clicked.connect(self.add_folder)

        self.btn_refresh = QToolButton()
        self.btn_refresh.setIcon(self.style().standardIcon(QStyle.StandardPixmap.SP_BrowserReload))
        self.btn_refresh.setToolTip("Rescan library")
        self.btn_refresh.clicked.connect(self.refresh_library)

        top_bar.addWidget(self.btn_add_files)
        top_bar.addWidget(self.btn_add_folder)
        top_bar.addStretch(1)
        top_bar.addWidget(self.btn_refresh)
        self.layout.addLayout(top_bar)

        # --- Albums ---
        self.album_list = AlbumListWidget(self.app_state.library)
        self.album_list.playAlbum.connect(self.play_album)
        self.album_list.removeTrack.connect(self.app_state.library.remove_track)
        self.album_list.forgetFolder.connect(self.forget_folder)
        self.layout.addWidget(self.album_list, 1)

        # --- PlayerBar ---
        self.player_bar = PlayerBar(self.app_state.queue, self.app_state.player, self)
        self.layout.addWidget(self.player_bar)
        self.app_state.queue.stateChanged.connect(self._on_queue_changed)
        if self.app_state.player:
            self.app_state.player.errorOccurred.connect(
                lambda msg: self.app_state.notify(f"Playback error: {msg}", "warn")
            )

        # --- Scan progress (hidden when idle) ---
        self.scan_row = QWidget()
        scan_layout = QHBoxLayout(self.scan_row)
        scan_layout.setContentsMargins(8, 6, 8, 6)
        scan_layout.setSpacing(10)

        self.scan_label = QLabel("Scanning…")
        self.scan_label.setObjectName("ScanLabel")

        self.progress_bar = QProgressBar()
        self.progress_bar.setObjectName("ScanProgress")
        self.progress_bar.setTextVisible(False)
        self.progress_bar.setRange(0, 0)

        scan_layout.addWidget(self.scan_label)
        scan_layout.addWidget(self.progress_bar, 1)

        self.layout.addWidget(self.scan_row)
        self.scan_row.setVisible(False)
        self.scan_row.setObjectName("ScanRow")

        self.show_queued_notifications()

        self.setStyleSheet(self.styleSheet() + """
            QWidget#ScanRow {
                background: #020617;
                border-top: 1px solid #111827;
            }
            QLabel#ScanLabel {
                color: #9ca3af;
                font-size: 11px;
            }
            QProgressBar#ScanProgress {
                background: #0b1222;
                border: 1px solid #1f2937;
                border-radius: 999px;
                height: 10px;
            }
            QProgressBar#ScanProgress::chunk {
                border-radius: 999px;
                background: #38bdf8;
            }
            """)

    # ------------------ importing ------------------
    def add_files(self):
        paths, _ = QFileDialog.getOpenFileNames(self, "Import Tracks", "", AUDIO_FILTER)
        if paths:
            self.scan(self.app_state.importer.remember(paths))

    def add_folder(self):
        path = QFileDialog.getExistingDirectory(self, "Import Folder")
        if path:
            self.scan(self.app_state.importer.remember([path]))

    def refresh_library(self):
        self.scan(self.app_state.importer.stored_references())

    def forget_folder(self, path: str):
        parent = self.app_state.importer.covering_reference(path)
        if parent is not None:
            self.app_state.notify(f"{parent} is still in the library. Forget that folder instead.", "warn")
            return
        removed = self.app_state.importer.forget(path)
        self.app_state.notify(f"Removed {removed} track(s)", "info")

    def scan(self, references: list[str]):
        if not references:
            return
        if self._scanner is not None and self._scanner.isRunning():
            self.app_state.notify("A scan is already running", "warn")
            return

        self.btn_refresh.setEnabled(False)
        self.progress_bar.setRange(0, 0)
        self.scan_row.setVisible(True)

        self._scanner = LibraryScanner(self.app_state.importer.scan, references, self)
        self._scanner.progress_signal.connect(self._update_scan_progress)
        self._scanner.tracks_ready.connect(self._on_tracks_ready)
        self._scanner.finished_signal.connect(self._scan_finished)
        self._scanner.start()

    def _update_scan_progress(self, scanned: int, total: int):
        if total <= 0:
            self.progress_bar.setRange(0, 0)
            return
        self.progress_bar.setRange(0, total)
        self.progress_bar.setValue(scanned)
        self.scan_label.setText(f"Scanning {scanned}/{total}")

    def _on_tracks_ready(self, tracks):
        self.app_state.library.import_tracks(tracks)

    def _scan_finished(self, ok: bool, msg: str):
        self.scan_row.setVisible(False)
        self.btn_refresh.setEnabled(True)

        if ok:
            self.app_state.notify(msg, "success")
        else:
            self.app_state.notify(msg, "error")
        self.statusBar().showMessage(msg, 4000)

    # ------------------ playback ------------------
    def play_album(self, album_id: str):
        album = self.app_state.library.find_album(album_id)
        if album is None:
            return
        self.app_state.queue.start(album.tracks)

    def _on_queue_changed(self, snapshot):
        track = snapshot.current_track
        self.album_list.set_now_playing(track.id if track else None)
        if track:
            self.setWindowTitle(f"{track.title} — {track.artist}")
        else:
            self.setWindowTitle("Library")

    # ------------------ notifications ------------------
    def _on_notify(self, n):
        msg = getattr(n, "message", "") or ""
        if not msg:
            return
        self.toasts.show_toast(msg, notify_type=n.notify_type, timeout_ms=3000)

    def show_queued_notifications(self):
        for n in self.app_state.queued_notifications:
            self._on_notify(n)
        self.app_state.queued_notifications.clear()
