# ui/widgets/album_list_widget.py
from __future__ import annotations

import os
from typing import Iterable

from PySide6.QtCore import Qt, Signal, QModelIndex
from PySide6.QtGui import QStandardItem, QStandardItemModel, QPixmap, QIcon
from PySide6.QtWidgets import QWidget, QVBoxLayout, QTreeView, QHeaderView, QMenu, QLabel, QStackedLayout

from cdcase.core.models import Album

ALBUM_ID_ROLE = Qt.ItemDataRole.UserRole
TRACK_ID_ROLE = Qt.ItemDataRole.UserRole + 1
PATH_ROLE = Qt.ItemDataRole.UserRole + 2


def _artwork_icon(data: bytes | None, size: int = 32) -> QIcon | None:
    if not data:
        return None
    pm = QPixmap()
    if not pm.loadFromData(data):
        return None
    return QIcon(pm.scaled(size, size, Qt.AspectRatioMode.KeepAspectRatio, Qt.TransformationMode.SmoothTransformation))


class AlbumListWidget(QWidget):
    """Albums as sections, each with its tracks underneath."""
    playAlbum = Signal(str)             # album_id
    removeTrack = Signal(str)           # track_id
    forgetFolder = Signal(str)          # folder path

    def __init__(self, library):
        super().__init__()
        self.library = library
        self._now_playing_id: str | None = None

        self.tree = QTreeView()
        self.model = QStandardItemModel(0, 3, self)
        self.model.setHorizontalHeaderLabels(["Title", "Artist", "#"])
        self.tree.setModel(self.model)

        self.tree.setObjectName("AlbumTree")
        self.tree.setUniformRowHeights(True)
        self.tree.setAlternatingRowColors(True)
        self.tree.setSelectionBehavior(QTreeView.SelectionBehavior.SelectRows)
        self.tree.setSelectionMode(QTreeView.SelectionMode.SingleSelection)
        self.tree.setEditTriggers(QTreeView.EditTrigger.NoEditTriggers)
        self.tree.header().setStretchLastSection(False)
        self.tree.header().setSectionResizeMode(0, QHeaderView.ResizeMode.Stretch)
        self.tree.setColumnWidth(1, 220)
        self.tree.setColumnWidth(2, 50)

        self.empty_label = QLabel("No Albums\n\nImport tracks to build your library.")
        self.empty_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self.empty_label.setObjectName("EmptyLabel")

        self._apply_styles()

        # Double click -> play album
        self.tree.doubleClicked.connect(self._on_double_click)

        # Right-click context menu
        self.tree.setContextMenuPolicy(Qt.ContextMenuPolicy.CustomContextMenu)
        self.tree.customContextMenuRequested.connect(self._on_context_menu)

        host = QWidget()
        self._stack = QStackedLayout(host)
        self._stack.addWidget(self.empty_label)
        self._stack.addWidget(self.tree)

        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.addWidget(host)

        self.library.albumsChanged.connect(self.set_albums)
        self.set_albums(self.library.albums)

    # -------------------------
    # External API
    # -------------------------

    def set_albums(self, albums: Iterable[Album]):
        expanded = self._expanded_album_ids()
        self.model.setRowCount(0)

        for album in albums:
            head = self._item(album.title, album_id=album.id)
            head.setIcon(_artwork_icon(album.artwork) or QIcon())
            font = head.font()
            font.setBold(True)
            head.setFont(font)

            for i, track in enumerate(album.tracks):
                number = "" if track.track_number is None else f"#{track.track_number}"
                row = [
                    self._item(track.title, album_id=album.id, track_id=track.id, path=track.file_path),
                    self._item(track.artist, album_id=album.id, track_id=track.id),
                    self._item(number, album_id=album.id, track_id=track.id,
                               align=Qt.AlignmentFlag.AlignRight | Qt.AlignmentFlag.AlignVCenter),
                ]
                head.appendRow(row)

            self.model.appendRow([
                head,
                self._item(album.artist, album_id=album.id),
                self._item(str(album.track_count), album_id=album.id,
                           align=Qt.AlignmentFlag.AlignRight | Qt.AlignmentFlag.AlignVCenter),
            ])

            if album.id in expanded:
                self.tree.setExpanded(head.index(), True)

        self._stack.setCurrentIndex(1 if self.model.rowCount() else 0)
        self.set_now_playing(self._now_playing_id)

    def set_now_playing(self, track_id: str | None):
        self._now_playing_id = track_id
        for row in range(self.model.rowCount()):
            head = self.model.item(row, 0)
            for child in range(head.rowCount()):
                item = head.child(child, 0)
                font = item.font()
                font.setItalic(item.data(TRACK_ID_ROLE) == track_id)
                item.setFont(font)

    # -------------------------
    # UI Events
    # -------------------------

    def _on_double_click(self, index: QModelIndex):
        if not index.isValid():
            return
        album_id = index.data(ALBUM_ID_ROLE)
        if album_id is None:
            return
        self.playAlbum.emit(str(album_id))

    def _on_context_menu(self, pos):
        idx = self.tree.indexAt(pos)
        if not idx.isValid():
            return

        album_id = idx.data(ALBUM_ID_ROLE)
        track_id = idx.data(TRACK_ID_ROLE)
        path = self.model.itemFromIndex(idx.siblingAtColumn(0)).data(PATH_ROLE)

        menu = QMenu(self)
        act_play = menu.addAction("Play album")
        act_remove = menu.addAction("Remove track") if track_id else None
        act_forget = menu.addAction("Forget containing folder") if path else None

        chosen = menu.exec(self.tree.viewport().mapToGlobal(pos))
        if chosen is None:
            return
        if chosen == act_play:
            self.playAlbum.emit(str(album_id))
        elif act_remove is not None and chosen == act_remove:
            self.removeTrack.emit(str(track_id))
        elif act_forget is not None and chosen == act_forget:
            self.forgetFolder.emit(os.path.dirname(path))

    # -------------------------
    # Helpers
    # -------------------------

    def _expanded_album_ids(self) -> set[str]:
        ids = set()
        for row in range(self.model.rowCount()):
            head = self.model.item(row, 0)
            if self.tree.isExpanded(head.index()):
                ids.add(head.data(ALBUM_ID_ROLE))
        return ids

    def _item(self, text: str, album_id: str, track_id: str | None = None,
              path: str | None = None, align: Qt.AlignmentFlag = Qt.AlignmentFlag.AlignVCenter):
        it = QStandardItem(text)
        it.setEditable(False)
        it.setData(album_id, ALBUM_ID_ROLE)
        if track_id is not None:
            it.setData(track_id, TRACK_ID_ROLE)
        if path is not None:
            it.setData(path, PATH_ROLE)
        it.setTextAlignment(align)
        return it

    def _apply_styles(self):
        self.setStyleSheet("""
        QTreeView#AlbumTree {
            background-color: #020617;
            alternate-background-color: #030712;
            border: none;
            color: #e5e7eb;
            selection-background-color: rgba(56, 189, 248, 0.2);
            selection-color: #e5e7eb;
        }

        QHeaderView::section {
            background-color: #020617;
            color: #9ca3af;
            padding: 4px 6px;
            border: none;
            border-bottom: 1px solid #111827;
            font-size: 11px;
            text-transform: uppercase;
        }

        QLabel#EmptyLabel {
            color: #9ca3af;
            font-size: 13px;
        }
        """)
