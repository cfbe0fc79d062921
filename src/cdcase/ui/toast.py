from __future__ import annotations

from PySide6.QtCore import Qt, QTimer, QPoint
from PySide6.QtWidgets import QWidget, QFrame, QLabel, QHBoxLayout


def _colors(kind: str) -> tuple[str, str]:
    """(background, border)"""
    kind = (kind or "info").lower()
    if kind == "success":
        return "#052e1a", "#16a34a"
    if kind in ("warn", "warning"):
        return "#2a1a05", "#f59e0b"
    if kind == "error":
        return "#2a0a0a", "#ef4444"
    return "#0b1222", "#38bdf8"


class Toast(QFrame):
    def __init__(self, parent: QWidget, text: str, kind: str = "info"):
        super().__init__(parent)
        bg, border = _colors(kind)

        self.setObjectName("Toast")
        self.setAttribute(Qt.WidgetAttribute.WA_StyledBackground, True)
        self.setStyleSheet(f"""
        QFrame#Toast {{
            background: {bg};
            border: 1px solid {border};
            border-radius: 12px;
        }}
        QLabel {{ color: #e5e7eb; font-size: 12px; }}
        """)

        self.label = QLabel(text)
        self.label.setWordWrap(True)
        layout = QHBoxLayout(self)
        layout.setContentsMargins(12, 10, 12, 10)
        layout.addWidget(self.label)


class ToastManager(QWidget):
    """Stacks toasts in the top-right corner of the host widget."""

    def __init__(self, host: QWidget, max_visible: int = 4):
        super().__init__(host)
        self.host = host
        self.setAttribute(Qt.WidgetAttribute.WA_TransparentForMouseEvents, True)
        self._toasts: list[Toast] = []
        self._margin = 14
        self._spacing = 8
        self._max_visible = max_visible
        self.show()

    def show_toast(self, message: str, notify_type: str = "info", timeout_ms: int = 3000):
        self.setGeometry(self.host.rect())
        self.raise_()

        toast = Toast(self, message, notify_type)
        toast.setFixedWidth(min(420, max(240, self.width() // 2)))
        self._toasts.insert(0, toast)

        while len(self._toasts) > self._max_visible:
            self._remove(self._toasts[-1])

        self._layout_toasts()
        QTimer.singleShot(max(500, int(timeout_ms)), lambda: self._remove(toast))

    def _remove(self, toast: Toast):
        if toast not in self._toasts:
            return
        self._toasts.remove(toast)
        toast.hide()
        toast.deleteLater()
        self._layout_toasts()

    def _layout_toasts(self):
        self.setGeometry(self.host.rect())
        x_right = self.width() - self._margin
        y = self._margin
        for t in self._toasts:
            t.adjustSize()
            t.move(QPoint(x_right - t.width(), y))
            t.show()
            y += t.height() + self._spacing
