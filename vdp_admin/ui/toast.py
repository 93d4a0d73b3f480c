from __future__ import annotations
from PySide6.QtCore import Qt, QTimer
from PySide6.QtWidgets import QWidget, QLabel

TOAST_COLORS = {
    'success': 'rgba(5,150,105,0.92)',
    'error': 'rgba(220,38,38,0.92)',
    'info': 'rgba(0,0,0,0.8)',
}

class Toast(QWidget):
    def __init__(self, parent: QWidget | None, message: str, kind: str = 'info', timeout_ms: int = 3000):
        super().__init__(parent)
        self.setWindowFlags(Qt.ToolTip | Qt.FramelessWindowHint | Qt.WindowStaysOnTopHint)
        self.setAttribute(Qt.WA_TranslucentBackground)
        self.setAttribute(Qt.WA_DeleteOnClose)
        label = QLabel(message, self)
        label.setStyleSheet(
            f"background: {TOAST_COLORS.get(kind, TOAST_COLORS['info'])}; color: white; padding: 10px 14px; border-radius: 8px;"
        )
        label.adjustSize()
        self.resize(label.size())
        # Position bottom-right over parent (if any)
        if parent:
            pw = parent.width(); ph = parent.height()
            tw = self.width(); th = self.height()
            self.move(max(0, pw - tw - 24), max(0, ph - th - 24))
        # owned by the toast so it dies with it
        self._timer = QTimer(self)
        self._timer.setSingleShot(True)
        self._timer.timeout.connect(self.close)
        self._timer.start(timeout_ms)


def _forget_toast(parent: QWidget, toast: Toast):
    if getattr(parent, '_toast', None) is toast:
        parent._toast = None


def show_toast(parent: QWidget | None, message: str, kind: str = 'info', timeout_ms: int = 3000):
    # a new toast replaces the one still on screen
    previous = getattr(parent, '_toast', None) if parent else None
    if previous is not None:
        previous.close()
    t = Toast(parent, message, kind, timeout_ms)
    if parent:
        parent._toast = t
        t.destroyed.connect(lambda *_: _forget_toast(parent, t))
    t.show()
    return t
