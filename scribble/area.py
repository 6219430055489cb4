"""QWidget host for the drawing canvas."""

import logging

from PyQt5.QtCore import Qt, pyqtSignal
from PyQt5.QtGui import QPainter
from PyQt5.QtWidgets import QDialog, QSizePolicy, QWidget

try:
    from PyQt5.QtPrintSupport import QPrintDialog, QPrinter
except ImportError:  # Qt built without print support
    QPrintDialog = QPrinter = None

from .canvas import Canvas

log = logging.getLogger("scribble.area")

HAS_PRINT_SUPPORT = QPrinter is not None


class ScribbleArea(QWidget):
    """Feeds widget events to a Canvas and repaints what it reports damaged."""

    modified_changed = pyqtSignal(bool)

    def __init__(self, parent=None):
        super().__init__(parent)
        self.setAttribute(Qt.WA_StaticContents)
        self.setSizePolicy(QSizePolicy.Expanding, QSizePolicy.Expanding)
        self._canvas = Canvas()
        self._was_modified = False

    # --- Canvas state ---
    @property
    def modified(self):
        return self._canvas.modified

    @property
    def pen_color(self):
        return self._canvas.pen_color

    @property
    def pen_width(self):
        return self._canvas.pen_width

    def set_pen_color(self, color):
        self._canvas.set_pen_color(color)

    def set_pen_width(self, width):
        self._canvas.set_pen_width(width)

    def image(self):
        return self._canvas.image()

    # --- Canvas operations ---
    def open_image(self, path):
        ok = self._canvas.open_image(path)
        self._sync()
        return ok

    def save_image(self, path, fmt=None):
        ok = self._canvas.save_image(path, fmt)
        self._sync()
        return ok

    def clear_image(self):
        log.info("[clear_image] called")
        self._canvas.clear()
        self._sync()

    def can_print(self):
        return HAS_PRINT_SUPPORT

    def print_image(self):
        if not self.can_print():
            log.error("[print] Qt print support is not available")
            return False
        printer = QPrinter(QPrinter.HighResolution)
        dialog = QPrintDialog(printer, self)
        if dialog.exec_() != QDialog.Accepted:
            log.info("[print] cancelled")
            return False
        return self._canvas.print_to(printer)

    def _sync(self):
        """Repaint damaged regions and announce modified-flag changes."""
        for rect in self._canvas.render():
            self.update(rect)
        if self._canvas.modified != self._was_modified:
            self._was_modified = self._canvas.modified
            self.modified_changed.emit(self._was_modified)

    # --- Events ---
    def mousePressEvent(self, event):
        self._canvas.handle_pointer_down(event.pos(), event.button())
        self._sync()

    def mouseMoveEvent(self, event):
        self._canvas.handle_pointer_move(event.pos(), event.buttons())
        self._sync()

    def mouseReleaseEvent(self, event):
        self._canvas.handle_pointer_up(event.pos(), event.button())
        self._sync()

    def resizeEvent(self, event):
        self._canvas.handle_resize(event.size())
        self._sync()
        super().resizeEvent(event)

    def paintEvent(self, event):
        painter = QPainter(self)
        self._canvas.paint(painter, event.rect())
        painter.end()
