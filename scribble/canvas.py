"""Raster drawing surface.

The canvas owns a QImage buffer and turns pointer input into line segments
painted into it.  It holds no widget: a host forwards pointer and resize
events, then asks ``render()`` for the rectangles that need repainting.
"""

import logging

from PyQt5.QtCore import QPoint, QRect, QSize, Qt
from PyQt5.QtGui import QColor, QImage, QPainter, QPen

log = logging.getLogger("scribble.canvas")

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------
GROW_MARGIN = 128
MIN_PEN_WIDTH = 1
MAX_PEN_WIDTH = 50
DEFAULT_PEN_WIDTH = 1
DEFAULT_PEN_COLOR = Qt.blue
BUFFER_FORMAT = QImage.Format_RGB32


def resized(image, size):
    """Copy ``image`` onto a white ``size`` image, anchored at the origin.

    Content outside ``size`` is cropped.  An image already of that size and
    in the buffer format is returned as is.
    """
    if image.size() == size and image.format() == BUFFER_FORMAT:
        return image
    new_image = QImage(size, BUFFER_FORMAT)
    new_image.fill(Qt.white)
    p = QPainter(new_image)
    p.drawImage(QPoint(0, 0), image)
    p.end()
    return new_image


class Canvas:
    """Freehand canvas over a grow-only white bitmap."""

    def __init__(self, size=None):
        self._image = QImage()
        self._view_size = QSize(0, 0)
        self._pen_color = QColor(DEFAULT_PEN_COLOR)
        self._pen_width = DEFAULT_PEN_WIDTH
        self._modified = False
        self._scribbling = False
        self._last_point = QPoint()
        self._damage = []
        if size is not None:
            self.handle_resize(size)

    # --- State ---
    @property
    def modified(self):
        return self._modified

    @property
    def is_drawing(self):
        return self._scribbling

    @property
    def pen_color(self):
        return QColor(self._pen_color)

    @property
    def pen_width(self):
        return self._pen_width

    def set_pen_color(self, color):
        self._pen_color = QColor(color)

    def set_pen_width(self, width):
        self._pen_width = width

    def image(self):
        """Detached copy of the whole buffer."""
        return self._image.copy()

    def buffer_size(self):
        return self._image.size()

    def view_size(self):
        return QSize(self._view_size)

    # --- Files ---
    def open_image(self, path):
        loaded = QImage()
        if not loaded.load(path):
            log.error(f"[open_image] Could not decode {path}")
            return False
        new_size = loaded.size().expandedTo(self._view_size)
        self._image = resized(loaded, new_size)
        self._modified = False
        self._damage.append(self._image.rect())
        log.info(f"[open_image] {path}: {loaded.width()}x{loaded.height()}, "
                 f"buffer {new_size.width()}x{new_size.height()}")
        return True

    def save_image(self, path, fmt=None):
        """Write the visible part of the buffer to ``path``.

        The buffer is cropped, or padded with white, to the view size first.
        ``fmt`` is a Qt format tag such as ``"png"``; ``None`` picks the
        format from the file extension.
        """
        visible = resized(self._image, self._view_size)
        if not visible.save(path, fmt):
            log.error(f"[save_image] Could not write {path} as {fmt}")
            return False
        self._modified = False
        log.info(f"[save_image] {path}: {visible.width()}x{visible.height()}")
        return True

    # --- Editing ---
    def clear(self):
        self._image.fill(Qt.white)
        self._modified = True
        self._damage.append(self._image.rect())

    def handle_pointer_down(self, point, buttons):
        if buttons & Qt.LeftButton:
            self._last_point = QPoint(point)
            self._scribbling = True

    def handle_pointer_move(self, point, buttons):
        if self._scribbling and buttons & Qt.LeftButton:
            self._draw_line_to(point)

    def handle_pointer_up(self, point, buttons):
        if self._scribbling and buttons & Qt.LeftButton:
            self._draw_line_to(point)
            self._scribbling = False

    def _draw_line_to(self, end_point):
        if self._image.isNull():
            return
        p = QPainter(self._image)
        p.setPen(QPen(self._pen_color, self._pen_width, Qt.SolidLine,
                      Qt.RoundCap, Qt.RoundJoin))
        p.drawLine(self._last_point, end_point)
        p.end()
        self._modified = True
        rad = self._pen_width // 2 + 2
        self._damage.append(QRect(self._last_point, end_point).normalized()
                            .adjusted(-rad, -rad, rad, rad))
        self._last_point = QPoint(end_point)

    def handle_resize(self, size):
        """Track the view size, growing the buffer when the view outgrows it."""
        self._view_size = QSize(size)
        if size.width() > self._image.width() or size.height() > self._image.height():
            new_size = QSize(max(size.width() + GROW_MARGIN, self._image.width()),
                             max(size.height() + GROW_MARGIN, self._image.height()))
            log.debug(f"[resize] buffer {self._image.width()}x{self._image.height()}"
                      f" -> {new_size.width()}x{new_size.height()}")
            self._image = resized(self._image, new_size)
            self._damage.append(self._image.rect())

    # --- Output ---
    def render(self):
        """Return, and forget, the buffer regions changed since the last call."""
        damage, self._damage = self._damage, []
        return damage

    def paint(self, painter, rect):
        painter.drawImage(rect, self._image, rect)

    def print_to(self, device):
        """Draw the whole buffer on ``device``, scaled to fit at its origin."""
        if self._image.isNull():
            return False
        painter = QPainter()
        if not painter.begin(device):
            log.error("[print_to] Could not start painting on the device")
            return False
        rect = painter.viewport()
        size = self._image.size().scaled(rect.size(), Qt.KeepAspectRatio)
        painter.setViewport(rect.x(), rect.y(), size.width(), size.height())
        painter.setWindow(self._image.rect())
        painter.drawImage(0, 0, self._image)
        painter.end()
        return True
