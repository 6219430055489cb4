"""Main window: menus, dialogs and the unsaved-changes guard."""

import logging
import os

from PyQt5.QtCore import Qt
from PyQt5.QtGui import QImageWriter, QKeySequence
from PyQt5.QtWidgets import (
    QApplication, QColorDialog, QFileDialog, QInputDialog, QMainWindow,
    QMessageBox,
)

from .area import ScribbleArea
from .canvas import MAX_PEN_WIDTH, MIN_PEN_WIDTH

log = logging.getLogger("scribble.window")

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------
APP_NAME = "Scribble"
DEFAULT_SAVE_FORMAT = "png"
DEFAULT_WIDTH = 500
DEFAULT_HEIGHT = 500


def save_formats():
    """Format tags of every image writer plugin Qt has loaded."""
    return [bytes(fmt).decode("ascii") for fmt in QImageWriter.supportedImageFormats()]


class MainWindow(QMainWindow):
    def __init__(self):
        super().__init__()
        self.resize(DEFAULT_WIDTH, DEFAULT_HEIGHT)
        self._file_path = None

        self.area = ScribbleArea()
        self.setCentralWidget(self.area)
        self.area.modified_changed.connect(lambda _m: self._update_title())

        self.commands = self._build_commands()
        self._actions = {}
        self._build_menus()
        self._update_title()

    # ---- Commands ----
    def _build_commands(self):
        """Map each action identifier to the callable it triggers."""
        commands = {
            "open": self.open,
            "print": self.area.print_image,
            "exit": self.close,
            "pen_color": self.pen_color,
            "pen_width": self.pen_width,
            "clear": self.area.clear_image,
            "about": self.about,
            "about_qt": QApplication.aboutQt,
        }
        for fmt in save_formats():
            commands[f"save_as:{fmt}"] = lambda _f=fmt: self.save(_f)
        return commands

    # ---- Menus ----
    def _build_menus(self):
        mb = self.menuBar()

        file_menu = mb.addMenu("&File")
        self._add_action(file_menu, "&Open...", "open", QKeySequence(QKeySequence.Open))
        save_as_menu = file_menu.addMenu("&Save As")
        for command_id in self.commands:
            if command_id.startswith("save_as:"):
                fmt = command_id.split(":", 1)[1]
                self._add_action(save_as_menu, f"{fmt.upper()}...", command_id)
        print_act = self._add_action(file_menu, "&Print...", "print")
        print_act.setEnabled(self.area.can_print())
        file_menu.addSeparator()
        self._add_action(file_menu, "E&xit", "exit", QKeySequence(QKeySequence.Quit))

        option_menu = mb.addMenu("&Options")
        self._add_action(option_menu, "&Pen Color...", "pen_color")
        self._add_action(option_menu, "Pen &Width...", "pen_width")
        option_menu.addSeparator()
        self._add_action(option_menu, "&Clear Screen", "clear", QKeySequence("Ctrl+L"))

        help_menu = mb.addMenu("&Help")
        self._add_action(help_menu, "&About", "about")
        self._add_action(help_menu, "About &Qt", "about_qt")

    def _add_action(self, menu, text, command_id, shortcut=None):
        action = menu.addAction(text)
        def _handler(checked=False, _id=command_id):
            log.info(f"[action] {_id}")
            try:
                self.commands[_id]()
            except Exception as e:
                log.error(f"[action ERROR] {_id}: {e}", exc_info=True)
        action.triggered.connect(_handler)
        if shortcut is not None:
            action.setShortcut(shortcut)
            action.setShortcutContext(Qt.ApplicationShortcut)
        self._actions[command_id] = action
        return action

    def action(self, command_id):
        return self._actions[command_id]

    # ---- Dialogs ----
    def _start_dir(self):
        if self._file_path:
            return os.path.dirname(self._file_path)
        return os.getcwd()

    def _ask_open_path(self):
        path, _ = QFileDialog.getOpenFileName(self, "Open File", self._start_dir())
        return path

    def _ask_save_path(self, fmt):
        initial_path = os.path.join(self._start_dir(), f"untitled.{fmt}")
        path, _ = QFileDialog.getSaveFileName(
            self, "Save As", initial_path,
            f"{fmt.upper()} Files (*.{fmt});;All Files (*)")
        return path

    def _ask_pen_color(self):
        return QColorDialog.getColor(self.area.pen_color, self, "Pen Color")

    def _ask_pen_width(self):
        return QInputDialog.getInt(self, APP_NAME, "Select pen width:",
                                   self.area.pen_width,
                                   MIN_PEN_WIDTH, MAX_PEN_WIDTH, 1)

    def _ask_save_changes(self):
        return QMessageBox.warning(
            self, APP_NAME,
            "The image has been modified.\nDo you want to save your changes?",
            QMessageBox.Save | QMessageBox.Discard | QMessageBox.Cancel,
        )

    def _warn(self, text):
        QMessageBox.warning(self, APP_NAME, text)

    # ---- File actions ----
    def maybe_save(self):
        """Returns True if OK to proceed (user saved or discarded)."""
        if not self.area.modified:
            return True
        ret = self._ask_save_changes()
        if ret == QMessageBox.Save:
            return self.save(DEFAULT_SAVE_FORMAT)
        return ret == QMessageBox.Discard

    def open(self):
        if not self.maybe_save():
            return False
        path = self._ask_open_path()
        log.info(f"[open] Dialog returned: {path!r}")
        if not path:
            return False
        return self.open_file(path)

    def open_file(self, path):
        """Load an image file into the canvas."""
        log.info(f"[open] Loading: {path}")
        if self.area.open_image(path):
            self._file_path = path
            self._update_title()
            return True
        log.error(f"[open] Failed to load: {path}")
        self._warn(f"Could not open {path}")
        return False

    def save(self, fmt):
        path = self._ask_save_path(fmt)
        if not path:
            return False
        log.info(f"[save] Saving to {path} as {fmt}")
        if self.area.save_image(path, fmt):
            self._file_path = path
            self._update_title()
            return True
        log.error(f"[save] FAILED: {path}")
        self._warn(f"Could not save to {path}")
        return False

    # ---- Options ----
    def pen_color(self):
        color = self._ask_pen_color()
        if color.isValid():
            self.area.set_pen_color(color)

    def pen_width(self):
        width, ok = self._ask_pen_width()
        if ok:
            self.area.set_pen_width(width)

    # ---- Title ----
    def _update_title(self):
        name = os.path.basename(self._file_path) if self._file_path else "Untitled"
        self.setWindowTitle(f"{name}[*] - {APP_NAME}")
        self.setWindowModified(self.area.modified)

    # ---- About ----
    def about(self):
        QMessageBox.about(
            self, f"About {APP_NAME}",
            f"<h3>{APP_NAME}</h3>"
            "<p>Draw freehand with the left mouse button. Pen color and "
            "width live in the Options menu; images can be opened, saved "
            "in any format Qt can write, and printed.</p>",
        )

    # ---- Close event ----
    def closeEvent(self, event):
        if self.maybe_save():
            event.accept()
        else:
            event.ignore()
