"""Entry point: logging, exception hook and the Qt event loop."""

import logging
import sys
import traceback

from PyQt5.QtWidgets import QApplication

from .window import APP_NAME, MainWindow

log = logging.getLogger("scribble.app")


def main(argv=None):
    if argv is None:
        argv = sys.argv
    logging.basicConfig(level=logging.DEBUG,
                        format="%(asctime)s %(name)s %(message)s", force=True)

    def _excepthook(t, v, tb):
        log.error("".join(traceback.format_exception(t, v, tb)))
        sys.__excepthook__(t, v, tb)
    sys.excepthook = _excepthook

    log.info("Starting")
    app = QApplication(argv)
    app.setApplicationName(APP_NAME)
    window = MainWindow()
    window.show()
    # Load file from command line: scribble image.png
    if len(argv) > 1:
        window.open_file(argv[1])
    return app.exec_()


if __name__ == "__main__":
    sys.exit(main())
