import logging
import os
import sys

from PyQt6 import QtWidgets

from .ui.main_window import EditorWindow

LOG_LEVEL_ENV = "FUNNELBUILDER_LOG_LEVEL"

if sys.platform == "win32":
    try:
        import ctypes
        ctypes.windll.shell32.SetCurrentProcessExplicitAppUserModelID(
            "FunnelBuilder.Editor")
    except (ImportError, AttributeError, OSError):
        pass


def configure_logging() -> None:
    level_name = os.getenv(LOG_LEVEL_ENV, "INFO").upper()
    level = getattr(logging, level_name, None)
    if not isinstance(level, int):
        level = logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def main() -> int:
    configure_logging()
    app = QtWidgets.QApplication(sys.argv)
    app.setApplicationName("Funnel Builder")
    win = EditorWindow()
    win.show()
    return app.exec()


if __name__ == "__main__":
    raise SystemExit(main())
