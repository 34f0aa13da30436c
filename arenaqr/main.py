from __future__ import annotations

import sys

from PyQt6 import QtWidgets

from .config import AppConfig
from .logger import setup_logging
from .ui import MainWindow


def main() -> int:
    app = QtWidgets.QApplication(sys.argv)
    app.setApplicationName("Are.na QR")
    cfg = AppConfig()
    setup_logging(cfg.debug)
    win = MainWindow(cfg)
    win.show()
    return app.exec()


if __name__ == "__main__":
    raise SystemExit(main())
