from __future__ import annotations

import asyncio
import random
import time
from pathlib import Path
from typing import List, Optional, Tuple

from PyQt6 import QtCore, QtGui, QtWidgets

from . import __version__
from .arena import EXAMPLE_BLOCK_URLS, create_card_from_url
from .config import AppConfig
from .errors import ArenaError, CardError
from .logger import setup_logging


def default_filename() -> str:
    return f"arena-qr-{int(time.time() * 1000)}.jpg"


class WorkerRenderCard(QtCore.QObject):
    finished = QtCore.pyqtSignal(bytes)
    error = QtCore.pyqtSignal(str)

    def __init__(self, cfg: AppConfig, url: str):
        super().__init__()
        self.cfg = cfg
        self.url = url

    @QtCore.pyqtSlot()
    def run(self):
        log = setup_logging(self.cfg.debug)
        try:
            log.info("[CARD] Rendering %s ...", self.url)
            data = asyncio.run(create_card_from_url(self.url, self.cfg.render_settings(), timeout=self.cfg.timeout))
            log.info("[CARD] Done, %d bytes", len(data))
            self.finished.emit(data)
        except (ArenaError, CardError) as e:
            log.warning("[CARD] Failed: %s", e)
            self.error.emit(str(e))
        except Exception as e:
            # report anything unexpected to the window instead of killing the thread
            log.exception("[CARD] Unexpected failure")
            self.error.emit(f"Unexpected error: {e}")


class MainWindow(QtWidgets.QMainWindow):
    def __init__(self, cfg: AppConfig):
        super().__init__()
        self.cfg = cfg
        self.log = setup_logging(cfg.debug)
        self._result: Optional[bytes] = None
        self._jobs: List[Tuple[QtCore.QThread, WorkerRenderCard]] = []
        self.setWindowTitle(f"Are.na QR v{__version__}")
        self._init_ui()

    def _init_ui(self):
        central = QtWidgets.QWidget()
        layout = QtWidgets.QVBoxLayout(central)
        layout.setContentsMargins(12, 12, 12, 12)
        layout.setSpacing(10)

        row = QtWidgets.QHBoxLayout()
        self.url_edit = QtWidgets.QLineEdit(self.cfg.last_url)
        self.url_edit.setPlaceholderText("https://www.are.na/block/...")
        self.url_edit.returnPressed.connect(self._generate)
        self.btn_generate = QtWidgets.QPushButton("Generate")
        self.btn_generate.clicked.connect(self._generate)
        self.btn_example = QtWidgets.QPushButton("Example")
        self.btn_example.clicked.connect(self._example)
        row.addWidget(self.url_edit, 1)
        row.addWidget(self.btn_generate)
        row.addWidget(self.btn_example)
        layout.addLayout(row)

        self.loading = QtWidgets.QLabel("Generating card ...")
        self.loading.setVisible(False)
        layout.addWidget(self.loading)
        self.error_label = QtWidgets.QLabel()
        self.error_label.setStyleSheet("color: #B00020;")
        self.error_label.setWordWrap(True)
        self.error_label.setVisible(False)
        layout.addWidget(self.error_label)

        self.preview = QtWidgets.QLabel()
        self.preview.setAlignment(QtCore.Qt.AlignmentFlag.AlignCenter)
        self.preview.setMinimumSize(400, 250)
        layout.addWidget(self.preview, 1)

        self.btn_save = QtWidgets.QPushButton("Save image")
        self.btn_save.setEnabled(False)
        self.btn_save.clicked.connect(self._save)
        layout.addWidget(self.btn_save, 0, QtCore.Qt.AlignmentFlag.AlignRight)

        self.setCentralWidget(central)
        self.resize(900, 640)

    def _example(self):
        url = random.choice(EXAMPLE_BLOCK_URLS)
        self.url_edit.setText(url)
        self._generate()

    def _generate(self):
        url = self.url_edit.text().strip()
        if not url or self._jobs:
            return
        self.cfg.last_url = url
        try:
            self.cfg.save()
        except OSError as e:
            self.log.warning("Could not save config: %s", e)

        self.loading.setVisible(True)
        self.error_label.setVisible(False)
        self.btn_generate.setEnabled(False)
        self.btn_example.setEnabled(False)

        thread = QtCore.QThread()
        worker = WorkerRenderCard(self.cfg, url)
        worker.moveToThread(thread)
        thread.started.connect(worker.run)
        worker.finished.connect(self._on_result)
        worker.error.connect(self._on_error)
        worker.finished.connect(thread.quit)
        worker.error.connect(thread.quit)
        worker.finished.connect(worker.deleteLater)
        worker.error.connect(worker.deleteLater)
        thread.finished.connect(self._on_done)
        thread.finished.connect(thread.deleteLater)
        # Keep strong refs until finished
        self._jobs.append((thread, worker))
        thread.finished.connect(lambda: self._jobs.remove((thread, worker)) if (thread, worker) in self._jobs else None)
        thread.start()

    def _on_result(self, data: bytes):
        self._result = data
        pix = QtGui.QPixmap()
        pix.loadFromData(data, "JPG")
        self.preview.setPixmap(pix.scaled(
            self.preview.size(),
            QtCore.Qt.AspectRatioMode.KeepAspectRatio,
            QtCore.Qt.TransformationMode.SmoothTransformation,
        ))
        self.btn_save.setEnabled(True)

    def _on_error(self, msg: str):
        self.error_label.setText(msg)
        self.error_label.setVisible(True)

    def _on_done(self):
        self.loading.setVisible(False)
        self.btn_generate.setEnabled(True)
        self.btn_example.setEnabled(True)

    def _save(self):
        if not self._result:
            return
        folder = self.cfg.output_folder
        folder.mkdir(parents=True, exist_ok=True)
        fn, _ = QtWidgets.QFileDialog.getSaveFileName(
            self, "Save card", str(folder / default_filename()), "JPEG (*.jpg *.jpeg)")
        if not fn:
            return
        try:
            Path(fn).write_bytes(self._result)
        except OSError as e:
            QtWidgets.QMessageBox.critical(self, "Save failed", str(e))
            return
        self.log.info("Saved card to %s", fn)
