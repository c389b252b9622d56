"""Main application window: wires the controller, table model and view."""

from __future__ import annotations

from pathlib import Path

from PySide6.QtGui import QKeySequence
from PySide6.QtWidgets import (
    QAbstractItemView,
    QFileDialog,
    QHeaderView,
    QMainWindow,
    QStatusBar,
    QTableView,
)

from tmxreview import config
from tmxreview.controller import AppController, ExportFile, LoadFile
from tmxreview.table_model import COL_ID, UnitTableModel
from tmxreview.tmx_io import export_filename


class MainWindow(QMainWindow):
    def __init__(self):
        super().__init__()
        self.setWindowTitle("TMX Review")
        self.resize(1100, 700)
        self.setAcceptDrops(True)

        # Status bar first: the controller reports its start message at once
        self._status = QStatusBar(self)
        self.setStatusBar(self._status)

        self._controller = AppController(
            notify=self._status.showMessage,
            refresh=self._on_refresh,
        )

        # Table model & view
        self._model = UnitTableModel(self._controller, self)
        self._view = QTableView(self)
        self._view.setModel(self._model)
        self._view.setWordWrap(True)
        self._view.setEditTriggers(
            QAbstractItemView.DoubleClicked
            | QAbstractItemView.EditKeyPressed
            | QAbstractItemView.AnyKeyPressed
        )
        header = self._view.horizontalHeader()
        header.setSectionResizeMode(QHeaderView.Stretch)
        header.setSectionResizeMode(COL_ID, QHeaderView.ResizeToContents)
        self.setCentralWidget(self._view)

        self._build_menus()
        self._update_actions()

    # ── Menu construction ───────────────────────────────────────

    def _build_menus(self) -> None:
        file_menu = self.menuBar().addMenu("&File")
        self._act_open = file_menu.addAction("&Open…", self._file_open)
        self._act_open.setShortcut(QKeySequence.Open)

        self._act_export = file_menu.addAction("&Export…", self._file_export)
        self._act_export.setShortcut(QKeySequence("Ctrl+E"))

        self._act_strip = file_menu.addAction(
            "Strip Attributes on Export", self._toggle_strip
        )
        self._act_strip.setCheckable(True)
        self._act_strip.setChecked(config.get_strip_attributes())

        file_menu.addSeparator()
        self._act_quit = file_menu.addAction("&Quit", self.close)
        self._act_quit.setShortcut(QKeySequence.Quit)

    def _update_actions(self) -> None:
        self._act_export.setEnabled(self._controller.session.has_document)

    def _update_title(self) -> None:
        name = self._controller.session.file_name or "Untitled"
        self.setWindowTitle(f"{name} - TMX Review")

    def _on_refresh(self) -> None:
        self._model.notify_data_changed()
        self._update_actions()
        self._update_title()

    # ── File operations ─────────────────────────────────────────

    def _file_open(self) -> None:
        path, _ = QFileDialog.getOpenFileName(
            self, "Open TMX", config.get_last_directory(), "TMX files (*.tmx);;All files (*)"
        )
        if not path:
            return
        self.load_file(path)

    def load_file(self, path: str | Path) -> bool:
        """Load a TMX file and return True on success. Can be called externally."""
        ok = self._controller.on_user_action(LoadFile(path))
        if ok:
            config.set_last_directory(Path(path).parent)
            config.save_settings()
        return ok

    def _file_export(self) -> None:
        if not self._controller.session.has_document:
            return
        suggested = Path(config.get_last_directory()) / export_filename(
            self._controller.session.file_name
        )
        path, _ = QFileDialog.getSaveFileName(
            self, "Export TMX", str(suggested), "TMX files (*.tmx);;All files (*)"
        )
        if not path:
            return
        self._controller.on_user_action(
            ExportFile(path, strip_attributes=self._act_strip.isChecked())
        )

    def _toggle_strip(self) -> None:
        config.set_strip_attributes(self._act_strip.isChecked())
        config.save_settings()

    # ── Drag & drop ─────────────────────────────────────────────

    def dragEnterEvent(self, event) -> None:
        if event.mimeData().hasUrls():
            event.acceptProposedAction()
        else:
            event.ignore()

    def dropEvent(self, event) -> None:
        urls = event.mimeData().urls()
        if not urls:
            return
        event.acceptProposedAction()
        self.load_file(urls[0].toLocalFile())
