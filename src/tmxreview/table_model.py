"""Qt table model backed by the controller's unit listing.

Uses QAbstractTableModel so that QTableView only requests data for
visible rows.  Rows are cached from ``list_units()`` and rebuilt on
every reset.
"""

from __future__ import annotations

from typing import Any

from PySide6.QtCore import QAbstractTableModel, QModelIndex, Qt

from tmxreview.controller import AppController, EditTarget
from tmxreview.models import UnitRow

COL_ID, COL_SOURCE, COL_TARGET = range(3)


class UnitTableModel(QAbstractTableModel):
    """Three-column model: ID, Source (read-only) and Target (editable)."""

    COLUMNS = ("ID", "Source", "Target")

    def __init__(self, controller: AppController, parent=None):
        super().__init__(parent)
        self._controller = controller
        self._rows: list[UnitRow] = controller.list_units()

    # ── Public API ──────────────────────────────────────────────

    def notify_data_changed(self) -> None:
        """Signal full refresh after a load or a structural edit."""
        self.beginResetModel()
        self._rows = self._controller.list_units()
        self.endResetModel()

    # ── QAbstractTableModel overrides ───────────────────────────

    def rowCount(self, parent: QModelIndex = QModelIndex()) -> int:
        if parent.isValid():
            return 0
        return len(self._rows)

    def columnCount(self, parent: QModelIndex = QModelIndex()) -> int:
        if parent.isValid():
            return 0
        return len(self.COLUMNS)

    def data(self, index: QModelIndex, role: int = Qt.DisplayRole) -> Any:
        if not index.isValid() or index.row() >= len(self._rows):
            return None
        if role in (Qt.DisplayRole, Qt.EditRole, Qt.ToolTipRole):
            return self._rows[index.row()][index.column()]
        return None

    def setData(self, index: QModelIndex, value: Any, role: int = Qt.EditRole) -> bool:
        if role != Qt.EditRole or not index.isValid() or index.column() != COL_TARGET:
            return False
        row = index.row()
        created = self._controller.on_user_action(EditTarget(row, str(value)))
        if not created:
            # Structural changes reset the whole model via the controller
            self._rows[row] = self._rows[row]._replace(target=str(value))
            self.dataChanged.emit(index, index, [Qt.DisplayRole, Qt.EditRole])
        return True

    def headerData(
        self, section: int, orientation: Qt.Orientation, role: int = Qt.DisplayRole
    ) -> Any:
        if role == Qt.DisplayRole:
            if orientation == Qt.Horizontal and 0 <= section < len(self.COLUMNS):
                return self.COLUMNS[section]
            if orientation == Qt.Vertical:
                return str(section + 1)
        return None

    def flags(self, index: QModelIndex) -> Qt.ItemFlags:
        base = Qt.ItemIsEnabled | Qt.ItemIsSelectable
        if index.isValid() and index.column() == COL_TARGET:
            return base | Qt.ItemIsEditable
        return base
