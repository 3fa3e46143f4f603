# shopfloor/presentation/table_models.py

import logging
from typing import Any, Callable, List, Optional, Sequence, Tuple

from PyQt5.QtCore import QAbstractTableModel, QModelIndex, Qt, QVariant

from shopfloor.business_logic.selection import SelectionBuffer
from shopfloor.constants import Screen
from shopfloor.presentation.messages import CostChanged, QuantityChanged
from shopfloor.utils.input_parsing import display_number
from shopfloor.utils.money import format_money

logger = logging.getLogger(__name__)

Column = Tuple[str, Callable[[Any], Any]]


class SnapshotTableModel(QAbstractTableModel):
    """Read-only view over a list of entities taken from the application state."""

    def __init__(self, columns: Sequence[Column], parent=None):
        super().__init__(parent)
        self._columns = list(columns)
        self._data: List[Any] = []

    def rowCount(self, parent: QModelIndex = QModelIndex()) -> int:
        return len(self._data)

    def columnCount(self, parent: QModelIndex = QModelIndex()) -> int:
        return len(self._columns)

    def data(self, index: QModelIndex, role: int = Qt.ItemDataRole.DisplayRole) -> Any:
        if not index.isValid() or not (0 <= index.row() < len(self._data)):
            return QVariant()
        if role == Qt.ItemDataRole.DisplayRole:
            value = self._columns[index.column()][1](self._data[index.row()])
            return "" if value is None else str(value)
        return QVariant()

    def headerData(self, section: int, orientation: Qt.Orientation, role: int = Qt.ItemDataRole.DisplayRole) -> Any:
        if orientation == Qt.Orientation.Horizontal and role == Qt.ItemDataRole.DisplayRole:
            if 0 <= section < len(self._columns):
                return self._columns[section][0]
        return QVariant()

    def set_columns(self, columns: Sequence[Column]) -> None:
        self.beginResetModel()
        self._columns = list(columns)
        self.endResetModel()

    def update_data(self, new_data: Sequence[Any]) -> None:
        self.beginResetModel()
        self._data = list(new_data)
        self.endResetModel()

    def get_row(self, row: int) -> Optional[Any]:
        if 0 <= row < len(self._data):
            return self._data[row]
        return None


class SelectionLinesModel(QAbstractTableModel):
    """Filtered candidates of a line-item form with editable quantity (and cost) cells."""

    QTY_COLUMN = 3
    COST_COLUMN = 4

    def __init__(self, dispatch: Callable[[Any], None], parent=None):
        super().__init__(parent)
        self._dispatch = dispatch
        self._screen: Optional[Screen] = None
        self._buffer: Optional[SelectionBuffer] = None
        self._rows: List[Any] = []

    @property
    def with_cost(self) -> bool:
        return self._screen == Screen.PURCHASES

    def show(self, screen: Screen, buffer: SelectionBuffer) -> None:
        self.beginResetModel()
        self._screen = screen
        self._buffer = buffer
        self._rows = list(buffer.filtered)
        self.endResetModel()

    def rowCount(self, parent: QModelIndex = QModelIndex()) -> int:
        return len(self._rows)

    def columnCount(self, parent: QModelIndex = QModelIndex()) -> int:
        return 5 if self.with_cost else 4

    def headerData(self, section: int, orientation: Qt.Orientation, role: int = Qt.ItemDataRole.DisplayRole) -> Any:
        if orientation == Qt.Orientation.Horizontal and role == Qt.ItemDataRole.DisplayRole:
            headers = ["Name", "In stock", "Unit cost", "Qty", "Line cost"]
            if 0 <= section < self.columnCount():
                return headers[section]
        return QVariant()

    def flags(self, index: QModelIndex):
        base = super().flags(index)
        if index.column() in (self.QTY_COLUMN, self.COST_COLUMN):
            return base | Qt.ItemFlag.ItemIsEditable
        return base

    def data(self, index: QModelIndex, role: int = Qt.ItemDataRole.DisplayRole) -> Any:
        if not index.isValid() or self._buffer is None or not (0 <= index.row() < len(self._rows)):
            return QVariant()
        if role not in (Qt.ItemDataRole.DisplayRole, Qt.ItemDataRole.EditRole):
            return QVariant()
        candidate = self._rows[index.row()]
        line = self._buffer.chosen.get(candidate.id)
        col = index.column()
        if col == 0: return candidate.name
        if col == 1: return str(getattr(candidate, "units", getattr(candidate, "units_left", "")))
        if col == 2: return format_money(getattr(candidate, "cost", None))
        if col == self.QTY_COLUMN: return display_number(line.qty) if line else ""
        if col == self.COST_COLUMN: return line.cost if line else ""
        return QVariant()

    def setData(self, index: QModelIndex, value: Any, role: int = Qt.ItemDataRole.EditRole) -> bool:
        if role != Qt.ItemDataRole.EditRole or self._screen is None or not index.isValid():
            return False
        candidate = self._rows[index.row()]
        if index.column() == self.QTY_COLUMN:
            self._dispatch(QuantityChanged(self._screen, candidate.id, str(value)))
        elif index.column() == self.COST_COLUMN:
            self._dispatch(CostChanged(self._screen, candidate.id, str(value)))
        else:
            return False
        return True
