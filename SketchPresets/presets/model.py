"""Qt models listing the presets of a :class:`~SketchPresets.presets.lib.PresetsAPI`."""
import enum
from typing import Any, Optional

from PySide6 import QtCore

from .lib import PresetsAPI, TIMESTAMP_KEY, SCHEMA_VERSION_KEY

DATE_FORMAT = 'yyyy-MM-dd hh:mm:ss'


class Columns(enum.IntEnum):
    Name = 0
    Saved = 1


class Roles:
    """Custom model roles."""
    Name = QtCore.Qt.UserRole + 1
    Timestamp = QtCore.Qt.UserRole + 2


def format_timestamp(value: Any) -> str:
    """Format a millisecond timestamp for display. Returns an empty string for missing values."""
    if not isinstance(value, (int, float)) or isinstance(value, bool):
        return ''
    return QtCore.QDateTime.fromMSecsSinceEpoch(int(value)).toString(DATE_FORMAT)


class PresetModel(QtCore.QAbstractTableModel):
    """
    One row per stored preset, in name order.

    The row list is rebuilt whenever the store saves, removes or reloads presets. Cell data is
    read from the store on demand, so an overwritten preset shows its new save time.
    """

    def __init__(self, api: PresetsAPI, parent: Optional[QtCore.QObject] = None) -> None:
        super().__init__(parent=parent)
        self._api = api
        self._names: list[str] = api.names()

        for signal in (api.presetSaved, api.presetRemoved, api.presetsReloaded):
            signal.connect(self.refresh)

    def api(self) -> PresetsAPI:
        return self._api

    @QtCore.Slot()
    def refresh(self, *args) -> None:
        """Re-read the preset names from the store."""
        self.beginResetModel()
        self._names = self._api.names()
        self.endResetModel()

    def row_for_name(self, name: str) -> int:
        """Return the row of the named preset, or -1."""
        return self._names.index(name) if name in self._names else -1

    def rowCount(self, parent: QtCore.QModelIndex = QtCore.QModelIndex()) -> int:
        return 0 if parent.isValid() else len(self._names)

    def columnCount(self, parent: QtCore.QModelIndex = QtCore.QModelIndex()) -> int:
        return 0 if parent.isValid() else len(Columns)

    def data(self, index: QtCore.QModelIndex, role: int = QtCore.Qt.DisplayRole) -> Any:
        if not index.isValid() or not 0 <= index.row() < len(self._names):
            return None

        name = self._names[index.row()]
        if role == Roles.Name:
            return name

        preset = self._api.get(name) or {}
        saved = preset.get(TIMESTAMP_KEY)
        column = Columns(index.column())

        if role == QtCore.Qt.DisplayRole:
            return name if column == Columns.Name else format_timestamp(saved)
        if role == Roles.Timestamp:
            return saved
        if role == QtCore.Qt.ToolTipRole:
            sections = ', '.join(k for k in preset if k not in (TIMESTAMP_KEY, SCHEMA_VERSION_KEY))
            return f'{name}\nSections: {sections or "none"}'
        if role == QtCore.Qt.TextAlignmentRole:
            horizontal = QtCore.Qt.AlignRight if column == Columns.Saved else QtCore.Qt.AlignLeft
            return horizontal | QtCore.Qt.AlignVCenter
        return None

    def flags(self, index: QtCore.QModelIndex) -> QtCore.Qt.ItemFlags:
        if not index.isValid():
            return QtCore.Qt.NoItemFlags
        return QtCore.Qt.ItemIsEnabled | QtCore.Qt.ItemIsSelectable

    def headerData(self, section: int, orientation: QtCore.Qt.Orientation, role: int = QtCore.Qt.DisplayRole) -> Any:
        if orientation == QtCore.Qt.Horizontal and role == QtCore.Qt.DisplayRole:
            return Columns(section).name
        return super().headerData(section, orientation, role)


class PresetsSortFilterProxyModel(QtCore.QSortFilterProxyModel):
    """Sorts presets by name, or by save time, and filters them by a name substring."""

    def __init__(self, parent: Optional[QtCore.QObject] = None) -> None:
        super().__init__(parent)
        self._filter_string = ''

        self.setDynamicSortFilter(True)
        self.setFilterCaseSensitivity(QtCore.Qt.CaseInsensitive)
        self.setFilterKeyColumn(Columns.Name)
        self.sort(Columns.Name, QtCore.Qt.AscendingOrder)

    def filter_string(self) -> str:
        return self._filter_string

    def set_filter_string(self, value: str) -> None:
        self._filter_string = value
        self.setFilterFixedString(value)

    def lessThan(self, left: QtCore.QModelIndex, right: QtCore.QModelIndex) -> bool:
        if left.column() == Columns.Saved:
            return (left.data(Roles.Timestamp) or 0) < (right.data(Roles.Timestamp) or 0)
        return super().lessThan(left, right)
