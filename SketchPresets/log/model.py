"""Item models over the in-memory log tank.

:class:`LogTableModel` polls the root logger's :class:`~.log.TankHandler` and splits each
formatted record back into date, module, level and message columns.
:class:`LogFilterProxyModel` hides rows below a chosen level.
"""
import enum
import logging
import re
from typing import Any

from PySide6 import QtCore, QtGui

from .log import TankHandler


class Columns(enum.IntEnum):
    Date = 0
    Module = 1
    Level = 2
    Message = 3


class Level(enum.IntEnum):
    """Standard logging levels, addressable by name."""
    NOTSET = logging.NOTSET
    DEBUG = logging.DEBUG
    INFO = logging.INFO
    WARNING = logging.WARNING
    ERROR = logging.ERROR
    CRITICAL = logging.CRITICAL


class Roles:
    LOG_LEVEL = QtCore.Qt.UserRole + 1


LEVEL_COLORS = {
    Level.DEBUG: QtGui.QColor(110, 140, 200),
    Level.WARNING: QtGui.QColor(220, 170, 60),
    Level.ERROR: QtGui.QColor(220, 80, 80),
    Level.CRITICAL: QtGui.QColor(220, 80, 80),
}

# Mirrors log.LOG_FORMAT
RECORD_RE = re.compile(
    r'^\[(?P<date>[^\]]+)\]\s+<(?P<module>[^>]+)>\s+(?P<level>[A-Z]+):\s+(?P<message>.*)$',
    flags=re.DOTALL
)


def get_handler() -> TankHandler:
    """Return the single TankHandler installed on the root logger.

    Raises:
        RuntimeError: If there is no TankHandler, or more than one.
    """
    tanks = [h for h in logging.getLogger().handlers if isinstance(h, TankHandler)]
    if len(tanks) != 1:
        raise RuntimeError(f'Expected one TankHandler on the root logger, found {len(tanks)}')
    return tanks[0]


def parse_record(text: str) -> dict[str, Any]:
    """Split a formatted record into its fields.

    Text that does not follow the log format is kept whole as the message, at NOTSET.
    """
    match = RECORD_RE.match(text)
    if not match:
        return {'date': '', 'module': '', 'level_enum': Level.NOTSET, 'message': text}

    return {
        'date': match['date'],
        'module': match['module'],
        'level_enum': Level.__members__.get(match['level'], Level.NOTSET),
        'message': match['message'],
    }


class LogTableModel(QtCore.QAbstractTableModel):
    """Table of parsed log records, appended to on a timer while not paused."""

    def __init__(self, parent: Any = None, fetch_interval_ms: int = 1000):
        super().__init__(parent=parent)
        self._entries: list[dict[str, Any]] = []
        self._seen = 0
        self._paused = False

        self._timer = QtCore.QTimer(self)
        self._timer.setInterval(fetch_interval_ms)
        self._timer.timeout.connect(self.fetch_new_logs)
        self._timer.start()

    @QtCore.Slot()
    def pause(self) -> None:
        self._paused = True

    @QtCore.Slot()
    def resume(self) -> None:
        self._paused = False

    def rowCount(self, parent: QtCore.QModelIndex = QtCore.QModelIndex()) -> int:
        return 0 if parent.isValid() else len(self._entries)

    def columnCount(self, parent: QtCore.QModelIndex = QtCore.QModelIndex()) -> int:
        return 0 if parent.isValid() else len(Columns)

    def data(self, index: QtCore.QModelIndex, role: int = QtCore.Qt.DisplayRole) -> Any:
        if not index.isValid() or not 0 <= index.row() < len(self._entries):
            return None

        entry = self._entries[index.row()]
        level = entry['level_enum']
        column = Columns(index.column())

        if role == QtCore.Qt.DisplayRole:
            if column == Columns.Level:
                return level.name
            return entry[column.name.lower()]
        if role == QtCore.Qt.ToolTipRole and column == Columns.Message:
            return entry['message']
        if role == QtCore.Qt.ForegroundRole:
            return LEVEL_COLORS.get(level)
        if role == QtCore.Qt.FontRole and level >= Level.ERROR:
            font = QtGui.QFont()
            font.setBold(True)
            return font
        if role == Roles.LOG_LEVEL:
            return int(level)
        return None

    def headerData(self, section: int, orientation, role: int = QtCore.Qt.DisplayRole) -> Any:
        if orientation == QtCore.Qt.Horizontal and role == QtCore.Qt.DisplayRole:
            return Columns(section).name
        return super().headerData(section, orientation, role)

    def get_entry(self, row: int) -> dict[str, Any]:
        return dict(self._entries[row])

    @QtCore.Slot()
    def clear_logs(self) -> None:
        """Remove every row. Records still held by the tank are not fetched again."""
        self.beginResetModel()
        self._entries.clear()
        self.endResetModel()

    @QtCore.Slot()
    def fetch_new_logs(self) -> None:
        """Append the records the tank received since the last fetch."""
        if self._paused:
            return
        try:
            handler = get_handler()
        except RuntimeError:
            return

        # Tank counter went backwards: it was cleared
        if handler.total < self._seen:
            self._seen = 0

        pending = min(handler.total - self._seen, len(handler.tank))
        self._seen = handler.total
        if pending <= 0:
            return

        parsed = [parse_record(text) for text in handler.get_logs()[-pending:]]
        first = len(self._entries)
        self.beginInsertRows(QtCore.QModelIndex(), first, first + len(parsed) - 1)
        self._entries.extend(parsed)
        self.endInsertRows()


class LogFilterProxyModel(QtCore.QSortFilterProxyModel):
    """Hides rows below a minimum logging level."""

    def __init__(self, parent: Any = None):
        super().__init__(parent)
        self._level = logging.NOTSET

    def filter_level(self) -> int:
        return self._level

    def set_filter_level(self, level: int) -> None:
        self._level = level
        self.invalidateFilter()

    def filterAcceptsRow(self, source_row: int, source_parent: QtCore.QModelIndex) -> bool:
        source = self.sourceModel()
        level = source.data(source.index(source_row, Columns.Level, source_parent), Roles.LOG_LEVEL)
        return level is None or level >= self._level
