"""Log dock for SketchPresets.

The dock shows the records held by the log tank. Its context menu sets the application
logging level, filters the view and clears the log.
"""
import logging

from PySide6 import QtCore, QtWidgets, QtGui

from . import log
from .model import LogFilterProxyModel, LogTableModel, Columns, get_handler
from ..ui.actions import LOG_DOCK_NAME
from ..ui.dockable_widget import DockableWidget

LEVEL_NAMES = ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL')


class LogTableView(QtWidgets.QTableView):
    """Read-only table over a filtered :class:`LogTableModel`. Follows new rows."""

    def __init__(self, parent=None):
        super().__init__(parent=parent)
        self.setEditTriggers(QtWidgets.QAbstractItemView.NoEditTriggers)
        self.setSelectionBehavior(QtWidgets.QAbstractItemView.SelectRows)
        self.setSelectionMode(QtWidgets.QAbstractItemView.SingleSelection)
        self.setWordWrap(False)
        self.verticalHeader().hide()

        proxy = LogFilterProxyModel(self)
        proxy.setSourceModel(LogTableModel(parent=self))
        self.setModel(proxy)

        header = self.horizontalHeader()
        header.setDefaultAlignment(QtCore.Qt.AlignLeft | QtCore.Qt.AlignVCenter)
        for column in Columns:
            mode = QtWidgets.QHeaderView.ResizeToContents
            if column == Columns.Message:
                mode = QtWidgets.QHeaderView.Stretch
            header.setSectionResizeMode(column, mode)

        proxy.rowsInserted.connect(self.scrollToBottom)

    def source_model(self) -> LogTableModel:
        return self.model().sourceModel()

    def selected_message(self) -> str:
        """Return the message of the selected row, or an empty string."""
        index = self.currentIndex()
        if not index.isValid():
            return ''
        return index.siblingAtColumn(Columns.Message).data(QtCore.Qt.DisplayRole) or ''


class LogDockWidget(DockableWidget):
    """Dock hosting the log table. Fetching is paused while the dock is hidden."""

    def __init__(self, parent=None) -> None:
        super().__init__('Logs', parent, size_hint=QtCore.QSize(640, 180))
        self.setObjectName(LOG_DOCK_NAME)

        self.view = LogTableView(self)
        self.view.setContextMenuPolicy(QtCore.Qt.ActionsContextMenu)
        self.setWidget(self.view)

        self._init_actions()
        self.visibilityChanged.connect(self.on_visibility_changed)

    def _add_level_menu(self, title: str, current: int, apply) -> None:
        group = QtGui.QActionGroup(self)
        menu = QtWidgets.QMenu(title, self)
        for name in LEVEL_NAMES:
            level = logging.getLevelName(name)
            action = menu.addAction(name.capitalize())
            action.setCheckable(True)
            action.setChecked(level == current)
            action.setData(level)
            group.addAction(action)
        group.triggered.connect(lambda action: apply(action.data()))
        self.view.addAction(menu.menuAction())

    def _init_actions(self) -> None:
        proxy = self.view.model()
        self._add_level_menu('Application Level', logging.getLogger().level, log.set_logging_level)
        self._add_level_menu('Show Level', proxy.filter_level(), proxy.set_filter_level)

        action = QtGui.QAction('Copy Message', self)
        action.setShortcut(QtGui.QKeySequence.Copy)
        action.setShortcutContext(QtCore.Qt.WidgetWithChildrenShortcut)
        action.triggered.connect(self.copy_message)
        self.view.addAction(action)

        action = QtGui.QAction('Clear Logs', self)
        action.triggered.connect(self.clear_logs)
        self.view.addAction(action)

    @QtCore.Slot()
    def copy_message(self) -> None:
        message = self.view.selected_message()
        if message:
            QtWidgets.QApplication.clipboard().setText(message)

    @QtCore.Slot()
    def clear_logs(self) -> None:
        """Empty both the tank and the table."""
        try:
            get_handler().clear_logs()
        except RuntimeError as ex:
            logging.warning(f'Could not clear the log tank: {ex}')
        self.view.source_model().clear_logs()

    @QtCore.Slot(bool)
    def on_visibility_changed(self, visible: bool) -> None:
        model = self.view.source_model()
        if visible:
            model.resume()
        else:
            model.pause()
