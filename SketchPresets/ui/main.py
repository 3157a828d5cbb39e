"""The SketchPresets main window: parameter editor in the centre, presets and log in docks."""
import logging
from typing import Optional

from PySide6 import QtWidgets, QtCore, QtGui

from ..core.storage import KeyValueStorage, SettingsStorage
from ..log.view import LogDockWidget
from ..presets.lib import PresetsAPI
from ..presets.view import PresetsDockWidget
from ..settings.lib import ParametersAPI, app_name
from ..settings.view import ParametersWidget
from ..ui.actions import signals

WINDOW_STATE_GROUP = 'MainWindow'

widget = None


def show():
    """Create the main window on first call and show it."""
    global widget
    if widget is None:
        widget = MainWindow()
    widget.show()


class MainWindow(QtWidgets.QMainWindow):
    """
    The application window.

    Builds the session's parameters and preset store once and hands them to the widgets that
    use them.
    """

    def __init__(
            self,
            parameters: Optional[ParametersAPI] = None,
            storage: Optional[KeyValueStorage] = None,
            parent: Optional[QtWidgets.QWidget] = None
    ):
        super().__init__(parent=parent)
        self.setWindowTitle(app_name)
        self.setObjectName('SketchPresetsMainWindow')

        self.parameters: ParametersAPI = parameters or ParametersAPI()
        if storage is None:
            storage = SettingsStorage(self.parameters.storage_path)
        self.presets_api = PresetsAPI(storage, parent=self)

        self.toolbar: QtWidgets.QToolBar
        self.parameters_view: ParametersWidget
        self.presets_view: PresetsDockWidget
        self.log_view: LogDockWidget

        self._configure_dock_behavior()
        self._create_ui()
        self._init_actions()
        self._connect_signals()
        self.load_window_settings()

    def _configure_dock_behavior(self) -> None:
        self.setDockNestingEnabled(True)
        self.setAnimated(True)

    def _create_ui(self) -> None:
        self.toolbar = QtWidgets.QToolBar('Views', self)
        self.toolbar.setObjectName('SketchPresetsToolbar')
        self.toolbar.setMovable(False)
        self.addToolBar(QtCore.Qt.TopToolBarArea, self.toolbar)

        self.parameters_view = ParametersWidget(self.parameters, self)
        self.setCentralWidget(self.parameters_view)

        self.presets_view = PresetsDockWidget(self.presets_api, self.parameters, self)
        self.addDockWidget(QtCore.Qt.RightDockWidgetArea, self.presets_view)

        self.log_view = LogDockWidget(self)
        self.addDockWidget(QtCore.Qt.BottomDockWidgetArea, self.log_view)
        self.log_view.hide()

        self.setStatusBar(QtWidgets.QStatusBar(self))

    def _init_actions(self) -> None:
        for dock, shortcut in (
                (self.presets_view, 'Ctrl+P'),
                (self.log_view, 'Ctrl+Shift+L'),
        ):
            self.toolbar.addAction(dock.toggle_action(shortcut))

        action = QtGui.QAction('Reload Presets', self)
        action.setShortcut('F5')
        action.setStatusTip('Re-read the presets from storage')
        action.triggered.connect(self.presets_api.reload)
        self.toolbar.addAction(action)

        action = QtGui.QAction('Revert Parameters', self)
        action.setStatusTip('Revert every parameter to its default value')
        action.triggered.connect(self.parameters.revert_all)
        self.toolbar.addAction(action)

    def _connect_signals(self) -> None:
        signals.initializationRequested.connect(self.presets_api.reload)
        signals.error.connect(self.show_error)
        signals.presetApplied.connect(self.show_preset_applied)

    @QtCore.Slot(str)
    def show_error(self, message: str) -> None:
        self.statusBar().showMessage(message, 5000)

    @QtCore.Slot(str)
    def show_preset_applied(self, name: str) -> None:
        self.statusBar().showMessage(f'Applied preset "{name}"', 3000)

    def sizeHint(self):
        return QtCore.QSize(960, 640)

    def closeEvent(self, event) -> None:
        self.save_window_settings()
        super().closeEvent(event)

    def _window_settings(self) -> QtCore.QSettings:
        settings = QtCore.QSettings(app_name, app_name)
        settings.beginGroup(WINDOW_STATE_GROUP)
        return settings

    def save_window_settings(self) -> None:
        settings = self._window_settings()
        settings.setValue('geometry', self.saveGeometry())
        settings.setValue('state', self.saveState())

    def load_window_settings(self) -> None:
        """Restore the last saved geometry and dock layout, if any."""
        settings = self._window_settings()

        geometry = settings.value('geometry')
        if not isinstance(geometry, QtCore.QByteArray) or not self.restoreGeometry(geometry):
            self.resize(self.sizeHint())

        state = settings.value('state')
        if isinstance(state, QtCore.QByteArray) and not self.restoreState(state):
            logging.debug('Saved dock layout could not be restored')
