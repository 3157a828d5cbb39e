"""Application-wide Qt signals and utility slots for SketchPresets.

This module provides:
    - reveal_dock slot: raises a dock widget of the main window by object name.
    - Signals: custom Qt signals for parameter changes, preset lifecycle,
      UI actions (showLogs, showPresets), and errors.
"""
import logging

from PySide6 import QtCore, QtWidgets

LOG_DOCK_NAME = 'SketchPresetsLogDockWidget'
PRESETS_DOCK_NAME = 'SketchPresetsPresetsDockWidget'


def reveal_dock(object_name: str) -> None:
    """
    Show and raise the dock widget with the given object name, if the main window has one.
    """
    app = QtWidgets.QApplication.instance()
    if not app:
        return

    for widget in app.topLevelWidgets():
        if not isinstance(widget, QtWidgets.QMainWindow):
            continue
        dock = widget.findChild(QtWidgets.QDockWidget, object_name)
        if dock is None:
            continue
        logging.debug(f'Revealing dock widget "{object_name}"')
        dock.show()
        dock.raise_()
        return


class Signals(QtCore.QObject):
    """Centralized Qt signals for parameter, preset, and UI events."""
    initializationRequested = QtCore.Signal()

    configSectionChanged = QtCore.Signal(str)  # Section
    parameterChanged = QtCore.Signal(str, str, object)  # Section, parameter, value

    presetsChanged = QtCore.Signal()
    presetAboutToBeApplied = QtCore.Signal(str)
    presetApplied = QtCore.Signal(str)

    showLogs = QtCore.Signal()
    showPresets = QtCore.Signal()

    error = QtCore.Signal(str)

    def __init__(self):
        super().__init__()
        self._connect_signals()

    def _connect_signals(self):
        self.showLogs.connect(lambda: reveal_dock(LOG_DOCK_NAME))
        self.showPresets.connect(lambda: reveal_dock(PRESETS_DOCK_NAME))


signals = Signals()
