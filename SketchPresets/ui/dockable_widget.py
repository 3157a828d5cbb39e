"""Base class for the presets and log docks."""
from typing import Optional

from PySide6 import QtWidgets, QtCore, QtGui

ALL_FEATURES = (
        QtWidgets.QDockWidget.DockWidgetMovable |
        QtWidgets.QDockWidget.DockWidgetFloatable |
        QtWidgets.QDockWidget.DockWidgetClosable
)


class DockableWidget(QtWidgets.QDockWidget):
    """
    A QDockWidget that can be placed in any dock area.

    Args:
        title: Window title, also used in the toggle action's status tip.
        parent: Parent widget.
        features: Dock features, all of them by default.
        min_width: Optional minimum width in pixels.
        size_hint: Optional preferred size, used before the main window restores its state.
    """
    #: Mirrors visibilityChanged
    toggled = QtCore.Signal(bool)

    def __init__(
            self,
            title: str,
            parent: Optional[QtWidgets.QWidget] = None,
            features: QtWidgets.QDockWidget.DockWidgetFeature = ALL_FEATURES,
            min_width: Optional[int] = None,
            size_hint: Optional[QtCore.QSize] = None,
    ) -> None:
        super().__init__(title, parent=parent)
        self.setFeatures(features)
        self.setAllowedAreas(QtCore.Qt.AllDockWidgetAreas)
        if min_width is not None:
            self.setMinimumWidth(min_width)

        self._preferred_size = size_hint
        self.visibilityChanged.connect(self.toggled)

    def sizeHint(self) -> QtCore.QSize:
        return self._preferred_size or super().sizeHint()

    def toggle_action(self, shortcut: Optional[str] = None) -> QtGui.QAction:
        """Return the dock's checkable show/hide action with a status tip and optional shortcut."""
        action = self.toggleViewAction()
        action.setStatusTip(f'Show or hide the {self.windowTitle().lower()} panel')
        if shortcut:
            action.setShortcut(shortcut)
        return action
