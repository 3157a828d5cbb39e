"""Presets dock widget: save, load, delete, export, import and clear presets of the live parameters.
"""
import logging
from typing import Optional

from PySide6 import QtWidgets, QtGui, QtCore

from . import transfer
from .lib import PresetsAPI, ImportMode, CLEAR_CONFIRMATION
from .model import PresetModel, PresetsSortFilterProxyModel, Columns, Roles
from ..settings.lib import ParametersAPI
from ..status import status
from ..ui.actions import signals, PRESETS_DOCK_NAME
from ..ui.dockable_widget import DockableWidget


class PresetsListView(QtWidgets.QTableView):
    """Table view of the stored presets."""

    def __init__(self, api: PresetsAPI, parent=None) -> None:
        super().__init__(parent=parent)

        self.setSelectionMode(QtWidgets.QAbstractItemView.SingleSelection)
        self.setSelectionBehavior(QtWidgets.QAbstractItemView.SelectRows)
        self.setEditTriggers(QtWidgets.QAbstractItemView.NoEditTriggers)
        self.setSortingEnabled(True)

        self._init_model(api)
        self._init_header()

    def _init_model(self, api: PresetsAPI) -> None:
        proxy = PresetsSortFilterProxyModel(self)
        model = PresetModel(api, self)
        proxy.setSourceModel(model)
        self.setModel(proxy)

    def _init_header(self) -> None:
        header = self.horizontalHeader()
        header.setSectionResizeMode(Columns.Name, QtWidgets.QHeaderView.Stretch)
        header.setSectionResizeMode(Columns.Saved, QtWidgets.QHeaderView.ResizeToContents)
        header.setSortIndicator(Columns.Name, QtCore.Qt.AscendingOrder)

        self.verticalHeader().setVisible(False)

    def selected_name(self) -> Optional[str]:
        """Return the name of the selected preset, or None."""
        sel = self.selectionModel()
        if not sel or not sel.hasSelection():
            return None
        idx = sel.selectedRows(Columns.Name)
        if not idx:
            return None
        return idx[0].data(Roles.Name)

    def select_name(self, name: str) -> None:
        """Select the row of the named preset, if present."""
        proxy = self.model()
        row = proxy.sourceModel().row_for_name(name)
        if row < 0:
            return
        idx = proxy.mapFromSource(proxy.sourceModel().index(row, Columns.Name))
        self.selectionModel().select(
            idx,
            QtCore.QItemSelectionModel.ClearAndSelect | QtCore.QItemSelectionModel.Rows
        )
        self.scrollTo(idx)


class PresetsDockWidget(DockableWidget):
    """
    Dockable widget for listing and managing presets.

    The widget captures the live parameters when saving and applies a loaded preset back onto
    them. Errors are shown in the status line; nothing is retried.
    """

    def __init__(
            self,
            api: PresetsAPI,
            parameters: ParametersAPI,
            parent: Optional[QtWidgets.QWidget] = None
    ) -> None:
        super().__init__('Presets', parent, min_width=240, size_hint=QtCore.QSize(320, 480))
        self.setObjectName(PRESETS_DOCK_NAME)

        self.api = api
        self.parameters = parameters

        self.toolbar: QtWidgets.QToolBar
        self.name_editor: QtWidgets.QLineEdit
        self.view: PresetsListView
        self.status_label: QtWidgets.QLabel
        self.mode_label: QtWidgets.QLabel

        self._create_ui()
        self._init_actions()
        self._connect_signals()

    def _create_ui(self) -> None:
        content = QtWidgets.QWidget(self)
        layout = QtWidgets.QVBoxLayout(content)
        layout.setContentsMargins(4, 4, 4, 4)
        layout.setSpacing(4)

        self.toolbar = QtWidgets.QToolBar(content)
        self.toolbar.setToolButtonStyle(QtCore.Qt.ToolButtonTextOnly)
        self.toolbar.setMovable(False)
        layout.addWidget(self.toolbar)

        self.name_editor = QtWidgets.QLineEdit(content)
        self.name_editor.setPlaceholderText('Preset name')
        self.name_editor.setClearButtonEnabled(True)
        layout.addWidget(self.name_editor)

        self.view = PresetsListView(self.api, content)
        self.view.setContextMenuPolicy(QtCore.Qt.ActionsContextMenu)
        layout.addWidget(self.view, 1)

        row = QtWidgets.QHBoxLayout()
        self.status_label = QtWidgets.QLabel(content)
        self.status_label.setWordWrap(True)
        self.mode_label = QtWidgets.QLabel(self.api.mode().value, content)
        self.mode_label.setAlignment(QtCore.Qt.AlignRight | QtCore.Qt.AlignVCenter)
        row.addWidget(self.status_label, 1)
        row.addWidget(self.mode_label, 0)
        layout.addLayout(row)

        self.setWidget(content)

    def _init_actions(self) -> None:
        """Initialize toolbar actions for managing presets."""

        @QtCore.Slot()
        def save_preset() -> None:
            name = self.name_editor.text().strip()
            overwrite = False
            if name and self.api.exists(name):
                r = QtWidgets.QMessageBox.question(
                    self, 'Save Preset',
                    f'Preset "{name}" already exists. Overwrite it?',
                    QtWidgets.QMessageBox.Yes | QtWidgets.QMessageBox.No
                )
                if r != QtWidgets.QMessageBox.Yes:
                    return
                overwrite = True
            self.save_preset(name, overwrite=overwrite)

        action = QtGui.QAction('Save', self)
        action.setShortcut('Ctrl+S')
        action.setStatusTip('Save the current parameters as a preset')
        action.triggered.connect(save_preset)
        self.toolbar.addAction(action)

        @QtCore.Slot()
        def load_preset() -> None:
            name = self.view.selected_name() or self.name_editor.text().strip()
            if not name:
                self.set_status('Select a preset to load.')
                return
            self.apply_preset(name)

        action = QtGui.QAction('Load', self)
        action.setShortcut('Ctrl+L')
        action.setStatusTip('Apply the selected preset to the current parameters')
        action.triggered.connect(load_preset)
        self.toolbar.addAction(action)

        @QtCore.Slot()
        def delete_preset() -> None:
            name = self.view.selected_name()
            if not name:
                self.set_status('Select a preset to delete.')
                return
            r = QtWidgets.QMessageBox.question(
                self, 'Delete Preset',
                f'Delete preset "{name}"? This cannot be undone.',
                QtWidgets.QMessageBox.Yes | QtWidgets.QMessageBox.No
            )
            if r != QtWidgets.QMessageBox.Yes:
                return
            self.delete_preset(name)

        action = QtGui.QAction('Delete', self)
        action.setShortcut('Delete')
        action.setStatusTip('Delete the selected preset')
        action.triggered.connect(delete_preset)
        self.toolbar.addAction(action)

        self.toolbar.addSeparator()

        @QtCore.Slot()
        def export_presets() -> None:
            default = self.parameters.exports_dir / transfer.default_export_name()
            path, _ = QtWidgets.QFileDialog.getSaveFileName(
                self, 'Export Presets', str(default), 'JSON files (*.json)'
            )
            if not path:
                return
            self.export_presets(path)

        action = QtGui.QAction('Export…', self)
        action.setStatusTip('Export all presets to a JSON file')
        action.triggered.connect(export_presets)
        self.toolbar.addAction(action)

        @QtCore.Slot()
        def import_presets() -> None:
            path, _ = QtWidgets.QFileDialog.getOpenFileName(
                self, 'Import Presets', str(self.parameters.exports_dir), 'JSON files (*.json)'
            )
            if not path:
                return

            box = QtWidgets.QMessageBox(self)
            box.setWindowTitle('Import Presets')
            box.setText('Merge the imported presets with the existing ones, or replace them all?')
            merge = box.addButton('Merge', QtWidgets.QMessageBox.AcceptRole)
            overwrite = box.addButton('Overwrite', QtWidgets.QMessageBox.DestructiveRole)
            box.addButton(QtWidgets.QMessageBox.Cancel)
            box.exec()

            if box.clickedButton() is merge:
                self.import_presets(path, ImportMode.Merge)
            elif box.clickedButton() is overwrite:
                self.import_presets(path, ImportMode.Overwrite)

        action = QtGui.QAction('Import…', self)
        action.setStatusTip('Import presets from a JSON file')
        action.triggered.connect(import_presets)
        self.toolbar.addAction(action)

        @QtCore.Slot()
        def clear_presets() -> None:
            text, ok = QtWidgets.QInputDialog.getText(
                self, 'Clear All Presets',
                f'This deletes every preset.\nType {CLEAR_CONFIRMATION} to confirm:'
            )
            if not ok:
                return
            self.clear_presets(text)

        action = QtGui.QAction('Clear All', self)
        action.setStatusTip('Delete every preset')
        action.triggered.connect(clear_presets)
        self.toolbar.addAction(action)

        self.view.addActions(self.toolbar.actions())

    def _connect_signals(self) -> None:
        self.api.modeChanged.connect(self.mode_label.setText)

        @QtCore.Slot()
        def selection_changed() -> None:
            name = self.view.selected_name()
            if name:
                self.name_editor.setText(name)

        self.view.selectionModel().selectionChanged.connect(selection_changed)
        self.view.doubleClicked.connect(
            lambda idx: self.apply_preset(idx.data(Roles.Name)) if idx.isValid() else None
        )
        self.name_editor.returnPressed.connect(self.toolbar.actions()[0].trigger)

    @QtCore.Slot(str)
    def set_status(self, message: str) -> None:
        self.status_label.setText(message)

    def save_preset(self, name: str, overwrite: bool = False) -> bool:
        """Save the current parameters under name. Returns True on success."""
        try:
            result = self.api.save(name, self.parameters.capture_state(), overwrite=overwrite)
        except status.BaseStatusException as ex:
            self.set_status(str(ex))
            return False
        self.set_status(result.message)
        self.view.select_name(result.name)
        return True

    def apply_preset(self, name: str) -> bool:
        """Load the named preset and apply it to the current parameters. Returns True on success."""
        try:
            signals.presetAboutToBeApplied.emit(name)
            payload = self.api.load(name)
            self.parameters.apply_state(payload)
        except status.BaseStatusException as ex:
            self.set_status(str(ex))
            return False
        signals.presetApplied.emit(name)
        self.set_status(f'Preset "{name}" loaded successfully.')
        return True

    def delete_preset(self, name: str) -> bool:
        try:
            result = self.api.delete(name)
        except status.BaseStatusException as ex:
            self.set_status(str(ex))
            return False
        self.set_status(result.message)
        return True

    def export_presets(self, path: str) -> bool:
        try:
            written = transfer.export_to_file(self.api, path)
        except status.BaseStatusException as ex:
            self.set_status(str(ex))
            return False
        self.set_status(f'Exported {self.api.count()} preset(s) to {written.name}.')
        return True

    def import_presets(self, path: str, mode: str = ImportMode.Merge) -> bool:
        try:
            result = transfer.import_from_file(self.api, path, mode=mode)
        except FileNotFoundError as ex:
            logging.error(str(ex))
            self.set_status(str(ex))
            return False
        except status.BaseStatusException as ex:
            self.set_status(str(ex))
            return False
        self.set_status(result.message)
        return True

    def clear_presets(self, confirmation: str) -> bool:
        try:
            result = self.api.clear(confirmation)
        except status.BaseStatusException as ex:
            self.set_status(str(ex))
            return False
        self.name_editor.clear()
        self.set_status(result.message)
        return True
