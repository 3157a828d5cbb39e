"""Form widget for editing the live sketch parameters.

Provides:
    - ParametersScrollArea: scroll area ensuring horizontal expansion without scrollbars.
    - ParametersWidget: one group per parameter section, with a spin box and slider for
      numeric parameters, a line edit for colours and a check box for flags.
"""
import functools
import logging
from typing import Any, Dict, Optional

from PySide6 import QtWidgets, QtCore, QtGui

from .lib import ParametersAPI, is_range_parameter
from ..status import status
from ..ui.actions import signals

SECTION_TITLES: Dict[str, str] = {
    'sliderValues': 'Values',
    'flags': 'Flags',
}


class ParametersScrollArea(QtWidgets.QScrollArea):
    """Scroll area that only scrolls vertically."""

    def __init__(self, parent=None):
        super().__init__(parent)
        self.setWidgetResizable(True)
        self.setHorizontalScrollBarPolicy(QtCore.Qt.ScrollBarAlwaysOff)
        self.setVerticalScrollBarPolicy(QtCore.Qt.ScrollBarAsNeeded)
        self.setFrameShape(QtWidgets.QFrame.NoFrame)


class RangeEditor(QtWidgets.QWidget):
    """A linked slider and spin box for a numeric parameter."""
    valueChanged = QtCore.Signal(int)

    def __init__(self, minimum: int, maximum: int, parent=None):
        super().__init__(parent)
        QtWidgets.QHBoxLayout(self)
        self.layout().setContentsMargins(0, 0, 0, 0)

        self.slider = QtWidgets.QSlider(QtCore.Qt.Horizontal, self)
        self.spinbox = QtWidgets.QSpinBox(self)
        for w in (self.slider, self.spinbox):
            w.setRange(int(minimum), int(maximum))

        self.layout().addWidget(self.slider, 1)
        self.layout().addWidget(self.spinbox, 0)

        self.slider.valueChanged.connect(self.spinbox.setValue)
        self.spinbox.valueChanged.connect(self.slider.setValue)
        self.spinbox.valueChanged.connect(self.valueChanged)

    def value(self) -> int:
        return self.spinbox.value()

    def setValue(self, value: int) -> None:
        self.spinbox.setValue(int(value))


class ParametersWidget(QtWidgets.QWidget):
    """Editor for every section of a :class:`~SketchPresets.settings.lib.ParametersAPI`."""

    def __init__(self, parameters: ParametersAPI, parent: Optional[QtWidgets.QWidget] = None):
        super().__init__(parent)
        self.setObjectName('ParametersWidget')
        self.setWindowTitle('Parameters')

        self.parameters = parameters
        self._editors: Dict[str, Dict[str, QtWidgets.QWidget]] = {}

        self._create_ui()
        self._init_actions()
        self._connect_signals()

    def _create_ui(self) -> None:
        QtWidgets.QVBoxLayout(self)
        self.layout().setContentsMargins(0, 0, 0, 0)

        scroll_area = ParametersScrollArea(self)
        self.layout().addWidget(scroll_area)

        parent = QtWidgets.QWidget()
        QtWidgets.QVBoxLayout(parent)
        parent.layout().setAlignment(QtCore.Qt.AlignTop)
        scroll_area.setWidget(parent)

        for section_name in self.parameters.sections():
            group = QtWidgets.QGroupBox(SECTION_TITLES.get(section_name, section_name), parent)
            form = QtWidgets.QFormLayout(group)
            form.setFieldGrowthPolicy(QtWidgets.QFormLayout.ExpandingFieldsGrow)

            self._editors[section_name] = {}
            for key, param in self.parameters.get_section(section_name).items():
                editor = self._create_editor(section_name, key, param, group)
                self._editors[section_name][key] = editor
                form.addRow(key, editor)

            parent.layout().addWidget(group)

    def _create_editor(self, section_name: str, key: str, param: Any, parent: QtWidgets.QWidget) -> QtWidgets.QWidget:
        on_change = functools.partial(self._on_editor_changed, section_name, key)

        if isinstance(param, bool):
            editor = QtWidgets.QCheckBox(parent)
            editor.setChecked(param)
            editor.toggled.connect(on_change)
            return editor

        if is_range_parameter(param):
            editor = RangeEditor(param['min'], param['max'], parent)
            editor.setValue(param['value'])
            editor.valueChanged.connect(on_change)
            return editor

        editor = QtWidgets.QLineEdit(parent)
        editor.setValidator(QtGui.QRegularExpressionValidator(
            QtCore.QRegularExpression(r'^#[0-9A-Fa-f]{6}$'), editor
        ))
        editor.setText(param['value'])
        editor.editingFinished.connect(lambda: on_change(editor.text()))
        return editor

    def _init_actions(self) -> None:
        @QtCore.Slot()
        def revert_all() -> None:
            self.parameters.revert_all()

        action = QtGui.QAction('Revert to Defaults', self)
        action.setStatusTip('Revert every parameter to its default value')
        action.triggered.connect(revert_all)
        self.addAction(action)
        self.setContextMenuPolicy(QtCore.Qt.ActionsContextMenu)

    def _connect_signals(self) -> None:
        signals.configSectionChanged.connect(self.refresh_section)

    def editor(self, section_name: str, key: str) -> QtWidgets.QWidget:
        """Return the editor widget of a parameter."""
        return self._editors[section_name][key]

    def _on_editor_changed(self, section_name: str, key: str, value: Any) -> None:
        try:
            self.parameters.set_value(section_name, key, value)
        except status.ParametersInvalidException:
            logging.debug(f'Reverting editor "{section_name}.{key}"')
            self.refresh_section(section_name)

    @QtCore.Slot(str)
    def refresh_section(self, section_name: str) -> None:
        """Update the editors of a section from the live parameters."""
        if section_name not in self._editors:
            return

        for key, editor in self._editors[section_name].items():
            value = self.parameters.get_value(section_name, key)
            editor.blockSignals(True)
            try:
                if isinstance(editor, QtWidgets.QCheckBox):
                    editor.setChecked(bool(value))
                elif isinstance(editor, RangeEditor):
                    editor.setValue(value)
                else:
                    editor.setText(value)
            finally:
                editor.blockSignals(False)
