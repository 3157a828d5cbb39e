"""
Smoke tests for UI components of SketchPresets.
Verifies each UI class can be instantiated without error and that the presets panel drives the
preset store and the live parameters.
"""
import json

from PySide6 import QtCore, QtGui, QtWidgets

from SketchPresets.core.storage import MemoryStorage
from SketchPresets.presets.lib import PresetsAPI, Mode
from SketchPresets.presets.model import Columns, PresetModel, Roles, format_timestamp
from tests.base import BaseTestCase


class UIBaseTestCase(BaseTestCase):
    def setUp(self):
        super().setUp()
        self.parameters = self.make_parameters()
        self.api = PresetsAPI(MemoryStorage())


class TestDockableWidget(UIBaseTestCase):
    def test_init_and_size_hint(self):
        from SketchPresets.ui.dockable_widget import DockableWidget
        dw = DockableWidget(
            'Test',
            features=QtWidgets.QDockWidget.DockWidgetMovable,
            size_hint=QtCore.QSize(10, 20),
        )
        self.assertEqual(dw.sizeHint(), QtCore.QSize(10, 20))
        self.assertFalse(dw.features() & QtWidgets.QDockWidget.DockWidgetClosable)

    def test_toggle_action(self):
        from SketchPresets.ui.dockable_widget import DockableWidget
        dw = DockableWidget('Presets')
        action = dw.toggle_action('Ctrl+P')
        self.assertTrue(action.isCheckable())
        self.assertEqual(action.shortcut(), QtGui.QKeySequence('Ctrl+P'))
        self.assertIn('presets', action.statusTip())


class TestPresetModel(UIBaseTestCase):
    def test_rows_follow_api(self):
        model = PresetModel(self.api)
        self.assertEqual(model.rowCount(), 0)

        self.api.save('b', {})
        self.api.save('a', {})
        self.assertEqual(model.rowCount(), 2)
        self.assertEqual(model.index(0, Columns.Name).data(), 'a')
        self.assertEqual(model.index(1, Columns.Name).data(Roles.Name), 'b')
        self.assertTrue(model.index(0, Columns.Saved).data())
        self.assertEqual(model.row_for_name('b'), 1)

        self.api.delete('a')
        self.assertEqual(model.rowCount(), 1)
        self.assertEqual(model.row_for_name('a'), -1)

    def test_header_and_invalid_index(self):
        model = PresetModel(self.api)
        self.assertEqual(model.headerData(Columns.Saved, QtCore.Qt.Horizontal), 'Saved')
        self.assertFalse(model.index(5, 0).isValid())

    def test_format_timestamp(self):
        self.assertEqual(format_timestamp(None), '')
        self.assertEqual(format_timestamp(True), '')
        self.assertRegex(format_timestamp(1700000000000), r'^\d{4}-\d{2}-\d{2} \d{2}:\d{2}:\d{2}$')

    def test_proxy_filters_by_name(self):
        from SketchPresets.presets.model import PresetsSortFilterProxyModel
        for name in ('Dense grid', 'sparse grid', 'shadows'):
            self.api.save(name, {})
        model = PresetModel(self.api)
        proxy = PresetsSortFilterProxyModel()
        proxy.setSourceModel(model)
        self.assertEqual(proxy.rowCount(), 3)

        proxy.set_filter_string('GRID')
        self.assertEqual(proxy.filter_string(), 'GRID')
        self.assertEqual(proxy.rowCount(), 2)
        self.assertEqual(proxy.index(0, Columns.Name).data(), 'Dense grid')


class TestParametersWidget(UIBaseTestCase):
    def test_editors_follow_parameters(self):
        from SketchPresets.settings.view import ParametersWidget, RangeEditor
        widget = ParametersWidget(self.parameters)

        editor = widget.editor('sliderValues', 'numRows')
        self.assertIsInstance(editor, RangeEditor)
        self.assertEqual(editor.value(), 5)

        self.parameters.apply_state({'sliderValues': {'numRows': {'value': 40}}})
        self.assertEqual(editor.value(), 40)

        editor.setValue(41)
        self.assertEqual(self.parameters.get_value('sliderValues', 'numRows'), 41)

        check = widget.editor('flags', 'shadows')
        check.setChecked(True)
        self.assertTrue(self.parameters.get_value('flags', 'shadows'))

        for action in widget.actions():
            action.trigger()
        self.assertEqual(self.parameters.get_value('sliderValues', 'numRows'), 5)
        self.assertFalse(check.isChecked())


class TestPresetsDockWidget(UIBaseTestCase):
    def setUp(self):
        super().setUp()
        from SketchPresets.presets.view import PresetsDockWidget
        self.dock = PresetsDockWidget(self.api, self.parameters)

    def test_save_and_apply(self):
        self.parameters.set_value('sliderValues', 'numRows', 33)
        self.assertTrue(self.dock.save_preset('dense'))
        self.assertTrue(self.api.exists('dense'))
        self.assertEqual(self.dock.view.selected_name(), 'dense')

        self.parameters.revert_all()
        self.assertTrue(self.dock.apply_preset('dense'))
        self.assertEqual(self.parameters.get_value('sliderValues', 'numRows'), 33)
        self.assertIn('dense', self.dock.status_label.text())
        self.assertEqual(self.dock.mode_label.text(), Mode.Idle.value)

    def test_errors_show_in_status_line(self):
        self.assertFalse(self.dock.save_preset('   '))
        self.assertIn('empty', self.dock.status_label.text())

        self.dock.save_preset('a')
        self.assertFalse(self.dock.save_preset('a'))
        self.assertIn('already exists', self.dock.status_label.text())
        self.assertTrue(self.dock.save_preset('a', overwrite=True))

        self.assertFalse(self.dock.apply_preset('missing'))
        self.assertFalse(self.dock.delete_preset('missing'))
        self.assertFalse(self.dock.clear_presets('nope'))
        self.assertEqual(self.api.count(), 1)

    def test_apply_invalid_preset_leaves_parameters(self):
        self.api.save('broken', {'sliderValues': {'numRows': {'value': 5000}}})
        before = self.parameters.capture_state()
        self.assertFalse(self.dock.apply_preset('broken'))
        self.assertEqual(self.parameters.capture_state(), before)

    def test_export_import_and_clear(self):
        self.dock.save_preset('one')
        self.dock.save_preset('two')
        path = self.parameters.exports_dir / 'all.json'

        self.assertTrue(self.dock.export_presets(str(path)))
        self.assertEqual(sorted(json.loads(path.read_text())['presets']), ['one', 'two'])

        self.assertTrue(self.dock.clear_presets('DELETE_ALL'))
        self.assertEqual(self.api.count(), 0)
        self.assertEqual(self.dock.view.model().rowCount(), 0)

        self.assertTrue(self.dock.import_presets(str(path), 'overwrite'))
        self.assertEqual(self.api.names(), ['one', 'two'])
        self.assertEqual(self.dock.view.model().rowCount(), 2)

        self.assertFalse(self.dock.import_presets(str(path.with_name('missing.json'))))

    def test_delete(self):
        self.dock.save_preset('gone')
        self.assertTrue(self.dock.delete_preset('gone'))
        self.assertFalse(self.api.exists('gone'))


class TestLogView(UIBaseTestCase):
    def test_log_dock_actions(self):
        from SketchPresets.log.view import LogDockWidget
        dock = LogDockWidget()
        self.assertTrue(dock.view.actions())
        dock.clear_logs()
        self.assertEqual(dock.view.model().rowCount(), 0)


class TestMainUI(UIBaseTestCase):
    def test_main_window(self):
        from SketchPresets.ui.main import MainWindow
        w = MainWindow(parameters=self.parameters, storage=MemoryStorage())
        self.assertIs(w.presets_view.api, w.presets_api)
        self.assertIs(w.presets_view.parameters, self.parameters)
        self.assertTrue(w.toolbar.actions())
        w.close()
