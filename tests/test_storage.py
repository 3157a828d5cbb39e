# tests/test_storage.py
"""
Unit‑tests for SketchPresets.core.storage

Run with:
    python -m unittest tests.test_storage
"""
import json

from SketchPresets.core.storage import KeyValueStorage, MemoryStorage, SettingsStorage
from tests.base import BaseTestCase


class MemoryStorageTests(BaseTestCase):

    def test_get_set_remove(self):
        s = MemoryStorage()
        self.assertIsNone(s.get_item('k'))
        s.set_item('k', 'v')
        self.assertEqual(s.get_item('k'), 'v')
        self.assertIn('k', s)
        s.remove_item('k')
        self.assertIsNone(s.get_item('k'))
        # removing twice is fine
        s.remove_item('k')

    def test_initial_values(self):
        s = MemoryStorage({'a': '1'})
        self.assertEqual(s.keys(), ['a'])

    def test_rejects_non_string(self):
        with self.assertRaises(TypeError):
            MemoryStorage().set_item('k', 5)  # type: ignore[arg-type]

    def test_interface_is_abstract(self):
        with self.assertRaises(NotImplementedError):
            KeyValueStorage().get_item('k')


class SettingsStorageTests(BaseTestCase):

    def setUp(self) -> None:
        super().setUp()
        self.path = self.app_data_dir / 'store' / 'test.ini'

    def test_creates_parent_directory(self):
        SettingsStorage(self.path)
        self.assertTrue(self.path.parent.is_dir())

    def test_round_trip_json_string(self):
        value = json.dumps({'a, b': {'x': [1, 2, 3], 's': 'quote " and = sign'}})
        s = SettingsStorage(self.path)
        s.set_item('sketch-presets', value)
        self.assertTrue(self.path.exists())

        again = SettingsStorage(self.path)
        self.assertEqual(again.get_item('sketch-presets'), value)
        self.assertIn('sketch-presets', again.keys())

    def test_missing_key(self):
        self.assertIsNone(SettingsStorage(self.path).get_item('nothing'))

    def test_remove_item(self):
        s = SettingsStorage(self.path)
        s.set_item('k', 'v')
        s.remove_item('k')
        self.assertIsNone(SettingsStorage(self.path).get_item('k'))

    def test_sees_writes_of_other_instance(self):
        a = SettingsStorage(self.path)
        b = SettingsStorage(self.path)
        a.set_item('k', 'first')
        self.assertEqual(b.get_item('k'), 'first')

    def test_rejects_non_string(self):
        with self.assertRaises(TypeError):
            SettingsStorage(self.path).set_item('k', 5)  # type: ignore[arg-type]

    def test_default_path_is_app_storage(self):
        s = SettingsStorage(self.config_paths.storage_path)
        self.assertEqual(s.path.name, 'presets.ini')
