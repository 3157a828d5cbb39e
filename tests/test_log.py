# tests/test_log.py
"""
Integration tests for SketchPresets.log
(covers TankHandler, the Qt bridge, setup helpers and the log table models).

Run:
    python -m unittest tests.test_log
"""
import logging
from typing import List

from PySide6 import QtCore
from PySide6.QtCore import QtMsgType

from SketchPresets.log.log import (
    TankHandler,
    qt_message_handler,
    set_logging_level,
    setup_logging,
)
from SketchPresets.log.model import (
    Columns,
    Level,
    LogFilterProxyModel,
    LogTableModel,
    Roles,
    get_handler,
    parse_record,
)
from SketchPresets.ui.actions import signals
from tests.base import BaseTestCase


class LogModuleTests(BaseTestCase):
    """
    Each test starts with a fresh root logger configured by
    setup_logging(enable_stream_handler=False).
    """

    def setUp(self) -> None:
        super().setUp()

        logging.disable(logging.NOTSET)

        setup_logging(enable_stream_handler=False,
                      enable_qt_handler=False,
                      log_level=logging.DEBUG)

        self.root_logger = logging.getLogger()
        self.tank: TankHandler = next(
            h for h in self.root_logger.handlers if isinstance(h, TankHandler)
        )

    def test_setup_logging_installs_tank_handler_only(self):
        self.assertEqual(
            [type(h) for h in self.root_logger.handlers],
            [TankHandler],
        )
        self.assertIs(get_handler(), self.tank)

    def test_setup_logging_with_stream_handler(self):
        setup_logging(enable_stream_handler=True, enable_qt_handler=False, log_level=logging.INFO)
        self.assertEqual(len(self.root_logger.handlers), 2)
        self.assertEqual(self.root_logger.level, logging.INFO)
        setup_logging(enable_stream_handler=False, enable_qt_handler=False, log_level=logging.DEBUG)

    def test_set_logging_level_accepts_valid_levels(self):
        set_logging_level(logging.ERROR)
        self.assertEqual(self.root_logger.level, logging.ERROR)
        for h in self.root_logger.handlers:
            self.assertEqual(h.level, logging.ERROR)

    def test_set_logging_level_rejects_invalid(self):
        for value in ('INFO', 1234, True, None):
            with self.subTest(value=value):
                with self.assertRaises(ValueError):
                    set_logging_level(value)  # type: ignore[arg-type]

    def test_tank_handler_stores_and_filters(self):
        logging.debug('dbg message')
        logging.error('err message')
        self.assertEqual(len(self.tank.tank), 2)
        errs: List[str] = self.tank.get_logs(logging.ERROR)
        self.assertEqual(len(errs), 1)
        self.assertIn('err message', errs[0])
        self.tank.clear_logs()
        self.assertEqual(len(self.tank.tank), 0)

    def test_emit_triggers_showLogs_on_error_only(self):
        triggered: list[bool] = []

        def _slot() -> None:
            triggered.append(True)

        signals.showLogs.connect(_slot)
        try:
            logging.warning('no signal')
            self.assertFalse(triggered)
            logging.error('should emit signal')
            self.assertTrue(triggered)
        finally:
            signals.showLogs.disconnect(_slot)

    def test_qt_message_handler_maps_to_logging(self):
        qt_message_handler(QtMsgType.QtInfoMsg, None, 'Qt info')
        qt_message_handler(QtMsgType.QtWarningMsg, None, 'Qt warn')
        msgs = self.tank.get_logs()
        self.assertTrue(any('Qt info' in m for m in msgs))
        self.assertTrue(any('Qt warn' in m for m in msgs))

    def test_qt_message_handler_fatal_exits(self):
        with self.assertRaises(SystemExit):
            qt_message_handler(QtMsgType.QtFatalMsg, None, 'fatal')


class LogModelTests(BaseTestCase):

    def setUp(self) -> None:
        super().setUp()
        logging.disable(logging.NOTSET)
        setup_logging(enable_stream_handler=False,
                      enable_qt_handler=False,
                      log_level=logging.DEBUG)
        self.model = LogTableModel(fetch_interval_ms=60_000)

    def test_fetch_parses_records(self):
        logging.info('preset saved')
        logging.error('write failed')
        self.model.fetch_new_logs()

        self.assertEqual(self.model.rowCount(), 2)
        entry = self.model.get_entry(1)
        self.assertEqual(entry['level_enum'], Level.ERROR)
        self.assertEqual(entry['message'], 'write failed')
        self.assertEqual(entry['module'], 'test_log')
        self.assertEqual(self.model.index(0, Columns.Level).data(), 'INFO')
        self.assertEqual(self.model.index(1, Columns.Level).data(Roles.LOG_LEVEL), logging.ERROR)

    def test_fetch_is_incremental(self):
        logging.info('one')
        self.model.fetch_new_logs()
        logging.info('two')
        self.model.fetch_new_logs()
        self.assertEqual(self.model.rowCount(), 2)

    def test_paused_model_does_not_fetch(self):
        self.model.pause()
        logging.info('hidden')
        self.model.fetch_new_logs()
        self.assertEqual(self.model.rowCount(), 0)
        self.model.resume()
        self.model.fetch_new_logs()
        self.assertEqual(self.model.rowCount(), 1)

    def test_cleared_tank_restarts_fetching(self):
        logging.info('one')
        logging.info('two')
        self.model.fetch_new_logs()
        get_handler().clear_logs()
        self.model.clear_logs()
        self.assertEqual(self.model.rowCount(), 0)

        logging.info('three')
        self.model.fetch_new_logs()
        self.assertEqual(self.model.rowCount(), 1)
        self.assertEqual(self.model.get_entry(0)['message'], 'three')

    def test_unparsable_message(self):
        entry = parse_record('plain text')
        self.assertEqual(entry['level_enum'], Level.NOTSET)
        self.assertEqual(entry['message'], 'plain text')

    def test_filter_proxy(self):
        proxy = LogFilterProxyModel()
        proxy.setSourceModel(self.model)
        logging.debug('debug')
        logging.warning('warning')
        logging.critical('critical')
        self.model.fetch_new_logs()

        self.assertEqual(proxy.rowCount(), 3)
        proxy.set_filter_level(logging.WARNING)
        self.assertEqual(proxy.filter_level(), logging.WARNING)
        self.assertEqual(proxy.rowCount(), 2)
        self.assertEqual(
            proxy.index(0, Columns.Message).data(QtCore.Qt.DisplayRole),
            'warning'
        )
