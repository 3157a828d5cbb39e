"""QApplication subclass for SketchPresets."""
import ctypes
import logging
import sys
from typing import Optional, Sequence

from PySide6 import QtCore, QtWidgets

__version__ = '0.1.0'

APP_USER_MODEL_ID = f'SketchPresets.SketchPresets.{__version__}'


def set_model_id() -> None:
    """Give the process its own taskbar identity on Windows. No-op elsewhere.

    https://github.com/cztomczak/cefpython/issues/395
    """
    if QtCore.QSysInfo().productType() not in ('windows', 'winrt'):
        return
    hresult = ctypes.windll.shell32.SetCurrentProcessExplicitAppUserModelID(APP_USER_MODEL_ID)
    if hresult != 0:
        logging.warning(f'SetCurrentProcessExplicitAppUserModelID failed with code {hresult}')


class Application(QtWidgets.QApplication):
    """Application instance carrying the name and version used by QSettings and the title bar."""

    def __init__(self, argv: Optional[Sequence[str]] = None) -> None:
        super().__init__(list(sys.argv if argv is None else argv))

        from ..settings.lib import app_name
        self.setApplicationName(app_name)
        self.setApplicationDisplayName(app_name)
        self.setApplicationVersion(__version__)
        self.setQuitOnLastWindowClosed(True)

        set_model_id()
        logging.debug(f'{app_name} {__version__} started')
