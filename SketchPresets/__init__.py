"""
SketchPresets: desktop tool for keeping named parameter snapshots of creative-coding sketches.

This package provides:

- :mod:`SketchPresets.core` – The key-value persistence medium the presets are stored in.
- :mod:`SketchPresets.presets` – The preset store, JSON file export and import, and the presets panel.
- :mod:`SketchPresets.settings` – Application paths and the live sketch parameters with their editor.
- :mod:`SketchPresets.status` – Status codes and exceptions.
- :mod:`SketchPresets.log` – In-app logging with real-time log viewer.

Use :func:`SketchPresets.exec_` to launch the application.
"""

import sys

from PySide6 import QtCore

# Fail on Python < 3.11
if not (sys.version_info.major == 3 and sys.version_info.minor >= 11):
    raise RuntimeError('SketchPresets requires Python 3.11 or higher.')

__version__ = '0.1.0'
__description__ = 'SketchPresets: save, load, export and import named parameter presets of creative-coding sketches.'

from .log import log

log.setup_logging()


def exec_() -> None:
    """Launch the SketchPresets GUI application and enter its event loop.

    Initializes the QApplication, shows the main window, and starts the Qt event loop.
    """
    from .ui import app
    from .ui import main
    from .ui.actions import signals
    application = app.Application(sys.argv)
    main.show()

    # Ask components to load their data
    QtCore.QTimer.singleShot(100, signals.initializationRequested.emit)

    sys.exit(application.exec())


if __name__ == '__main__':
    exec_()
