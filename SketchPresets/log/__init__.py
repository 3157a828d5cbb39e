"""
Logging subsystem: handlers, models, and views for application logging.

Modules:

- :mod:`SketchPresets.log.log` – Log handler integrating with Python logging.
- :mod:`SketchPresets.log.model` – Table model and proxy for displaying and filtering in-memory logs.
- :mod:`SketchPresets.log.view` – Qt views and dock widget for rendering log messages.
"""
