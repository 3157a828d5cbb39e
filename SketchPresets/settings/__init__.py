"""
Settings package: application paths and the live sketch parameters.

This package provides:

- :mod:`SketchPresets.settings.lib` – Application paths, parameter schema validation and the parameters API.
- :mod:`SketchPresets.settings.view` – Form widget for editing the live parameters.
"""
