"""
Core package for SketchPresets providing the persistence medium.

This package includes:

- :mod:`SketchPresets.core.storage` – Synchronous string-keyed key-value storage backed by QSettings or memory.
"""
