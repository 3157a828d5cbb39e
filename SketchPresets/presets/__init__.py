"""Presets subpackage: named snapshots of the live sketch parameters.

This package provides:
    - lib: the preset store with save, load, delete, export, import and clear operations
    - transfer: reading and writing export documents as JSON files
    - model: Qt model listing the stored presets
    - view: Qt dock widget for interacting with presets in the UI
"""
