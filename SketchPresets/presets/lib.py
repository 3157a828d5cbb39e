"""Preset store: named snapshots of the live parameters.

The whole collection is held in memory as a mapping of preset name to preset, and persisted as a
single JSON string under one key of a :class:`~SketchPresets.core.storage.KeyValueStorage`.

A stored preset is the saved payload plus two stamps::

    {...payload, "timestamp": <ms since epoch>, "schemaVersion": "1.0"}

Mutations are staged on a copy of the collection, persisted, and only then committed, so a failed
write leaves the in-memory collection as it was.
"""
import contextlib
import copy
import dataclasses
import datetime
import enum
import json
import logging
import time
from typing import Any, Dict, Iterator, List, Mapping, Optional

from PySide6 import QtCore

from ..core.storage import KeyValueStorage
from ..status import status
from ..ui.actions import signals

STORAGE_KEY = 'sketch-presets'
SCHEMA_VERSION = '1.0'
CLEAR_CONFIRMATION = 'DELETE_ALL'

TIMESTAMP_KEY = 'timestamp'
SCHEMA_VERSION_KEY = 'schemaVersion'


class Mode(enum.StrEnum):
    """The operation the store is currently running."""
    Idle = 'idle'
    Saving = 'saving'
    Loading = 'loading'
    Deleting = 'deleting'


class ImportMode(enum.StrEnum):
    """How imported presets are combined with the existing collection."""
    Merge = 'merge'
    Overwrite = 'overwrite'


@dataclasses.dataclass(frozen=True)
class PresetResult:
    """Outcome of a successful mutating operation.

    Attributes:
        message: Human readable description of what happened.
        name: The (trimmed) preset name, for single-preset operations.
        count: Number of presets involved, for imports.
    """
    message: str
    name: Optional[str] = None
    count: Optional[int] = None


def now_ms() -> int:
    """Return the current time as integer milliseconds since the epoch."""
    return int(time.time() * 1000)


def now_str() -> str:
    """Return current UTC date and time as an ISO 8601 string."""
    return datetime.datetime.now(datetime.timezone.utc).isoformat()


def _snapshot(data: Any) -> Any:
    """Return a deep, JSON-clean copy of data.

    Raises:
        TypeError: If data contains values that cannot be serialized.
        ValueError: If data contains circular references or non-finite numbers.
    """
    return json.loads(json.dumps(data, allow_nan=False))


class PresetsAPI(QtCore.QObject):
    """
    Stores, lists and restores named presets.

    The API is constructed once per session around a storage backend and handed to the views that
    need it. Every constraint violation raises a :class:`~SketchPresets.status.status.BaseStatusException`
    subclass synchronously. Nothing is retried.
    """
    presetSaved = QtCore.Signal(str)
    presetRemoved = QtCore.Signal(str)
    presetLoaded = QtCore.Signal(str)
    presetsReloaded = QtCore.Signal()
    modeChanged = QtCore.Signal(str)

    def __init__(
            self,
            storage: KeyValueStorage,
            storage_key: str = STORAGE_KEY,
            parent: Optional[QtCore.QObject] = None
    ) -> None:
        """
        Args:
            storage: The persistence medium.
            storage_key: Key the collection is stored under.
            parent: Optional parent QObject.
        """
        super().__init__(parent=parent)
        self._storage = storage
        self._storage_key = storage_key
        self._presets: Dict[str, Dict[str, Any]] = {}
        self._mode = Mode.Idle

        self._connect_signals()

        self.reload()

    def _connect_signals(self) -> None:
        self.presetSaved.connect(lambda _: signals.presetsChanged.emit())
        self.presetRemoved.connect(lambda _: signals.presetsChanged.emit())
        self.presetsReloaded.connect(signals.presetsChanged.emit)

    def __repr__(self) -> str:
        return f'<PresetsAPI key={self._storage_key!r}, count={len(self._presets)}, mode={self._mode}>'

    def __len__(self) -> int:
        return len(self._presets)

    def __contains__(self, name: object) -> bool:
        return name in self._presets

    def __iter__(self) -> Iterator[str]:
        return iter(self.names())

    @property
    def storage(self) -> KeyValueStorage:
        return self._storage

    @property
    def storage_key(self) -> str:
        return self._storage_key

    def _read_storage(self) -> Dict[str, Dict[str, Any]]:
        """Read the persisted collection, skipping anything unusable.

        Returns:
            The valid entries of the stored collection. Empty if nothing usable is stored.
        """
        try:
            raw = self._storage.get_item(self._storage_key)
        except OSError as ex:
            logging.warning(f'Could not read presets from storage: {ex}')
            return {}

        if raw is None:
            logging.debug('No presets stored yet')
            return {}

        try:
            data = json.loads(raw)
        except ValueError as ex:
            logging.warning(f'Stored presets are corrupt, starting empty: {ex}')
            return {}

        if not isinstance(data, dict):
            logging.warning(f'Stored presets are not a mapping, starting empty: {type(data)}')
            return {}

        presets: Dict[str, Dict[str, Any]] = {}
        for name, preset in data.items():
            if not name.strip():
                logging.warning('Skipped stored preset with a blank name')
                continue
            if not isinstance(preset, dict):
                logging.warning(f'Skipped stored preset "{name}": not a mapping')
                continue
            presets[name] = preset
        return presets

    def _persist(self, presets: Dict[str, Dict[str, Any]]) -> None:
        """Write presets to storage.

        Raises:
            status.PersistenceException: If the storage write fails.
        """
        try:
            self._storage.set_item(self._storage_key, json.dumps(presets))
        except (OSError, TypeError, ValueError) as ex:
            raise status.PersistenceException(str(ex)) from ex

    def _commit(self, presets: Dict[str, Dict[str, Any]]) -> None:
        """Persist the staged collection, then make it the live one."""
        self._persist(presets)
        self._presets = presets

    def _set_mode(self, mode: Mode) -> None:
        if self._mode == mode:
            return
        self._mode = mode
        self.modeChanged.emit(mode.value)

    @contextlib.contextmanager
    def _operation(self, mode: Mode) -> Iterator[None]:
        """Set the mode for the duration of an operation and reset it to idle afterwards."""
        self._set_mode(mode)
        try:
            yield
        finally:
            self._set_mode(Mode.Idle)

    @QtCore.Slot()
    def reload(self) -> None:
        """Re-read the collection from storage.

        Missing, unreadable or corrupt data yields an empty collection.
        """
        self._presets = self._read_storage()
        logging.debug(f'Loaded {len(self._presets)} preset(s) from storage')
        self.presetsReloaded.emit()

    def names(self) -> List[str]:
        """Return the preset names, sorted."""
        return sorted(self._presets)

    def exists(self, name: str) -> bool:
        """Return True if a preset is stored under exactly this name."""
        return name in self._presets

    def count(self) -> int:
        """Return the number of stored presets."""
        return len(self._presets)

    def mode(self) -> Mode:
        """Return the mode of the running operation, or :attr:`Mode.Idle`."""
        return self._mode

    def get(self, name: str) -> Optional[Dict[str, Any]]:
        """Return a copy of the preset with the given name, or None if not found."""
        if name not in self._presets:
            return None
        return copy.deepcopy(self._presets[name])

    def save(self, name: str, payload: Mapping[str, Any], overwrite: bool = False) -> PresetResult:
        """Save payload as a preset.

        The name is trimmed before use. The stored preset is the payload plus a ``timestamp``
        and a ``schemaVersion`` stamp.

        Args:
            name: Name of the preset.
            payload: The snapshot to store.
            overwrite: Replace an existing preset with the same name.

        Returns:
            The result, echoing the trimmed name.

        Raises:
            status.InvalidArgumentException: If the name is blank or the payload is unusable.
            status.PresetConflictException: If the preset exists and overwrite is False.
            status.PersistenceException: If the storage write fails.
        """
        with self._operation(Mode.Saving):
            if not isinstance(name, str) or not name.strip():
                raise status.InvalidArgumentException('Preset name cannot be empty.')
            name = name.strip()

            if not isinstance(payload, Mapping):
                raise status.InvalidArgumentException(f'Payload must be a mapping, got {type(payload)}.')
            try:
                preset = _snapshot(dict(payload))
            except (TypeError, ValueError) as ex:
                raise status.InvalidArgumentException(f'Payload is not serializable: {ex}') from ex

            if name in self._presets and not overwrite:
                raise status.PresetConflictException(
                    f'"{name}" already exists. Use overwrite to replace it.'
                )

            preset[TIMESTAMP_KEY] = now_ms()
            preset[SCHEMA_VERSION_KEY] = SCHEMA_VERSION

            staged = dict(self._presets)
            staged[name] = preset
            self._commit(staged)

        logging.info(f'Saved preset "{name}"')
        self.presetSaved.emit(name)
        return PresetResult(f'Preset "{name}" saved successfully.', name=name)

    def load(self, name: str) -> Dict[str, Any]:
        """Return a copy of the stored preset.

        Args:
            name: Name of the preset.

        Returns:
            The stored payload including its ``timestamp`` and ``schemaVersion``.

        Raises:
            status.PresetNotFoundException: If no preset is stored under name.
        """
        with self._operation(Mode.Loading):
            if name not in self._presets:
                raise status.PresetNotFoundException(f'"{name}" does not exist.')
            preset = copy.deepcopy(self._presets[name])

        logging.debug(f'Loaded preset "{name}"')
        self.presetLoaded.emit(name)
        return preset

    def delete(self, name: str) -> PresetResult:
        """Delete a preset.

        Raises:
            status.PresetNotFoundException: If no preset is stored under name.
            status.PersistenceException: If the storage write fails.
        """
        with self._operation(Mode.Deleting):
            if name not in self._presets:
                raise status.PresetNotFoundException(f'"{name}" does not exist.')

            staged = dict(self._presets)
            del staged[name]
            self._commit(staged)

        logging.info(f'Deleted preset "{name}"')
        self.presetRemoved.emit(name)
        return PresetResult(f'Preset "{name}" deleted successfully.', name=name)

    def export(self) -> Dict[str, Any]:
        """Return an export document holding a copy of the whole collection."""
        return {
            SCHEMA_VERSION_KEY: SCHEMA_VERSION,
            'exportedAt': now_str(),
            'presets': copy.deepcopy(self._presets),
        }

    @staticmethod
    def validate_import(data: Any) -> Dict[str, Dict[str, Any]]:
        """Check an export document and return a clean copy of its presets.

        Args:
            data: The document, as produced by :meth:`export`.

        Returns:
            The presets of the document.

        Raises:
            status.InvalidFormatException: If the document or one of its presets is malformed.
        """
        if not isinstance(data, Mapping):
            raise status.InvalidFormatException(f'Expected a mapping, got {type(data)}.')

        presets = data.get('presets')
        if not isinstance(presets, Mapping):
            raise status.InvalidFormatException('"presets" must be a mapping.')

        for name, preset in presets.items():
            if not isinstance(name, str) or not name.strip():
                raise status.InvalidFormatException('Preset names cannot be empty.')
            if not isinstance(preset, Mapping):
                raise status.InvalidFormatException(f'Preset "{name}" must be a mapping.')

        try:
            return _snapshot({k: dict(v) for k, v in presets.items()})
        except (TypeError, ValueError) as ex:
            raise status.InvalidFormatException(f'Presets are not serializable: {ex}') from ex

    def import_presets(self, data: Mapping[str, Any], mode: str = ImportMode.Merge) -> PresetResult:
        """Import the presets of an export document.

        In merge mode incoming presets replace same-named existing ones and everything else is
        kept. In overwrite mode the collection is replaced by the incoming presets.

        Args:
            data: The export document.
            mode: ``'merge'`` or ``'overwrite'``.

        Returns:
            The result. ``count`` is the number of presets in the document.

        Raises:
            status.InvalidArgumentException: If mode is unknown.
            status.InvalidFormatException: If the document is malformed.
            status.PersistenceException: If the storage write fails.
        """
        with self._operation(Mode.Saving):
            try:
                mode = ImportMode(mode)
            except ValueError as ex:
                raise status.InvalidArgumentException(f'Unknown import mode "{mode}".') from ex

            incoming = self.validate_import(data)

            if mode == ImportMode.Overwrite:
                staged = incoming
            else:
                staged = dict(self._presets)
                staged.update(incoming)
            self._commit(staged)

        n = len(incoming)
        logging.info(f'Imported {n} preset(s) ({mode.value})')
        self.presetsReloaded.emit()
        return PresetResult(f'Imported {n} preset(s) successfully.', count=n)

    def clear(self, confirmation: str) -> PresetResult:
        """Delete every preset.

        Args:
            confirmation: Must be exactly ``'DELETE_ALL'``.

        Raises:
            status.ConfirmationMismatchException: If confirmation does not match.
            status.PersistenceException: If the storage write fails.
        """
        with self._operation(Mode.Deleting):
            if confirmation != CLEAR_CONFIRMATION:
                raise status.ConfirmationMismatchException(f'Type "{CLEAR_CONFIRMATION}" to confirm.')
            self._commit({})

        logging.info('Cleared all presets')
        self.presetsReloaded.emit()
        return PresetResult('All presets cleared successfully.', count=0)
