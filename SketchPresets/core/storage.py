"""
Synchronous string-keyed key-value storage used to persist the preset collection.

The store writes the whole collection as one JSON string under one key, so all a backend has to
provide is get, set and remove of string values. Two backends are available:

- :class:`SettingsStorage` keeps values in an INI file through :class:`QtCore.QSettings`.
- :class:`MemoryStorage` keeps values in a dictionary and is used by tests and as a scratch store.
"""
import logging
import pathlib
from typing import Dict, List, Optional, Union

from PySide6 import QtCore


class KeyValueStorage:
    """Interface of a synchronous string-keyed key-value store.

    Implementations raise :class:`OSError` when the underlying medium cannot be read or written.
    """

    def get_item(self, key: str) -> Optional[str]:
        """Return the value stored under key, or None if the key is absent."""
        raise NotImplementedError

    def set_item(self, key: str, value: str) -> None:
        """Store value under key."""
        raise NotImplementedError

    def remove_item(self, key: str) -> None:
        """Remove key. Removing an absent key is not an error."""
        raise NotImplementedError

    def keys(self) -> List[str]:
        """Return all stored keys."""
        raise NotImplementedError

    def __contains__(self, key: str) -> bool:
        return key in self.keys()


class MemoryStorage(KeyValueStorage):
    """Dictionary-backed storage."""

    def __init__(self, initial: Optional[Dict[str, str]] = None) -> None:
        self._data: Dict[str, str] = dict(initial or {})

    def __repr__(self) -> str:
        return f'<MemoryStorage keys={sorted(self._data)!r}>'

    def get_item(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set_item(self, key: str, value: str) -> None:
        if not isinstance(value, str):
            raise TypeError(f'Value must be a string, got {type(value)}')
        self._data[key] = value

    def remove_item(self, key: str) -> None:
        self._data.pop(key, None)

    def keys(self) -> List[str]:
        return list(self._data.keys())


class SettingsStorage(KeyValueStorage):
    """Storage backed by a :class:`QtCore.QSettings` INI file.

    Every write is flushed to disk immediately and every read re-syncs with the file, so a value
    written by another instance becomes visible on the next read. Concurrent writers race with
    last-writer-wins.
    """

    def __init__(self, path: Optional[Union[str, pathlib.Path]] = None) -> None:
        """
        Args:
            path: Path of the INI file. Defaults to the application's preset store path.
        """
        if path is None:
            from ..settings import lib
            path = lib.ConfigPaths().storage_path

        self.path: pathlib.Path = pathlib.Path(path)
        self.path.parent.mkdir(parents=True, exist_ok=True)

        self._settings = QtCore.QSettings(
            str(self.path),
            QtCore.QSettings.Format.IniFormat,
        )
        logging.debug(f'Using preset storage: {self.path}')

    def __repr__(self) -> str:
        return f'<SettingsStorage path={str(self.path)!r}>'

    def _check_status(self, action: str) -> None:
        s = self._settings.status()
        if s == QtCore.QSettings.Status.AccessError:
            raise OSError(f'Could not {action} "{self.path}": access denied')
        if s == QtCore.QSettings.Status.FormatError:
            raise OSError(f'Could not {action} "{self.path}": malformed file')

    def sync(self) -> None:
        """Write pending changes and reload changes made by other processes.

        Raises:
            OSError: If the file could not be accessed or parsed.
        """
        self._settings.sync()
        self._check_status('sync')

    def get_item(self, key: str) -> Optional[str]:
        """Return the value stored under key, or None if the key is absent.

        Raises:
            OSError: If the file is unreadable or the stored value is not a string.
        """
        self._settings.sync()
        self._check_status('read')

        if not self._settings.contains(key):
            return None
        value = self._settings.value(key)
        if not isinstance(value, str):
            raise OSError(f'Value stored under "{key}" is not a string: {type(value)}')
        return value

    def set_item(self, key: str, value: str) -> None:
        """Store value under key and flush to disk.

        Raises:
            TypeError: If value is not a string.
            OSError: If the file could not be written.
        """
        if not isinstance(value, str):
            raise TypeError(f'Value must be a string, got {type(value)}')
        self._settings.setValue(key, value)
        self.sync()

    def remove_item(self, key: str) -> None:
        """Remove key and flush to disk.

        Raises:
            OSError: If the file could not be written.
        """
        self._settings.remove(key)
        self.sync()

    def keys(self) -> List[str]:
        self._settings.sync()
        return list(self._settings.allKeys())
