"""Reading and writing preset export documents as JSON files.

Export files are written atomically: the document goes to a temporary file next to the
destination, which then replaces the destination in one step.
"""
import json
import logging
import os
import pathlib
import tempfile
from typing import Any, Dict, Union

from .lib import PresetsAPI, PresetResult, ImportMode, now_ms
from ..status import status

EXPORT_PREFIX = 'sketch-presets'


def default_export_name(prefix: str = EXPORT_PREFIX) -> str:
    """Return a timestamped export file name, e.g. ``sketch-presets-1700000000000.json``."""
    return f'{prefix}-{now_ms()}.json'


def write_export_file(path: Union[str, pathlib.Path], data: Dict[str, Any]) -> pathlib.Path:
    """Write an export document to path.

    Args:
        path: Destination file. Its directory is created if needed.
        data: The document to write.

    Returns:
        The written path.

    Raises:
        status.PersistenceException: If the file could not be written.
    """
    path = pathlib.Path(path)
    json_str = json.dumps(data, indent=2, ensure_ascii=False)

    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, temp_path = tempfile.mkstemp(suffix='.tmp', prefix='.export_', dir=path.parent)
        try:
            with os.fdopen(fd, 'w', encoding='utf-8') as f:
                f.write(json_str)
            os.replace(temp_path, path)
        except OSError:
            pathlib.Path(temp_path).unlink(missing_ok=True)
            raise
    except OSError as ex:
        raise status.PersistenceException(f'{path}: {ex}') from ex

    logging.info(f'Exported presets to "{path}"')
    return path


def read_import_file(path: Union[str, pathlib.Path]) -> Dict[str, Any]:
    """Read an export document from path.

    Raises:
        FileNotFoundError: If path does not exist.
        status.InvalidFormatException: If the file is not a JSON object.
    """
    path = pathlib.Path(path)
    if not path.exists():
        raise FileNotFoundError(f'Import file not found: {path}')

    try:
        with path.open('r', encoding='utf-8') as f:
            data = json.load(f)
    except ValueError as ex:
        raise status.InvalidFormatException(f'{path.name}: {ex}') from ex

    if not isinstance(data, dict):
        raise status.InvalidFormatException(f'{path.name}: expected a JSON object.')
    return data


def export_to_file(api: PresetsAPI, path: Union[str, pathlib.Path]) -> pathlib.Path:
    """Write the api's export document to path."""
    return write_export_file(path, api.export())


def import_from_file(
        api: PresetsAPI,
        path: Union[str, pathlib.Path],
        mode: str = ImportMode.Merge
) -> PresetResult:
    """Import the export document at path into api."""
    logging.info(f'Importing presets from "{path}" ({mode})')
    return api.import_presets(read_import_file(path), mode=mode)
