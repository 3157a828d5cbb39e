"""Settings library for application paths and the live sketch parameters.

Provides:
    - Application paths for the parameter template, the preset store and exports.
    - Schema validation for the parameter sections.
    - Loading, editing, reverting, capturing and applying the live parameters.
"""

import copy
import json
import logging
import pathlib
from typing import Any, Dict, List, Mapping, Optional

from PySide6 import QtCore, QtWidgets

from ..status import status
from ..ui.actions import signals

app_name: str = 'SketchPresets'

STORAGE_FILENAME: str = 'presets.ini'
EXPORTS_DIRNAME: str = 'exports'

PARAMETERS_SCHEMA: Dict[str, Any] = {
    'sliderValues': {
        'type': dict,
        'required': True,
        'item_type': dict,
    },
    'flags': {
        'type': dict,
        'required': True,
        'value_type': bool,
    },
}

RANGE_KEYS: List[str] = ['min', 'value', 'max']


def is_valid_hex_color(value: str) -> bool:
    """Check if a string is a valid hexadecimal color in #RRGGBB format.

    Args:
        value (str): Color string to validate.

    Returns:
        bool: True if value matches '#RRGGBB', False otherwise.
    """
    return isinstance(value, str) and QtCore.QRegularExpression(
        r'^#[0-9A-Fa-f]{6}$'
    ).match(value).hasMatch()


def is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def is_range_parameter(param: Mapping[str, Any]) -> bool:
    """Return True if the parameter describes a numeric slider rather than a colour."""
    return 'min' in param or 'max' in param


def _validate_parameter(name: str, param: Any) -> None:
    """Validate a single slider or colour parameter.

    Slider parameters carry ``min``, ``value`` and ``max`` numbers with ``min <= value <= max``.
    Colour parameters carry a single ``value`` in ``#RRGGBB`` format.

    Args:
        name: Parameter name, used in error messages.
        param: The parameter definition.

    Raises:
        TypeError: If param is not a dict or a field has the wrong type.
        ValueError: If a field is missing, out of range, or not a valid colour.
    """
    if not isinstance(param, dict):
        raise TypeError(f'Parameter "{name}" must be a dict, got {type(param)}.')
    if 'value' not in param:
        raise ValueError(f'Parameter "{name}" is missing "value".')

    if not is_range_parameter(param):
        if not is_valid_hex_color(param['value']):
            raise ValueError(f'Parameter "{name}" must be a hex color (#RRGGBB), got "{param["value"]}".')
        return

    for key in RANGE_KEYS:
        if key not in param:
            raise ValueError(f'Parameter "{name}" is missing "{key}".')
        if not is_number(param[key]):
            raise TypeError(f'Parameter "{name}" field "{key}" must be a number, got {type(param[key])}.')
    if not param['min'] <= param['value'] <= param['max']:
        raise ValueError(
            f'Parameter "{name}" value {param["value"]} is outside [{param["min"]}, {param["max"]}].'
        )


def _validate_section(section_name: str, section: Any, schema: Dict[str, Any]) -> None:
    """Validate one parameter section against its schema entry.

    Raises:
        TypeError: If the section or one of its values has the wrong type.
        ValueError: If a parameter fails validation.
    """
    if not isinstance(section, schema['type']):
        raise TypeError(f'Section "{section_name}" must be {schema["type"]}, got {type(section)}.')
    for key, value in section.items():
        if not isinstance(key, str):
            raise TypeError(f'Section "{section_name}" key "{key}" is not a string.')
        if 'value_type' in schema and not isinstance(value, schema['value_type']):
            raise TypeError(
                f'Section "{section_name}" value "{key}" must be {schema["value_type"]}, got {type(value)}.'
            )
        if 'item_type' in schema:
            _validate_parameter(key, value)


class ConfigPaths:
    """Manage application file paths and ensure the template and data directories exist."""

    def __init__(self, app_data_dir: Optional[pathlib.Path] = None) -> None:
        """Set up application paths.

        Args:
            app_data_dir: Optional writable directory. Defaults to the platform app data location.
        """
        QtWidgets.QApplication.setApplicationName(app_name)
        QtWidgets.QApplication.setOrganizationName('')

        if app_data_dir is None:
            p = QtCore.QStandardPaths.writableLocation(QtCore.QStandardPaths.AppDataLocation)
            app_data_dir = pathlib.Path(p)
        self.app_data_dir: pathlib.Path = pathlib.Path(app_data_dir)
        logging.debug(f'Using app data directory: {self.app_data_dir}')

        self.template_dir: pathlib.Path = pathlib.Path(__file__).parent.parent / 'config'
        self.parameters_template: pathlib.Path = self.template_dir / 'parameters.json.template'

        self.storage_path: pathlib.Path = self.app_data_dir / STORAGE_FILENAME
        self.exports_dir: pathlib.Path = self.app_data_dir / EXPORTS_DIRNAME

        self._verify_and_prepare()

    def _verify_and_prepare(self) -> None:
        """Verify the template exists and create the data directories.

        Raises:
            status.TemplateNotFoundException: If the parameter template is missing.
        """
        if not self.parameters_template.exists():
            raise status.TemplateNotFoundException(str(self.parameters_template))

        if not self.app_data_dir.exists():
            logging.debug(f'Creating app data directory: {self.app_data_dir}')
            self.app_data_dir.mkdir(parents=True, exist_ok=True)

        if not self.exports_dir.exists():
            logging.debug(f'Creating exports directory: {self.exports_dir}')
            self.exports_dir.mkdir(parents=True, exist_ok=True)


class ParametersAPI(ConfigPaths):
    """
    Holds the live parameters of the sketch and provides the capture-state and
    apply-state callbacks used by the presets panel.
    """

    def __init__(
            self,
            app_data_dir: Optional[pathlib.Path] = None,
            template_path: Optional[pathlib.Path] = None
    ) -> None:
        """Initialize the API and load the parameter template.

        Args:
            app_data_dir: Optional writable directory, see :class:`ConfigPaths`.
            template_path: Optional path to a custom parameter template.
        """
        self._custom_template = pathlib.Path(template_path) if template_path else None
        super().__init__(app_data_dir=app_data_dir)

        if self._custom_template:
            self.parameters_template = self._custom_template

        self._signals_blocked: bool = False

        self.template_data: Dict[str, Any] = {}
        self.parameters_data: Dict[str, Any] = {}

        self.init_data()

    def _verify_and_prepare(self) -> None:
        if self._custom_template:
            self.parameters_template = self._custom_template
        super()._verify_and_prepare()

    def block_signals(self, v: bool) -> None:
        """Enable or disable emission of change signals."""
        self._signals_blocked = v

    def _emit_section_changed(self, section_name: str) -> None:
        if self._signals_blocked:
            return
        signals.configSectionChanged.emit(section_name)

    @QtCore.Slot()
    def init_data(self) -> None:
        """Reload the template and reset the live parameters to it."""
        self.template_data = self.load_template()
        self.parameters_data = copy.deepcopy(self.template_data)
        for section in self.sections():
            self._emit_section_changed(section)

    def load_template(self) -> Dict[str, Any]:
        """Load and validate the parameter template.

        Returns:
            The template data.

        Raises:
            status.TemplateNotFoundException: If the template file is missing.
            status.ParametersInvalidException: If parsing or validation fails.
        """
        logging.debug(f'Loading parameters from "{self.parameters_template}"')
        if not self.parameters_template.exists():
            raise status.TemplateNotFoundException(str(self.parameters_template))

        try:
            with self.parameters_template.open('r', encoding='utf-8') as f:
                data: Dict[str, Any] = json.load(f)
        except (ValueError, OSError) as ex:
            raise status.ParametersInvalidException(f'{self.parameters_template}: {ex}') from ex

        self.validate_parameters(data)
        return data

    def validate_parameters(self, data: Optional[Dict[str, Any]] = None) -> None:
        """Validate parameter data against PARAMETERS_SCHEMA.

        Args:
            data (dict, optional): Data to validate. Defaults to the live parameters.

        Raises:
            status.ParametersInvalidException: If a section is missing, unknown, or invalid.
        """
        if data is None:
            data = self.parameters_data
        if not isinstance(data, dict):
            raise status.ParametersInvalidException(f'Expected a dict, got {type(data)}.')

        for section_name, schema in PARAMETERS_SCHEMA.items():
            if schema.get('required') and section_name not in data:
                raise status.ParametersInvalidException(f'Missing required section: {section_name}')

        for section_name, section in data.items():
            if section_name not in PARAMETERS_SCHEMA:
                raise status.ParametersInvalidException(f'Unknown section: {section_name}')
            try:
                _validate_section(section_name, section, PARAMETERS_SCHEMA[section_name])
            except (TypeError, ValueError) as ex:
                raise status.ParametersInvalidException(str(ex)) from ex

    def sections(self) -> List[str]:
        """Return the names of the live parameter sections."""
        return list(self.parameters_data.keys())

    def get_section(self, section_name: str) -> Dict[str, Any]:
        """Return a copy of a parameter section.

        Raises:
            KeyError: If section_name is unknown.
        """
        return copy.deepcopy(self.parameters_data[section_name])

    def set_section(self, section_name: str, new_data: Dict[str, Any]) -> None:
        """Replace a parameter section, rolling back if the result does not validate.

        Raises:
            ValueError: If section_name is unknown.
            status.ParametersInvalidException: If new_data fails validation.
        """
        if section_name not in self.parameters_data:
            msg: str = f'Unknown section_name for set: "{section_name}"'
            logging.error(msg)
            raise ValueError(msg)

        current = self.parameters_data[section_name]
        self.parameters_data[section_name] = copy.deepcopy(new_data)
        try:
            self.validate_parameters()
        except status.ParametersInvalidException:
            self.parameters_data[section_name] = current
            raise
        self._emit_section_changed(section_name)

    def get_value(self, section_name: str, key: str) -> Any:
        """Return the current value of a single parameter.

        Raises:
            KeyError: If the section or parameter is unknown.
        """
        value = self.parameters_data[section_name][key]
        if isinstance(value, dict):
            return value['value']
        return value

    def set_value(self, section_name: str, key: str, value: Any) -> None:
        """Set the value of a single parameter.

        Raises:
            KeyError: If the section or parameter is unknown.
            status.ParametersInvalidException: If the value is out of range or of the wrong type.
        """
        section = self.get_section(section_name)
        if key not in section:
            raise KeyError(f'Unknown parameter "{key}" in section "{section_name}"')

        if isinstance(section[key], dict):
            section[key]['value'] = value
        else:
            section[key] = value

        try:
            _validate_section(section_name, section, PARAMETERS_SCHEMA[section_name])
        except (TypeError, ValueError) as ex:
            raise status.ParametersInvalidException(str(ex)) from ex

        self.parameters_data[section_name] = section
        if not self._signals_blocked:
            signals.parameterChanged.emit(section_name, key, value)

    def revert_section(self, section_name: str) -> None:
        """Revert a section to its template values.

        Raises:
            ValueError: If section_name is unknown.
        """
        if section_name not in self.template_data:
            msg: str = f'Unknown section_name for revert: "{section_name}"'
            logging.error(msg)
            raise ValueError(msg)
        self.parameters_data[section_name] = copy.deepcopy(self.template_data[section_name])
        self._emit_section_changed(section_name)

    def revert_all(self) -> None:
        """Revert every section to its template values."""
        for section_name in self.sections():
            self.revert_section(section_name)

    def capture_state(self) -> Dict[str, Any]:
        """Return a snapshot of all live parameter sections, suitable as a preset payload."""
        return copy.deepcopy(self.parameters_data)

    def apply_state(self, payload: Mapping[str, Any]) -> List[str]:
        """Apply a preset payload onto the live parameters.

        Only sections and parameters known to the live configuration are applied; anything
        else in the payload (including the ``timestamp`` and ``schemaVersion`` stamps) is
        ignored. Slider and colour parameters take only the incoming ``value``, so the live
        ``min``/``max`` bounds stay in force. The whole payload is validated before anything
        is applied.

        Args:
            payload: A snapshot previously produced by :meth:`capture_state`.

        Returns:
            The names of the applied sections.

        Raises:
            status.ParametersInvalidException: If the payload is malformed or a value is invalid.
        """
        if not isinstance(payload, Mapping):
            raise status.ParametersInvalidException(f'Snapshot must be a mapping, got {type(payload)}.')

        staged = copy.deepcopy(self.parameters_data)
        applied: List[str] = []

        for section_name, incoming in payload.items():
            if section_name not in staged:
                logging.debug(f'Skipping unknown section "{section_name}"')
                continue
            if not isinstance(incoming, Mapping):
                raise status.ParametersInvalidException(f'Section "{section_name}" must be a mapping.')

            section = staged[section_name]
            for key, value in incoming.items():
                if key not in section:
                    logging.debug(f'Skipping unknown parameter "{section_name}.{key}"')
                    continue
                if not isinstance(section[key], dict):
                    section[key] = value
                    continue
                if not isinstance(value, Mapping) or 'value' not in value:
                    raise status.ParametersInvalidException(
                        f'Parameter "{section_name}.{key}" must be a mapping with a "value".'
                    )
                section[key]['value'] = copy.deepcopy(value['value'])
            applied.append(section_name)

        self.validate_parameters(staged)
        self.parameters_data = staged

        for section_name in applied:
            self._emit_section_changed(section_name)
        return applied
