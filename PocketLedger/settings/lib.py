"""Settings library for storage, validation and chart configuration.

Provides:
    - Schema validation and enforcement for the settings.json structure.
    - Loading, saving, reverting, and managing application settings.
    - Application paths for the settings file and the local store.
"""

import json
import logging
import pathlib
import shutil
from typing import Any, Dict, List, Optional, Union

from PySide6 import QtCore, QtWidgets

from . import locale
from ..status import status

app_name: str = 'PocketLedger'

NEGATIVE_AMOUNT_POLICIES: List[str] = ['allow', 'reject']

METADATA_KEYS: List[str] = [
    'locale',
    'yearmonth',
    'span',
]

SETTINGS_SCHEMA: Dict[str, Any] = {
    'storage': {
        'type': dict,
        'required': True,
        'item_schema': {
            'path': {'type': str, 'required': True},
        }
    },
    'validation': {
        'type': dict,
        'required': True,
        'item_schema': {
            'negative_amounts': {'type': str, 'required': True, 'allowed_values': NEGATIVE_AMOUNT_POLICIES},
            'min_password_length': {'type': int, 'required': True, 'min': 1},
        }
    },
    'chart': {
        'type': dict,
        'required': True,
        'item_schema': {
            'size': {'type': int, 'required': True, 'min': 1},
            'margin': {'type': int, 'required': True, 'min': 0},
        }
    },
    'metadata': {
        'type': dict,
        'required': True,
        'item_schema': {
            'locale': {'type': str, 'required': True, 'allowed_values': locale.LOCALE_MAP},
            'yearmonth': {'type': str, 'required': True},
            'span': {'type': int, 'required': True, 'min': 1},
        }
    },
}


def _validate_section(section_name: str, section: Dict[str, Any], item_schema: Dict[str, Any]) -> None:
    """Validate one section of the settings against its item schema.

    Args:
        section_name: Name of the section, used in error messages.
        section: Section data.
        item_schema: Mapping of field names to their type and value constraints.

    Raises:
        TypeError: If a field has the wrong type.
        ValueError: If a required field is missing or a value is out of range.
    """
    logging.debug(f'Validating "{section_name}" section.')
    for field, field_specs in item_schema.items():
        if field not in section:
            if field_specs['required']:
                msg = f'Section "{section_name}" missing "{field}".'
                logging.error(msg)
                raise ValueError(msg)
            continue

        value = section[field]
        # bool is an int subclass
        if not isinstance(value, field_specs['type']) or (
                field_specs['type'] is int and isinstance(value, bool)):
            msg = (
                f'Field "{section_name}.{field}" must be {field_specs["type"]}, '
                f'got {type(value)}.'
            )
            logging.error(msg)
            raise TypeError(msg)

        allowed = field_specs.get('allowed_values')
        if allowed is not None and value not in allowed:
            msg = f'Field "{section_name}.{field}" must be one of {allowed}, got "{value}".'
            logging.error(msg)
            raise ValueError(msg)

        minimum = field_specs.get('min')
        if minimum is not None and value < minimum:
            msg = f'Field "{section_name}.{field}" must be at least {minimum}, got {value}.'
            logging.error(msg)
            raise ValueError(msg)


def validate_settings_data(data: Dict[str, Any]) -> None:
    """Validate settings data against :data:`SETTINGS_SCHEMA`.

    Raises:
        TypeError: If a section or field has the wrong type.
        ValueError: If a required section or field is missing or invalid.
    """
    if not data:
        raise ValueError('Settings data is empty.')

    for section_name, specs in SETTINGS_SCHEMA.items():
        if section_name not in data:
            if specs.get('required'):
                raise ValueError(f'Missing required section: {section_name}')
            continue
        if not isinstance(data[section_name], specs['type']):
            raise TypeError(
                f'Section "{section_name}" must be {specs["type"]}, got {type(data[section_name])}.'
            )
        _validate_section(section_name, data[section_name], specs['item_schema'])

    logging.debug('Settings data is valid.')


class ConfigPaths:
    """Manage application file paths and ensure the default settings template is in place.

    Args:
        app_data_dir: Optional root directory for the configuration and the store.
            Defaults to Qt's writable application data location.
    """

    def __init__(self, app_data_dir: Optional[Union[str, pathlib.Path]] = None) -> None:
        if app_data_dir is None:
            QtWidgets.QApplication.setApplicationName(app_name)
            QtWidgets.QApplication.setOrganizationName('')
            p = QtCore.QStandardPaths.writableLocation(QtCore.QStandardPaths.AppDataLocation)
            app_data_dir = pathlib.Path(p)
        self.app_data_dir: pathlib.Path = pathlib.Path(app_data_dir)
        logging.debug(f'Using app data directory: {self.app_data_dir}')

        self.template_dir: pathlib.Path = pathlib.Path(__file__).parent.parent / 'config'
        self.settings_template: pathlib.Path = self.template_dir / 'settings.json.template'

        self.config_dir: pathlib.Path = self.app_data_dir / 'config'
        self.db_dir: pathlib.Path = self.app_data_dir / 'db'

        self.settings_path: pathlib.Path = self.config_dir / 'settings.json'
        self.default_db_path: pathlib.Path = self.db_dir / 'store.db'

        self._verify_and_prepare()

    def _verify_and_prepare(self) -> None:
        """Verify the template exists, create directories and copy the default settings.

        Raises:
            FileNotFoundError: If the settings template is missing.
        """
        if not self.settings_template.exists():
            msg = f'Missing settings template: {self.settings_template}'
            logging.error(msg)
            raise FileNotFoundError(msg)

        for directory in (self.config_dir, self.db_dir):
            if not directory.exists():
                logging.debug(f'Creating directory: {directory}')
                directory.mkdir(parents=True, exist_ok=True)

        if not self.settings_path.exists():
            logging.debug(f'Copying default settings from template to {self.settings_path}')
            shutil.copy(self.settings_template, self.settings_path)

    def revert_settings_to_template(self) -> None:
        logging.debug(f'Reverting settings to template: {self.settings_template}')
        shutil.copy(self.settings_template, self.settings_path)


class SettingsAPI(ConfigPaths):
    """
    Provides an interface to get/set/revert/save settings.json sections.
    """

    def __init__(self, app_data_dir: Optional[Union[str, pathlib.Path]] = None,
                 settings_path: Optional[Union[str, pathlib.Path]] = None) -> None:
        super().__init__(app_data_dir)

        if settings_path:
            self.settings_path = pathlib.Path(settings_path)

        self.settings_data: Dict[str, Any] = {k: {} for k in SETTINGS_SCHEMA}
        self.load_settings()

    def __getitem__(self, key: str) -> Any:
        """Retrieve a metadata value using dictionary-style access.

        Raises:
            KeyError: If key is not in METADATA_KEYS.
        """
        if key not in METADATA_KEYS:
            raise KeyError(f'Invalid metadata key: {key}, must be one of {METADATA_KEYS}')
        return self.settings_data['metadata'].get(key)

    def __setitem__(self, key: str, value: Any) -> None:
        """Assign a metadata value using dictionary-style access and persist it.

        Raises:
            KeyError: If key is not in METADATA_KEYS.
            TypeError, ValueError: If the value fails validation.
        """
        if key not in METADATA_KEYS:
            raise KeyError(f'Invalid metadata key: {key}, must be one of {METADATA_KEYS}')

        section = {**self.settings_data['metadata'], key: value}
        _validate_section('metadata', section, SETTINGS_SCHEMA['metadata']['item_schema'])

        self.settings_data['metadata'] = section
        self.save_section('metadata')

        from ..ui.actions import signals
        signals.metadataChanged.emit(key, value)

    @property
    def db_path(self) -> pathlib.Path:
        """Path of the local store; the configured path, or the default inside the app data dir."""
        path = self.settings_data['storage'].get('path')
        return pathlib.Path(path) if path else self.default_db_path

    def load_settings(self) -> Dict[str, Any]:
        """Load settings.json from disk and validate against schema.

        Raises:
            status.SettingsNotFoundException: If settings.json is missing.
            status.SettingsInvalidException: If JSON parsing or validation fails.
        """
        logging.debug(f'Loading settings from "{self.settings_path}"')
        if not self.settings_path.exists():
            raise status.SettingsNotFoundException(str(self.settings_path))

        try:
            with self.settings_path.open('r', encoding='utf-8') as f:
                data: Dict[str, Any] = json.load(f)
            validate_settings_data(data)
        except (ValueError, TypeError) as ex:
            raise status.SettingsInvalidException(str(ex)) from ex

        self.settings_data = data
        return self.settings_data

    def get_section(self, section_name: str) -> Dict[str, Any]:
        """Retrieve a copy of a settings section.

        Raises:
            KeyError: If section_name is unknown.
        """
        return self.settings_data[section_name].copy()

    def set_section(self, section_name: str, new_data: Dict[str, Any]) -> None:
        """Replace and persist a settings section, rolling back on validation failure.

        Raises:
            ValueError: If section_name is unknown or the data is invalid.
            TypeError: If the data has the wrong types.
        """
        if section_name not in SETTINGS_SCHEMA:
            msg = f'Unknown section_name for set: "{section_name}"'
            logging.error(msg)
            raise ValueError(msg)

        current_section_data = self.settings_data.get(section_name, {}).copy()
        self.settings_data[section_name] = new_data
        try:
            validate_settings_data(self.settings_data)
        except (ValueError, TypeError) as e:
            logging.error(f'Validation error on set_section("{section_name}"): {e}')
            self.settings_data[section_name] = current_section_data
            raise

        self.save_section(section_name)

        from ..ui.actions import signals
        signals.configSectionChanged.emit(section_name)

    def revert_section(self, section_name: str) -> None:
        """Revert a settings section to its template default and save.

        Raises:
            ValueError: If section_name is unknown.
        """
        if section_name not in SETTINGS_SCHEMA:
            msg = f'Unknown section_name for revert: "{section_name}"'
            logging.error(msg)
            raise ValueError(msg)

        with self.settings_template.open('r', encoding='utf-8') as f:
            template_data: Dict[str, Any] = json.load(f)

        self.settings_data[section_name] = template_data[section_name]
        self.save_section(section_name)

        from ..ui.actions import signals
        signals.configSectionChanged.emit(section_name)

    def save_section(self, section_name: str) -> None:
        """Persist a single settings section to settings.json.

        Raises:
            ValueError: If section_name is unknown.
        """
        if section_name not in SETTINGS_SCHEMA:
            msg = f'Unknown section_name for save: "{section_name}"'
            logging.error(msg)
            raise ValueError(msg)

        with self.settings_path.open('r', encoding='utf-8') as f:
            original_data: Dict[str, Any] = json.load(f)

        new_data = original_data.copy()
        new_data[section_name] = self.settings_data[section_name]

        with self.settings_path.open('w', encoding='utf-8') as f:
            json.dump(new_data, f, indent=4, ensure_ascii=False)


settings: Optional[SettingsAPI] = None


def get_settings() -> SettingsAPI:
    """Return the application settings, loading them on first use."""
    global settings
    if settings is None:
        settings = SettingsAPI()
    return settings
