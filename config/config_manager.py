"""
Configuration loading validated by schemaguard's own validators.
"""
import os
import json
import yaml
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any, Dict, Optional
from copy import deepcopy

from utils.logging_config import LoggerFactory, get_logger
from utils.exceptions import ConfigurationError
from validation import (
    BooleanValidator,
    EnumValidator,
    IntersectionValidator,
    ObjectValidator,
    StringValidator,
    Validator
)

logger = get_logger(__name__)

ENV_PREFIX = "SCHEMAGUARD_"
LOG_LEVELS = ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL')

SETTINGS_SCHEMA = ObjectValidator({
    'log_level': IntersectionValidator(
        StringValidator().trim().to_uppercase(),
        EnumValidator(LOG_LEVELS)
    ).default('WARNING'),
    'log_dir': StringValidator().min(1).optional(),
    'enable_console': BooleanValidator().default(True),
    'enable_structured': BooleanValidator().default(False),
}).strict()


def _validated(validator: Validator, data: Any, source: str) -> Any:
    outcome = validator.validate(data)
    if not outcome.ok:
        raise ConfigurationError(
            f"Invalid configuration from {source}: {outcome.issues}",
            details={'source': source, 'issues': outcome.issues.to_list()}
        )
    return outcome.value


@dataclass(frozen=True)
class Settings:
    """Runtime settings for schemaguard itself."""

    log_level: str = 'WARNING'
    log_dir: Optional[str] = None
    enable_console: bool = True
    enable_structured: bool = False

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> 'Settings':
        """Build settings from a mapping checked against ``SETTINGS_SCHEMA``."""
        values = _validated(SETTINGS_SCHEMA, data or {}, 'settings')
        return cls(**values)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


class ConfigManager:
    """
    Configuration from files, dictionaries and the environment.

    Schemas registered under a name validate data loaded under that name;
    for files the name is the file stem (``service.yaml`` -> ``service``).
    Loaded data is the validator's output, so defaults and transforms apply.
    """

    def __init__(self):
        self._data: Dict[str, Any] = {}
        self._schemas: Dict[str, Validator] = {}
        self.logger = get_logger(self.__class__.__name__)

    def register_schema(self, name: str, schema: Validator):
        """Register a validator for configuration loaded under ``name``."""
        if not isinstance(schema, Validator):
            raise ConfigurationError(
                f"Schema for '{name}' must be a validator",
                details={'name': name, 'type': type(schema).__name__}
            )
        self._schemas[name] = schema
        self.logger.debug(f"Registered schema: {name}")

    def load_from_file(self, filepath: str, validate: bool = True) -> Dict[str, Any]:
        """
        Load configuration from a JSON or YAML file.

        Args:
            filepath: Path to configuration file
            validate: Whether to validate against the schema named after the file stem

        Returns:
            The loaded (and validated) data
        """
        path = Path(filepath)

        if not path.exists():
            raise ConfigurationError(
                f"Configuration file not found: {filepath}",
                details={'filepath': str(path)}
            )

        try:
            with open(path, 'r') as f:
                if path.suffix in ['.yaml', '.yml']:
                    data = yaml.safe_load(f)
                elif path.suffix == '.json':
                    data = json.load(f)
                else:
                    raise ConfigurationError(
                        f"Unsupported file format: {path.suffix}",
                        details={'filepath': str(path)}
                    )
        except (OSError, yaml.YAMLError, json.JSONDecodeError) as e:
            raise ConfigurationError(
                f"Failed to load configuration from {filepath}: {e}",
                details={'filepath': str(path), 'error': str(e)}
            )

        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ConfigurationError(
                f"Configuration file must contain a mapping: {filepath}",
                details={'filepath': str(path), 'type': type(data).__name__}
            )

        if validate and path.stem in self._schemas:
            data = _validated(self._schemas[path.stem], data, str(path))

        self._merge(data)
        self.logger.info(f"Loaded configuration from {filepath}")
        return data

    def load_from_dict(self, data: Dict[str, Any], schema_name: Optional[str] = None) -> Dict[str, Any]:
        """
        Load configuration from a dictionary.

        Args:
            data: Configuration dictionary
            schema_name: Name of a registered schema to validate against
        """
        if schema_name is not None:
            if schema_name not in self._schemas:
                raise ConfigurationError(
                    f"No schema registered as '{schema_name}'",
                    details={'schema_name': schema_name, 'registered': sorted(self._schemas)}
                )
            data = _validated(self._schemas[schema_name], data, schema_name)

        self._merge(data)
        self.logger.info("Loaded configuration from dictionary")
        return data

    def load_from_env(self, prefix: str = ENV_PREFIX) -> int:
        """
        Load configuration from environment variables.

        ``SCHEMAGUARD_LOG_LEVEL=debug`` sets ``log.level``; values are decoded
        as JSON when possible and kept as strings otherwise.

        Returns:
            Number of variables loaded
        """
        count = 0
        for key, value in os.environ.items():
            if not key.startswith(prefix):
                continue
            config_key = key[len(prefix):].lower()
            if not config_key:
                continue

            try:
                parsed_value = json.loads(value)
            except json.JSONDecodeError:
                parsed_value = value

            self.set(config_key.replace('_', '.'), parsed_value)
            count += 1

        self.logger.info(f"Loaded {count} configuration values from environment")
        return count

    def get(self, key: str, default: Any = None) -> Any:
        """Get a value by dotted key."""
        value: Any = self._data
        try:
            for part in key.split('.'):
                value = value[part]
        except (KeyError, TypeError):
            return default
        return value

    def set(self, key: str, value: Any):
        """Set a value by dotted key, creating intermediate sections."""
        keys = key.split('.')
        data = self._data
        for k in keys[:-1]:
            if not isinstance(data.get(k), dict):
                data[k] = {}
            data = data[k]
        data[keys[-1]] = value
        self.logger.debug(f"Set config: {key}")

    def to_dict(self) -> Dict[str, Any]:
        return deepcopy(self._data)

    def clear(self):
        self._data = {}

    def _merge(self, update: Dict[str, Any]):
        _deep_update(self._data, update)


def _deep_update(base: Dict, update: Dict):
    """Recursively update nested dictionaries."""
    for key, value in update.items():
        if key in base and isinstance(base[key], dict) and isinstance(value, dict):
            _deep_update(base[key], value)
        else:
            base[key] = deepcopy(value)


def load_settings(filepath: Optional[str] = None, env_prefix: str = ENV_PREFIX) -> Settings:
    """
    Resolve settings from an optional file, then environment overrides.

    Environment variables use the flat setting names, e.g.
    ``SCHEMAGUARD_LOG_LEVEL`` or ``SCHEMAGUARD_ENABLE_STRUCTURED``.
    """
    data: Dict[str, Any] = {}

    if filepath is not None:
        manager = ConfigManager()
        data.update(manager.load_from_file(filepath, validate=False))

    for name in Settings.__dataclass_fields__:
        raw = os.environ.get(f"{env_prefix}{name.upper()}")
        if raw is None:
            continue
        try:
            data[name] = json.loads(raw)
        except json.JSONDecodeError:
            data[name] = raw

    return Settings.from_dict(data)


def configure_logging(settings: Optional[Settings] = None):
    """Apply logging settings to the package loggers."""
    settings = settings or Settings()
    LoggerFactory.configure(
        log_level=settings.log_level,
        log_dir=settings.log_dir,
        enable_console=settings.enable_console,
        enable_structured=settings.enable_structured,
        force=True
    )
    logger.debug(f"Logging configured: {settings.to_dict()}")
