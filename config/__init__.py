"""
Configuration management for schemaguard.
"""
from .config_manager import (
    ConfigManager,
    Settings,
    SETTINGS_SCHEMA,
    configure_logging,
    load_settings
)

__all__ = [
    'ConfigManager',
    'Settings',
    'SETTINGS_SCHEMA',
    'configure_logging',
    'load_settings',
]
