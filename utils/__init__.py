"""
Utility modules for schemaguard.
"""
from .logging_config import get_logger, LoggerFactory, StructuredFormatter
from .exceptions import *

__all__ = [
    'get_logger',
    'LoggerFactory',
    'StructuredFormatter',
    'SchemaGuardError',
    'SchemaError',
    'SchemaDefinitionError',
    'DataError',
    'ValidationError',
    'ConfigurationError',
]
