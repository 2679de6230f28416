"""
Custom exception hierarchy for schemaguard.
"""
from typing import Any, Dict, Optional


class SchemaGuardError(Exception):
    """Base exception for all schemaguard errors."""

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for logging/serialization."""
        return {
            'error_type': self.__class__.__name__,
            'error_code': self.error_code,
            'message': self.message,
            'details': self.details
        }


# Schema Exceptions
class SchemaError(SchemaGuardError):
    """Base exception for schema graph errors."""
    pass


class SchemaDefinitionError(SchemaError):
    """Raised when a validator is built or wired incorrectly."""
    pass


# Data Exceptions
class DataError(SchemaGuardError):
    """Base exception for data errors."""
    pass


class ValidationError(DataError):
    """Raised when a value is rejected by a validator."""

    def __init__(self, message: str, issues=None, error_code: Optional[str] = None):
        self.issues = issues if issues is not None else ()
        details = {}
        if issues is not None:
            details['issues'] = issues.to_list()
        super().__init__(message, error_code=error_code, details=details)


# Configuration Exceptions
class ConfigurationError(SchemaGuardError):
    """Raised when configuration is invalid."""
    pass
