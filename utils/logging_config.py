"""
Logging configuration with structured logging and rotating file handlers.
"""
import logging
import logging.handlers
import json
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, Optional
import traceback


class StructuredFormatter(logging.Formatter):
    """JSON formatter for structured logging."""

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            'timestamp': datetime.now(timezone.utc).isoformat(),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
            'module': record.module,
            'function': record.funcName,
            'line': record.lineno,
        }

        # Add exception info if present
        if record.exc_info:
            log_data['exception'] = {
                'type': record.exc_info[0].__name__,
                'message': str(record.exc_info[1]),
                'traceback': traceback.format_exception(*record.exc_info)
            }

        # Issue lists attached through ``extra={'issues': ...}``
        if hasattr(record, 'issues'):
            log_data['issues'] = record.issues

        return json.dumps(log_data, default=str)


class LoggerFactory:
    """Factory for creating configured loggers."""

    _loggers: Dict[str, logging.Logger] = {}
    _handlers: list = []
    _configured = False

    @classmethod
    def configure(
        cls,
        log_level: str = "WARNING",
        log_dir: Optional[str] = None,
        enable_console: bool = True,
        enable_structured: bool = False,
        max_bytes: int = 10 * 1024 * 1024,  # 10MB
        backup_count: int = 5,
        force: bool = False
    ):
        """
        Install handlers on the root logger, which every package logger propagates to.

        Args:
            log_level: Level applied to the root logger
            log_dir: Directory for rotating log files; no files when None
            enable_console: Attach a stderr handler
            enable_structured: Emit JSON lines instead of plain text
            max_bytes: Rotation threshold per file
            backup_count: Rotated files to keep
            force: Replace handlers installed by an earlier call
        """
        if cls._configured and not force:
            return

        root = cls._package_root()
        for handler in cls._handlers:
            root.removeHandler(handler)
            handler.close()
        cls._handlers = []

        root.setLevel(getattr(logging, log_level.upper()))

        if enable_console:
            console_handler = logging.StreamHandler(sys.stderr)
            if enable_structured:
                console_handler.setFormatter(StructuredFormatter())
            else:
                console_handler.setFormatter(
                    logging.Formatter(
                        '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
                    )
                )
            cls._attach(root, console_handler)

        if log_dir:
            log_path = Path(log_dir)
            log_path.mkdir(parents=True, exist_ok=True)

            file_handler = logging.handlers.RotatingFileHandler(
                log_path / "schemaguard.log",
                maxBytes=max_bytes,
                backupCount=backup_count
            )
            file_handler.setLevel(logging.DEBUG)
            if enable_structured:
                file_handler.setFormatter(StructuredFormatter())
            else:
                file_handler.setFormatter(
                    logging.Formatter(
                        '%(asctime)s - %(name)s - %(levelname)s - %(funcName)s:%(lineno)d - %(message)s'
                    )
                )
            cls._attach(root, file_handler)

            error_handler = logging.handlers.RotatingFileHandler(
                log_path / "errors.log",
                maxBytes=max_bytes,
                backupCount=backup_count
            )
            error_handler.setLevel(logging.ERROR)
            error_handler.setFormatter(
                logging.Formatter(
                    '%(asctime)s - %(name)s - %(levelname)s - %(funcName)s:%(lineno)d - %(message)s'
                )
            )
            cls._attach(root, error_handler)

        cls._configured = True

    @classmethod
    def get_logger(cls, name: str) -> logging.Logger:
        """Get or create a logger with the given name."""
        if name not in cls._loggers:
            cls._loggers[name] = logging.getLogger(name)

        return cls._loggers[name]

    @classmethod
    def reset(cls):
        """Detach every handler installed by ``configure``."""
        root = cls._package_root()
        for handler in cls._handlers:
            root.removeHandler(handler)
            handler.close()
        cls._handlers = []
        cls._configured = False

    @classmethod
    def _attach(cls, root: logging.Logger, handler: logging.Handler):
        root.addHandler(handler)
        cls._handlers.append(handler)

    @staticmethod
    def _package_root() -> logging.Logger:
        # All package loggers propagate to the root; handlers live there.
        return logging.getLogger()


# Convenience function
def get_logger(name: str) -> logging.Logger:
    """Get a configured logger."""
    return LoggerFactory.get_logger(name)
