import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Dict

from .config import Config
from .exceptions import LoggerError

DEFAULT_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s - method:%(method)s - url:%(url)s'

class _RequestContextFilter(logging.Filter):
    """Fill in request context for records emitted by plain module loggers"""

    def filter(self, record: logging.LogRecord) -> bool:
        for field in ("method", "url"):
            if not hasattr(record, field):
                setattr(record, field, "-")
        return True

class Logger:
    """
    Configures the ``requestbuilder`` package logger.

    Module loggers under the package (``logging.getLogger(__name__)``)
    propagate to it, so one instance wires file and console output for the
    builder, the response handler and the client alike.
    """
    _loggers: Dict[str, logging.Logger] = {}

    def __init__(self, config: Config):
        """Initialize logger with configuration"""
        self.config = config

        logger_name = "requestbuilder"
        if logger_name in self._loggers:
            self.logger = self._loggers[logger_name]
            for handler in self.logger.handlers[:]:
                self.logger.removeHandler(handler)
                handler.close()
        else:
            self.logger = logging.getLogger(logger_name)
            self._loggers[logger_name] = self.logger

        level = self._get_log_level()
        self.logger.setLevel(level)

        self.formatter = logging.Formatter(
            self.config.get("logging.format") or DEFAULT_FORMAT
        )
        self._context_filter = _RequestContextFilter()

        log_file = self.config.get("logging.file")
        if log_file:
            try:
                path = Path(log_file)
                if not path.parent.exists() and str(path.parent) != ".":
                    try:
                        path.parent.mkdir(parents=True, exist_ok=True)
                    except (OSError, PermissionError):
                        raise LoggerError(f"Cannot create log directory: {path.parent}")

                max_size = self.config.get("logging.max_size", 1024 * 1024)  # 1MB default
                backup_count = self.config.get("logging.backup_count", 3)

                handler = RotatingFileHandler(
                    str(path),
                    maxBytes=max_size,
                    backupCount=backup_count
                )
                self._attach(handler)
            except LoggerError:
                raise
            except Exception as e:
                raise LoggerError(f"Failed to setup log file: {str(e)}")

        if self.config.get("logging.console_output", False):
            self._attach(logging.StreamHandler())

    def _attach(self, handler: logging.Handler) -> None:
        handler.setFormatter(self.formatter)
        handler.addFilter(self._context_filter)
        self.logger.addHandler(handler)

    def _get_log_level(self) -> int:
        """Convert string log level to logging constant"""
        level_name = str(self.config.get("logging.level", "INFO")).upper()
        level = logging.getLevelName(level_name)
        if not isinstance(level, int):
            raise LoggerError(f"Invalid log level: {level_name}")
        return level
