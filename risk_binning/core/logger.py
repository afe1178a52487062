"""
Logging Utilities

Centralized logging setup for an analysis run: console output plus an
optional rotating log file inside the run directory.
"""

import logging
import sys
from pathlib import Path
from logging.handlers import RotatingFileHandler
from typing import Any, Dict, Optional


DEFAULT_FORMAT = "%(asctime)s | %(levelname)-5s | %(name)s | %(message)s"
DEFAULT_DATEFMT = "%Y-%m-%d %H:%M:%S"

# Libraries that are chatty at DEBUG
NOISY_LOGGERS = ("matplotlib", "PIL", "fontTools", "statsmodels")

_loggers: Dict[str, logging.Logger] = {}


def setup_logging(
    log_level: str = "INFO",
    log_file: Optional[str] = None,
    log_format: Optional[str] = None,
    console_level: Optional[str] = None,
    max_bytes: int = 10 * 1024 * 1024,
    backup_count: int = 3,
) -> None:
    """
    Configure the root logger for a run.

    Existing root handlers are replaced so repeated runs in one process
    do not duplicate output.

    Args:
        log_level: Root and file handler level.
        log_file: Path to a log file (optional).
        log_format: Log message format.
        console_level: Console handler level, defaults to ``log_level``.
        max_bytes: Rotation size for the file handler.
        backup_count: Number of rotated files to keep.
    """
    formatter = logging.Formatter(log_format or DEFAULT_FORMAT, datefmt=DEFAULT_DATEFMT)

    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, log_level.upper()))
    root_logger.handlers = []

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(getattr(logging, (console_level or log_level).upper()))
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            log_file,
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding="utf-8",
        )
        file_handler.setLevel(getattr(logging, log_level.upper()))
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)

    for logger_name in NOISY_LOGGERS:
        logging.getLogger(logger_name).setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """
    Get or create a logger with the given name.

    Args:
        name: Logger name (typically module or class name)

    Returns:
        Logger instance
    """
    if name not in _loggers:
        _loggers[name] = logging.getLogger(name)
    return _loggers[name]


class LoggerMixin:
    """
    Mixin class that provides a ``logger`` property named after the class.

    Usage:
        class DataValidator(LoggerMixin):
            def validate(self, df):
                self.logger.info("Validating")
    """

    @property
    def logger(self) -> logging.Logger:
        if not hasattr(self, '_logger'):
            self._logger = get_logger(self.__class__.__name__)
        return self._logger


class PipelineLogger:
    """
    Structured logger for pipeline execution.

    Prefixes every message with the run context and offers helpers for
    step boundaries, metrics and table sizes.
    """

    def __init__(self, name: str):
        self.logger = get_logger(name)
        self._context: Dict[str, Any] = {}

    def set_context(self, **kwargs) -> None:
        """Set logging context (e.g., run_id)."""
        self._context.update(kwargs)

    def clear_context(self) -> None:
        self._context = {}

    def _format_message(self, message: str) -> str:
        if self._context:
            context_str = " ".join(f"{k}={v}" for k, v in self._context.items())
            return f"[{context_str}] {message}"
        return message

    def info(self, message: str, **kwargs) -> None:
        self.logger.info(self._format_message(message), **kwargs)

    def debug(self, message: str, **kwargs) -> None:
        self.logger.debug(self._format_message(message), **kwargs)

    def warning(self, message: str, **kwargs) -> None:
        self.logger.warning(self._format_message(message), **kwargs)

    def error(self, message: str, **kwargs) -> None:
        self.logger.error(self._format_message(message), **kwargs)

    def step_start(self, step_name: str) -> None:
        """Log the start of a pipeline step."""
        self.info(f"{'=' * 20} Starting: {step_name} {'=' * 20}")

    def step_complete(self, step_name: str, duration: Optional[float] = None) -> None:
        """Log the completion of a pipeline step."""
        if duration is not None:
            self.info(f"{'=' * 20} Completed: {step_name} ({duration:.2f}s) {'=' * 20}")
        else:
            self.info(f"{'=' * 20} Completed: {step_name} {'=' * 20}")

    def metric(self, name: str, value: Any) -> None:
        self.info(f"METRIC | {name}: {value}")

    def data_stats(self, name: str, count: int, columns: Optional[int] = None) -> None:
        """Log table size."""
        if columns:
            self.info(f"DATA | {name}: {count:,} rows, {columns} columns")
        else:
            self.info(f"DATA | {name}: {count:,} rows")
