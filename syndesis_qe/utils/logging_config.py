"""
Structured Logging Configuration

Configures JSON-formatted logging with a run ID so that every line emitted
during one scenario run can be correlated.
"""

import logging
import sys
import uuid
from contextvars import ContextVar
from typing import Any, Dict, Optional

from pythonjsonlogger import jsonlogger

# Context variable for run ID
run_id_var: ContextVar[Optional[str]] = ContextVar("run_id", default=None)


class RunIdFilter(logging.Filter):
    """Add run ID to log records"""

    def filter(self, record: logging.LogRecord) -> bool:
        run_id = run_id_var.get()
        record.run_id = run_id or "N/A"
        return True


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """
    Custom JSON formatter for structured logging.
    Includes run ID, timestamp, and other metadata.
    """

    def add_fields(
        self,
        log_record: Dict[str, Any],
        record: logging.LogRecord,
        message_dict: Dict[str, Any],
    ) -> None:
        """Add custom fields to log record"""
        super().add_fields(log_record, record, message_dict)

        log_record["timestamp"] = self.formatTime(record, self.datefmt)
        log_record["level"] = record.levelname
        log_record["logger"] = record.name
        log_record["function"] = record.funcName
        log_record["line"] = record.lineno

        if hasattr(record, "run_id"):
            log_record["run_id"] = record.run_id

        if record.exc_info:
            log_record["exception"] = self.formatException(record.exc_info)


def setup_logging(log_level: str = "INFO") -> logging.Logger:
    """
    Configure suite logging with JSON formatting.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger("syndesis_qe")
    logger.setLevel(log_level)

    # Records still propagate so pytest's caplog and live logging see them
    logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(log_level)

    formatter = CustomJsonFormatter(
        "%(timestamp)s %(level)s %(name)s %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
    )
    console_handler.setFormatter(formatter)
    console_handler.addFilter(RunIdFilter())

    logger.addHandler(console_handler)

    return logger


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance with the specified name.

    Args:
        name: Logger name (typically module name)

    Returns:
        Logger instance
    """
    if name.startswith("syndesis_qe"):
        return logging.getLogger(name)
    return logging.getLogger(f"syndesis_qe.{name}")


def set_run_id(run_id: Optional[str] = None) -> str:
    """
    Set run ID for the current context.
    Generates a new UUID if not provided.

    Args:
        run_id: Optional run ID

    Returns:
        The run ID that was set
    """
    if run_id is None:
        run_id = str(uuid.uuid4())
    run_id_var.set(run_id)
    return run_id


def get_run_id() -> Optional[str]:
    """Get the current run ID."""
    return run_id_var.get()


def clear_run_id() -> None:
    """Clear the run ID for the current context"""
    run_id_var.set(None)
