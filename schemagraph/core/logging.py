"""Structured logging configuration for schemagraph."""

import logging
import sys
from typing import Optional

try:
    from json_log_formatter import JSONFormatter
except ImportError:
    JSONFormatter = None  # type: ignore


def configure_logging(
    level: str = "INFO",
    json_format: bool = False,
    subject: Optional[str] = None,
) -> None:
    """Configure logging for schemagraph.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_format: If True, use JSON format; otherwise use normal format
        subject: Optional top-level build target to include in every record
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    logger = logging.getLogger("schemagraph")
    logger.setLevel(log_level)
    logger.handlers.clear()

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(log_level)

    if json_format:
        if JSONFormatter is None:
            raise ImportError(
                "json-log-formatter is required for JSON logging. "
                "Install it with: pip install json-log-formatter"
            )
        formatter = JSONFormatter()
    else:
        formatter = StructuredFormatter()

    handler.setFormatter(formatter)
    if subject:
        handler.addFilter(_SubjectFilter(subject))
    logger.addHandler(handler)


class _SubjectFilter(logging.Filter):
    def __init__(self, subject: str) -> None:
        super().__init__()
        self.subject = subject

    def filter(self, record: logging.LogRecord) -> bool:
        record.build_subject = self.subject
        return True


class StructuredFormatter(logging.Formatter):
    """Structured formatter that adds context to log messages."""

    def format(self, record: logging.LogRecord) -> str:
        context = getattr(record, "context", {})

        parts = [f"[{record.levelname}]"]

        if hasattr(record, "build_subject"):
            parts.append(f"subject={record.build_subject}")

        for key, value in context.items():
            parts.append(f"{key}={value}")

        parts.append(record.getMessage())

        return " ".join(parts)
