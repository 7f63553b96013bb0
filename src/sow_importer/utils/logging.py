"""Structured logging utilities for the SoW importer.

This module provides:
- Request ID tracking using contextvars for correlation across an import
- Structured logging with consistent format and metadata
- Performance metrics logging helpers

Usage:
    from sow_importer.utils.logging import (
        get_logger,
        set_request_id,
        LogContext,
    )

    logger = get_logger(__name__)

    # Set request ID for correlation
    set_request_id("abc-123")

    # Log with context
    with LogContext(document_id=42, operation="import"):
        logger.info("Structuring grid")

    # Time an operation
    with timed_operation(logger, "structure") as metrics:
        metrics.rows_scanned = 120
"""

import logging
from collections.abc import Generator
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

# Context variables for request tracking
_request_id_var: ContextVar[str | None] = ContextVar("request_id", default=None)
_document_id_var: ContextVar[str | None] = ContextVar("document_id", default=None)
_extra_context_var: ContextVar[dict[str, Any] | None] = ContextVar(
    "extra_context", default=None
)


def get_request_id() -> str | None:
    """Get the current request ID from context.

    Returns:
        The current request ID or None if not set.
    """
    return _request_id_var.get()


def set_request_id(request_id: str | None) -> None:
    """Set the request ID in context.

    Args:
        request_id: The request ID to set, or None to clear.
    """
    _request_id_var.set(request_id)


def get_document_id() -> str | None:
    """Get the current document ID from context."""
    return _document_id_var.get()


def set_document_id(document_id: str | int | None) -> None:
    """Set the document ID in context.

    Args:
        document_id: The document ID to set, or None to clear.
    """
    _document_id_var.set(str(document_id) if document_id is not None else None)


def get_extra_context() -> dict[str, Any]:
    """Get additional context from context vars.

    Returns:
        Dictionary of extra context values.
    """
    ctx = _extra_context_var.get()
    return ctx if ctx is not None else {}


def set_extra_context(context: dict[str, Any]) -> None:
    """Set additional context in context vars."""
    _extra_context_var.set(context)


def clear_context() -> None:
    """Clear all context variables."""
    _request_id_var.set(None)
    _document_id_var.set(None)
    _extra_context_var.set(None)


@dataclass
class PerformanceMetrics:
    """Container for performance metrics of an import step.

    Attributes:
        operation: Name of the operation being measured.
        start_time: When the operation started.
        end_time: When the operation ended.
        duration_seconds: Duration in seconds.
        rows_scanned: Number of grid rows scanned.
        chapters_produced: Number of chapters in the result.
        subchapters_produced: Number of subchapters in the result.
        custom_metrics: Additional custom metrics.
    """

    operation: str
    start_time: datetime = field(default_factory=lambda: datetime.now(UTC))
    end_time: datetime | None = None
    duration_seconds: float = 0.0
    rows_scanned: int = 0
    chapters_produced: int = 0
    subchapters_produced: int = 0
    custom_metrics: dict[str, Any] = field(default_factory=dict)

    def finish(self) -> None:
        """Mark the operation as complete and calculate duration."""
        self.end_time = datetime.now(UTC)
        self.duration_seconds = (self.end_time - self.start_time).total_seconds()

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for logging.

        Returns:
            Dictionary with the non-zero metrics.
        """
        result: dict[str, Any] = {
            "operation": self.operation,
            "duration_seconds": self.duration_seconds,
        }
        if self.rows_scanned > 0:
            result["rows_scanned"] = self.rows_scanned
        if self.chapters_produced > 0:
            result["chapters_produced"] = self.chapters_produced
        if self.subchapters_produced > 0:
            result["subchapters_produced"] = self.subchapters_produced
        if self.custom_metrics:
            result["custom_metrics"] = self.custom_metrics
        return result


class StructuredLogFormatter(logging.Formatter):
    """Log formatter that prefixes records with context variables.

    Adds request_id, document_id and any extra context to each record when
    available.
    """

    def format(self, record: logging.LogRecord) -> str:
        """Format the log record with context information.

        Args:
            record: The log record to format.

        Returns:
            Formatted log message string.
        """
        prefix_parts = []
        request_id = get_request_id()
        if request_id:
            prefix_parts.append(f"request_id={request_id}")
        document_id = get_document_id()
        if document_id:
            prefix_parts.append(f"document_id={document_id}")

        for key, value in get_extra_context().items():
            prefix_parts.append(f"{key}={value}")

        prefix = f"[{' '.join(prefix_parts)}] " if prefix_parts else ""

        original_msg = record.msg
        record.msg = f"{prefix}{original_msg}"
        result = super().format(record)
        record.msg = original_msg

        return result


class StructuredLogger:
    """Logger wrapper that appends structured key-value pairs to messages.

    Example:
        logger.info("Document stored", document_id=3, chapters=5)
        # -> "Document stored | document_id=3, chapters=5"
    """

    def __init__(self, name: str) -> None:
        """Initialize the structured logger.

        Args:
            name: Logger name (typically __name__ of the module).
        """
        self._logger = logging.getLogger(name)
        self._name = name

    @property
    def logger(self) -> logging.Logger:
        """Access the underlying Python logger."""
        return self._logger

    def _build_message(self, message: str, **kwargs: Any) -> str:
        if not kwargs:
            return message

        parts = [f"{k}={v}" for k, v in kwargs.items()]
        return f"{message} | {', '.join(parts)}"

    def debug(self, message: str, **kwargs: Any) -> None:
        """Log a debug message."""
        self._logger.debug(self._build_message(message, **kwargs))

    def info(self, message: str, **kwargs: Any) -> None:
        """Log an info message."""
        self._logger.info(self._build_message(message, **kwargs))

    def warning(self, message: str, **kwargs: Any) -> None:
        """Log a warning message."""
        self._logger.warning(self._build_message(message, **kwargs))

    def error(self, message: str, exc_info: bool = False, **kwargs: Any) -> None:
        """Log an error message.

        Args:
            message: Log message.
            exc_info: Whether to include exception info.
            **kwargs: Additional structured data.
        """
        self._logger.error(self._build_message(message, **kwargs), exc_info=exc_info)

    def exception(self, message: str, **kwargs: Any) -> None:
        """Log an exception with traceback."""
        self._logger.exception(self._build_message(message, **kwargs))

    def log_performance(self, metrics: PerformanceMetrics) -> None:
        """Log performance metrics.

        Args:
            metrics: Performance metrics to log.
        """
        self.info(
            f"Performance: {metrics.operation}",
            **metrics.to_dict(),
        )

    def log_import_result(
        self,
        filename: str,
        success: bool,
        rows: int,
        chapters: int,
        document_id: int | None = None,
    ) -> None:
        """Log completion of a spreadsheet import.

        Args:
            filename: Uploaded filename.
            success: Whether the import produced a stored document.
            rows: Number of grid rows read.
            chapters: Number of chapters produced.
            document_id: ID of the stored document, if any.
        """
        kwargs: dict[str, Any] = {
            "filename": filename,
            "success": success,
            "rows": rows,
            "chapters": chapters,
        }
        if document_id is not None:
            kwargs["document_id"] = document_id

        level = logging.INFO if success else logging.ERROR
        self._logger.log(level, self._build_message("Import completed", **kwargs))


class LogContext:
    """Context manager for adding temporary context to logs.

    Usage:
        with LogContext(document_id=12, operation="export"):
            logger.info("Rendering...")  # includes document_id and operation
    """

    def __init__(self, **kwargs: Any) -> None:
        self._new_context = kwargs
        self._old_context: dict[str, Any] = {}
        self._old_document_id: str | None = None
        self._old_request_id: str | None = None

    def __enter__(self) -> "LogContext":
        """Enter the context, saving old values and setting new ones."""
        self._old_context = get_extra_context().copy()
        self._old_document_id = get_document_id()
        self._old_request_id = get_request_id()

        new_context = dict(self._new_context)
        document_id = new_context.pop("document_id", None)
        request_id = new_context.pop("request_id", None)

        if document_id is not None:
            set_document_id(document_id)
        if request_id is not None:
            set_request_id(request_id)

        merged = self._old_context.copy()
        merged.update(new_context)
        set_extra_context(merged)

        return self

    def __exit__(self, *args: Any) -> None:
        """Exit the context, restoring old values."""
        set_extra_context(self._old_context)
        _document_id_var.set(self._old_document_id)
        set_request_id(self._old_request_id)


@contextmanager
def timed_operation(
    logger: StructuredLogger,
    operation: str,
) -> Generator[PerformanceMetrics, None, None]:
    """Context manager for timing operations.

    Usage:
        with timed_operation(logger, "structure") as metrics:
            metrics.rows_scanned = 40

        # Logs: "Performance: structure | operation=structure, ..."

    Args:
        logger: Logger to use for output.
        operation: Name of the operation.

    Yields:
        PerformanceMetrics instance for tracking.
    """
    metrics = PerformanceMetrics(operation=operation)
    try:
        yield metrics
    finally:
        metrics.finish()
        logger.log_performance(metrics)


def configure_logging(
    level: int | str = logging.INFO,
    format_string: str | None = None,
    use_structured_formatter: bool = True,
) -> None:
    """Configure logging for the application.

    Args:
        level: Log level (int or string like "INFO").
        format_string: Custom format string (uses default if None).
        use_structured_formatter: Whether to use the structured formatter.
    """
    if isinstance(level, str):
        level = getattr(logging, level.upper())

    if format_string is None:
        format_string = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler()
    handler.setLevel(level)

    formatter: logging.Formatter
    if use_structured_formatter:
        formatter = StructuredLogFormatter(format_string)
    else:
        formatter = logging.Formatter(format_string)

    handler.setFormatter(formatter)
    root_logger.addHandler(handler)


def get_logger(name: str) -> StructuredLogger:
    """Get a structured logger for a module.

    Args:
        name: Logger name (typically __name__).

    Returns:
        StructuredLogger instance.

    Example:
        logger = get_logger(__name__)
        logger.info("Grid read", rows=42, grid_format="xlsx")
    """
    return StructuredLogger(name)
