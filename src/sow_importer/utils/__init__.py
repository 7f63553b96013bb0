"""Utilities package for the SoW importer.

This package provides:
- Centralized exception classes (exceptions.py)
- Structured logging utilities (logging.py)
"""

from sow_importer.utils.exceptions import (
    DocumentError,
    DocumentNotFoundError,
    EmptyInputError,
    ErrorCode,
    FileError,
    HTTPStatusMixin,
    SOWError,
    StructuringError,
    TemplateNotFoundError,
    UnsupportedFormatError,
    ValidationError,
)
from sow_importer.utils.logging import (
    LogContext,
    StructuredLogger,
    get_logger,
    get_request_id,
    set_request_id,
)

__all__ = [
    # Exceptions
    "DocumentError",
    "DocumentNotFoundError",
    "EmptyInputError",
    "ErrorCode",
    "FileError",
    "HTTPStatusMixin",
    "SOWError",
    "StructuringError",
    "TemplateNotFoundError",
    "UnsupportedFormatError",
    "ValidationError",
    # Logging
    "LogContext",
    "StructuredLogger",
    "get_logger",
    "get_request_id",
    "set_request_id",
]
