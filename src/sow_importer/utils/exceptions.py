"""Centralized exception classes for the SoW importer.

This module provides a hierarchy of custom exceptions with error codes,
HTTP status code mapping, and structured error details for consistent
error handling throughout the application.

Exception Hierarchy:
    SOWError (base)
    ├── FileError
    │   ├── FileTooLargeError
    │   ├── UnsupportedFormatError
    │   └── FileReadError
    ├── StructuringError
    │   └── EmptyInputError
    ├── DocumentError
    │   ├── DocumentNotFoundError
    │   └── TemplateNotFoundError
    └── ValidationError

Error Codes:
    All errors have a unique error code (e.g., "E1001") that can be used
    for programmatic error handling and documentation.
"""

from enum import Enum
from typing import Any


class ErrorCode(str, Enum):
    """Enumeration of all error codes used in the application.

    Error codes are grouped by category:
    - E1xxx: File/upload errors
    - E2xxx: Import and structuring errors
    - E3xxx: Document store errors
    - E9xxx: Internal/unexpected errors
    """

    # File errors (E1xxx)
    FILE_TOO_LARGE = "E1002"
    UNSUPPORTED_FORMAT = "E1003"
    FILE_READ_ERROR = "E1004"

    # Structuring errors (E2xxx)
    EMPTY_INPUT = "E2001"
    STRUCTURING_FAILED = "E2002"
    INVALID_REQUEST = "E2003"

    # Document errors (E3xxx)
    DOCUMENT_NOT_FOUND = "E3001"
    DOCUMENT_UPDATE_FAILED = "E3002"
    TEMPLATE_NOT_FOUND = "E3003"

    # Internal errors (E9xxx)
    INTERNAL_ERROR = "E9001"


class HTTPStatusMixin:
    """Mixin that provides HTTP status code for exceptions.

    Subclasses should set the `http_status` class attribute.
    """

    http_status: int = 500

    def get_http_status(self) -> int:
        """Get the HTTP status code for this exception.

        Returns:
            HTTP status code appropriate for this error.
        """
        return self.http_status


class SOWError(Exception, HTTPStatusMixin):
    """Base exception for all SoW importer errors.

    Attributes:
        message: Human-readable error message.
        error_code: Unique error code from ErrorCode enum.
        details: Optional dictionary with additional error details.
        http_status: HTTP status code for API responses (default 500).
    """

    http_status: int = 500

    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.INTERNAL_ERROR,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error description.
            error_code: Error code from ErrorCode enum.
            details: Optional additional details about the error.
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert the exception to a dictionary for API responses.

        Returns:
            Dictionary with error information.
        """
        result: dict[str, Any] = {
            "error_code": self.error_code.value,
            "message": self.message,
        }
        if self.details:
            result["details"] = self.details
        return result

    def __str__(self) -> str:
        """Return string representation with error code."""
        return f"[{self.error_code.value}] {self.message}"


# =============================================================================
# File Errors (E1xxx)
# =============================================================================


class FileError(SOWError):
    """Base class for uploaded file errors."""

    http_status: int = 400

    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.FILE_READ_ERROR,
        filename: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize with filename information.

        Args:
            message: Error message.
            error_code: Error code.
            filename: Name of the problematic file.
            details: Additional details.
        """
        details = details or {}
        if filename:
            details["filename"] = filename
        super().__init__(message, error_code, details)
        self.filename = filename


class FileTooLargeError(FileError):
    """Raised when an upload exceeds the maximum allowed size."""

    http_status: int = 413

    def __init__(
        self,
        file_size: int,
        max_size: int,
        filename: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize with size information.

        Args:
            file_size: Actual file size in bytes.
            max_size: Maximum allowed size in bytes.
            filename: Optional filename.
            details: Additional details.
        """
        details = details or {}
        details["file_size_bytes"] = file_size
        details["max_size_bytes"] = max_size
        message = (
            f"File size ({file_size} bytes) exceeds maximum "
            f"allowed size ({max_size} bytes)"
        )
        super().__init__(
            message=message,
            error_code=ErrorCode.FILE_TOO_LARGE,
            filename=filename,
            details=details,
        )
        self.file_size = file_size
        self.max_size = max_size


class UnsupportedFormatError(FileError):
    """Raised when an upload is neither an Excel workbook nor a CSV file."""

    http_status: int = 400

    def __init__(
        self,
        message: str,
        detected_mime: str | None = None,
        filename: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize with format information.

        Args:
            message: Error message.
            detected_mime: MIME type that was detected.
            filename: Optional filename.
            details: Additional details.
        """
        details = details or {}
        if detected_mime:
            details["detected_mime_type"] = detected_mime
        super().__init__(
            message=message,
            error_code=ErrorCode.UNSUPPORTED_FORMAT,
            filename=filename,
            details=details,
        )
        self.detected_mime = detected_mime


class FileReadError(FileError):
    """Raised when a workbook or CSV file cannot be decoded into rows."""

    def __init__(
        self,
        message: str,
        filename: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            error_code=ErrorCode.FILE_READ_ERROR,
            filename=filename,
            details=details,
        )


# =============================================================================
# Structuring Errors (E2xxx)
# =============================================================================


class StructuringError(SOWError):
    """Base class for errors raised while structuring a grid."""

    http_status: int = 422

    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.STRUCTURING_FAILED,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, error_code, details)


class EmptyInputError(StructuringError):
    """Raised when the grid to structure is absent or has no rows.

    This is the only error the structurer raises; every non-empty grid
    produces a document.
    """

    def __init__(
        self,
        message: str = "Empty Excel file",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            error_code=ErrorCode.EMPTY_INPUT,
            details=details,
        )


# =============================================================================
# Document Errors (E3xxx)
# =============================================================================


class DocumentError(SOWError):
    """Base class for document store errors."""

    http_status: int = 400

    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.DOCUMENT_UPDATE_FAILED,
        document_id: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize with document ID.

        Args:
            message: Error message.
            error_code: Error code.
            document_id: ID of the affected document.
            details: Additional details.
        """
        details = details or {}
        if document_id is not None:
            details["document_id"] = document_id
        super().__init__(message, error_code, details)
        self.document_id = document_id


class DocumentNotFoundError(DocumentError):
    """Raised when a document ID is not in the store."""

    http_status: int = 404

    def __init__(
        self,
        document_id: int,
        message: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        message = message or f"Document not found: {document_id}"
        super().__init__(
            message=message,
            error_code=ErrorCode.DOCUMENT_NOT_FOUND,
            document_id=document_id,
            details=details,
        )


class TemplateNotFoundError(DocumentError):
    """Raised when a template ID is not in the template store."""

    http_status: int = 404

    def __init__(
        self,
        template_id: int,
        details: dict[str, Any] | None = None,
    ) -> None:
        details = details or {}
        details["template_id"] = template_id
        super().__init__(
            message=f"Template not found: {template_id}",
            error_code=ErrorCode.TEMPLATE_NOT_FOUND,
            details=details,
        )
        self.template_id = template_id


# =============================================================================
# Validation Errors
# =============================================================================


class ValidationError(SOWError):
    """Raised when request input fails validation."""

    http_status: int = 400

    def __init__(
        self,
        message: str,
        field: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize with the offending field.

        Args:
            message: Error message.
            field: Name of the field that failed validation.
            details: Additional details.
        """
        details = details or {}
        if field:
            details["field"] = field
        super().__init__(message, ErrorCode.INVALID_REQUEST, details)
        self.field = field
