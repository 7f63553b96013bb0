"""Upload format detection for spreadsheet imports.

Detects whether uploaded bytes are an Excel workbook or a CSV file from
magic bytes (file content signatures), falling back to the file extension
when content analysis is ambiguous.
"""

from pathlib import Path

import magic

from sow_importer.models import FormatInfo, GridFormat
from sow_importer.utils.exceptions import UnsupportedFormatError
from sow_importer.utils.logging import get_logger

logger = get_logger(__name__)

XLSX_MIME = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
CSV_MIME = "text/csv"

# Mapping of file extensions to MIME types
EXTENSION_TO_MIME: dict[str, str] = {
    ".xlsx": XLSX_MIME,
    ".csv": CSV_MIME,
}

MIME_TO_EXTENSION: dict[str, str] = {
    XLSX_MIME: ".xlsx",
    CSV_MIME: ".csv",
}

MIME_TO_GRID_FORMAT: dict[str, GridFormat] = {
    XLSX_MIME: GridFormat.XLSX,
    CSV_MIME: GridFormat.CSV,
}

SUPPORTED_MIME_TYPES: set[str] = set(MIME_TO_GRID_FORMAT.keys())


class FormatDetector:
    """Detects whether an upload can be decoded into a grid.

    Content detection wins when it yields a supported type. Generic results
    such as "application/zip" (xlsx is a zip container) or "text/plain"
    (CSV has no signature) defer to the extension.
    """

    def __init__(self) -> None:
        self._magic = magic.Magic(mime=True)

    def detect_from_content(
        self,
        content: bytes,
        filename: str | None = None,
    ) -> FormatInfo:
        """Detect format from file content bytes.

        Args:
            content: File content as bytes.
            filename: Optional filename for extension-based fallback.

        Returns:
            FormatInfo with the grid format to decode with.

        Raises:
            UnsupportedFormatError: If the format is not supported.
        """
        original_extension = None
        if filename:
            ext = Path(filename).suffix.lower()
            original_extension = ext if ext else None

        detected_mime = self._detect_mime_from_content(content)
        mime_from_extension = EXTENSION_TO_MIME.get(original_extension or "")

        detected_from_content = False
        original_ext_differs: str | None = None

        if detected_mime in SUPPORTED_MIME_TYPES:
            final_mime = detected_mime
            detected_from_content = True
            if mime_from_extension and mime_from_extension != detected_mime:
                original_ext_differs = original_extension
                logger.warning(
                    "File extension does not match detected MIME type",
                    extension=original_extension,
                    detected_mime=detected_mime,
                )
        elif mime_from_extension:
            final_mime = mime_from_extension
        else:
            logger.warning(
                "Rejected upload format",
                detected_mime=detected_mime,
                extension=original_extension,
            )
            raise UnsupportedFormatError(
                "Only Excel (.xlsx) and CSV files are allowed",
                detected_mime=detected_mime,
                filename=filename,
                details={"supported_extensions": self.get_supported_extensions()},
            )

        return FormatInfo(
            mime_type=final_mime,
            extension=MIME_TO_EXTENSION[final_mime],
            grid_format=MIME_TO_GRID_FORMAT[final_mime],
            detected_from_content=detected_from_content,
            original_extension=original_ext_differs,
        )

    def _detect_mime_from_content(self, content: bytes) -> str | None:
        """Detect MIME type from magic bytes, or None if detection fails."""
        if not content:
            return None

        try:
            detected: str = self._magic.from_buffer(content)
        except Exception as e:
            logger.warning(
                "Magic detection failed",
                error=str(e),
                error_type=type(e).__name__,
            )
            return None
        return self._normalize_mime_type(detected)

    @staticmethod
    def _normalize_mime_type(mime_type: str) -> str:
        normalizations: dict[str, str] = {
            "text/x-csv": CSV_MIME,
            "application/csv": CSV_MIME,
        }
        return normalizations.get(mime_type, mime_type)

    @staticmethod
    def get_supported_extensions() -> list[str]:
        """Get list of supported file extensions (with dots)."""
        return sorted(EXTENSION_TO_MIME.keys())
