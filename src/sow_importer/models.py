"""Pydantic models for structured documents and API requests/responses."""

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field

from sow_importer.utils.exceptions import ErrorCode


class Subchapter(BaseModel):
    """A titled section nested inside a chapter."""

    id: str = Field(..., description="'<chapterId>.<n>', n counted per chapter")
    title: str = Field(..., description="Title with its numbering prefix removed")
    content: str = Field(default="", description="Free text for the subchapter")


class Chapter(BaseModel):
    """A top-level section of a structured document."""

    id: str = Field(..., description="1-based position in encounter order")
    title: str = Field(..., description="Chapter title as found in the sheet")
    content: str = Field(
        default="", description="Accumulated free-text lines, newline separated"
    )
    subchapters: list[Subchapter] = Field(default_factory=list)


class DocumentContent(BaseModel):
    """Nested chapter tree stored as a document's content."""

    chapters: list[Chapter] = Field(default_factory=list)


class StructuredDocument(BaseModel):
    """Result of structuring a tabular grid."""

    title: str
    description: str
    content: DocumentContent


class DocumentType(str, Enum):
    """Kind of stored document."""

    SOW = "sow"
    EFFORT_ESTIMATION = "effort-estimation"


class DocumentStatus(str, Enum):
    """Editorial status of a stored document."""

    DRAFT = "draft"
    REVIEW = "review"
    PUBLISHED = "published"


class DocumentRecord(BaseModel):
    """A document as held by the document store."""

    id: int
    title: str
    description: str | None = None
    content: dict[str, Any] = Field(
        ..., description="Opaque nested content, usually {'chapters': [...]}"
    )
    type: DocumentType = DocumentType.SOW
    status: DocumentStatus = DocumentStatus.DRAFT
    author_id: int
    template_id: int | None = None
    created_at: datetime
    updated_at: datetime


class DocumentUpdate(BaseModel):
    """Partial update for a stored document; unset fields are left alone."""

    title: str | None = None
    description: str | None = None
    content: dict[str, Any] | None = None
    status: DocumentStatus | None = None
    template_id: int | None = None


class TemplateCreate(BaseModel):
    """Request body for creating a reusable document template."""

    name: str = Field(..., min_length=1)
    description: str | None = None
    content: dict[str, Any] = Field(
        ..., description="Skeleton content, usually {'chapters': [...]}"
    )
    type: DocumentType = DocumentType.SOW
    author_id: int


class TemplateRecord(TemplateCreate):
    """A template as held by the template store."""

    id: int
    usage_count: int = 0
    created_at: datetime


class StructureRequest(BaseModel):
    """Request body for structuring an in-memory grid."""

    rows: list[list[str | int | float | bool | None] | None] | None = Field(
        default=None,
        description="Row-major grid; row 0 is the header row",
    )


class HealthResponse(BaseModel):
    """Response model for health check endpoint."""

    status: str
    timestamp: str
    version: str


class ChapterEstimate(BaseModel):
    """Estimated effort for one chapter."""

    chapter_id: str
    title: str
    hours: int = 0
    included: bool = False


class EffortEstimationResponse(BaseModel):
    """Effort estimation seeded from a stored document's chapters."""

    document_id: int
    chapters: list[ChapterEstimate]
    total_hours: int
    working_days: int
    shares: dict[str, int] = Field(
        default_factory=dict,
        description="Chapter id to percentage of total included hours",
    )


class GridFormat(str, Enum):
    """Tabular formats that can be imported."""

    XLSX = "xlsx"
    CSV = "csv"


class FormatInfo(BaseModel):
    """Upload format detection result."""

    mime_type: str = Field(..., description="MIME type of the upload")
    extension: str = Field(..., description="Canonical extension including the dot")
    grid_format: GridFormat = Field(..., description="Decoder to use for the upload")
    detected_from_content: bool = Field(
        default=False,
        description="Whether format was detected from file content (magic bytes)",
    )
    original_extension: str | None = Field(
        default=None,
        description="Original file extension if different from detected format",
    )


class ErrorDetail(BaseModel):
    """Error detail model for API error responses."""

    detail: str = Field(..., description="Human-readable error message")
    error_code: str | None = Field(
        default=None,
        description="Machine-readable error code (e.g., 'E2001')",
    )
    details: dict[str, Any] | None = Field(
        default=None,
        description="Additional error details for debugging",
    )
    request_id: str | None = Field(
        default=None,
        description="Request ID for error correlation",
    )

    @classmethod
    def from_error_code(
        cls,
        error_code: ErrorCode,
        detail: str,
        details: dict[str, Any] | None = None,
        request_id: str | None = None,
    ) -> "ErrorDetail":
        """Create an ErrorDetail from an ErrorCode enum value."""
        return cls(
            detail=detail,
            error_code=error_code.value,
            details=details,
            request_id=request_id,
        )
