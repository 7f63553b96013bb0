"""FastAPI application for SoW spreadsheet import and export."""

import re
import uuid
from contextlib import asynccontextmanager
from dataclasses import asdict
from datetime import UTC, datetime
from functools import partial
from typing import Annotated, Any

import anyio
from fastapi import (
    FastAPI,
    File,
    Form,
    HTTPException,
    Request,
    Response,
    UploadFile,
    status,
)
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse

from sow_importer.config import settings, validate_settings_on_startup
from sow_importer.models import (
    DocumentRecord,
    DocumentUpdate,
    EffortEstimationResponse,
    ErrorDetail,
    HealthResponse,
    StructuredDocument,
    StructureRequest,
    TemplateCreate,
    TemplateRecord,
)
from sow_importer.output.outline import render_markdown
from sow_importer.output.pdf_renderer import PdfRenderer
from sow_importer.services.document_store import DocumentStore
from sow_importer.services.effort_estimator import seed_estimation, summarize
from sow_importer.services.format_detector import FormatDetector
from sow_importer.services.grid_reader import GridReader, GridReadOptions
from sow_importer.services.structurer import structure
from sow_importer.services.template_store import TemplateStore
from sow_importer.utils.exceptions import (
    ErrorCode,
    FileTooLargeError,
    SOWError,
    ValidationError,
)
from sow_importer.utils.logging import (
    LogContext,
    clear_context,
    configure_logging,
    get_logger,
    get_request_id,
    set_request_id,
)

VERSION = "0.1.0"

# Configure structured logging using settings
configure_logging(
    level=settings.log_level_int,
    use_structured_formatter=True,
)
logger = get_logger(__name__)


def _attachment_filename(title: str) -> str:
    """Header-safe PDF filename derived from a document title."""
    safe = re.sub(r"[^A-Za-z0-9 ._-]", "_", title).strip()
    return f"{safe or 'document'}.pdf"


def _import_upload(
    app: FastAPI, content: bytes, *, filename: str, author_id: int
) -> DocumentRecord:
    """Detect, decode, structure and store an upload.

    Runs in a worker thread; workbook decoding is CPU bound.
    """
    format_info = app.state.format_detector.detect_from_content(
        content, filename=filename
    )
    with LogContext(filename=filename, grid_format=format_info.grid_format.value):
        grid = app.state.grid_reader.read_bytes(
            content,
            format_info.grid_format,
            GridReadOptions(max_rows=settings.max_import_rows),
            filename=filename,
        )
        structured = structure(
            grid.rows, metadata_scan_rows=settings.metadata_scan_rows
        )
        store: DocumentStore = app.state.document_store
        record = store.create_from_structure(structured, author_id=author_id)
        logger.log_import_result(
            filename=filename,
            success=True,
            rows=grid.row_count,
            chapters=len(structured.content.chapters),
            document_id=record.id,
        )
    return record


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> Any:
        logger.info("SoW importer starting", documents=len(app.state.document_store))
        try:
            yield
        finally:
            app.state.document_store.clear()
            app.state.template_store.clear()

    app = FastAPI(
        title="SoW Importer API",
        description=(
            "Imports Statement-of-Work spreadsheets into structured chapter "
            "documents and exports them as Markdown or PDF."
        ),
        version=VERSION,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )
    app.state.document_store = DocumentStore()
    app.state.template_store = TemplateStore()
    app.state.format_detector = FormatDetector()
    app.state.grid_reader = GridReader()
    app.state.pdf_renderer = PdfRenderer()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    validate_settings_on_startup(settings)

    @app.middleware("http")
    async def request_id_middleware(request: Request, call_next: Any) -> Any:
        """Assign a request ID, expose it in logs and echo it in the response."""
        request_id = request.headers.get("X-Request-ID", str(uuid.uuid4()))
        set_request_id(request_id)
        request.state.request_id = request_id

        try:
            response = await call_next(request)
            response.headers["X-Request-ID"] = request_id
            return response
        finally:
            clear_context()

    @app.exception_handler(SOWError)
    async def sow_exception_handler(request: Request, exc: SOWError) -> JSONResponse:
        """Render application errors as ErrorDetail with their HTTP status."""
        request_id = getattr(request.state, "request_id", get_request_id())
        logger.error(
            f"SoW Error: {exc.message}",
            error_code=exc.error_code.value,
            http_status=exc.http_status,
        )
        return JSONResponse(
            status_code=exc.http_status,
            content=ErrorDetail(
                detail=exc.message,
                error_code=exc.error_code.value,
                details=exc.details if exc.details else None,
                request_id=request_id,
            ).model_dump(exclude_none=True),
        )

    @app.exception_handler(HTTPException)
    async def http_exception_handler(
        request: Request, exc: HTTPException
    ) -> JSONResponse:
        request_id = getattr(request.state, "request_id", get_request_id())
        logger.warning(
            f"HTTP Error: {exc.detail}",
            status_code=exc.status_code,
        )
        return JSONResponse(
            status_code=exc.status_code,
            content=ErrorDetail(
                detail=str(exc.detail),
                request_id=request_id,
            ).model_dump(exclude_none=True),
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(
        request: Request, exc: Exception
    ) -> JSONResponse:
        """Catch-all handler that hides internals unless debug is enabled."""
        request_id = getattr(request.state, "request_id", get_request_id())
        logger.exception(
            f"Unexpected error: {type(exc).__name__}",
            error_type=type(exc).__name__,
        )
        if settings.debug:
            detail = f"Internal server error: {type(exc).__name__}: {exc}"
        else:
            detail = "Internal server error. Please try again later."

        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=ErrorDetail.from_error_code(
                ErrorCode.INTERNAL_ERROR, detail, request_id=request_id
            ).model_dump(exclude_none=True),
        )

    @app.get("/health", response_model=HealthResponse, tags=["Health"])
    async def health_check() -> dict[str, Any]:
        """Report service status, current time and version."""
        return {
            "status": "healthy",
            "timestamp": datetime.now(UTC).isoformat(),
            "version": VERSION,
        }

    @app.post(
        "/documents/structure",
        response_model=StructuredDocument,
        tags=["Import"],
        responses={422: {"model": ErrorDetail, "description": "Empty grid"}},
    )
    async def structure_grid(body: StructureRequest) -> StructuredDocument:
        """Structure an in-memory grid without storing the result."""
        return structure(body.rows, metadata_scan_rows=settings.metadata_scan_rows)

    @app.post(
        "/documents/import-excel",
        response_model=DocumentRecord,
        tags=["Import"],
        responses={
            400: {"model": ErrorDetail, "description": "Missing or unsupported file"},
            413: {"model": ErrorDetail, "description": "File too large"},
            422: {"model": ErrorDetail, "description": "Empty spreadsheet"},
        },
    )
    async def import_excel(
        request: Request,
        file: Annotated[
            UploadFile | None, File(description="Excel (.xlsx) or CSV file")
        ] = None,
        author_id: Annotated[
            str | None, Form(description="ID of the importing user")
        ] = None,
    ) -> DocumentRecord:
        """Import the first sheet of a spreadsheet as a draft SoW document.

        Raises:
            ValidationError: 400 if the file or author ID is missing.
            FileTooLargeError: 413 if the upload exceeds the size limit.
            UnsupportedFormatError: 400 if the file is not xlsx or csv.
            EmptyInputError: 422 if the sheet has no rows.
        """
        if file is None or not file.filename:
            raise ValidationError(message="No file uploaded", field="file")

        try:
            author = int(author_id) if author_id else 0
        except ValueError:
            author = 0
        if not author:
            raise ValidationError(message="Author ID is required", field="author_id")

        content = await file.read()
        if len(content) > settings.max_file_size_bytes:
            raise FileTooLargeError(
                file_size=len(content),
                max_size=settings.max_file_size_bytes,
                filename=file.filename,
            )

        return await anyio.to_thread.run_sync(
            partial(
                _import_upload,
                request.app,
                content,
                filename=file.filename,
                author_id=author,
            )
        )

    @app.get("/documents", response_model=list[DocumentRecord], tags=["Documents"])
    async def list_documents(
        request: Request, author_id: int | None = None
    ) -> list[DocumentRecord]:
        store: DocumentStore = request.app.state.document_store
        if author_id is not None:
            return store.list_by_author(author_id)
        return store.list_all()

    @app.get(
        "/documents/{document_id}",
        response_model=DocumentRecord,
        tags=["Documents"],
        responses={404: {"model": ErrorDetail, "description": "Document not found"}},
    )
    async def get_document(request: Request, document_id: int) -> DocumentRecord:
        store: DocumentStore = request.app.state.document_store
        return store.get(document_id)

    @app.put(
        "/documents/{document_id}",
        response_model=DocumentRecord,
        tags=["Documents"],
        responses={
            400: {"model": ErrorDetail, "description": "Invalid update"},
            404: {"model": ErrorDetail, "description": "Document not found"},
        },
    )
    async def update_document(
        request: Request, document_id: int, updates: DocumentUpdate
    ) -> DocumentRecord:
        """Apply a partial update; the last write wins.

        Raises:
            ValidationError: 400 if ``template_id`` names no stored template.
            DocumentError: 400 if title, content or status is set to null.
        """
        templates: TemplateStore = request.app.state.template_store
        if updates.template_id is not None and updates.template_id not in templates:
            raise ValidationError(
                message=f"Template not found: {updates.template_id}",
                field="template_id",
            )
        store: DocumentStore = request.app.state.document_store
        return store.update(document_id, updates)

    @app.delete(
        "/documents/{document_id}",
        tags=["Documents"],
        responses={404: {"model": ErrorDetail, "description": "Document not found"}},
    )
    async def delete_document(request: Request, document_id: int) -> dict[str, str]:
        store: DocumentStore = request.app.state.document_store
        store.delete(document_id)
        return {"message": "Document deleted successfully"}

    @app.get(
        "/documents/{document_id}/export/markdown",
        response_class=PlainTextResponse,
        tags=["Export"],
        responses={404: {"model": ErrorDetail, "description": "Document not found"}},
    )
    async def export_markdown(request: Request, document_id: int) -> PlainTextResponse:
        store: DocumentStore = request.app.state.document_store
        document = store.get(document_id)
        return PlainTextResponse(
            render_markdown(document.title, document.description, document.content),
            media_type="text/markdown",
        )

    @app.post(
        "/documents/{document_id}/export-pdf",
        tags=["Export"],
        responses={
            200: {"content": {"application/pdf": {}}},
            404: {"model": ErrorDetail, "description": "Document not found"},
        },
    )
    async def export_pdf(request: Request, document_id: int) -> Response:
        """Render a stored document as a PDF attachment."""
        store: DocumentStore = request.app.state.document_store
        document = store.get(document_id)
        with LogContext(document_id=document_id):
            pdf = await anyio.to_thread.run_sync(
                request.app.state.pdf_renderer.render,
                document.title,
                document.description,
                document.content,
            )
            logger.info("PDF exported", size_bytes=len(pdf))
        return Response(
            content=pdf,
            media_type="application/pdf",
            headers={
                "Content-Disposition": (
                    f'attachment; filename="{_attachment_filename(document.title)}"'
                )
            },
        )

    @app.get(
        "/documents/{document_id}/effort-estimation",
        response_model=EffortEstimationResponse,
        tags=["Estimation"],
        responses={404: {"model": ErrorDetail, "description": "Document not found"}},
    )
    async def effort_estimation(
        request: Request, document_id: int
    ) -> EffortEstimationResponse:
        """Seed an effort estimation with one entry per chapter."""
        store: DocumentStore = request.app.state.document_store
        document = store.get(document_id)
        entries = seed_estimation(document.content)
        summary = summarize(entries, hours_per_day=settings.working_hours_per_day)
        return EffortEstimationResponse(
            document_id=document_id,
            chapters=[asdict(entry) for entry in entries],
            total_hours=summary.total_hours,
            working_days=summary.working_days,
            shares=summary.shares,
        )

    @app.get("/templates", response_model=list[TemplateRecord], tags=["Templates"])
    async def list_templates(request: Request) -> list[TemplateRecord]:
        templates: TemplateStore = request.app.state.template_store
        return templates.list_all()

    @app.post("/templates", response_model=TemplateRecord, tags=["Templates"])
    async def create_template(request: Request, body: TemplateCreate) -> TemplateRecord:
        """Store a reusable content skeleton that documents can reference."""
        templates: TemplateStore = request.app.state.template_store
        return templates.create(body)

    @app.get(
        "/templates/{template_id}",
        response_model=TemplateRecord,
        tags=["Templates"],
        responses={404: {"model": ErrorDetail, "description": "Template not found"}},
    )
    async def get_template(request: Request, template_id: int) -> TemplateRecord:
        templates: TemplateStore = request.app.state.template_store
        return templates.get(template_id)

    @app.post(
        "/templates/{template_id}/use",
        tags=["Templates"],
        responses={404: {"model": ErrorDetail, "description": "Template not found"}},
    )
    async def use_template(request: Request, template_id: int) -> dict[str, str]:
        templates: TemplateStore = request.app.state.template_store
        templates.record_use(template_id)
        return {"message": "Template usage incremented"}

    @app.delete(
        "/templates/{template_id}",
        tags=["Templates"],
        responses={404: {"model": ErrorDetail, "description": "Template not found"}},
    )
    async def delete_template(request: Request, template_id: int) -> dict[str, str]:
        templates: TemplateStore = request.app.state.template_store
        templates.delete(template_id)
        return {"message": "Template deleted successfully"}

    logger.info("FastAPI application created successfully")
    return app


# Create the application instance
app = create_app()
