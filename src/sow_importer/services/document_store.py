"""In-memory document store.

Documents get monotonically increasing integer IDs and created/updated
timestamps. Updates are partial and the last write wins. Nothing is
persisted; the store lives as long as the process.
"""

import threading
from datetime import UTC, datetime
from typing import Any

from sow_importer.models import (
    DocumentRecord,
    DocumentStatus,
    DocumentType,
    DocumentUpdate,
    StructuredDocument,
)
from sow_importer.utils.exceptions import DocumentError, DocumentNotFoundError
from sow_importer.utils.logging import get_logger

logger = get_logger(__name__)

NON_NULLABLE_FIELDS = ("title", "content", "status")


class DocumentStore:
    """Thread-safe in-memory store of document records."""

    def __init__(self) -> None:
        self._documents: dict[int, DocumentRecord] = {}
        self._next_id = 1
        self._lock = threading.RLock()

    def create(
        self,
        *,
        title: str,
        content: dict[str, Any],
        author_id: int,
        description: str | None = None,
        type: DocumentType = DocumentType.SOW,
        status: DocumentStatus = DocumentStatus.DRAFT,
        template_id: int | None = None,
    ) -> DocumentRecord:
        """Store a new document and return it with its assigned ID."""
        with self._lock:
            now = datetime.now(UTC)
            record = DocumentRecord(
                id=self._next_id,
                title=title,
                description=description,
                content=content,
                type=type,
                status=status,
                author_id=author_id,
                template_id=template_id,
                created_at=now,
                updated_at=now,
            )
            self._documents[record.id] = record
            self._next_id += 1

        logger.info(
            "Document created",
            document_id=record.id,
            type=record.type.value,
            author_id=author_id,
        )
        return record

    def create_from_structure(
        self, document: StructuredDocument, author_id: int
    ) -> DocumentRecord:
        """Store a structured import as a draft SoW document."""
        return self.create(
            title=document.title,
            description=document.description,
            content=document.content.model_dump(),
            author_id=author_id,
            type=DocumentType.SOW,
            status=DocumentStatus.DRAFT,
        )

    def get(self, document_id: int) -> DocumentRecord:
        """Get a document by ID.

        Raises:
            DocumentNotFoundError: If no document has this ID.
        """
        with self._lock:
            record = self._documents.get(document_id)
        if record is None:
            raise DocumentNotFoundError(document_id)
        return record

    def list_all(self) -> list[DocumentRecord]:
        """All documents in creation order."""
        with self._lock:
            return [self._documents[key] for key in sorted(self._documents)]

    def list_by_author(self, author_id: int) -> list[DocumentRecord]:
        return [doc for doc in self.list_all() if doc.author_id == author_id]

    def update(self, document_id: int, updates: DocumentUpdate) -> DocumentRecord:
        """Apply the fields set on ``updates`` and bump ``updated_at``.

        Raises:
            DocumentNotFoundError: If no document has this ID.
            DocumentError: If a required field is explicitly set to null.
        """
        changes = updates.model_dump(exclude_unset=True)
        nulled = [
            name
            for name in NON_NULLABLE_FIELDS
            if name in changes and changes[name] is None
        ]

        with self._lock:
            current = self.get(document_id)
            if nulled:
                raise DocumentError(
                    f"Fields cannot be null: {', '.join(nulled)}",
                    document_id=document_id,
                    details={"fields": nulled},
                )
            record = DocumentRecord.model_validate(
                {**current.model_dump(), **changes, "updated_at": datetime.now(UTC)}
            )
            self._documents[document_id] = record

        logger.info(
            "Document updated",
            document_id=document_id,
            fields=",".join(sorted(changes)),
        )
        return record

    def delete(self, document_id: int) -> None:
        """Remove a document.

        Raises:
            DocumentNotFoundError: If no document has this ID.
        """
        with self._lock:
            if self._documents.pop(document_id, None) is None:
                raise DocumentNotFoundError(document_id)
        logger.info("Document deleted", document_id=document_id)

    def clear(self) -> None:
        """Remove every document and restart IDs at 1."""
        with self._lock:
            self._documents.clear()
            self._next_id = 1

    def __len__(self) -> int:
        with self._lock:
            return len(self._documents)
