"""In-memory store of reusable document templates.

Documents may reference a template by ID; the API checks the reference
against this store before accepting it.
"""

import threading
from datetime import UTC, datetime

from sow_importer.models import TemplateCreate, TemplateRecord
from sow_importer.utils.exceptions import TemplateNotFoundError
from sow_importer.utils.logging import get_logger

logger = get_logger(__name__)


class TemplateStore:
    """Thread-safe in-memory store of template records."""

    def __init__(self) -> None:
        self._templates: dict[int, TemplateRecord] = {}
        self._next_id = 1
        self._lock = threading.RLock()

    def create(self, template: TemplateCreate) -> TemplateRecord:
        """Store a new template with a zero usage count."""
        with self._lock:
            record = TemplateRecord(
                **template.model_dump(),
                id=self._next_id,
                usage_count=0,
                created_at=datetime.now(UTC),
            )
            self._templates[record.id] = record
            self._next_id += 1

        logger.info("Template created", template_id=record.id, name=record.name)
        return record

    def get(self, template_id: int) -> TemplateRecord:
        """Get a template by ID.

        Raises:
            TemplateNotFoundError: If no template has this ID.
        """
        with self._lock:
            record = self._templates.get(template_id)
        if record is None:
            raise TemplateNotFoundError(template_id)
        return record

    def list_all(self) -> list[TemplateRecord]:
        with self._lock:
            return [self._templates[key] for key in sorted(self._templates)]

    def record_use(self, template_id: int) -> TemplateRecord:
        """Increment a template's usage count."""
        with self._lock:
            current = self.get(template_id)
            record = current.model_copy(update={"usage_count": current.usage_count + 1})
            self._templates[template_id] = record
        logger.debug("Template used", template_id=template_id, usage=record.usage_count)
        return record

    def delete(self, template_id: int) -> None:
        """Remove a template.

        Raises:
            TemplateNotFoundError: If no template has this ID.
        """
        with self._lock:
            if self._templates.pop(template_id, None) is None:
                raise TemplateNotFoundError(template_id)
        logger.info("Template deleted", template_id=template_id)

    def clear(self) -> None:
        with self._lock:
            self._templates.clear()
            self._next_id = 1

    def __contains__(self, template_id: object) -> bool:
        with self._lock:
            return template_id in self._templates
