"""Services for the SoW importer."""

from sow_importer.services.document_store import DocumentStore
from sow_importer.services.grid_reader import GridReader, GridReadOptions
from sow_importer.services.structurer import structure
from sow_importer.services.template_store import TemplateStore

__all__ = [
    "DocumentStore",
    "GridReadOptions",
    "GridReader",
    "TemplateStore",
    "structure",
]
