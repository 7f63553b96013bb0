"""Output generation for structured documents.

This module renders stored documents as a numbered outline, as Markdown,
and as PDF.
"""

from sow_importer.output.outline import OutlineEntry, build_outline, render_markdown
from sow_importer.output.pdf_renderer import PdfRenderer

__all__ = [
    "OutlineEntry",
    "PdfRenderer",
    "build_outline",
    "render_markdown",
]
