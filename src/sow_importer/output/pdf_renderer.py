"""PDF export of structured documents using ReportLab."""

import io
from collections.abc import Mapping
from typing import Any
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.pagesizes import letter
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import inch
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer

from sow_importer.output.outline import build_outline
from sow_importer.utils.logging import get_logger

logger = get_logger(__name__)


def _markup(text: str) -> str:
    """Escape text for a Paragraph and keep its line breaks."""
    return escape(text).replace("\n", "<br/>")


class PdfRenderer:
    """Typesets a title, a description and the numbered chapter outline."""

    def __init__(self) -> None:
        styles = getSampleStyleSheet()
        self.title_style = ParagraphStyle(
            "SowTitle",
            parent=styles["Title"],
            fontSize=20,
            spaceAfter=12,
        )
        self.description_style = ParagraphStyle(
            "SowDescription",
            parent=styles["Normal"],
            fontSize=12,
            textColor=colors.HexColor("#444444"),
            spaceAfter=18,
        )
        self.chapter_style = ParagraphStyle(
            "SowChapter",
            parent=styles["Heading1"],
            fontSize=16,
            spaceBefore=14,
            spaceAfter=8,
        )
        self.subchapter_style = ParagraphStyle(
            "SowSubchapter",
            parent=styles["Heading2"],
            fontSize=14,
            leftIndent=20,
            spaceBefore=10,
            spaceAfter=6,
        )
        self.body_style = ParagraphStyle(
            "SowBody", parent=styles["Normal"], fontSize=12, leading=15, spaceAfter=6
        )
        self.sub_body_style = ParagraphStyle(
            "SowSubBody", parent=self.body_style, leftIndent=20
        )

    def render(
        self,
        title: str,
        description: str | None,
        content: Mapping[str, Any] | None,
    ) -> bytes:
        """Render the document and return the PDF bytes."""
        buffer = io.BytesIO()
        doc = SimpleDocTemplate(
            buffer,
            pagesize=letter,
            title=title,
            rightMargin=inch,
            leftMargin=inch,
            topMargin=inch,
            bottomMargin=inch,
        )

        story: list[Any] = [Paragraph(_markup(title), self.title_style)]
        if description:
            story.append(Paragraph(_markup(description), self.description_style))

        outline = build_outline(content)
        for entry in outline:
            chapter_level = entry.level == 1
            heading_style = self.chapter_style if chapter_level else self.subchapter_style
            story.append(Paragraph(_markup(entry.heading), heading_style))
            if entry.content:
                body_style = self.body_style if chapter_level else self.sub_body_style
                story.append(Paragraph(_markup(entry.content), body_style))
            if chapter_level:
                story.append(Spacer(1, 0.1 * inch))

        doc.build(story)
        pdf = buffer.getvalue()
        logger.debug("PDF rendered", headings=len(outline), size_bytes=len(pdf))
        return pdf
