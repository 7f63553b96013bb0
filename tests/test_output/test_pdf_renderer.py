"""Tests for the ReportLab PDF renderer."""

import pytest

from sow_importer.output.pdf_renderer import PdfRenderer, _markup


@pytest.fixture
def renderer() -> PdfRenderer:
    return PdfRenderer()


class TestPdfRenderer:
    def test_renders_pdf_bytes(self, renderer: PdfRenderer) -> None:
        pdf = renderer.render(
            "My Project",
            "Imported from Excel file",
            {
                "chapters": [
                    {
                        "id": "1",
                        "title": "Overview",
                        "content": "Line one\nLine two",
                        "subchapters": [
                            {"id": "1.1", "title": "Scope", "content": "In scope"}
                        ],
                    }
                ]
            },
        )

        assert pdf.startswith(b"%PDF")
        assert pdf.rstrip().endswith(b"%%EOF")

    def test_renders_document_without_chapters(self, renderer: PdfRenderer) -> None:
        pdf = renderer.render("Empty", None, None)

        assert pdf.startswith(b"%PDF")

    def test_markup_characters_in_text(self, renderer: PdfRenderer) -> None:
        pdf = renderer.render(
            "R&D <draft>",
            "Budget < 10k & > 5k",
            {"chapters": [{"id": "1", "title": "a < b", "content": "x & y"}]},
        )

        assert pdf.startswith(b"%PDF")


class TestMarkup:
    def test_escapes_and_keeps_line_breaks(self) -> None:
        assert _markup("a & b\n<c>") == "a &amp; b<br/>&lt;c&gt;"
