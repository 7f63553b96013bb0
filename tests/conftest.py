from __future__ import annotations

import io
from collections.abc import Callable, Sequence
from typing import Any

import pytest
from openpyxl import Workbook


@pytest.fixture
def sow_rows() -> list[list[Any]]:
    """A small SoW sheet with metadata, chapters and subchapters."""
    return [
        ["Field", "Value"],
        ["Project Title", "Website Relaunch"],
        ["Description", "Rebuild of the marketing site"],
        ["1. Overview", "Replace the legacy CMS"],
        ["1.1 Scope", "Public pages only"],
        ["1.2 Out of scope", "Intranet"],
        ["Requirements", ""],
        ["a) Accessibility", "WCAG 2.1 AA"],
        ["Hosting", "Managed cloud"],
        ["Timeline", "Q3"],
    ]


@pytest.fixture
def make_xlsx() -> Callable[..., bytes]:
    """Build an in-memory workbook from row lists and return its bytes."""

    def _make(
        rows: Sequence[Sequence[Any]],
        title: str = "Sheet1",
        extra_sheets: dict[str, Sequence[Sequence[Any]]] | None = None,
    ) -> bytes:
        wb = Workbook()
        ws = wb.active
        ws.title = title
        for row in rows:
            ws.append(list(row))
        for name, sheet_rows in (extra_sheets or {}).items():
            extra = wb.create_sheet(name)
            for row in sheet_rows:
                extra.append(list(row))
        buffer = io.BytesIO()
        wb.save(buffer)
        return buffer.getvalue()

    return _make
