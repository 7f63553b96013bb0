"""Cell values and the tabular grid consumed by the structurer."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import date, datetime, time
from typing import Any

CellValue = str | int | float | bool | date | datetime | time | None
Row = Sequence[CellValue]
Grid = Sequence[Row | None]


def to_display_text(value: Any) -> str:
    """Render a cell value as trimmed text.

    Empty cells become "", integral floats drop their ".0", booleans are
    lower-case and dates use ISO format.
    """
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (date, datetime, time)):
        return value.isoformat()
    return str(value).strip()


def raw_text(value: Any) -> str:
    """Untrimmed text of a cell, used where leading whitespace is significant."""
    if isinstance(value, str):
        return value
    return to_display_text(value)


def cell_at(row: Row | None, index: int) -> CellValue:
    """Return the cell at ``index``, or None if the row or cell is absent."""
    if row is None or index >= len(row):
        return None
    return row[index]


def row_text(row: Row | None) -> str:
    """Join every cell of a row by a single space."""
    if row is None:
        return ""
    return " ".join(to_display_text(cell) for cell in row)


@dataclass
class TabularGrid:
    """A grid decoded from an uploaded spreadsheet or CSV file."""

    rows: list[list[CellValue]]
    source_format: str
    sheet_name: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)

    @property
    def row_count(self) -> int:
        return len(self.rows)

    @property
    def column_count(self) -> int:
        return max((len(row) for row in self.rows), default=0)
