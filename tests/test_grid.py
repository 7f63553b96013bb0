"""Tests for cell rendering helpers."""

from datetime import date, datetime

import pytest

from sow_importer.grid import TabularGrid, cell_at, raw_text, row_text, to_display_text


class TestToDisplayText:
    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            (None, ""),
            ("  padded  ", "padded"),
            (3, "3"),
            (3.0, "3"),
            (2.5, "2.5"),
            (True, "true"),
            (False, "false"),
            (date(2024, 1, 15), "2024-01-15"),
            (datetime(2024, 1, 15, 9, 30), "2024-01-15T09:30:00"),
        ],
    )
    def test_rendering(self, value: object, expected: str) -> None:
        assert to_display_text(value) == expected


class TestRawText:
    def test_strings_keep_leading_whitespace(self) -> None:
        assert raw_text("  indented") == "  indented"

    def test_non_strings_use_display_text(self) -> None:
        assert raw_text(4.0) == "4"
        assert raw_text(None) == ""


class TestCellAt:
    def test_existing_cell(self) -> None:
        assert cell_at(["a", "b"], 1) == "b"

    def test_short_row(self) -> None:
        assert cell_at(["a"], 1) is None

    def test_missing_row(self) -> None:
        assert cell_at(None, 0) is None


class TestRowText:
    def test_joins_with_single_space(self) -> None:
        assert row_text(["a", 1, None, "b"]) == "a 1  b"

    def test_none_row(self) -> None:
        assert row_text(None) == ""

    def test_empty_row(self) -> None:
        assert row_text([]) == ""


class TestTabularGrid:
    def test_dimensions(self) -> None:
        grid = TabularGrid(rows=[["a"], ["b", "c", "d"], []], source_format="csv")

        assert grid.row_count == 3
        assert grid.column_count == 3

    def test_empty_grid_dimensions(self) -> None:
        grid = TabularGrid(rows=[], source_format="xlsx")

        assert grid.row_count == 0
        assert grid.column_count == 0
        assert grid.metadata == {}
