"""Tests for the spreadsheet/CSV grid reader."""

from __future__ import annotations

import tempfile
from collections.abc import Callable
from datetime import datetime
from pathlib import Path

import pytest

from sow_importer.models import GridFormat
from sow_importer.services.grid_reader import GridReader, GridReadOptions
from sow_importer.services.structurer import structure
from sow_importer.utils.exceptions import ErrorCode, FileReadError


class TestReadXlsx:
    def test_reads_active_sheet_with_native_types(
        self, make_xlsx: Callable[..., bytes]
    ) -> None:
        content = make_xlsx(
            [
                ["Field", "Value"],
                ["Title", "Apollo"],
                ["Budget", 1200.5],
                ["Approved", True],
                ["Start", datetime(2024, 1, 15)],
            ],
            title="SoW",
        )

        grid = GridReader().read_bytes(content, GridFormat.XLSX)

        assert grid.sheet_name == "SoW"
        assert grid.source_format == "xlsx"
        assert grid.rows[1] == ["Title", "Apollo"]
        assert grid.rows[2] == ["Budget", 1200.5]
        assert grid.rows[3] == ["Approved", True]
        assert grid.rows[4][1] == datetime(2024, 1, 15)

    def test_only_first_sheet_is_read(self, make_xlsx: Callable[..., bytes]) -> None:
        content = make_xlsx(
            [["H"], ["Overview", "first"]],
            extra_sheets={"Other": [["H"], ["Timeline", "second"]]},
        )
        reader = GridReader()

        grid = reader.read_bytes(content, GridFormat.XLSX)

        assert grid.rows == [["H"], ["Overview", "first"]]
        assert grid.metadata["sheet_names"] == ["Sheet1", "Other"]
        assert reader.sheet_names(content) == ["Sheet1", "Other"]

    def test_named_sheet(self, make_xlsx: Callable[..., bytes]) -> None:
        content = make_xlsx(
            [["H"]], extra_sheets={"Other": [["H"], ["Timeline", "second"]]}
        )

        grid = GridReader().read_bytes(
            content, GridFormat.XLSX, GridReadOptions(sheet_name="Other")
        )

        assert grid.sheet_name == "Other"
        assert grid.rows[1] == ["Timeline", "second"]

    def test_missing_sheet_raises(self, make_xlsx: Callable[..., bytes]) -> None:
        content = make_xlsx([["H"]])

        with pytest.raises(FileReadError) as exc_info:
            GridReader().read_bytes(
                content, GridFormat.XLSX, GridReadOptions(sheet_name="Nope")
            )
        assert exc_info.value.details["sheet_names"] == ["Sheet1"]

    def test_empty_cells_are_none_and_trailing_ones_dropped(
        self, make_xlsx: Callable[..., bytes]
    ) -> None:
        content = make_xlsx([["H", None, None], ["Overview", None, "x", None]])

        grid = GridReader().read_bytes(content, GridFormat.XLSX)

        assert grid.rows == [["H"], ["Overview", None, "x"]]

    def test_max_rows(self, make_xlsx: Callable[..., bytes]) -> None:
        content = make_xlsx([["H"], ["a"], ["b"], ["c"]])

        grid = GridReader().read_bytes(
            content, GridFormat.XLSX, GridReadOptions(max_rows=2)
        )

        assert grid.rows == [["H"], ["a"]]

    def test_corrupt_workbook_raises(self) -> None:
        with pytest.raises(FileReadError) as exc_info:
            GridReader().read_bytes(
                b"not a zip file", GridFormat.XLSX, filename="broken.xlsx"
            )
        assert exc_info.value.error_code == ErrorCode.FILE_READ_ERROR
        assert exc_info.value.details["filename"] == "broken.xlsx"

    def test_read_path(self, make_xlsx: Callable[..., bytes]) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            path = Path(temp_dir) / "sow.xlsx"
            path.write_bytes(make_xlsx([["H"], ["Overview", "x"]]))

            grid = GridReader().read_path(path)

        assert grid.rows == [["H"], ["Overview", "x"]]

    def test_read_path_rejects_other_extensions(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            path = Path(temp_dir) / "sow.txt"
            path.write_text("H\n")

            with pytest.raises(ValueError):
                GridReader().read_path(path)

    def test_read_path_missing_file(self) -> None:
        with pytest.raises(FileNotFoundError):
            GridReader().read_path(Path("/nonexistent/sow.xlsx"))

    def test_indentation_survives_for_structuring(
        self, make_xlsx: Callable[..., bytes]
    ) -> None:
        content = make_xlsx([["H"], ["1. Plan", "p"], ["  sub note", "s"]])

        grid = GridReader().read_bytes(content, GridFormat.XLSX)
        doc = structure(grid.rows)

        assert doc.content.chapters[0].subchapters[0].title == "sub note"


class TestReadCsv:
    def test_comma_separated(self) -> None:
        content = b"Header\nTitle,My Project\nOverview,Intro text\n1.1 Scope,In scope\n"

        grid = GridReader().read_bytes(content, GridFormat.CSV)

        assert grid.source_format == "csv"
        assert grid.rows == [
            ["Header"],
            ["Title", "My Project"],
            ["Overview", "Intro text"],
            ["1.1 Scope", "In scope"],
        ]
        assert grid.metadata["delimiter"] == ","

    def test_semicolon_separated(self) -> None:
        content = b"Field;Value\nTitle;Apollo\nOverview;Moon landing\nTimeline;1969\n"

        grid = GridReader().read_bytes(content, GridFormat.CSV)

        assert grid.metadata["delimiter"] == ";"
        assert grid.rows[1] == ["Title", "Apollo"]

    def test_ragged_rows_are_kept(self) -> None:
        content = b"a,b\nc,d,e,f\ng\n"

        grid = GridReader().read_bytes(content, GridFormat.CSV)

        assert grid.rows == [["a", "b"], ["c", "d", "e", "f"], ["g"]]

    def test_values_stay_text(self) -> None:
        content = b"Field,Value\n1,0042\n"

        grid = GridReader().read_bytes(content, GridFormat.CSV)

        assert grid.rows[1] == ["1", "0042"]

    def test_leading_spaces_are_preserved(self) -> None:
        content = b"H,\n1. Plan,p\n  sub note,s\n"

        grid = GridReader().read_bytes(content, GridFormat.CSV)

        assert grid.rows[2][0] == "  sub note"

    def test_empty_fields_become_none(self) -> None:
        content = b"a,,c\n,,\n"

        grid = GridReader().read_bytes(content, GridFormat.CSV)

        assert grid.rows == [["a", None, "c"], []]

    def test_non_utf8_content(self) -> None:
        content = "Title,Café Étude Ünïcode\nOverview,Grüße aus München\n".encode(
            "cp1252"
        )

        grid = GridReader().read_bytes(content, GridFormat.CSV)

        assert grid.rows[0] == ["Title", "Café Étude Ünïcode"]

    def test_empty_file(self) -> None:
        grid = GridReader().read_bytes(b"", GridFormat.CSV)

        assert grid.rows == []

    def test_max_rows(self) -> None:
        grid = GridReader().read_bytes(
            b"H\na\nb\nc\n", GridFormat.CSV, GridReadOptions(max_rows=2)
        )

        assert grid.rows == [["H"], ["a"]]
