"""Decode uploaded Excel workbooks and CSV files into row-major grids."""

from __future__ import annotations

import csv
import io
from dataclasses import dataclass
from pathlib import Path
from typing import Any
from zipfile import BadZipFile

import chardet
import pandas as pd
from openpyxl import load_workbook
from openpyxl.utils.exceptions import InvalidFileException

from sow_importer.grid import CellValue, TabularGrid
from sow_importer.models import GridFormat
from sow_importer.utils.exceptions import FileReadError
from sow_importer.utils.logging import get_logger

logger = get_logger(__name__)

FALLBACK_ENCODINGS = ["utf-8", "cp1252", "latin-1"]
MIN_ENCODING_CONFIDENCE = 0.5


@dataclass
class GridReadOptions:
    """Options controlling how an upload is read."""

    sheet_name: str | None = None
    max_rows: int | None = None


class GridReader:
    """Read the first sheet of a workbook, or a CSV file, into a grid.

    Cells keep their native types (str, int, float, bool, datetime); empty
    cells are None and trailing empty cells are dropped from each row.
    """

    def read_path(
        self, file_path: Path, options: GridReadOptions | None = None
    ) -> TabularGrid:
        """Read a grid from a .xlsx or .csv file on disk."""
        if not file_path.exists():
            raise FileNotFoundError(f"Spreadsheet not found: {file_path}")
        suffix = file_path.suffix.lower()
        if suffix == ".csv":
            grid_format = GridFormat.CSV
        elif suffix == ".xlsx":
            grid_format = GridFormat.XLSX
        else:
            raise ValueError(f"Unsupported spreadsheet extension: {suffix}")
        return self.read_bytes(
            file_path.read_bytes(), grid_format, options, filename=file_path.name
        )

    def read_bytes(
        self,
        content: bytes,
        grid_format: GridFormat,
        options: GridReadOptions | None = None,
        filename: str | None = None,
    ) -> TabularGrid:
        """Decode uploaded bytes into a grid.

        Raises:
            FileReadError: If the content cannot be decoded.
        """
        opts = options or GridReadOptions()
        if grid_format == GridFormat.XLSX:
            grid = self._read_xlsx(content, opts, filename)
        else:
            grid = self._read_csv(content, opts, filename)

        logger.info(
            "Grid read",
            grid_format=grid_format.value,
            sheet=grid.sheet_name,
            rows=grid.row_count,
            columns=grid.column_count,
        )
        return grid

    def sheet_names(self, content: bytes) -> list[str]:
        """List all sheet names in a workbook."""
        workbook = self._load_workbook(content, None)
        try:
            return list(workbook.sheetnames)
        finally:
            workbook.close()

    # ------------------------------------------------------------------ #
    # Internal helpers
    # ------------------------------------------------------------------ #

    def _read_xlsx(
        self, content: bytes, opts: GridReadOptions, filename: str | None
    ) -> TabularGrid:
        workbook = self._load_workbook(content, filename)
        try:
            sheet_names = list(workbook.sheetnames)
            if opts.sheet_name and opts.sheet_name not in sheet_names:
                raise FileReadError(
                    f"Sheet '{opts.sheet_name}' not found in workbook",
                    filename=filename,
                    details={"sheet_names": sheet_names},
                )
            sheet = workbook[opts.sheet_name] if opts.sheet_name else workbook.active
            rows = [
                _trim_row(values)
                for values in sheet.iter_rows(max_row=opts.max_rows, values_only=True)
            ]
            return TabularGrid(
                rows=rows,
                source_format=GridFormat.XLSX.value,
                sheet_name=sheet.title,
                metadata={"sheet_names": sheet_names},
            )
        finally:
            workbook.close()

    @staticmethod
    def _load_workbook(content: bytes, filename: str | None) -> Any:
        try:
            return load_workbook(
                filename=io.BytesIO(content), data_only=True, read_only=True
            )
        except (InvalidFileException, BadZipFile, KeyError, OSError) as e:
            raise FileReadError(
                f"Failed to read Excel workbook: {e}",
                filename=filename,
            ) from e

    def _read_csv(
        self, content: bytes, opts: GridReadOptions, filename: str | None
    ) -> TabularGrid:
        encoding = _detect_encoding(content)
        try:
            text = content.decode(encoding)
        except (UnicodeDecodeError, LookupError) as e:
            raise FileReadError(
                f"Failed to decode CSV file as {encoding}: {e}",
                filename=filename,
            ) from e

        delimiter = _detect_csv_delimiter(text)
        # pandas sizes columns from the first line; ragged sheets need the widest row.
        width = max(
            (len(fields) for fields in csv.reader(io.StringIO(text), delimiter=delimiter)),
            default=0,
        )
        metadata = {"encoding": encoding, "delimiter": delimiter}
        if width == 0:
            return TabularGrid(rows=[], source_format=GridFormat.CSV.value, metadata=metadata)

        try:
            df = pd.read_csv(
                io.StringIO(text),
                header=None,
                names=list(range(width)),
                delimiter=delimiter,
                dtype=str,
                keep_default_na=False,
                skip_blank_lines=False,
                nrows=opts.max_rows,
            )
        except pd.errors.EmptyDataError:
            return TabularGrid(rows=[], source_format=GridFormat.CSV.value, metadata=metadata)
        except pd.errors.ParserError as e:
            raise FileReadError(f"Failed to parse CSV: {e}", filename=filename) from e

        rows = [
            _trim_row(None if pd.isna(value) or value == "" else value for value in record)
            for record in df.itertuples(index=False, name=None)
        ]
        return TabularGrid(rows=rows, source_format=GridFormat.CSV.value, metadata=metadata)


def _trim_row(values: Any) -> list[CellValue]:
    """Materialize a row and drop trailing empty cells."""
    row = list(values)
    while row and (row[-1] is None or row[-1] == ""):
        row.pop()
    return row


def _detect_encoding(content: bytes) -> str:
    if not content:
        return "utf-8"

    result = chardet.detect(content)
    encoding = result.get("encoding")
    confidence = result.get("confidence", 0.0) or 0.0
    if encoding and confidence >= MIN_ENCODING_CONFIDENCE:
        # ascii is a subset of utf-8; utf-8 also accepts later non-ascii rows
        return "utf-8" if encoding.lower() == "ascii" else encoding

    for fallback in FALLBACK_ENCODINGS:
        try:
            content.decode(fallback)
        except UnicodeDecodeError:
            continue
        logger.debug("Using fallback encoding", encoding=fallback)
        return fallback

    return "latin-1"


def _detect_csv_delimiter(text: str) -> str:
    try:
        dialect = csv.Sniffer().sniff(text[:8192], delimiters=",;\t|")
    except csv.Error:
        logger.debug("CSV delimiter detection failed, defaulting to comma")
        return ","
    return dialect.delimiter
