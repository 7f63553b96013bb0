"""Heuristic conversion of a two-column grid into a chapter tree.

The first column of each row is classified as a chapter heading, a
subchapter heading, or a free-text line; the second column supplies the
content for that row. Rows 0..4 are also scanned for "Title"/"Project" and
"Description" labels that override the document defaults.

The conversion never fails on malformed content. An empty grid raises
EmptyInputError; a grid in which no chapter is recognized yields a single
"Project Overview" chapter holding every body row as text.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum

from sow_importer.grid import Grid, cell_at, raw_text, row_text, to_display_text
from sow_importer.models import (
    Chapter,
    DocumentContent,
    StructuredDocument,
    Subchapter,
)
from sow_importer.utils.exceptions import EmptyInputError
from sow_importer.utils.logging import get_logger, timed_operation

logger = get_logger(__name__)

DEFAULT_TITLE = "Imported SoW Document"
DEFAULT_DESCRIPTION = "Imported from Excel file"
FALLBACK_CHAPTER_TITLE = "Project Overview"
METADATA_SCAN_ROWS = 5

TITLE_LABELS = ("title", "project")
DESCRIPTION_LABELS = ("description",)
CHAPTER_KEYWORDS = ("overview", "requirement", "deliverable", "timeline", "budget")

# "Chapter 2", "3", "3. Plan", "3.Plan", "b. Scope"; never "3.1" (a subchapter).
CHAPTER_NUMBERING = re.compile(
    r"^(chapter\b|(chapter\s*)?(\d+\.?(?![\d.])|[a-z]\.(?=\s|:|$)))",
    re.IGNORECASE,
)
SUBCHAPTER_MARKER = re.compile(r"^\s*(\d+\.\d+|[a-z]\)|•|-)", re.IGNORECASE)
SUBCHAPTER_PREFIX = re.compile(r"^\s*(\d+\.\d+|[a-z]\)|•|-)\s*", re.IGNORECASE)
INDENT = "  "


def is_chapter_start(text: str) -> bool:
    """Whether a first-column value opens a new chapter."""
    lowered = text.lower()
    if any(keyword in lowered for keyword in CHAPTER_KEYWORDS):
        return True
    return CHAPTER_NUMBERING.match(text) is not None


def is_subchapter_start(text: str, raw: str | None = None) -> bool:
    """Whether a first-column value opens a subchapter of the open chapter.

    Args:
        text: Trimmed cell text.
        raw: The untrimmed cell text; two leading spaces mark an indented row.
    """
    if SUBCHAPTER_MARKER.match(text):
        return True
    return raw is not None and raw.startswith(INDENT)


def strip_subchapter_prefix(text: str) -> str:
    """Remove a leading "1.2", "a)", bullet or dash marker from a title."""
    return SUBCHAPTER_PREFIX.sub("", text, count=1)


def scan_metadata(grid: Grid, scan_rows: int = METADATA_SCAN_ROWS) -> tuple[str, str]:
    """Find the document title and description in the leading rows.

    Every matching row overwrites the previous value, so the last label in
    the window wins. A label with an empty value leaves the field unchanged.

    Returns:
        (title, description)
    """
    title = DEFAULT_TITLE
    description = DEFAULT_DESCRIPTION

    for row in grid[: min(scan_rows, len(grid))]:
        label = to_display_text(cell_at(row, 0)).lower()
        if not label:
            continue
        value = to_display_text(cell_at(row, 1))
        if any(key in label for key in TITLE_LABELS):
            if value:
                title = value
        elif any(key in label for key in DESCRIPTION_LABELS):
            if value:
                description = value

    return title, description


class RowOutcome(str, Enum):
    """What the body scan did with a row."""

    CHAPTER = "chapter"
    SUBCHAPTER = "subchapter"
    CONTENT = "content"
    DROPPED = "dropped"


@dataclass
class NoOpenChapter:
    """Scan state before the first chapter heading."""


@dataclass
class OpenChapter:
    """Scan state while a chapter is accepting subchapters and text."""

    chapter: Chapter
    next_subchapter: int = 1

    def add_subchapter(self, title: str, content: str) -> None:
        self.chapter.subchapters.append(
            Subchapter(
                id=f"{self.chapter.id}.{self.next_subchapter}",
                title=title,
                content=content,
            )
        )
        self.next_subchapter += 1

    def append_line(self, line: str) -> None:
        if self.chapter.content:
            self.chapter.content += "\n" + line
        else:
            self.chapter.content = line


ScanState = NoOpenChapter | OpenChapter


class ChapterAccumulator:
    """Body-scan state machine.

    Transitions per row:
        any state    --chapter heading-->     OpenChapter (previous one closed)
        OpenChapter  --subchapter heading-->  OpenChapter (subchapter added)
        OpenChapter  --other text-->          OpenChapter (line appended)
        NoOpenChapter --other text-->         NoOpenChapter (row dropped)
    """

    def __init__(self) -> None:
        self.chapters: list[Chapter] = []
        self.state: ScanState = NoOpenChapter()
        self._next_chapter = 1

    def feed(self, cell_value: str, content_value: str, raw: str) -> RowOutcome:
        """Classify one non-empty row and update the state.

        Args:
            cell_value: Trimmed first-column text (non-empty).
            content_value: Trimmed second-column text, "" if absent.
            raw: Untrimmed first-column text.
        """
        if is_chapter_start(cell_value):
            self._close_open_chapter()
            self.state = OpenChapter(
                Chapter(
                    id=str(self._next_chapter),
                    title=cell_value,
                    content=content_value,
                    subchapters=[],
                )
            )
            self._next_chapter += 1
            return RowOutcome.CHAPTER

        if not isinstance(self.state, OpenChapter):
            return RowOutcome.DROPPED

        if is_subchapter_start(cell_value, raw):
            self.state.add_subchapter(strip_subchapter_prefix(cell_value), content_value)
            return RowOutcome.SUBCHAPTER

        line = f"{cell_value}: {content_value}" if content_value else cell_value
        self.state.append_line(line)
        return RowOutcome.CONTENT

    def close(self) -> list[Chapter]:
        """Flush the open chapter and return every chapter in order."""
        self._close_open_chapter()
        self.state = NoOpenChapter()
        return self.chapters

    def _close_open_chapter(self) -> None:
        if isinstance(self.state, OpenChapter):
            self.chapters.append(self.state.chapter)


def fallback_chapter(grid: Grid) -> Chapter:
    """Single overview chapter holding every body row as a line of text."""
    return Chapter(
        id="1",
        title=FALLBACK_CHAPTER_TITLE,
        content="\n".join(row_text(row) for row in grid[1:]),
        subchapters=[],
    )


def structure(
    grid: Grid | None,
    *,
    metadata_scan_rows: int = METADATA_SCAN_ROWS,
) -> StructuredDocument:
    """Convert a two-column grid into a titled chapter/subchapter document.

    Args:
        grid: Row-major cells; row 0 is a header and only read for metadata.
        metadata_scan_rows: Size of the leading window searched for labels.

    Returns:
        StructuredDocument with at least one chapter.

    Raises:
        EmptyInputError: If the grid is None or has no rows.
    """
    if not grid:
        raise EmptyInputError()

    with timed_operation(logger, "structure") as metrics:
        title, description = scan_metadata(grid, metadata_scan_rows)

        accumulator = ChapterAccumulator()
        dropped = 0
        for row in grid[1:]:
            first = cell_at(row, 0)
            cell_value = to_display_text(first)
            if not cell_value:
                continue
            outcome = accumulator.feed(
                cell_value,
                to_display_text(cell_at(row, 1)),
                raw_text(first),
            )
            if outcome is RowOutcome.DROPPED:
                dropped += 1

        chapters = accumulator.close()
        used_fallback = not chapters
        if used_fallback:
            chapters = [fallback_chapter(grid)]

        metrics.rows_scanned = len(grid)
        metrics.chapters_produced = len(chapters)
        metrics.subchapters_produced = sum(len(c.subchapters) for c in chapters)
        metrics.custom_metrics = {"dropped_rows": dropped, "fallback": used_fallback}

    if dropped:
        logger.debug("Rows before the first chapter were dropped", dropped=dropped)

    return StructuredDocument(
        title=title,
        description=description,
        content=DocumentContent(chapters=chapters),
    )
