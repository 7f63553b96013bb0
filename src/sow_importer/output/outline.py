"""Linear, numbered outline of a document's chapter tree.

Display numbers come from array position ("1.", "1.1"), not from the stored
chapter ids, so edited or reordered documents still number consecutively.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any


@dataclass
class OutlineEntry:
    """One heading of the outline with the text that follows it."""

    level: int
    """1 for chapters, 2 for subchapters."""

    number: str
    title: str
    content: str = ""

    @property
    def heading(self) -> str:
        return f"{self.number} {self.title}"


def _sections(value: Any) -> list[Mapping[str, Any]]:
    """The mapping items of a chapter or subchapter list; anything else is skipped."""
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, Mapping)]


def build_outline(content: Mapping[str, Any] | None) -> list[OutlineEntry]:
    """Flatten ``{"chapters": [...]}`` into outline entries in array order.

    Stored content is editable, so entries that are not objects are ignored
    and numbering counts only the entries that remain.
    """
    entries: list[OutlineEntry] = []
    if not isinstance(content, Mapping):
        return entries

    for index, chapter in enumerate(_sections(content.get("chapters")), start=1):
        entries.append(
            OutlineEntry(
                level=1,
                number=f"{index}.",
                title=str(chapter.get("title", "")),
                content=str(chapter.get("content") or ""),
            )
        )
        for sub_index, sub in enumerate(
            _sections(chapter.get("subchapters")), start=1
        ):
            entries.append(
                OutlineEntry(
                    level=2,
                    number=f"{index}.{sub_index}",
                    title=str(sub.get("title", "")),
                    content=str(sub.get("content") or ""),
                )
            )
    return entries


def render_markdown(
    title: str,
    description: str | None,
    content: Mapping[str, Any] | None,
) -> str:
    """Render a document as Markdown.

    Chapters become level-2 headings and subchapters level-3 headings.
    """
    blocks = [f"# {title}"]
    if description:
        blocks.append(description)

    for entry in build_outline(content):
        blocks.append(f"{'#' * (entry.level + 1)} {entry.heading}")
        if entry.content:
            blocks.append(entry.content)

    return "\n\n".join(blocks) + "\n"
