"""Effort estimation over a document's chapters.

An estimation starts with one zero-hour, excluded entry per chapter. Totals
count only included entries; working days round up.
"""

import math
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

from sow_importer.utils.logging import get_logger

logger = get_logger(__name__)

DEFAULT_HOURS_PER_DAY = 8


@dataclass
class EstimationEntry:
    """Estimated hours for one chapter."""

    chapter_id: str
    title: str
    hours: int = 0
    included: bool = False


@dataclass
class EstimationSummary:
    """Totals across the included entries of an estimation."""

    total_hours: int
    working_days: int
    shares: dict[str, int] = field(default_factory=dict)
    """Chapter id to rounded percentage of total hours."""


def seed_estimation(content: Mapping[str, Any]) -> list[EstimationEntry]:
    """Create one entry per chapter of a stored document's content.

    Content that is not shaped like ``{"chapters": [...]}`` yields no entries.
    """
    chapters = content.get("chapters")
    if not isinstance(chapters, list):
        chapters = []
    entries = [
        EstimationEntry(
            chapter_id=str(chapter.get("id", index + 1)),
            title=str(chapter.get("title", "")),
        )
        for index, chapter in enumerate(chapters)
        if isinstance(chapter, Mapping)
    ]
    logger.debug("Estimation seeded", chapters=len(entries))
    return entries


def summarize(
    entries: Iterable[EstimationEntry],
    hours_per_day: int = DEFAULT_HOURS_PER_DAY,
) -> EstimationSummary:
    """Total the included entries.

    Args:
        entries: Chapter estimates.
        hours_per_day: Hours in one working day.

    Returns:
        EstimationSummary with total hours, days rounded up, and each
        contributing chapter's share of the total.
    """
    if hours_per_day < 1:
        raise ValueError(f"hours_per_day must be at least 1, got {hours_per_day}")

    counted = [entry for entry in entries if entry.included]
    total = sum(entry.hours for entry in counted)
    shares: dict[str, int] = {}
    if total > 0:
        shares = {
            entry.chapter_id: round(entry.hours / total * 100)
            for entry in counted
            if entry.hours > 0
        }

    return EstimationSummary(
        total_hours=total,
        working_days=math.ceil(total / hours_per_day),
        shares=shares,
    )
