"""Tests for chapter effort estimation."""

import pytest

from sow_importer.services.effort_estimator import (
    EstimationEntry,
    seed_estimation,
    summarize,
)


class TestSeedEstimation:
    def test_one_excluded_entry_per_chapter(self) -> None:
        entries = seed_estimation(
            {
                "chapters": [
                    {"id": "1", "title": "Overview", "subchapters": []},
                    {"id": "2", "title": "Timeline"},
                ]
            }
        )

        assert entries == [
            EstimationEntry(chapter_id="1", title="Overview"),
            EstimationEntry(chapter_id="2", title="Timeline"),
        ]

    def test_missing_ids_use_position(self) -> None:
        entries = seed_estimation({"chapters": [{"title": "A"}, {"title": "B"}]})

        assert [e.chapter_id for e in entries] == ["1", "2"]

    def test_content_without_chapters(self) -> None:
        assert seed_estimation({}) == []
        assert seed_estimation({"chapters": None}) == []

    @pytest.mark.parametrize("chapters", [5, "abc", {"id": "1"}])
    def test_chapters_that_are_not_a_list(self, chapters: object) -> None:
        assert seed_estimation({"chapters": chapters}) == []

    def test_non_mapping_chapters_are_ignored(self) -> None:
        entries = seed_estimation({"chapters": ["loose", {"id": "2", "title": "B"}]})

        assert [e.title for e in entries] == ["B"]


class TestSummarize:
    def test_only_included_entries_count(self) -> None:
        summary = summarize(
            [
                EstimationEntry("1", "Overview", hours=10, included=True),
                EstimationEntry("2", "Build", hours=30, included=True),
                EstimationEntry("3", "Extras", hours=100, included=False),
            ]
        )

        assert summary.total_hours == 40
        assert summary.working_days == 5
        assert summary.shares == {"1": 25, "2": 75}

    def test_working_days_round_up(self) -> None:
        summary = summarize([EstimationEntry("1", "A", hours=9, included=True)])

        assert summary.working_days == 2

    def test_custom_day_length(self) -> None:
        summary = summarize(
            [EstimationEntry("1", "A", hours=12, included=True)], hours_per_day=6
        )

        assert summary.working_days == 2

    def test_shares_are_rounded(self) -> None:
        summary = summarize(
            [
                EstimationEntry("1", "A", hours=1, included=True),
                EstimationEntry("2", "B", hours=2, included=True),
                EstimationEntry("3", "C", hours=0, included=True),
            ]
        )

        assert summary.shares == {"1": 33, "2": 67}

    def test_nothing_included(self) -> None:
        summary = summarize([EstimationEntry("1", "A", hours=5)])

        assert summary.total_hours == 0
        assert summary.working_days == 0
        assert summary.shares == {}

    def test_invalid_day_length(self) -> None:
        with pytest.raises(ValueError):
            summarize([], hours_per_day=0)
