"""Tests for run-wide aggregation."""

import pytest

from covupload.coverage.aggregate import aggregate, coverage_percentage
from covupload.coverage.models import NormalizedFileReport


def _report(path: str, coverage: list[int | None]) -> NormalizedFileReport:
    return NormalizedFileReport(path=path, source="\n" * (len(coverage) - 1), coverage=coverage)


class TestCoveragePercentage:
    @pytest.mark.parametrize(
        ("covered", "instrumented", "expected"),
        [
            (0, 0, 0.0),
            (0, 5, 0.0),
            (5, 5, 100.0),
            (1, 3, 33.33),
            (2, 3, 66.67),
        ],
    )
    def test_percentage(self, covered: int, instrumented: int, expected: float) -> None:
        assert coverage_percentage(covered, instrumented) == expected


class TestAggregate:
    def test_two_files(self) -> None:
        """Scenario: two files with mixed coverage.

        Given files with 3 and 2 instrumented lines, 3 of them hit
        When aggregated
        Then totals and percentage cover both files
        """
        reports = [
            _report("src/a.js", [1, None, 0, 1]),
            _report("src/b.js", [None, 2, 0]),
        ]

        summary, source_files = aggregate(reports)

        assert summary.files_processed == 2
        assert summary.files_total == 2
        assert summary.total_instrumented_lines == 5
        assert summary.total_covered_lines == 3
        assert summary.overall_percentage == 60.0
        assert [f.name for f in source_files] == ["src/a.js", "src/b.js"]
        assert source_files[1].coverage == [None, 2, 0]

    def test_empty(self) -> None:
        summary, source_files = aggregate([])

        assert summary.files_processed == 0
        assert summary.total_instrumented_lines == 0
        assert summary.overall_percentage == 0.0
        assert source_files == []

    def test_files_total_counts_skipped(self) -> None:
        summary, _ = aggregate([_report("src/a.js", [1])], files_total=3)

        assert summary.files_processed == 1
        assert summary.files_total == 3

    def test_no_instrumented_lines(self) -> None:
        summary, source_files = aggregate([_report("README.js", [None, None])])

        assert summary.overall_percentage == 0.0
        assert summary.total_covered_lines == 0
        assert source_files[0].coverage == [None, None]

    def test_percentage_bounds(self) -> None:
        summary, _ = aggregate([_report("a.js", [0, 0]), _report("b.js", [7, 9])])

        assert 0.0 <= summary.overall_percentage <= 100.0
        assert summary.overall_percentage == 50.0
