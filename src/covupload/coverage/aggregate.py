"""Run-wide totals and wire records for normalized files."""

from collections.abc import Sequence

import structlog

from covupload.coverage.models import AggregateSummary, NormalizedFileReport
from covupload.upload.models import SourceFile

log = structlog.get_logger()


def coverage_percentage(covered: int, instrumented: int) -> float:
    """Covered share as a percentage, 2 decimals; 0.0 when nothing is instrumented."""
    if instrumented == 0:
        return 0.0
    return round(covered / instrumented * 100, 2)


def aggregate(
    reports: Sequence[NormalizedFileReport],
    files_total: int | None = None,
) -> tuple[AggregateSummary, list[SourceFile]]:
    """Fold normalized files into totals and one wire record per file.

    Args:
        reports: Files that were resolved and normalized.
        files_total: Files listed in the artifact, skipped ones included.
            Defaults to ``len(reports)``.
    """
    files_total = len(reports) if files_total is None else files_total

    instrumented = sum(r.lines_found for r in reports)
    covered = sum(r.lines_hit for r in reports)

    summary = AggregateSummary(
        files_processed=len(reports),
        files_total=files_total,
        total_instrumented_lines=instrumented,
        total_covered_lines=covered,
        overall_percentage=coverage_percentage(covered, instrumented),
    )
    log.info(
        "aggregate.done",
        message=f"processed {summary.files_processed} of {summary.files_total} files",
        lines=instrumented,
        covered=covered,
        percentage=summary.overall_percentage,
    )

    source_files = [
        SourceFile(name=r.path, source=r.source, coverage=list(r.coverage)) for r in reports
    ]
    return summary, source_files
