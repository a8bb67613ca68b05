"""Instrumentation reading, line normalization, and aggregation.

Usage:
    from covupload.coverage import aggregate, normalize, read_artifact

    artifact = read_artifact(Path("coverage/coverage-final.json"))
    for path, signals in artifact.files.items():
        coverage = normalize(signals, Path(path).read_text())

Supported formats:
    - istanbul: Jest, Vitest, NYC (coverage-final.json)
    - gocov: Go test coverage profiles (coverage.out)
"""

from covupload.coverage.aggregate import aggregate, coverage_percentage
from covupload.coverage.models import (
    AggregateSummary,
    BlockProfile,
    CoverageBlock,
    FunctionSpan,
    InstrumentationMap,
    LineSignals,
    NormalizedFileReport,
    SourceSpan,
)
from covupload.coverage.normalize import count_lines, merge_hit, normalize
from covupload.coverage.parsers import (
    READER_BY_FORMAT,
    READER_REGISTRY,
    Artifact,
    InstrumentationReader,
    detect_reader,
    read_artifact,
)
from covupload.coverage.resolve import read_source, relative_name

__all__ = [
    # Models
    "AggregateSummary",
    "BlockProfile",
    "CoverageBlock",
    "FunctionSpan",
    "InstrumentationMap",
    "LineSignals",
    "NormalizedFileReport",
    "SourceSpan",
    # Readers
    "Artifact",
    "InstrumentationReader",
    "READER_BY_FORMAT",
    "READER_REGISTRY",
    "detect_reader",
    "read_artifact",
    # Normalize
    "count_lines",
    "merge_hit",
    "normalize",
    # Resolve
    "read_source",
    "relative_name",
    # Aggregate
    "aggregate",
    "coverage_percentage",
]
