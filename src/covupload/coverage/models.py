"""Coverage data model.

Two layers:

- Instrumentation records as read from an artifact. These are validated
  pydantic models; malformed entries are dropped one at a time instead of
  failing the whole file.
- Line-granular results (NormalizedFileReport, AggregateSummary), plain
  dataclasses built fresh for each run.

Every instrumentation record exposes ``line_hits()``: the (1-based line, hits)
signals in the order the normalizer must apply them.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from itertools import chain
from typing import Any, Protocol

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    NonNegativeInt,
    TypeAdapter,
    ValidationError,
    model_validator,
)


class LineSignals(Protocol):
    """Anything the normalizer can reduce to per-line coverage."""

    def line_hits(self, line_count: int | None = None) -> Iterator[tuple[int, int]]:
        """Yield (line, hits) pairs in merge order. Lines are 1-based.

        When ``line_count`` is given, lines past it may be left out.
        """
        ...


# =============================================================================
# Istanbul instrumentation
# =============================================================================


class Position(BaseModel):
    model_config = ConfigDict(extra="ignore")

    line: int
    column: int | None = None


class SourceSpan(BaseModel):
    """Start/end position of a statement or function in the instrumented source."""

    model_config = ConfigDict(extra="ignore")

    start: Position
    end: Position | None = None


class FunctionSpan(BaseModel):
    """Istanbul fnMap entry.

    ``loc`` spans the whole function, ``decl`` only its name. Both start on
    the declaration line for ordinary functions; ``loc`` is preferred.
    """

    model_config = ConfigDict(extra="ignore")

    name: str | None = None
    decl: SourceSpan | None = None
    loc: SourceSpan | None = None
    line: int | None = None

    @property
    def start_line(self) -> int | None:
        if self.loc is not None:
            return self.loc.start.line
        if self.decl is not None:
            return self.decl.start.line
        return self.line


_SPAN = TypeAdapter(SourceSpan)
_FUNCTION = TypeAdapter(FunctionSpan)
_HITS = TypeAdapter(NonNegativeInt)


def _keep_valid(raw: Any, adapter: TypeAdapter[Any]) -> dict[str, Any]:
    """Validate each entry of a mapping on its own, dropping the bad ones."""
    if not isinstance(raw, dict):
        return {}
    kept: dict[str, Any] = {}
    for key, value in raw.items():
        try:
            kept[str(key)] = adapter.validate_python(value)
        except ValidationError:
            continue
    return kept


def _js_key_order(keys: Iterable[str]) -> list[str]:
    """Order keys the way the JavaScript reporters iterate them.

    Integer-like keys come first in ascending numeric order, then the rest in
    insertion order. Istanbul ids are "0", "1", ... so this is normally a no-op.
    """
    keys = list(keys)
    numeric = sorted((k for k in keys if k.isdigit()), key=int)
    return numeric + [k for k in keys if not k.isdigit()]


class InstrumentationMap(BaseModel):
    """One file's entry from an Istanbul ``coverage-final.json``."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    path: str | None = None
    statement_map: dict[str, SourceSpan] = Field(default_factory=dict, alias="statementMap")
    statement_hits: dict[str, int] = Field(default_factory=dict, alias="s")
    function_map: dict[str, FunctionSpan] = Field(default_factory=dict, alias="fnMap")
    function_hits: dict[str, int] = Field(default_factory=dict, alias="f")

    @model_validator(mode="before")
    @classmethod
    def _drop_malformed_entries(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        data = dict(data)
        for keys, adapter in (
            (("statementMap", "statement_map"), _SPAN),
            (("s", "statement_hits"), _HITS),
            (("fnMap", "function_map"), _FUNCTION),
            (("f", "function_hits"), _HITS),
        ):
            for key in keys:
                if key in data:
                    data[key] = _keep_valid(data[key], adapter)
        return data

    def statement_lines(self) -> Iterator[tuple[int, int]]:
        """(start line, hits) for every statement present in both map and hits."""
        for key in _js_key_order(self.statement_map):
            if key in self.statement_hits:
                yield self.statement_map[key].start.line, self.statement_hits[key]

    def function_lines(self) -> Iterator[tuple[int, int]]:
        """(declaration line, hits) for every function present in both map and hits."""
        for key in _js_key_order(self.function_map):
            line = self.function_map[key].start_line
            if line is not None and key in self.function_hits:
                yield line, self.function_hits[key]

    def line_hits(self, line_count: int | None = None) -> Iterator[tuple[int, int]]:
        # Statements first, then functions
        for line, hits in chain(self.statement_lines(), self.function_lines()):
            if line_count is None or line <= line_count:
                yield line, hits


# =============================================================================
# Go coverage profile blocks
# =============================================================================


@dataclass(frozen=True, slots=True)
class CoverageBlock:
    """One ``file:sl.sc,el.ec numstmt count`` line of a Go coverage profile."""

    start_line: int
    start_col: int
    end_line: int
    end_col: int
    num_stmt: int
    count: int


@dataclass(slots=True)
class BlockProfile:
    """All blocks recorded for one Go source file, in profile order."""

    blocks: list[CoverageBlock] = field(default_factory=list)

    def line_hits(self, line_count: int | None = None) -> Iterator[tuple[int, int]]:
        # Every line a block spans gets the block's count
        for block in self.blocks:
            end_line = block.end_line if line_count is None else min(block.end_line, line_count)
            for line in range(block.start_line, end_line + 1):
                yield line, block.count


# =============================================================================
# Normalized results
# =============================================================================


@dataclass(frozen=True, slots=True)
class NormalizedFileReport:
    """Line-granular coverage for one source file.

    ``coverage[i]`` belongs to line i + 1: None when the line carries no
    instrumentation, otherwise its hit count.
    """

    path: str  # project-relative, POSIX separators
    source: str
    coverage: list[int | None]

    @property
    def lines_found(self) -> int:
        """Number of instrumented lines."""
        return sum(1 for hits in self.coverage if hits is not None)

    @property
    def lines_hit(self) -> int:
        """Number of instrumented lines with at least one hit."""
        return sum(1 for hits in self.coverage if hits is not None and hits > 0)


@dataclass(frozen=True, slots=True)
class AggregateSummary:
    """Run-wide totals over all normalized files."""

    files_processed: int
    files_total: int
    total_instrumented_lines: int
    total_covered_lines: int
    overall_percentage: float
