"""Tests for instrumentation records in coverage/models.py."""

from covupload.coverage.models import (
    BlockProfile,
    CoverageBlock,
    FunctionSpan,
    InstrumentationMap,
    NormalizedFileReport,
)


def _span(line: int) -> dict[str, dict[str, int]]:
    return {"start": {"line": line, "column": 0}, "end": {"line": line, "column": 5}}


class TestInstrumentationMap:
    """Validation and signal ordering for Istanbul entries."""

    def test_parses_wire_keys(self) -> None:
        entry = InstrumentationMap.model_validate(
            {
                "path": "/p/a.js",
                "statementMap": {"0": _span(1)},
                "s": {"0": 4},
                "fnMap": {"0": {"name": "f", "decl": _span(2), "loc": _span(2)}},
                "f": {"0": 1},
                "branchMap": {"0": {"type": "if"}},
                "b": {"0": [1, 0]},
            }
        )

        assert entry.path == "/p/a.js"
        assert entry.statement_hits == {"0": 4}
        assert list(entry.line_hits()) == [(1, 4), (2, 1)]

    def test_statements_come_before_functions(self) -> None:
        entry = InstrumentationMap.model_validate(
            {
                "statementMap": {"0": _span(5)},
                "s": {"0": 0},
                "fnMap": {"0": {"loc": _span(1)}},
                "f": {"0": 2},
            }
        )

        assert list(entry.line_hits()) == [(5, 0), (1, 2)]

    def test_hit_without_map_entry_ignored(self) -> None:
        entry = InstrumentationMap.model_validate(
            {"statementMap": {"0": _span(1)}, "s": {"0": 1, "7": 9}}
        )

        assert list(entry.statement_lines()) == [(1, 1)]

    def test_map_entry_without_hit_ignored(self) -> None:
        entry = InstrumentationMap.model_validate(
            {"statementMap": {"0": _span(1), "1": _span(2)}, "s": {"0": 1}}
        )

        assert list(entry.statement_lines()) == [(1, 1)]

    def test_malformed_entries_dropped_individually(self) -> None:
        """One bad statement does not take the rest of the file with it."""
        entry = InstrumentationMap.model_validate(
            {
                "statementMap": {"0": _span(1), "1": "garbage", "2": {"start": {}}, "3": _span(4)},
                "s": {"0": 1, "1": 1, "2": 1, "3": -2},
            }
        )

        assert set(entry.statement_map) == {"0", "3"}
        assert entry.statement_hits == {"0": 1, "1": 1, "2": 1}
        assert list(entry.statement_lines()) == [(1, 1)]

    def test_non_mapping_sections_treated_as_empty(self) -> None:
        entry = InstrumentationMap.model_validate({"statementMap": [], "s": None, "fnMap": 3})

        assert list(entry.line_hits()) == []

    def test_numeric_keys_iterated_in_numeric_order(self) -> None:
        entry = InstrumentationMap.model_validate(
            {
                "statementMap": {"10": _span(3), "2": _span(3)},
                "s": {"10": 7, "2": 3},
            }
        )

        assert list(entry.statement_lines()) == [(3, 3), (3, 7)]

    def test_empty_entry(self) -> None:
        assert list(InstrumentationMap.model_validate({}).line_hits()) == []


class TestFunctionSpan:
    """Declaration line selection."""

    def test_prefers_loc(self) -> None:
        span = FunctionSpan.model_validate({"decl": _span(3), "loc": _span(2), "line": 9})
        assert span.start_line == 2

    def test_falls_back_to_decl(self) -> None:
        assert FunctionSpan.model_validate({"decl": _span(3)}).start_line == 3

    def test_falls_back_to_line(self) -> None:
        assert FunctionSpan.model_validate({"line": 9}).start_line == 9

    def test_no_position(self) -> None:
        assert FunctionSpan.model_validate({"name": "anon"}).start_line is None


class TestBlockProfile:
    """Go block expansion."""

    def test_blocks_cover_every_spanned_line(self) -> None:
        profile = BlockProfile(
            blocks=[
                CoverageBlock(start_line=2, start_col=1, end_line=4, end_col=2, num_stmt=2, count=1),
                CoverageBlock(start_line=6, start_col=1, end_line=6, end_col=9, num_stmt=1, count=0),
            ]
        )

        assert list(profile.line_hits()) == [(2, 1), (3, 1), (4, 1), (6, 0)]

    def test_line_count_caps_block_range(self) -> None:
        profile = BlockProfile(
            blocks=[
                CoverageBlock(start_line=2, start_col=1, end_line=10**9, end_col=1, num_stmt=1, count=3),
                CoverageBlock(start_line=7, start_col=1, end_line=8, end_col=1, num_stmt=1, count=1),
            ]
        )

        assert list(profile.line_hits(4)) == [(2, 3), (3, 3), (4, 3)]


class TestNormalizedFileReport:
    """Line counting properties."""

    def test_counts_ignore_absent_lines(self) -> None:
        report = NormalizedFileReport(path="a.js", source="", coverage=[None, 0, 3, None, 1])
        assert report.lines_found == 3
        assert report.lines_hit == 2

    def test_all_absent(self) -> None:
        report = NormalizedFileReport(path="a.js", source="", coverage=[None, None])
        assert report.lines_found == 0
        assert report.lines_hit == 0
