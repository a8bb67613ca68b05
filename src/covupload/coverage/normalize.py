"""Reduce statement/function hit data to one value per physical line.

Merge rule, applied to every (line, hits) signal in order:

- an absent line takes the signal's count, zero included;
- a present line is overwritten only by a positive count.

A line is therefore reported executed if any signal says so, and a later
zero never hides an earlier hit. Two positive signals on the same line keep
the later one; counts are not maximized.
"""

from covupload.coverage.models import LineSignals


def count_lines(source: str) -> int:
    """Number of lines the coverage array must have for ``source``.

    Splits on newline only, so text ending in "\\n" has a final empty line.
    """
    return source.count("\n") + 1


def merge_hit(current: int | None, hits: int) -> int | None:
    if current is None or hits > 0:
        return hits
    return current


def normalize(instrumentation: LineSignals, source: str) -> list[int | None]:
    """Build the per-line coverage array for one file.

    Args:
        instrumentation: Parsed instrumentation for the file.
        source: The exact text that was instrumented.

    Returns:
        List with one entry per line of ``source``. Signals pointing outside
        the file are dropped.
    """
    coverage: list[int | None] = [None] * count_lines(source)
    for line, hits in instrumentation.line_hits(len(coverage)):
        index = line - 1
        if 0 <= index < len(coverage):
            coverage[index] = merge_hit(coverage[index], hits)
    return coverage
