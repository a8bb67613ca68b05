"""Instrumentation reader registry and auto-detection.

This module provides:
- READER_REGISTRY: All available readers
- detect_reader: Auto-detect format from a file
- read_artifact: Convenience function to read with auto-detection
"""

from collections.abc import Sequence
from pathlib import Path

from covupload.core.errors import ArtifactError

from .base import Artifact, InstrumentationReader
from .gocov import GoProfileReader
from .istanbul import IstanbulReader

# Reader registry - order matters for detection priority
READER_REGISTRY: Sequence[InstrumentationReader] = (
    GoProfileReader(),  # Go .out files (very specific format)
    IstanbulReader(),  # JS coverage-final.json
)

READER_BY_FORMAT: dict[str, InstrumentationReader] = {r.format_id: r for r in READER_REGISTRY}

__all__ = [
    "READER_BY_FORMAT",
    "READER_REGISTRY",
    "Artifact",
    "GoProfileReader",
    "InstrumentationReader",
    "IstanbulReader",
    "detect_reader",
    "read_artifact",
]


def detect_reader(path: Path) -> InstrumentationReader | None:
    """Return the first registered reader that claims the file."""
    for reader in READER_REGISTRY:
        if reader.can_read(path):
            return reader
    return None


def read_artifact(path: Path, *, format_id: str | None = None) -> Artifact:
    """Read an instrumentation artifact.

    Args:
        path: Path to the artifact file.
        format_id: Force specific format (skip auto-detection).

    Raises:
        ArtifactError: If the file is missing, the format is unknown,
            or parsing fails.
    """
    if not path.is_file():
        raise ArtifactError.not_found(str(path))

    if format_id:
        reader = READER_BY_FORMAT.get(format_id)
        if reader is None:
            raise ArtifactError.unknown_format(str(path), sorted(READER_BY_FORMAT))
    else:
        reader = detect_reader(path)
        if reader is None:
            raise ArtifactError.unknown_format(str(path), sorted(READER_BY_FORMAT))

    return reader.read(path)
