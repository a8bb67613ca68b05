"""Instrumentation reader protocol."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Protocol

from covupload.coverage.models import LineSignals


@dataclass(slots=True)
class Artifact:
    """Parsed instrumentation artifact.

    ``files`` maps each source path as recorded by the instrumenter
    (normally absolute) to its line signals, in artifact order.
    """

    format_id: str
    path: Path
    files: dict[str, LineSignals] = field(default_factory=dict)


class InstrumentationReader(Protocol):
    """Protocol for artifact readers.

    Each reader handles one instrumentation format and converts it to
    per-file LineSignals.
    """

    @property
    def format_id(self) -> str:
        """Format identifier (e.g., 'istanbul', 'gocov')."""
        ...

    def can_read(self, path: Path) -> bool:
        """Check if this reader can handle the given file.

        Uses file name and content sniffing for auto-detection.
        """
        ...

    def read(self, path: Path) -> Artifact:
        """Read an artifact file.

        Raises:
            ArtifactError: If the file is missing or cannot be parsed.
        """
        ...
