"""Istanbul/NYC JSON format reader.

Istanbul (used by Jest, Vitest, NYC) writes coverage-final.json:
{
  "/path/to/file.js": {
    "path": "/path/to/file.js",
    "statementMap": { "0": {"start": {"line": 1, "column": 0}, "end": ...}, ... },
    "s": { "0": 1, "1": 0, ... },  // statement hit counts
    "branchMap": { ... },          // not used for line coverage
    "b": { ... },
    "fnMap": { "0": {"name": "foo", "decl": {...}, "loc": {"start": {"line": 1}}}, ... },
    "f": { "0": 1, ... }  // function hit counts
  }
}
"""

import json
from pathlib import Path

import structlog
from pydantic import ValidationError

from covupload.core.errors import ArtifactError
from covupload.coverage.models import InstrumentationMap, LineSignals
from covupload.coverage.parsers.base import Artifact

log = structlog.get_logger()

ARTIFACT_NAME = "coverage-final.json"


class IstanbulReader:
    """Reader for Istanbul JSON format."""

    @property
    def format_id(self) -> str:
        return "istanbul"

    def can_read(self, path: Path) -> bool:
        """Check if path contains Istanbul coverage data."""
        if not path.is_file():
            return False

        if path.name == ARTIFACT_NAME:
            return True

        # Content sniff for JSON with statementMap
        try:
            with path.open() as f:
                header = f.read(2048)
        except (OSError, UnicodeDecodeError):
            return False
        return '"statementMap"' in header or '"fnMap"' in header

    def read(self, path: Path) -> Artifact:
        if not path.is_file():
            raise ArtifactError.not_found(str(path))

        try:
            with path.open(encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
            raise ArtifactError.parse_error(str(path), str(e)) from e

        if not isinstance(data, dict):
            raise ArtifactError.parse_error(str(path), "top-level value must be an object")

        files: dict[str, LineSignals] = {}
        for file_path, file_data in data.items():
            try:
                files[file_path] = InstrumentationMap.model_validate(file_data)
            except ValidationError as e:
                log.warning(
                    "istanbul.malformed_entry",
                    file=file_path,
                    error=e.errors()[0]["msg"],
                )

        return Artifact(format_id=self.format_id, path=path, files=files)
