"""Coveralls-compatible upload job.

Serialized shape:

    {
      "repo_token": "...",
      "service_name": "manual",
      "git": {"branch": "main", "head": {"id": "<sha>", "message": "..."}},
      "source_files": [
        {"name": "src/app.ts", "source": "...", "coverage": [null, 1, 0]}
      ]
    }

``coverage[i]`` is the hit count of line i + 1, null when the line is not
instrumented.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import httpx
from pydantic import BaseModel, Field


class SourceFile(BaseModel):
    name: str
    source: str
    coverage: list[int | None]


class GitHead(BaseModel):
    id: str
    message: str


class GitInfo(BaseModel):
    branch: str
    head: GitHead


class UploadEnvelope(BaseModel):
    repo_token: str
    service_name: str
    git: GitInfo
    source_files: list[SourceFile] = Field(default_factory=list)

    def to_json(self) -> str:
        return self.model_dump_json()


# =============================================================================
# Upload outcome
# =============================================================================


@dataclass(frozen=True, slots=True)
class UploadSuccess:
    """Service answered 200. ``body`` is the parsed acknowledgement, or the raw
    text when it is not JSON."""

    body: Any


@dataclass(frozen=True, slots=True)
class UploadFailure:
    """Service answered with any other status."""

    status_code: int
    body: str


@dataclass(frozen=True, slots=True)
class TransportFailure:
    """No HTTP response: DNS failure, refused connection, timeout."""

    cause: httpx.TransportError


UploadResult = UploadSuccess | UploadFailure | TransportFailure
