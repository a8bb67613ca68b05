"""Conversion pipeline.

artifact -> source lookup -> per-file normalization -> aggregation
-> upload job. Sending the job is left to the caller (see upload.client).

Everything here runs sequentially in the calling thread and keeps no state
between runs.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

import structlog

from covupload.config.models import UploadConfig
from covupload.core.errors import ConfigError
from covupload.core.progress import progress
from covupload.coverage import (
    AggregateSummary,
    Artifact,
    NormalizedFileReport,
    aggregate,
    normalize,
    read_artifact,
    read_source,
    relative_name,
)
from covupload.upload import UploadEnvelope, build_envelope
from covupload.vcs import GitMetadata

log = structlog.get_logger()


@dataclass(slots=True)
class Conversion:
    """Normalized files plus the artifact entries whose sources were unreadable."""

    reports: list[NormalizedFileReport] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)

    @property
    def files_total(self) -> int:
        return len(self.reports) + len(self.skipped)


def convert(artifact: Artifact, root: Path) -> Conversion:
    """Normalize every file of an artifact against its source text.

    Files whose source cannot be read are skipped and recorded.
    """
    conversion = Conversion()
    for file_path, signals in progress(list(artifact.files.items()), desc="Converting"):
        path = Path(file_path)
        if not path.is_absolute():
            path = root / path

        source = read_source(path)
        if source is None:
            conversion.skipped.append(file_path)
            continue

        conversion.reports.append(
            NormalizedFileReport(
                path=relative_name(path, root),
                source=source,
                coverage=normalize(signals, source),
            )
        )
    return conversion


def prepare(
    config: UploadConfig, git: GitMetadata
) -> tuple[AggregateSummary, UploadEnvelope, list[str]]:
    """Read, convert, and aggregate; build the upload job without sending it.

    Raises:
        ConfigError: If no project token is configured (checked first).
        ArtifactError: If the artifact is missing or unreadable.
    """
    if not config.project_token or not config.project_token.strip():
        raise ConfigError.missing_required("project_token")

    artifact = read_artifact(config.artifact_path, format_id=config.format)
    log.info(
        "pipeline.artifact_read",
        path=str(artifact.path),
        format=artifact.format_id,
        files=len(artifact.files),
    )

    conversion = convert(artifact, config.root)

    summary, source_files = aggregate(conversion.reports, conversion.files_total)
    envelope = build_envelope(
        source_files,
        config.project_token,
        git.branch,
        git.commit_id,
        git.commit_message,
        service_name=config.service_name,
    )
    return summary, envelope, conversion.skipped
