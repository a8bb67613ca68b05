"""Core module exports."""

from covupload.core.errors import (
    ArtifactError,
    ConfigError,
    CovUploadError,
    ErrorCode,
)
from covupload.core.logging import bind_run_id, configure_logging
from covupload.core.progress import progress, spinner, status

__all__ = [
    # Errors
    "ArtifactError",
    "ConfigError",
    "CovUploadError",
    "ErrorCode",
    # Logging
    "bind_run_id",
    "configure_logging",
    # Progress
    "progress",
    "spinner",
    "status",
]
