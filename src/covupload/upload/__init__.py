"""Upload job assembly and submission."""

from covupload.upload.client import upload
from covupload.upload.models import (
    GitHead,
    GitInfo,
    SourceFile,
    TransportFailure,
    UploadEnvelope,
    UploadFailure,
    UploadResult,
    UploadSuccess,
)
from covupload.upload.payload import (
    DEFAULT_BRANCH,
    DEFAULT_COMMIT_ID,
    DEFAULT_COMMIT_MESSAGE,
    build_envelope,
)

__all__ = [
    # Models
    "GitHead",
    "GitInfo",
    "SourceFile",
    "UploadEnvelope",
    # Results
    "TransportFailure",
    "UploadFailure",
    "UploadResult",
    "UploadSuccess",
    # Payload
    "DEFAULT_BRANCH",
    "DEFAULT_COMMIT_ID",
    "DEFAULT_COMMIT_MESSAGE",
    "build_envelope",
    # Client
    "upload",
]
