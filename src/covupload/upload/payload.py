"""Upload job assembly."""

from collections.abc import Iterable

from covupload.config.models import DEFAULT_SERVICE_NAME
from covupload.core.errors import ConfigError
from covupload.upload.models import GitHead, GitInfo, SourceFile, UploadEnvelope

# Values the receiving service expects when git metadata is unavailable
DEFAULT_BRANCH = "main"
DEFAULT_COMMIT_ID = "unknown"
DEFAULT_COMMIT_MESSAGE = "No commit message"


def build_envelope(
    source_files: Iterable[SourceFile],
    token: str | None,
    branch: str | None = None,
    commit_id: str | None = None,
    commit_message: str | None = None,
    *,
    service_name: str = DEFAULT_SERVICE_NAME,
) -> UploadEnvelope:
    """Assemble the upload job.

    Empty or missing git values fall back to DEFAULT_BRANCH,
    DEFAULT_COMMIT_ID and DEFAULT_COMMIT_MESSAGE.

    Raises:
        ConfigError: If the token is empty.
    """
    if not token or not token.strip():
        raise ConfigError.missing_required("project_token")

    return UploadEnvelope(
        repo_token=token,
        service_name=service_name,
        git=GitInfo(
            branch=branch or DEFAULT_BRANCH,
            head=GitHead(
                id=commit_id or DEFAULT_COMMIT_ID,
                message=commit_message or DEFAULT_COMMIT_MESSAGE,
            ),
        ),
        source_files=list(source_files),
    )
