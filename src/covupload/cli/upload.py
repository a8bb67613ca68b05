"""covupload upload - convert the coverage artifact and send it to the service."""

import json
from pathlib import Path

import click

from covupload.cli.options import config_options, resolve_config
from covupload.config import UploadConfig
from covupload.core.errors import CovUploadError
from covupload.core.logging import bind_run_id
from covupload.core.progress import spinner, status
from covupload.pipeline import prepare
from covupload.upload import (
    TransportFailure,
    UploadEnvelope,
    UploadFailure,
    UploadSuccess,
    upload,
)
from covupload.vcs import read_git_metadata


def prepare_envelope(config: UploadConfig) -> UploadEnvelope:
    """Read git metadata and the artifact, printing progress; shared with convert."""
    status("Reading coverage data...", style="header")
    git = read_git_metadata(config.root)

    status("Converting coverage to Coveralls format...", style="header")
    try:
        summary, envelope, skipped = prepare(config, git)
    except CovUploadError as e:
        raise click.ClickException(str(e)) from e

    for path in skipped:
        status(f"Warning: Could not read source file: {path}", style="warning")

    status(f"Branch: {envelope.git.branch}")
    status(f"Commit: {envelope.git.head.id[:8]}")
    status(f"Processed {summary.files_processed}/{summary.files_total} files")
    status(
        f"Overall coverage: {summary.overall_percentage:.2f}% "
        f"({summary.total_covered_lines}/{summary.total_instrumented_lines} lines)"
    )
    return envelope


@click.command()
@config_options
@click.pass_context
def upload_command(
    ctx: click.Context,
    project_root: Path | None,
    format_id: str | None,
    coverage_file: str | None,
    coverage_dir: str | None,
    url: str | None,
    token: str | None,
) -> None:
    """Convert coverage and upload it in a single attempt.

    Exits 0 only when the service accepts the upload.
    """
    config = resolve_config(
        ctx,
        project_root=project_root,
        format_id=format_id,
        coverage_file=coverage_file,
        coverage_dir=coverage_dir,
        url=url,
        token=token,
    )
    bind_run_id()

    envelope = prepare_envelope(config)

    status(f"Uploading coverage to {config.url}...", style="header")
    with spinner("Uploading", indent=3):
        outcome = upload(envelope, config.url, timeout=config.timeout_sec)

    match outcome:
        case UploadSuccess(body=body):
            status("Coverage uploaded successfully!", style="success")
            click.echo(body if isinstance(body, str) else json.dumps(body, indent=2))
        case UploadFailure(status_code=code, body=body):
            status(f"Upload failed with status code {code}", style="error")
            click.echo(body, err=True)
            ctx.exit(1)
        case TransportFailure(cause=cause):
            status(f"Upload failed: {cause}", style="error")
            ctx.exit(1)
