"""covupload convert - write the upload job as JSON instead of sending it."""

from pathlib import Path

import click

from covupload.cli.options import config_options, resolve_config
from covupload.cli.upload import prepare_envelope
from covupload.core.progress import status


@click.command()
@config_options
@click.option(
    "-o",
    "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Write the job to this file instead of stdout",
)
@click.pass_context
def convert_command(
    ctx: click.Context,
    output: Path | None,
    project_root: Path | None,
    format_id: str | None,
    coverage_file: str | None,
    coverage_dir: str | None,
    url: str | None,
    token: str | None,
) -> None:
    """Convert coverage to the Coveralls job format without uploading."""
    config = resolve_config(
        ctx,
        project_root=project_root,
        format_id=format_id,
        coverage_file=coverage_file,
        coverage_dir=coverage_dir,
        url=url,
        token=token,
    )
    envelope = prepare_envelope(config)

    if output is None:
        click.echo(envelope.to_json())
        return

    output.write_text(envelope.to_json(), encoding="utf-8")
    status(f"Wrote {output}", style="success")
