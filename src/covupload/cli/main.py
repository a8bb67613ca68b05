"""covupload CLI."""

import click

from covupload import __version__
from covupload.cli.convert import convert_command
from covupload.cli.upload import upload_command
from covupload.config import LoggingConfig
from covupload.core.logging import configure_logging


@click.group()
@click.version_option(version=__version__, prog_name="covupload")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """Convert test coverage to Coveralls format and upload it."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    configure_logging(LoggingConfig(level="DEBUG") if verbose else None)


cli.add_command(upload_command, name="upload")
cli.add_command(convert_command, name="convert")


if __name__ == "__main__":
    cli()
