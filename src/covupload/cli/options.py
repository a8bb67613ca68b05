"""Options shared by the covupload commands."""

from collections.abc import Callable
from pathlib import Path
from typing import Any, TypeVar

import click

from covupload.config import UploadConfig, load_config
from covupload.core.errors import ConfigError
from covupload.core.logging import configure_logging
from covupload.coverage import READER_BY_FORMAT


F = TypeVar("F", bound=Callable[..., Any])


def config_options(func: F) -> F:
    """Attach the configuration options to a command."""
    options = [
        click.option(
            "--project-root",
            type=click.Path(exists=True, file_okay=False, path_type=Path),
            default=None,
            help="Root that source names are made relative to (default: cwd)",
        ),
        click.option(
            "--format",
            "format_id",
            type=click.Choice(sorted(READER_BY_FORMAT)),
            default=None,
            help="Artifact format (default: auto-detect)",
        ),
        click.option(
            "--coverage-file",
            default=None,
            help="Artifact path (overrides --coverage-dir)",
        ),
        click.option(
            "--coverage-dir",
            default=None,
            help="Directory holding coverage-final.json [env: COVERAGE_DIR]",
        ),
        click.option(
            "--url",
            default=None,
            help="Coverage service base URL [env: LIBRECOV_URL]",
        ),
        click.option(
            "--token",
            default=None,
            help="Project token [env: PROJECT_TOKEN]",
        ),
    ]
    for option in options:
        func = option(func)
    return func


def resolve_config(
    ctx: click.Context,
    *,
    project_root: Path | None,
    format_id: str | None,
    coverage_file: str | None,
    coverage_dir: str | None,
    url: str | None,
    token: str | None,
) -> UploadConfig:
    """Load configuration and set up logging; config errors become CLI errors."""
    try:
        config = load_config(
            project_root,
            format=format_id,
            coverage_file=coverage_file,
            coverage_dir=coverage_dir,
            url=url,
            project_token=token,
        )
    except ConfigError as e:
        raise click.ClickException(str(e)) from e

    logging_config = config.logging
    if ctx.obj and ctx.obj.get("verbose"):
        logging_config = logging_config.model_copy(update={"level": "DEBUG"})
    configure_logging(logging_config)
    return config
