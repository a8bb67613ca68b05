"""Entry point for ``python -m covupload``."""

from covupload.cli.main import cli

if __name__ == "__main__":
    cli()
