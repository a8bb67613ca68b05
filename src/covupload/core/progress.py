"""Operator-facing progress output for the upload CLI.

Design principles:
- Section headers and status lines go to stderr through Rich
- Progress bar only on a TTY and when iterating >100 files
- Graceful degradation in non-TTY (CI, pipes)
- structlog console output is paused while a spinner is live

Usage::

    from covupload.core.progress import progress, spinner, status

    status("Reading coverage data...", style="header")
    for path, entry in progress(files, desc="Converting"):
        ...
    with spinner("Uploading"):
        send()
    status("Coverage uploaded successfully!", style="success")
"""

from __future__ import annotations

import sys
import threading
from collections.abc import Iterable, Iterator
from contextlib import contextmanager
from typing import TypeVar

import structlog
from rich.console import Console
from rich.markup import escape
from rich.progress import BarColumn, Progress, TaskProgressColumn, TextColumn

log = structlog.get_logger()

_PROGRESS_THRESHOLD = 100

T = TypeVar("T")

_console = Console(stderr=True)

_STYLES = {
    "header": "[bold]==>[/bold] ",
    "success": "[green]✓[/green] ",
    "error": "[red]✗[/red] ",
    "warning": "[yellow]![/yellow] ",
    "info": "   ",
    "none": "",
}

_suppress_console_logs = threading.local()


def is_console_suppressed() -> bool:
    """Check if console logging is currently suppressed."""
    return getattr(_suppress_console_logs, "active", False)


@contextmanager
def suppress_console_logs() -> Iterator[None]:
    """Suppress structlog console output for the duration of the block."""
    _suppress_console_logs.active = True
    try:
        yield
    finally:
        _suppress_console_logs.active = False


def _is_tty() -> bool:
    return hasattr(sys.stderr, "isatty") and sys.stderr.isatty()


def status(message: str, *, style: str = "info", indent: int = 0) -> None:
    """Print a styled status message to stderr.

    ``message`` is plain text: paths like ``app/[id]/page.tsx`` print as given.
    """
    prefix = _STYLES.get(style, "")
    padding = " " * indent
    _console.print(f"{padding}{prefix}{escape(message)}", highlight=False, markup=True)
    log.debug("status", message=message, style=style)


def progress(
    iterable: Iterable[T],
    *,
    desc: str | None = None,
    total: int | None = None,
    unit: str = "files",
) -> Iterator[T]:
    """Wrap an iterable with a progress bar if TTY and >100 items."""
    if total is None:
        try:
            total = len(iterable)  # type: ignore[arg-type]
        except TypeError:
            total = None

    show_bar = _is_tty() and total is not None and total > _PROGRESS_THRESHOLD

    if show_bar:
        with (
            suppress_console_logs(),
            Progress(
                TextColumn("    {task.description}:"),
                BarColumn(bar_width=25, style="cyan", complete_style="cyan"),
                TaskProgressColumn(),
                TextColumn("{task.completed}/{task.total} {task.fields[unit]}"),
                console=_console,
                transient=True,
            ) as pbar,
        ):
            task_id = pbar.add_task(desc or "Processing", total=total, unit=unit)
            for item in iterable:
                yield item
                pbar.advance(task_id)
    else:
        yield from iterable


@contextmanager
def spinner(message: str, *, indent: int = 0) -> Iterator[None]:
    """Show a spinner while the block runs (plain line on non-TTY)."""
    padding = " " * indent
    if _is_tty():
        with (
            suppress_console_logs(),
            _console.status(f"{padding}[cyan]{escape(message)}[/cyan]", spinner="dots"),
        ):
            yield
    else:
        _console.print(f"{padding}{escape(message)}...", highlight=False)
        yield
