"""structlog setup for covupload.

Every record, ours and those of httpx or pygit2 callers, is rendered by one
stderr handler so console and JSON output look the same regardless of origin.
While a spinner owns the terminal the handler drops records instead of
tearing the live line.
"""

from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING
from uuid import uuid4

import structlog

if TYPE_CHECKING:
    from covupload.config.models import LoggingConfig

# Libraries that log every request at INFO
_CHATTY_LOGGERS = ("httpx", "httpcore")


class _SpinnerFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:  # noqa: ARG002
        from covupload.core.progress import is_console_suppressed

        return not is_console_suppressed()


def bind_run_id() -> str:
    """Tag the log lines that follow in this context with a fresh run id."""
    run_id = uuid4().hex[:12]
    structlog.contextvars.bind_contextvars(run_id=run_id)
    return run_id


def configure_logging(config: LoggingConfig | None = None) -> None:
    """Route structlog through a single stderr handler.

    Safe to call repeatedly; the CLI configures once at startup and again
    after the project configuration is known.
    """
    from covupload.config.models import LoggingConfig

    config = config or LoggingConfig()
    level = logging.getLevelNamesMapping()[config.level]

    pre_chain: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
    ]
    renderer: structlog.types.Processor
    if config.format == "json":
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())

    structlog.configure(
        processors=[*pre_chain, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(processor=renderer, foreign_pre_chain=pre_chain)
    )
    handler.addFilter(_SpinnerFilter())

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level)

    for name in _CHATTY_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))
