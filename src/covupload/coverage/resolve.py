"""Source text lookup and path naming for instrumented files."""

from pathlib import Path

import structlog

log = structlog.get_logger()


def read_source(path: Path) -> str | None:
    """Read the original source of an instrumented file.

    Returns None, after logging a warning, when the file cannot be read.
    """
    try:
        # newline="" keeps the text byte-for-byte so line numbers match
        with path.open(encoding="utf-8", newline="") as f:
            return f.read()
    except (OSError, UnicodeDecodeError) as e:
        log.warning("resolve.source_unreadable", path=str(path), error=str(e))
        return None


def relative_name(path: Path, root: Path) -> str:
    """Name a source file relative to the project root, POSIX style.

    Files outside the root keep their path as given.
    """
    try:
        rel = path.resolve().relative_to(root.resolve())
    except ValueError:
        return path.as_posix()
    return rel.as_posix()
