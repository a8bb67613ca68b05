"""Root conftest.py for test configuration.

Ensures local src/ directory takes priority over any installed packages and
isolates every test from the caller's environment and global config.
"""

import json
import logging
import os
import sys
from collections.abc import Callable, Iterator
from pathlib import Path
from typing import Any

import pytest
import structlog

_src_dir = Path(__file__).parent.parent / "src"
if str(_src_dir) not in sys.path:
    sys.path.insert(0, str(_src_dir))

for module_name in list(sys.modules.keys()):
    if module_name.startswith("covupload"):
        del sys.modules[module_name]

_ENV_VARS = ("LIBRECOV_URL", "PROJECT_TOKEN", "COVERAGE_DIR")


@pytest.fixture(autouse=True)
def isolated_config(
    tmp_path_factory: pytest.TempPathFactory, monkeypatch: pytest.MonkeyPatch
) -> Iterator[None]:
    """Strip covupload env vars and point the global config at an empty dir.

    Logging set up by a test is torn down afterwards so no handler outlives
    the captured stream it writes to.
    """
    for name in list(os.environ):
        if name in _ENV_VARS or name.upper().startswith("COVUPLOAD__"):
            monkeypatch.delenv(name, raising=False)

    global_dir = tmp_path_factory.mktemp("global-config")
    monkeypatch.setattr(
        "covupload.config.loader.GLOBAL_CONFIG_PATH", global_dir / "config.yaml"
    )

    yield

    logging.getLogger().handlers.clear()
    structlog.reset_defaults()
    structlog.contextvars.clear_contextvars()


def istanbul_entry(
    path: Path,
    statements: dict[str, tuple[int, int]] | None = None,
    functions: dict[str, tuple[int, int]] | None = None,
) -> dict[str, Any]:
    """Build a coverage-final.json entry.

    statements/functions map an id to (line, hits).
    """
    statements = statements or {}
    functions = functions or {}
    return {
        "path": str(path),
        "statementMap": {
            key: {"start": {"line": line, "column": 0}, "end": {"line": line, "column": 10}}
            for key, (line, _) in statements.items()
        },
        "s": {key: hits for key, (_, hits) in statements.items()},
        "fnMap": {
            key: {
                "name": f"fn{key}",
                "decl": {"start": {"line": line, "column": 9}, "end": {"line": line, "column": 12}},
                "loc": {"start": {"line": line, "column": 0}, "end": {"line": line + 2, "column": 1}},
                "line": line,
            }
            for key, (line, _) in functions.items()
        },
        "f": {key: hits for key, (_, hits) in functions.items()},
        "branchMap": {},
        "b": {},
    }


@pytest.fixture
def make_project(tmp_path: Path) -> Callable[..., Path]:
    """Create a project with sources and coverage/coverage-final.json.

    Usage::

        root = make_project(
            sources={"src/a.js": "line1\\nline2\\n"},
            coverage={"src/a.js": {"statements": {"0": (1, 3)}}},
        )
    """

    def _make(
        sources: dict[str, str],
        coverage: dict[str, dict[str, dict[str, tuple[int, int]]]],
    ) -> Path:
        root = tmp_path / "project"
        root.mkdir(exist_ok=True)
        for rel, text in sources.items():
            file_path = root / rel
            file_path.parent.mkdir(parents=True, exist_ok=True)
            file_path.write_text(text)

        data = {}
        for rel, spec in coverage.items():
            abs_path = root / rel
            data[str(abs_path)] = istanbul_entry(
                abs_path, spec.get("statements"), spec.get("functions")
            )

        coverage_dir = root / "coverage"
        coverage_dir.mkdir(exist_ok=True)
        (coverage_dir / "coverage-final.json").write_text(json.dumps(data))
        return root

    return _make
