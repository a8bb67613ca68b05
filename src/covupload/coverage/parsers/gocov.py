"""Go coverage profile reader.

Go test produces coverage profiles with format:
mode: set|count|atomic
<package>/<file>:<startline>.<startcol>,<endline>.<endcol> <numstmt> <count>

Example:
mode: set
github.com/user/pkg/main.go:10.2,12.16 3 1
github.com/user/pkg/main.go:15.2,20.16 5 0

File names are import paths. They are mapped back to the filesystem by
finding the go.mod that declares the module, searching upward from the
profile's directory.
"""

from pathlib import Path

from covupload.core.errors import ArtifactError
from covupload.coverage.models import BlockProfile, CoverageBlock, LineSignals
from covupload.coverage.parsers.base import Artifact


def find_module(start: Path) -> tuple[str, Path] | None:
    """Locate the enclosing go.mod; return (module path, module root)."""
    current = start.resolve()
    while True:
        go_mod = current / "go.mod"
        if go_mod.is_file():
            try:
                text = go_mod.read_text()
            except (OSError, UnicodeDecodeError):
                return None
            for line in text.splitlines():
                if line.startswith("module "):
                    return line[len("module ") :].strip(), current
            return None
        if current.parent == current:
            return None
        current = current.parent


def parse_block(line: str) -> tuple[str, CoverageBlock] | None:
    """Parse one profile line; None when it is malformed."""
    parts = line.split()
    if len(parts) != 3:
        return None

    path_range, num_stmt, count = parts
    colon_idx = path_range.rfind(":")
    if colon_idx == -1:
        return None

    file_name = path_range[:colon_idx]
    range_parts = path_range[colon_idx + 1 :].split(",")
    if len(range_parts) != 2:
        return None

    try:
        start_line, start_col = (int(n) for n in range_parts[0].split("."))
        end_line, end_col = (int(n) for n in range_parts[1].split("."))
        block = CoverageBlock(
            start_line=start_line,
            start_col=start_col,
            end_line=end_line,
            end_col=end_col,
            num_stmt=int(num_stmt),
            count=int(count),
        )
    except ValueError:
        return None
    return file_name, block


class GoProfileReader:
    """Reader for Go coverage profiles."""

    @property
    def format_id(self) -> str:
        return "gocov"

    def can_read(self, path: Path) -> bool:
        """Check if file looks like Go coverage profile."""
        if not path.is_file():
            return False

        if path.suffix == ".out":
            return True

        try:
            with path.open() as f:
                first_line = f.readline().strip()
        except (OSError, UnicodeDecodeError):
            return False
        return first_line.startswith("mode:")

    def read(self, path: Path) -> Artifact:
        if not path.is_file():
            raise ArtifactError.not_found(str(path))

        try:
            content = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise ArtifactError.parse_error(str(path), str(e)) from e

        lines = content.strip().splitlines()
        if not lines:
            return Artifact(format_id=self.format_id, path=path)

        if not lines[0].strip().startswith("mode:"):
            raise ArtifactError.parse_error(str(path), "missing mode line")

        module = find_module(path.parent)
        profiles: dict[str, BlockProfile] = {}

        for line in lines[1:]:
            parsed = parse_block(line.strip())
            if parsed is None:
                continue
            file_name, block = parsed

            if module is not None:
                module_path, module_root = module
                if file_name.startswith(module_path + "/"):
                    file_name = str(module_root / file_name[len(module_path) + 1 :])

            profiles.setdefault(file_name, BlockProfile()).blocks.append(block)

        files: dict[str, LineSignals] = dict(profiles)
        return Artifact(format_id=self.format_id, path=path, files=files)
