"""Git metadata for the upload job, read via pygit2.

Every field may be None; the payload builder substitutes its defaults.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import pygit2
import structlog

log = structlog.get_logger()

_BRANCH_PREFIX = "refs/heads/"


@dataclass(frozen=True, slots=True)
class GitMetadata:
    """Branch, commit id, and commit message of the checked-out revision."""

    branch: str | None = None
    commit_id: str | None = None
    commit_message: str | None = None


def _current_branch(repo: pygit2.Repository) -> str | None:
    """Current branch name, or None if detached."""
    if repo.head_is_unborn:
        try:
            target = repo.references["HEAD"].target
        except KeyError:
            return None
        if isinstance(target, str) and target.startswith(_BRANCH_PREFIX):
            return target[len(_BRANCH_PREFIX) :]
        return None
    if repo.head_is_detached:
        return None
    return repo.head.shorthand


def read_git_metadata(path: Path | str) -> GitMetadata:
    """Describe HEAD of the repository containing ``path``.

    Outside a repository every field is None. An unborn HEAD yields only the
    branch name.
    """
    repo_path = pygit2.discover_repository(str(path))
    if repo_path is None:
        log.debug("vcs.not_a_repository", path=str(path))
        return GitMetadata()

    try:
        repo = pygit2.Repository(repo_path)
    except pygit2.GitError as e:
        log.warning("vcs.open_failed", path=str(path), error=str(e))
        return GitMetadata()

    branch = _current_branch(repo)
    if repo.head_is_unborn:
        return GitMetadata(branch=branch)

    commit = repo.head.peel(pygit2.Commit)
    return GitMetadata(
        branch=branch,
        commit_id=str(commit.id),
        commit_message=commit.message.strip() or None,
    )
