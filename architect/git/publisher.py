"""Creates a git commit from a generated message."""

from __future__ import annotations

from pathlib import Path
from typing import Awaitable, Callable

from ..logging import get_logger
from .diff import GitCommandError, run_git

Runner = Callable[..., Awaitable[str]]


class GitCommitter:
    """Commits the staged changes of a repository with a given message.

    ``repo_path`` may be any directory inside the work tree; git resolves
    the repository itself, the same way the diff collector does.
    """

    def __init__(self, runner: Runner | None = None) -> None:
        self._runner = runner or run_git
        self.logger = get_logger("git.publisher")

    async def commit(self, repo_path: str | Path, message: str) -> bool:
        """Create a commit from the index; returns False when nothing is staged."""
        repo = Path(repo_path)
        try:
            inside = await self._runner(["git", "rev-parse", "--is-inside-work-tree"], cwd=repo)
        except (GitCommandError, OSError) as exc:
            self.logger.debug("%s is not a git work tree: %s", repo, exc)
            return False
        if inside.strip() != "true":
            return False

        staged = await self._runner(["git", "diff", "--cached", "--name-only"], cwd=repo)
        if not staged.strip():
            return False

        await self._runner(["git", "commit", "-m", message], cwd=repo)
        return True


__all__ = ["GitCommitter"]
