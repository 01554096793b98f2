"""Diff acquisition for commit message generation."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Awaitable, Callable, Optional, Sequence

from ..logging import get_logger
from ..models import DiffPayload

DIFF_CHAR_LIMIT = 10_000
TRUNCATION_MARKER = "\n... (truncated)"

Runner = Callable[..., Awaitable[str]]


class GitCommandError(RuntimeError):
    """Raised by the default runner when a git command exits non-zero."""

    def __init__(self, args: Sequence[str], returncode: int, stderr: str) -> None:
        self.returncode = returncode
        self.stderr = stderr
        detail = stderr.strip() or f"exit code {returncode}"
        super().__init__(f"{' '.join(args)} failed: {detail}")


class DiffCollector:
    """Collects a diff from the staged tier, falling back to the working tree.

    Tiers are tried in fixed order: ``git diff --cached`` first, then
    ``git diff HEAD``. A tier that fails or yields only whitespace is treated
    as absent. Staged changes always win when both tiers have content.
    """

    TIERS: Sequence[tuple[str, tuple[str, ...]]] = (
        ("staged", ("git", "diff", "--cached")),
        ("head", ("git", "diff", "HEAD")),
    )

    def __init__(self, runner: Runner | None = None, *, limit: int = DIFF_CHAR_LIMIT) -> None:
        self._runner = runner or run_git
        self.limit = limit
        self.logger = get_logger("git.diff")

    async def collect(self, repo_path: str | Path) -> Optional[DiffPayload]:
        """Return the first non-empty tier, truncated, or ``None`` when nothing changed."""
        cwd = Path(repo_path)
        for source, args in self.TIERS:
            text = await self._try_tier(args, cwd)
            if text is None or not text.strip():
                self.logger.debug("Diff tier '%s' produced no changes", source)
                continue
            truncated = len(text) > self.limit
            if truncated:
                self.logger.info(
                    "Diff from '%s' is %d chars; truncating to %d", source, len(text), self.limit
                )
                text = text[: self.limit] + TRUNCATION_MARKER
            return DiffPayload(text=text, source=source, truncated=truncated)
        return None

    async def _try_tier(self, args: Sequence[str], cwd: Path) -> Optional[str]:
        try:
            return await self._runner(list(args), cwd=cwd)
        except (GitCommandError, OSError) as exc:
            self.logger.debug("%s unavailable: %s", " ".join(args), exc)
            return None


async def run_git(args: Sequence[str], *, cwd: Path) -> str:
    """Run a git command without blocking the event loop and return stdout."""
    process = await asyncio.create_subprocess_exec(
        *args,
        cwd=str(cwd),
        stdout=asyncio.subprocess.PIPE,
        stderr=asyncio.subprocess.PIPE,
    )
    stdout, stderr = await process.communicate()
    if process.returncode != 0:
        raise GitCommandError(args, process.returncode or 0, stderr.decode("utf-8", errors="replace"))
    return stdout.decode("utf-8", errors="replace")


__all__ = ["DIFF_CHAR_LIMIT", "DiffCollector", "GitCommandError", "TRUNCATION_MARKER", "run_git"]
