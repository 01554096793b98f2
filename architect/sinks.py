"""Output ports the flows write their result to, once per invocation."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Optional, Protocol, TextIO, runtime_checkable

from .git.publisher import GitCommitter
from .logging import get_logger


@runtime_checkable
class ReportSink(Protocol):
    """Receives the Markdown report of an analysis flow."""

    async def publish(self, report: str) -> None: ...


@runtime_checkable
class MessageSink(Protocol):
    """Receives the commit message of a commit flow."""

    async def publish(self, message: str) -> None: ...


class ConsoleSink:
    """Writes text to a stream (stdout by default)."""

    def __init__(self, stream: Optional[TextIO] = None) -> None:
        self._stream = stream

    async def publish(self, text: str) -> None:
        stream = self._stream or sys.stdout
        stream.write(text.rstrip("\n") + "\n")
        stream.flush()


class MarkdownFileSink:
    """Writes the report to a Markdown file, replacing previous content."""

    def __init__(self, path: Path) -> None:
        self.path = path
        self.logger = get_logger("sinks")

    async def publish(self, text: str) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(text.rstrip("\n") + "\n", encoding="utf-8")
        self.logger.info("Report written to %s", self.path)


class GitCommitSink:
    """Commits the staged changes of ``repo_path`` with the received message."""

    def __init__(self, repo_path: Path, committer: GitCommitter | None = None) -> None:
        self.repo_path = repo_path
        self.committer = committer or GitCommitter()
        self.logger = get_logger("sinks")

    async def publish(self, text: str) -> None:
        if await self.committer.commit(self.repo_path, text):
            self.logger.info("Created commit in %s", self.repo_path)
        else:
            self.logger.warning("Nothing staged in %s; commit skipped", self.repo_path)


__all__ = [
    "ConsoleSink",
    "GitCommitSink",
    "MarkdownFileSink",
    "MessageSink",
    "ReportSink",
]
