"""Builds the bounded project structure document sent to the LLM."""

from __future__ import annotations

import asyncio
from collections import OrderedDict
from typing import Dict, List, Optional, Sequence

from .logging import get_logger
from .models import FileHandle, FileSelection, ProjectStructureDocument

TREE_FILES_PER_FOLDER = 10
CONFIG_FILE_LIMIT = 15
CONFIG_CHAR_LIMIT = 3000
CODE_SAMPLE_FILE_LIMIT = 12
CODE_SAMPLE_CHAR_LIMIT = 2000
TRUNCATION_MARKER = "\n... (truncated)"


def truncate(content: str, limit: int) -> str:
    """Cut ``content`` to ``limit`` characters, appending the marker when cut."""
    if len(content) <= limit:
        return content
    return content[:limit] + TRUNCATION_MARKER


def render_tree(files: Sequence[FileHandle], *, per_folder: int = TREE_FILES_PER_FOLDER) -> str:
    """Render the directory tree grouped by first path segment."""
    folders: Dict[str, List[str]] = OrderedDict()
    for handle in files:
        folder = handle.relative_path.split("/", 1)[0]
        folders.setdefault(folder, []).append(handle.name)

    lines = ["## Directory Tree", "```"]
    for folder, names in folders.items():
        lines.append(f"📁 {folder}/")
        for name in names[:per_folder]:
            lines.append(f"  └─ {name}")
        if len(names) > per_folder:
            lines.append(f"  └─ ... (+{len(names) - per_folder} files)")
    lines.append("```")
    return "\n".join(lines) + "\n\n"


def render_excerpt(relative_path: str, content: str) -> str:
    return f"### {relative_path}\n```\n{content}\n```\n\n"


class StructureSynthesizer:
    """Turns a file selection into one ProjectStructureDocument.

    The document size has a closed-form upper bound: the tree, plus at most
    ``config_files`` excerpts of ``config_chars`` characters and
    ``code_files`` excerpts of ``code_chars`` characters, each followed by
    the truncation marker when cut.
    """

    def __init__(
        self,
        *,
        per_folder: int = TREE_FILES_PER_FOLDER,
        config_files: int = CONFIG_FILE_LIMIT,
        config_chars: int = CONFIG_CHAR_LIMIT,
        code_files: int = CODE_SAMPLE_FILE_LIMIT,
        code_chars: int = CODE_SAMPLE_CHAR_LIMIT,
    ) -> None:
        self.per_folder = per_folder
        self.config_files = config_files
        self.config_chars = config_chars
        self.code_files = code_files
        self.code_chars = code_chars
        self.logger = get_logger("structure")

    async def build(self, selection: FileSelection) -> ProjectStructureDocument:
        skipped: List[str] = []
        parts = ["# Project Structure\n\n", render_tree(selection.files, per_folder=self.per_folder)]

        parts.append("## Configuration Files\n\n")
        parts.extend(
            await self._excerpts(
                selection.configuration[: self.config_files], self.config_chars, skipped
            )
        )

        parts.append("## Code Samples (for deep analysis)\n\n")
        parts.extend(
            await self._excerpts(selection.code_samples[: self.code_files], self.code_chars, skipped)
        )

        if skipped:
            self.logger.warning("Skipped %d unreadable file(s): %s", len(skipped), ", ".join(skipped))
        return ProjectStructureDocument(text="".join(parts), skipped=tuple(skipped))

    async def _excerpts(
        self,
        handles: Sequence[FileHandle],
        limit: int,
        skipped: List[str],
    ) -> List[str]:
        excerpts: List[str] = []
        # One read at a time; excerpts keep selection order.
        for handle in handles:
            content = await read_text(handle)
            if content is None:
                skipped.append(handle.relative_path)
                continue
            excerpts.append(render_excerpt(handle.relative_path, truncate(content, limit)))
        return excerpts


async def read_text(handle: FileHandle) -> Optional[str]:
    """Best-effort read of a file as text; ``None`` when it cannot be read."""
    try:
        raw = await asyncio.to_thread(handle.path.read_bytes)
    except OSError as exc:
        get_logger("structure").debug("Cannot read %s: %s", handle.relative_path, exc)
        return None
    return raw.decode("utf-8", errors="replace")


__all__ = [
    "StructureSynthesizer",
    "TRUNCATION_MARKER",
    "read_text",
    "render_excerpt",
    "render_tree",
    "truncate",
]
