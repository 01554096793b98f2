"""Workspace file discovery and bucket classification."""

from __future__ import annotations

import os
from dataclasses import dataclass
from fnmatch import fnmatchcase
from pathlib import Path
from typing import Iterable, Iterator, List, Sequence, Set

from .errors import NoWorkspaceError
from .logging import get_logger
from .models import FileBucket, FileHandle, FileSelection

INCLUDED_SUFFIXES = frozenset(
    {
        ".ts",
        ".tsx",
        ".js",
        ".jsx",
        ".py",
        ".java",
        ".go",
        ".rs",
        ".json",
        ".md",
        ".yml",
        ".yaml",
        ".sql",
        ".prisma",
    }
)

EXCLUDED_DIRS = frozenset(
    {
        ".git",
        ".hg",
        ".svn",
        "node_modules",
        "dist",
        "build",
        ".next",
        "venv",
        ".venv",
        "__pycache__",
    }
)

_CONFIG_MARKERS: tuple[str, ...] = (
    "package.json",
    "tsconfig",
    "docker",
    "readme",
    "prisma",
    ".env.example",
    "requirements.txt",
    "go.mod",
    "cargo.toml",
)

_CONFIG_SUFFIXES: tuple[str, ...] = (".xml", ".gradle")

_CODE_DIR_MARKERS: tuple[str, ...] = (
    "/controller",
    "/route",
    "/api/",
    "/service",
    "/usecase",
    "/handler",
    "/model",
    "/entity",
    "/schema",
    "/repository",
    "/dao",
)

_ENTRYPOINT_NAMES = frozenset(
    f"{stem}.{ext}" for stem in ("index", "main", "app", "server") for ext in ("ts", "js")
)


@dataclass
class IgnoreRule:
    """Represents a gitignore-style exclusion pattern from .architect.yml."""

    pattern: str
    directory_only: bool
    anchored: bool
    has_slash: bool

    def matches(self, rel_path: str, is_dir: bool) -> bool:
        if not self.pattern:
            return False
        if self.directory_only and not is_dir:
            return False

        if self.anchored or self.has_slash:
            if fnmatchcase(rel_path, self.pattern):
                return True
            if self.directory_only and rel_path.startswith(f"{self.pattern}/"):
                return True
            return False

        for part in rel_path.split("/"):
            if fnmatchcase(part, self.pattern):
                return True
        return False


def build_ignore_rule(pattern: str) -> IgnoreRule | None:
    pattern = pattern.strip()
    if not pattern:
        return None

    directory_only = pattern.endswith("/")
    if directory_only:
        pattern = pattern[:-1]

    anchored = pattern.startswith("/")
    if anchored:
        pattern = pattern[1:]

    return IgnoreRule(
        pattern=pattern,
        directory_only=directory_only,
        anchored=anchored,
        has_slash="/" in pattern,
    )


def _should_ignore(rel_path: str, is_dir: bool, rules: Sequence[IgnoreRule]) -> bool:
    return any(rule.matches(rel_path, is_dir) for rule in rules)


def is_configuration(relative_path: str) -> bool:
    name = relative_path.lower()
    if any(marker in name for marker in _CONFIG_MARKERS):
        return True
    return name.endswith(_CONFIG_SUFFIXES)


def is_code_sample(relative_path: str) -> bool:
    name = f"/{relative_path.lower()}"
    if any(marker in name for marker in _CODE_DIR_MARKERS):
        return True
    return name.rsplit("/", 1)[-1] in _ENTRYPOINT_NAMES


class FileSelector:
    """Enumerates workspace files and partitions them into buckets.

    Only directory listings are read here; file contents are left to the
    structure synthesizer.
    """

    def __init__(
        self,
        *,
        include_suffixes: Iterable[str] = INCLUDED_SUFFIXES,
        excluded_dirs: Iterable[str] = EXCLUDED_DIRS,
        exclude_paths: Iterable[str] = (),
    ) -> None:
        self.include_suffixes = frozenset(suffix.lower() for suffix in include_suffixes)
        self.excluded_dirs = frozenset(excluded_dirs)
        self._rules: List[IgnoreRule] = [
            rule for rule in (build_ignore_rule(pattern) for pattern in exclude_paths) if rule
        ]
        self.logger = get_logger("repo_scanner")

    def select(self, root: str | Path) -> FileSelection:
        """Return every candidate file and the configuration/code-sample buckets."""
        root_path = self._resolve_root(root)
        files = self.list_files(root_path)
        configuration: List[FileHandle] = []
        code_samples: List[FileHandle] = []
        for handle in files:
            buckets = self.classify(handle)
            if FileBucket.CONFIGURATION in buckets:
                configuration.append(handle)
            elif FileBucket.CODE_SAMPLE in buckets:
                code_samples.append(handle)

        self.logger.debug(
            "Selected %d files (%d configuration, %d code samples) under %s",
            len(files),
            len(configuration),
            len(code_samples),
            root_path,
        )
        return FileSelection(
            root=root_path,
            files=tuple(files),
            configuration=tuple(configuration),
            code_samples=tuple(code_samples),
        )

    def list_files(self, root: str | Path) -> List[FileHandle]:
        root_path = self._resolve_root(root)
        return [
            FileHandle(path=path, relative_path=path.relative_to(root_path).as_posix())
            for path in self._iter_files(root_path)
        ]

    @staticmethod
    def classify(handle: FileHandle) -> Set[FileBucket]:
        """Return the buckets for a file; configuration takes priority over code samples."""
        buckets = {FileBucket.TREE}
        if is_configuration(handle.relative_path):
            buckets.add(FileBucket.CONFIGURATION)
        elif is_code_sample(handle.relative_path):
            buckets.add(FileBucket.CODE_SAMPLE)
        return buckets

    def _iter_files(self, root: Path) -> Iterator[Path]:
        for dirpath, dirnames, filenames in os.walk(root):
            current_dir = Path(dirpath)
            rel_dir = current_dir.relative_to(root).as_posix() if current_dir != root else ""

            kept_dirs = []
            for name in sorted(dirnames):
                if name in self.excluded_dirs:
                    continue
                rel_path = f"{rel_dir}/{name}" if rel_dir else name
                if _should_ignore(rel_path, True, self._rules):
                    continue
                kept_dirs.append(name)
            dirnames[:] = kept_dirs

            for filename in sorted(filenames):
                if Path(filename).suffix.lower() not in self.include_suffixes:
                    continue
                rel_path = f"{rel_dir}/{filename}" if rel_dir else filename
                if _should_ignore(rel_path, False, self._rules):
                    continue
                yield current_dir / filename

    @staticmethod
    def _resolve_root(root: str | Path) -> Path:
        root_path = Path(root).expanduser().resolve()
        if not root_path.is_dir():
            raise NoWorkspaceError(str(root))
        return root_path


__all__ = ["FileSelector", "IgnoreRule", "build_ignore_rule", "is_code_sample", "is_configuration"]
