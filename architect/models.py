"""Core data models shared across architect components."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import List, Optional, Tuple

COMMIT_TYPES: Tuple[str, ...] = (
    "feat",
    "fix",
    "docs",
    "style",
    "refactor",
    "perf",
    "test",
    "build",
    "ci",
    "chore",
    "revert",
)

_COMMIT_HEADER = re.compile(
    r"^(?P<type>%s)(\((?P<scope>[^()\s][^()]*)\))?!?: (?P<description>\S.*)$"
    % "|".join(COMMIT_TYPES)
)


class FileBucket(str, Enum):
    """Classification label assigned to a discovered file."""

    TREE = "tree"
    CONFIGURATION = "configuration"
    CODE_SAMPLE = "code-sample"


class AnalysisMode(str, Enum):
    """Report flavour: language (pt/en) crossed with depth (summary/technical)."""

    SUMMARY_PT = "summary-pt"
    SUMMARY_EN = "summary-en"
    TECHNICAL_PT = "technical-pt"
    TECHNICAL_EN = "technical-en"

    @property
    def language(self) -> str:
        return self.value.split("-", 1)[1]

    @property
    def depth(self) -> str:
        return self.value.split("-", 1)[0]

    @classmethod
    def parse(cls, value: str) -> "AnalysisMode":
        try:
            return cls(value.strip().lower())
        except ValueError:
            choices = ", ".join(mode.value for mode in cls)
            raise ValueError(f"Unknown analysis mode '{value}'. Choose one of: {choices}") from None


@dataclass(frozen=True)
class FileHandle:
    """One workspace file, identified by absolute and POSIX relative path."""

    path: Path
    relative_path: str

    @property
    def name(self) -> str:
        return self.relative_path.rsplit("/", 1)[-1]


@dataclass(frozen=True)
class FileSelection:
    """Selector output: every candidate file plus the two excerpt buckets."""

    root: Path
    files: Tuple[FileHandle, ...]
    configuration: Tuple[FileHandle, ...]
    code_samples: Tuple[FileHandle, ...]


@dataclass(frozen=True)
class ProjectStructureDocument:
    """Bounded textual snapshot of a workspace."""

    text: str
    skipped: Tuple[str, ...] = ()

    def __len__(self) -> int:
        return len(self.text)

    def __str__(self) -> str:
        return self.text


@dataclass(frozen=True)
class Prompt:
    """System role plus user body sent to the LLM gateway."""

    system_role: str
    body: str


@dataclass(frozen=True)
class DiffPayload:
    """Diff text collected from one tier, already truncated."""

    text: str
    source: str
    truncated: bool = False


@dataclass(frozen=True)
class LLMRequest:
    """Represents a single chat-completion round trip."""

    provider: str
    model: str
    system_role: str
    user_prompt: str
    temperature: float
    max_tokens: int


@dataclass(frozen=True)
class CommitMessage:
    """Trimmed commit message produced by the commit flow."""

    text: str

    @property
    def header(self) -> str:
        return self.text.splitlines()[0] if self.text else ""

    @property
    def is_conventional(self) -> bool:
        return bool(_COMMIT_HEADER.match(self.header))

    def __str__(self) -> str:
        return self.text


@dataclass
class AnalysisOutcome:
    """Result of one analysis flow."""

    status: str
    mode: AnalysisMode
    report: Optional[str] = None
    file_count: int = 0
    skipped: List[str] = field(default_factory=list)


@dataclass
class CommitOutcome:
    """Result of one commit flow."""

    status: str
    message: Optional[CommitMessage] = None
    diff_source: Optional[str] = None
    truncated: bool = False


STATUS_COMPLETED = "completed"
STATUS_CANCELLED = "cancelled"
STATUS_NO_CHANGES = "no_changes"
