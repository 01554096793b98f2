"""Git helpers for the commit flow."""

from .diff import DiffCollector
from .publisher import GitCommitter

__all__ = ["DiffCollector", "GitCommitter"]
