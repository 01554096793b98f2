"""Workspace analysis and commit message generation backed by an LLM."""

__version__ = "0.1.0"
