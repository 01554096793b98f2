"""Prompt templates for the analysis and commit flows."""

from .builder import ANALYSIS_SYSTEM_ROLE, COMMIT_SYSTEM_ROLE, PromptBuilder

__all__ = ["ANALYSIS_SYSTEM_ROLE", "COMMIT_SYSTEM_ROLE", "PromptBuilder"]
