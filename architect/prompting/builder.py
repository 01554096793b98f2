"""Builds analysis and commit prompts from the packaged Jinja2 templates."""

from __future__ import annotations

from pathlib import Path
from typing import List

from jinja2 import Environment, FileSystemLoader, StrictUndefined

from ..models import COMMIT_TYPES, AnalysisMode, DiffPayload, Prompt, ProjectStructureDocument

ANALYSIS_SYSTEM_ROLE = (
    "You are a senior software architect with expertise in code analysis and documentation."
)
COMMIT_SYSTEM_ROLE = "You are a helpful assistant that writes semantic git commit messages."
COMMIT_TEMPLATE = "commit.j2"


def template_name(mode: AnalysisMode) -> str:
    return f"{mode.value.replace('-', '_')}.j2"


class PromptBuilder:
    """Maps an analysis mode and a structure document to a fixed prompt.

    The builder never summarizes anything itself; rendering is a pure function
    of its inputs, so identical inputs always give byte-identical prompts.
    """

    def __init__(self, templates_dir: Path | None = None) -> None:
        self.templates_dir = templates_dir
        self._env = self._create_env(templates_dir)

    def build(self, mode: AnalysisMode, document: ProjectStructureDocument | str) -> Prompt:
        template = self._env.get_template(template_name(AnalysisMode(mode)))
        body = template.render(document=str(document))
        return Prompt(system_role=ANALYSIS_SYSTEM_ROLE, body=body)

    def build_commit(self, diff: DiffPayload | str) -> Prompt:
        text = diff.text if isinstance(diff, DiffPayload) else diff
        template = self._env.get_template(COMMIT_TEMPLATE)
        body = template.render(diff=text, commit_types=COMMIT_TYPES)
        return Prompt(system_role=COMMIT_SYSTEM_ROLE, body=body)

    @staticmethod
    def _create_env(templates_dir: Path | None) -> Environment:
        directories: List[str] = []
        if templates_dir:
            directories.append(str(templates_dir))
        directories.append(str(Path(__file__).with_name("templates")))
        return Environment(
            loader=FileSystemLoader(directories),
            autoescape=False,
            undefined=StrictUndefined,
            keep_trailing_newline=False,
        )


__all__ = ["ANALYSIS_SYSTEM_ROLE", "COMMIT_SYSTEM_ROLE", "PromptBuilder", "template_name"]
