"""Flow orchestration for the analysis and commit pipelines."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Callable, Iterable

from .cancellation import CancellationContext, FlowCancelled
from .commit import CommitComposer
from .config import ArchitectConfig, LLMConfig
from .errors import ArchitectError, MissingApiKeyError, NoWorkspaceError, UnexpectedError
from .git.diff import DiffCollector
from .llm import create_provider
from .llm.base import LLMProvider
from .logging import get_logger
from .models import (
    STATUS_CANCELLED,
    STATUS_COMPLETED,
    STATUS_NO_CHANGES,
    AnalysisMode,
    AnalysisOutcome,
    CommitOutcome,
)
from .prompting.builder import PromptBuilder
from .repo_scanner import FileSelector
from .sinks import MessageSink, ReportSink
from .structure import StructureSynthesizer

ProviderFactory = Callable[[LLMConfig], LLMProvider]


class Orchestrator:
    """Runs one flow per call; holds collaborators but no per-flow state.

    Configuration is passed to each entry point, never read ambiently, and
    every result is handed to the sinks exactly once.
    """

    def __init__(
        self,
        *,
        synthesizer: StructureSynthesizer | None = None,
        prompt_builder: PromptBuilder | None = None,
        diff_collector: DiffCollector | None = None,
        provider_factory: ProviderFactory | None = None,
    ) -> None:
        self.synthesizer = synthesizer or StructureSynthesizer()
        self._prompt_builder = prompt_builder
        self.diff_collector = diff_collector or DiffCollector()
        self.provider_factory = provider_factory or create_provider
        self.logger = get_logger("orchestrator")

    async def run_analysis(
        self,
        path: str | Path | None,
        mode: AnalysisMode | str,
        config: ArchitectConfig,
        *,
        cancellation: CancellationContext | None = None,
        sink: ReportSink | None = None,
    ) -> AnalysisOutcome:
        """Scan the workspace and ask the provider for a report in ``mode``."""
        mode = AnalysisMode(mode)
        token = cancellation or CancellationContext()
        root = self._resolve_workspace(path)
        provider = self._resolve_provider(config)
        self.logger.info("Starting %s analysis of %s", mode.value, root)

        try:
            selector = FileSelector(exclude_paths=config.exclude_paths)
            selection = await asyncio.to_thread(selector.select, root)
            self.logger.debug("Discovered %d files", len(selection.files))
            token.checkpoint("discovery")

            document = await self.synthesizer.build(selection)
            self.logger.debug("Structure document is %d chars", len(document))
            token.checkpoint("synthesis")

            prompt = self._builder_for(config).build(mode, document)
            report = await provider.generate(prompt.system_role, prompt.body)
            token.checkpoint("response")

            if sink is not None:
                await sink.publish(report)
        except FlowCancelled as exc:
            self.logger.info("Analysis cancelled at %s", exc.checkpoint)
            return AnalysisOutcome(status=STATUS_CANCELLED, mode=mode)
        except ArchitectError:
            raise
        except Exception as exc:
            self.logger.debug("Analysis failed", exc_info=True)
            raise UnexpectedError("analysis", exc) from exc

        self.logger.info(
            "Analysis complete (%d files, %d skipped)", len(selection.files), len(document.skipped)
        )
        return AnalysisOutcome(
            status=STATUS_COMPLETED,
            mode=mode,
            report=report,
            file_count=len(selection.files),
            skipped=list(document.skipped),
        )

    async def run_commit(
        self,
        path: str | Path | None,
        config: ArchitectConfig,
        *,
        sinks: Iterable[MessageSink] = (),
    ) -> CommitOutcome:
        """Collect a diff and ask the provider for a Conventional Commits message."""
        root = self._resolve_workspace(path)
        provider = self._resolve_provider(config)
        self.logger.info("Generating commit message for %s", root)

        try:
            diff = await self.diff_collector.collect(root)
            if diff is None:
                self.logger.warning("No changes detected (staged or unstaged) to describe")
                return CommitOutcome(status=STATUS_NO_CHANGES)

            self.logger.debug("Using %s diff (%d chars)", diff.source, len(diff.text))
            composer = CommitComposer(provider, self._builder_for(config))
            message = await composer.compose(diff)
            for sink in sinks:
                await sink.publish(message.text)
        except ArchitectError:
            raise
        except Exception as exc:
            self.logger.debug("Commit generation failed", exc_info=True)
            raise UnexpectedError("commit", exc) from exc

        return CommitOutcome(
            status=STATUS_COMPLETED,
            message=message,
            diff_source=diff.source,
            truncated=diff.truncated,
        )

    def _resolve_provider(self, config: ArchitectConfig) -> LLMProvider:
        if not config.llm.api_key:
            raise MissingApiKeyError(config.llm.provider)
        return self.provider_factory(config.llm)

    def _builder_for(self, config: ArchitectConfig) -> PromptBuilder:
        if self._prompt_builder is not None:
            return self._prompt_builder
        return PromptBuilder(templates_dir=config.templates_dir)

    @staticmethod
    def _resolve_workspace(path: str | Path | None) -> Path:
        if path is None or str(path).strip() == "":
            raise NoWorkspaceError("<none>")
        root = Path(path).expanduser().resolve()
        if not root.is_dir():
            raise NoWorkspaceError(str(path))
        return root


__all__ = ["Orchestrator"]
