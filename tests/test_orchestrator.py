"""Tests for the analysis and commit flows."""

from __future__ import annotations

import asyncio
from pathlib import Path

import pytest

from architect.cancellation import CancellationContext
from architect.errors import MissingApiKeyError, NetworkError, NoWorkspaceError, UnexpectedError
from architect.git.diff import DiffCollector
from architect.models import STATUS_CANCELLED, STATUS_COMPLETED, STATUS_NO_CHANGES, AnalysisMode
from architect.orchestrator import Orchestrator
from architect.prompting.builder import ANALYSIS_SYSTEM_ROLE, COMMIT_SYSTEM_ROLE
from architect.structure import StructureSynthesizer

from tests._fixtures.fakes import FakeProvider, RecordingSink, make_config


def _orchestrator(provider: FakeProvider, **kwargs) -> Orchestrator:
    return Orchestrator(provider_factory=lambda _config: provider, **kwargs)


def _collector(outputs: dict) -> DiffCollector:
    async def runner(args, cwd):  # type: ignore[no-untyped-def]
        return outputs.get(tuple(args), "")

    return DiffCollector(runner=runner)


@pytest.fixture
def workspace(repo_builder) -> Path:
    repo_builder.write(
        {
            "package.json": '{"name": "demo"}',
            "src/index.ts": "export const main = () => 1;",
            "src/utils/helpers.ts": "export const x = 2;",
        }
    )
    return repo_builder.path()


def test_analysis_sends_document_and_publishes_report(workspace: Path) -> None:
    provider = FakeProvider(reply="# Report")
    sink = RecordingSink()

    outcome = asyncio.run(
        _orchestrator(provider).run_analysis(
            workspace, AnalysisMode.SUMMARY_EN, make_config(workspace), sink=sink
        )
    )

    assert outcome.status == STATUS_COMPLETED
    assert outcome.report == "# Report"
    assert outcome.file_count == 3
    assert outcome.skipped == []
    assert sink.items == ["# Report"]
    assert len(provider.calls) == 1
    system_role, prompt = provider.calls[0]
    assert system_role == ANALYSIS_SYSTEM_ROLE
    assert "# Project Structure" in prompt
    assert "### package.json" in prompt
    assert "### src/index.ts" in prompt


def test_analysis_accepts_mode_string(workspace: Path) -> None:
    provider = FakeProvider()

    outcome = asyncio.run(
        _orchestrator(provider).run_analysis(workspace, "technical-pt", make_config(workspace))
    )

    assert outcome.mode is AnalysisMode.TECHNICAL_PT
    assert "relatório técnico EXTREMAMENTE DETALHADO" in provider.calls[0][1]


def test_cancel_before_start_skips_provider(workspace: Path) -> None:
    provider = FakeProvider()
    sink = RecordingSink()
    token = CancellationContext()
    token.cancel()

    outcome = asyncio.run(
        _orchestrator(provider).run_analysis(
            workspace, "summary-en", make_config(workspace), cancellation=token, sink=sink
        )
    )

    assert outcome.status == STATUS_CANCELLED
    assert outcome.report is None
    assert provider.calls == []
    assert sink.items == []


def test_cancel_during_request_discards_report(workspace: Path) -> None:
    token = CancellationContext()
    provider = FakeProvider(reply="late report", on_generate=token.cancel)
    sink = RecordingSink()

    outcome = asyncio.run(
        _orchestrator(provider).run_analysis(
            workspace, "summary-en", make_config(workspace), cancellation=token, sink=sink
        )
    )

    assert outcome.status == STATUS_CANCELLED
    assert len(provider.calls) == 1
    assert sink.items == []


def test_cancel_during_synthesis_skips_provider(workspace: Path) -> None:
    token = CancellationContext()
    built = []

    class _CancellingSynthesizer(StructureSynthesizer):
        async def build(self, selection):  # type: ignore[no-untyped-def]
            document = await super().build(selection)
            built.append(document)
            token.cancel()
            return document

    provider = FakeProvider()
    sink = RecordingSink()

    outcome = asyncio.run(
        _orchestrator(provider, synthesizer=_CancellingSynthesizer()).run_analysis(
            workspace, "summary-en", make_config(workspace), cancellation=token, sink=sink
        )
    )

    assert outcome.status == STATUS_CANCELLED
    assert outcome.report is None
    assert len(built) == 1
    assert provider.calls == []
    assert sink.items == []


def test_missing_api_key_fails_before_scanning(workspace: Path) -> None:
    provider = FakeProvider()

    with pytest.raises(MissingApiKeyError):
        asyncio.run(
            _orchestrator(provider).run_analysis(
                workspace, "summary-en", make_config(workspace, api_key=None)
            )
        )
    assert provider.calls == []


def test_missing_workspace_is_reported(tmp_path: Path) -> None:
    provider = FakeProvider()
    missing = tmp_path / "nope"

    with pytest.raises(NoWorkspaceError):
        asyncio.run(
            _orchestrator(provider).run_analysis(missing, "summary-en", make_config(tmp_path))
        )
    with pytest.raises(NoWorkspaceError):
        asyncio.run(_orchestrator(provider).run_commit(None, make_config(tmp_path)))


def test_network_errors_propagate_unchanged(workspace: Path) -> None:
    def fail() -> None:
        raise NetworkError("OpenAI API Error: invalid key", provider="openai", status=401)

    provider = FakeProvider(on_generate=fail)

    with pytest.raises(NetworkError, match="invalid key"):
        asyncio.run(
            _orchestrator(provider).run_analysis(workspace, "summary-en", make_config(workspace))
        )


def test_unclassified_errors_are_wrapped(workspace: Path) -> None:
    def fail() -> None:
        raise KeyError("boom")

    provider = FakeProvider(on_generate=fail)

    with pytest.raises(UnexpectedError) as excinfo:
        asyncio.run(
            _orchestrator(provider).run_analysis(workspace, "summary-en", make_config(workspace))
        )
    assert excinfo.value.context["flow"] == "analysis"
    assert isinstance(excinfo.value.__cause__, KeyError)


def test_commit_flow_publishes_message_to_every_sink(workspace: Path) -> None:
    provider = FakeProvider(reply="feat(core): add main entry\n")
    first, second = RecordingSink(), RecordingSink()
    collector = _collector({("git", "diff", "--cached"): "+export const main = () => 1;\n"})

    outcome = asyncio.run(
        _orchestrator(provider, diff_collector=collector).run_commit(
            workspace, make_config(workspace), sinks=[first, second]
        )
    )

    assert outcome.status == STATUS_COMPLETED
    assert outcome.message is not None
    assert outcome.message.text == "feat(core): add main entry"
    assert outcome.diff_source == "staged"
    assert outcome.truncated is False
    assert first.items == second.items == ["feat(core): add main entry"]
    system_role, prompt = provider.calls[0]
    assert system_role == COMMIT_SYSTEM_ROLE
    assert "+export const main = () => 1;" in prompt


def test_commit_flow_without_changes_never_calls_provider(workspace: Path) -> None:
    provider = FakeProvider()
    sink = RecordingSink()

    outcome = asyncio.run(
        _orchestrator(provider, diff_collector=_collector({})).run_commit(
            workspace, make_config(workspace), sinks=[sink]
        )
    )

    assert outcome.status == STATUS_NO_CHANGES
    assert outcome.message is None
    assert provider.calls == []
    assert sink.items == []


def test_commit_flow_reports_truncation(workspace: Path) -> None:
    provider = FakeProvider(reply="chore: bulk update")
    collector = _collector({("git", "diff", "HEAD"): "+" * 12_000})

    outcome = asyncio.run(
        _orchestrator(provider, diff_collector=collector).run_commit(
            workspace, make_config(workspace)
        )
    )

    assert outcome.diff_source == "head"
    assert outcome.truncated is True
    assert "\n... (truncated)" in provider.calls[0][1]


def test_sink_failures_are_wrapped(workspace: Path) -> None:
    class BrokenSink:
        async def publish(self, text: str) -> None:
            raise OSError("disk full")

    provider = FakeProvider(reply="fix: x")
    collector = _collector({("git", "diff", "--cached"): "+x\n"})

    with pytest.raises(UnexpectedError, match="disk full"):
        asyncio.run(
            _orchestrator(provider, diff_collector=collector).run_commit(
                workspace, make_config(workspace), sinks=[BrokenSink()]
            )
        )
