"""CLI entrypoints for architect commands."""

from __future__ import annotations

import argparse
import asyncio
import dataclasses
import signal
import sys
from pathlib import Path
from typing import List

from .cancellation import CancellationContext
from .config import ArchitectConfig, load_config
from .errors import ArchitectError
from .logging import configure_logging
from .models import STATUS_CANCELLED, STATUS_NO_CHANGES, AnalysisMode, AnalysisOutcome, CommitOutcome
from .orchestrator import Orchestrator
from .sinks import ConsoleSink, GitCommitSink, MarkdownFileSink, MessageSink, ReportSink


def _add_logging_options(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    # Subcommand copies must not clobber a flag given before the command.
    def default(value: object) -> object:
        return argparse.SUPPRESS if suppress_default else value

    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=default(False),
        help="Increase log verbosity for troubleshooting.",
    )
    parser.add_argument(
        "-q",
        "--quiet",
        action="store_true",
        default=default(False),
        help="Only log warnings and errors.",
    )
    parser.add_argument(
        "--log-file",
        type=Path,
        default=default(None),
        help="Also write debug logs to this file.",
    )


def _add_workspace_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "path",
        nargs="?",
        default=".",
        help="Path to the workspace root (defaults to current directory).",
    )
    parser.add_argument(
        "--provider",
        default=None,
        help="Override the LLM provider from .architect.yml.",
    )
    parser.add_argument(
        "--model",
        default=None,
        help="Override the model name from .architect.yml.",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="architect",
        description="Summarize a workspace or draft a commit message with an LLM.",
    )
    _add_logging_options(parser)
    subparsers = parser.add_subparsers(dest="command", required=True)

    analyze_parser = subparsers.add_parser(
        "analyze",
        help="Produce a Markdown report describing the project.",
    )
    _add_logging_options(analyze_parser, suppress_default=True)
    _add_workspace_options(analyze_parser)
    analyze_parser.add_argument(
        "--mode",
        choices=[mode.value for mode in AnalysisMode],
        default=AnalysisMode.SUMMARY_EN.value,
        help="Report language and depth (default: summary-en).",
    )
    analyze_parser.add_argument(
        "-o",
        "--output",
        type=Path,
        default=None,
        help="Write the report to this Markdown file instead of stdout.",
    )

    commit_parser = subparsers.add_parser(
        "commit",
        help="Generate a Conventional Commits message from the current diff.",
    )
    _add_logging_options(commit_parser, suppress_default=True)
    _add_workspace_options(commit_parser)
    commit_parser.add_argument(
        "--apply",
        action="store_true",
        help="Commit the staged changes with the generated message.",
    )

    serve_parser = subparsers.add_parser(
        "serve",
        help="Run the HTTP service exposing analyze and commit.",
    )
    _add_logging_options(serve_parser, suppress_default=True)
    serve_parser.add_argument("--host", default="127.0.0.1", help="Interface to bind.")
    serve_parser.add_argument("--port", type=int, default=8000, help="Port to bind.")

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for architect commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(
        verbose=bool(args.verbose), quiet=bool(args.quiet), log_file=args.log_file
    )

    if args.command == "serve":
        from .service import run_service

        run_service(host=args.host, port=args.port)
        return

    try:
        config = _load_config(args)
        if args.command == "analyze":
            outcome = asyncio.run(_analyze(args, config))
            _report_analysis(outcome)
        elif args.command == "commit":
            commit_outcome = asyncio.run(_commit(args, config))
            _report_commit(commit_outcome)
        else:  # pragma: no cover - argparse enforces choices
            parser.exit(1, "Unknown command\n")
    except ArchitectError as exc:
        parser.exit(exc.exit_code, f"error: {exc}\n")


def _load_config(args: argparse.Namespace) -> ArchitectConfig:
    config = load_config(Path(args.path))
    overrides = {}
    if args.provider:
        overrides["provider"] = args.provider.strip().lower()
    if args.model:
        overrides["model"] = args.model
    if overrides:
        config = dataclasses.replace(config, llm=dataclasses.replace(config.llm, **overrides))
    return config


async def _analyze(args: argparse.Namespace, config: ArchitectConfig) -> AnalysisOutcome:
    cancellation = CancellationContext()
    loop = asyncio.get_running_loop()
    try:
        loop.add_signal_handler(signal.SIGINT, cancellation.cancel)
    except NotImplementedError:  # pragma: no cover - Windows event loops
        pass

    sink: ReportSink = MarkdownFileSink(args.output) if args.output else ConsoleSink()
    return await Orchestrator().run_analysis(
        args.path,
        args.mode,
        config,
        cancellation=cancellation,
        sink=sink,
    )


async def _commit(args: argparse.Namespace, config: ArchitectConfig) -> CommitOutcome:
    sinks: List[MessageSink] = [ConsoleSink()]
    if args.apply:
        sinks.append(GitCommitSink(Path(args.path).expanduser().resolve()))
    return await Orchestrator().run_commit(args.path, config, sinks=sinks)


def _report_analysis(outcome: AnalysisOutcome) -> None:
    if outcome.status == STATUS_CANCELLED:
        return
    if outcome.skipped:
        print(f"note: skipped {len(outcome.skipped)} unreadable file(s)", file=sys.stderr)


def _report_commit(outcome: CommitOutcome) -> None:
    if outcome.status == STATUS_NO_CHANGES:
        print("No changes detected (staged or unstaged) to generate a commit.", file=sys.stderr)
    elif outcome.truncated:
        print("note: diff was truncated before sending", file=sys.stderr)


if __name__ == "__main__":
    main(sys.argv[1:])
