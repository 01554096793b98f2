"""Commit message synthesis from a collected diff."""

from __future__ import annotations

from .llm.base import LLMProvider
from .logging import get_logger
from .models import COMMIT_TYPES, CommitMessage, DiffPayload
from .prompting.builder import PromptBuilder


class CommitComposer:
    """Embeds a diff in the commit template and asks the provider for one message."""

    def __init__(self, provider: LLMProvider, prompt_builder: PromptBuilder | None = None) -> None:
        self.provider = provider
        self.prompt_builder = prompt_builder or PromptBuilder()
        self.logger = get_logger("commit")

    async def compose(self, diff: DiffPayload) -> CommitMessage:
        prompt = self.prompt_builder.build_commit(diff)
        raw = await self.provider.generate(prompt.system_role, prompt.body)
        message = CommitMessage(text=raw.strip())
        if not message.is_conventional:
            self.logger.warning(
                "Generated header %r does not follow Conventional Commits (%s)",
                message.header,
                ", ".join(COMMIT_TYPES),
            )
        return message


__all__ = ["CommitComposer"]
