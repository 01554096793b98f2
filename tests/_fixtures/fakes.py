"""Test doubles shared across the suite."""

from __future__ import annotations

from pathlib import Path
from typing import Callable, List, Optional, Tuple

from architect.config import ArchitectConfig, LLMConfig
from architect.llm.base import LLMProvider


class FakeProvider(LLMProvider):
    """Provider that records every exchange and answers with a canned reply."""

    name = "fake"

    def __init__(
        self,
        config: LLMConfig | None = None,
        *,
        reply: str = "response",
        on_generate: Optional[Callable[[], None]] = None,
    ) -> None:
        super().__init__(config or LLMConfig(api_key="sk-test"))
        self.reply = reply
        self.on_generate = on_generate
        self.calls: List[Tuple[str, str]] = []

    async def generate(self, system_role: str, prompt: str) -> str:
        self.calls.append((system_role, prompt))
        if self.on_generate is not None:
            self.on_generate()
        return self.reply


class RecordingSink:
    """Sink that keeps what it was handed."""

    def __init__(self) -> None:
        self.items: List[str] = []

    async def publish(self, text: str) -> None:
        self.items.append(text)


def make_config(root: Path, *, api_key: str | None = "sk-test", provider: str = "openai") -> ArchitectConfig:
    return ArchitectConfig(root=root, llm=LLMConfig(provider=provider, api_key=api_key))


__all__ = ["FakeProvider", "RecordingSink", "make_config"]
