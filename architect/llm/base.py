"""Provider contract for the LLM gateway."""

from __future__ import annotations

from abc import ABC, abstractmethod

from ..config import LLMConfig
from ..models import LLMRequest


class LLMProvider(ABC):
    """A vendor endpoint able to answer one system+user exchange."""

    name: str = ""

    def __init__(self, config: LLMConfig) -> None:
        self.config = config

    def build_request(self, system_role: str, prompt: str) -> LLMRequest:
        return LLMRequest(
            provider=self.name,
            model=self.config.model,
            system_role=system_role,
            user_prompt=prompt,
            temperature=self.config.temperature,
            max_tokens=self.config.max_tokens,
        )

    @abstractmethod
    async def generate(self, system_role: str, prompt: str) -> str:
        """Send one request and return the response text."""


__all__ = ["LLMProvider"]
