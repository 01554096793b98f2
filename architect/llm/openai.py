"""Chat-completions provider speaking the OpenAI wire format."""

from __future__ import annotations

from typing import Any, Optional

import httpx

from ..config import LLMConfig
from ..errors import MissingApiKeyError, NetworkError
from ..logging import get_logger
from ..models import LLMRequest
from .base import LLMProvider


class OpenAIProvider(LLMProvider):
    """Single best-effort POST to ``{base_url}/chat/completions``.

    No retries, no streaming. A non-2xx answer is turned into a
    ``NetworkError`` carrying the provider's own ``error.message``.
    """

    name = "openai"

    def __init__(
        self,
        config: LLMConfig,
        *,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        super().__init__(config)
        self._transport = transport
        self.logger = get_logger("llm.openai")

    @property
    def endpoint(self) -> str:
        return f"{self.config.base_url.rstrip('/')}/chat/completions"

    async def generate(self, system_role: str, prompt: str) -> str:
        if not self.config.api_key:
            raise MissingApiKeyError(self.name)
        request = self.build_request(system_role, prompt)
        headers = {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self.config.api_key}",
        }

        self.logger.debug(
            "POST %s model=%s prompt_chars=%d", self.endpoint, request.model, len(prompt)
        )
        try:
            async with httpx.AsyncClient(
                transport=self._transport, timeout=self.config.request_timeout
            ) as client:
                response = await client.post(
                    self.endpoint, json=self.build_payload(request), headers=headers
                )
        except httpx.TimeoutException as exc:
            raise NetworkError(
                f"OpenAI API request timed out after {self.config.request_timeout:g}s",
                provider=self.name,
            ) from exc
        except httpx.HTTPError as exc:
            raise NetworkError(f"OpenAI API request failed: {exc}", provider=self.name) from exc

        if not response.is_success:
            message = self._error_message(response)
            raise NetworkError(
                f"OpenAI API Error: {message}",
                provider=self.name,
                status=response.status_code,
            )

        try:
            payload = response.json()
        except ValueError as exc:
            raise NetworkError(
                "OpenAI API returned invalid JSON",
                provider=self.name,
                status=response.status_code,
            ) from exc

        content = self._extract_content(payload)
        if content is None:
            raise NetworkError(
                "OpenAI API returned no choices",
                provider=self.name,
                status=response.status_code,
            )
        return content

    @staticmethod
    def build_payload(request: LLMRequest) -> dict[str, object]:
        return {
            "model": request.model,
            "messages": [
                {"role": "system", "content": request.system_role},
                {"role": "user", "content": request.user_prompt},
            ],
            "temperature": request.temperature,
            "max_tokens": request.max_tokens,
        }

    @staticmethod
    def _error_message(response: httpx.Response) -> str:
        try:
            payload = response.json()
        except ValueError:
            return "Unknown error"
        if isinstance(payload, dict):
            error = payload.get("error")
            if isinstance(error, dict) and isinstance(error.get("message"), str):
                return error["message"]
            if isinstance(error, str):
                return error
        return "Unknown error"

    @staticmethod
    def _extract_content(payload: Any) -> Optional[str]:
        if not isinstance(payload, dict):
            return None
        choices = payload.get("choices")
        if not isinstance(choices, list) or not choices:
            return None
        first = choices[0]
        if not isinstance(first, dict):
            return None
        message = first.get("message")
        if isinstance(message, dict):
            content = message.get("content")
            if isinstance(content, str):
                return content
        return None


__all__ = ["OpenAIProvider"]
