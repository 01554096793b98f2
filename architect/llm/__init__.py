"""LLM gateway: provider registry and dispatch.

Providers are classes implementing ``LLMProvider``. Adding a vendor means
registering another class in ``PROVIDERS``; callers only ever see
``generate(system_role, prompt)``.
"""

from __future__ import annotations

from typing import Any, Dict, List, Type

from ..config import LLMConfig
from ..errors import UnsupportedProviderError
from .base import LLMProvider
from .openai import OpenAIProvider

PROVIDERS: Dict[str, Type[LLMProvider]] = {
    OpenAIProvider.name: OpenAIProvider,
}


def get_provider_names() -> List[str]:
    return sorted(PROVIDERS)


def create_provider(config: LLMConfig, **kwargs: Any) -> LLMProvider:
    """Instantiate the provider named by ``config.provider``.

    Raises ``UnsupportedProviderError`` before any network activity when the
    name is not registered.
    """
    name = (config.provider or "").strip().lower()
    provider_cls = PROVIDERS.get(name)
    if provider_cls is None:
        raise UnsupportedProviderError(config.provider, available=get_provider_names())
    return provider_cls(config, **kwargs)


__all__ = ["LLMProvider", "OpenAIProvider", "PROVIDERS", "create_provider", "get_provider_names"]
