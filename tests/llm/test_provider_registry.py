"""Tests for provider dispatch."""

from __future__ import annotations

import pytest

from architect.config import LLMConfig
from architect.errors import UnsupportedProviderError
from architect.llm import PROVIDERS, create_provider, get_provider_names
from architect.llm.openai import OpenAIProvider


def test_create_provider_returns_openai_by_default() -> None:
    provider = create_provider(LLMConfig(api_key="k"))
    assert isinstance(provider, OpenAIProvider)


def test_create_provider_normalises_name() -> None:
    provider = create_provider(LLMConfig(provider=" OpenAI ", api_key="k"))
    assert isinstance(provider, OpenAIProvider)


def test_unknown_provider_is_rejected(monkeypatch) -> None:
    def _explode(*args, **kwargs):
        raise AssertionError("no network access expected")

    monkeypatch.setattr("httpx.AsyncClient", _explode)

    with pytest.raises(UnsupportedProviderError) as excinfo:
        create_provider(LLMConfig(provider="anthropic", api_key="k"))

    assert "anthropic" in str(excinfo.value)
    assert "openai" in str(excinfo.value)
    assert excinfo.value.context == {"provider": "anthropic"}


def test_registry_lists_names() -> None:
    assert get_provider_names() == sorted(PROVIDERS)
    assert "openai" in get_provider_names()
