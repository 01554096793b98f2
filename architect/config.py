"""Configuration loading for architect (.architect.yml plus environment)."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Sequence

import yaml

from .errors import ConfigError

CONFIG_FILENAME = ".architect.yml"

DEFAULT_PROVIDER = "openai"
DEFAULT_MODEL = "gpt-4o"
DEFAULT_BASE_URL = "https://api.openai.com/v1"
DEFAULT_TEMPERATURE = 0.7
DEFAULT_MAX_TOKENS = 8000
DEFAULT_REQUEST_TIMEOUT = 120.0

ENV_API_KEY_KEYS = ("ARCHITECT_API_KEY", "OPENAI_API_KEY")
ENV_PROVIDER_KEYS = ("ARCHITECT_PROVIDER",)
ENV_MODEL_KEYS = ("ARCHITECT_MODEL",)


@dataclass(frozen=True)
class LLMConfig:
    """Provider settings resolved once per invocation."""

    provider: str = DEFAULT_PROVIDER
    api_key: Optional[str] = None
    model: str = DEFAULT_MODEL
    temperature: float = DEFAULT_TEMPERATURE
    max_tokens: int = DEFAULT_MAX_TOKENS
    base_url: str = DEFAULT_BASE_URL
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT


@dataclass(frozen=True)
class ArchitectConfig:
    """Read-only settings handed to each flow entry point."""

    root: Path
    llm: LLMConfig = field(default_factory=LLMConfig)
    exclude_paths: List[str] = field(default_factory=list)
    templates_dir: Optional[Path] = None


def load_config(
    config_path: Path,
    *,
    env: Mapping[str, str] | None = None,
) -> ArchitectConfig:
    """Load configuration from disk and apply environment overrides.

    ``config_path`` may point at the workspace directory or at the file
    itself. A missing file yields defaults; environment variables still
    apply on top.
    """
    environ = os.environ if env is None else env
    config_file = _resolve_config_path(config_path)
    root = config_file.parent.resolve()

    data: Dict[str, Any] = {}
    if config_file.exists():
        data = _read_config(config_file)

    llm_data = _as_dict(data.get("llm"))
    provider = (
        _first_env_value(environ, ENV_PROVIDER_KEYS)
        or _as_str(llm_data.get("provider"))
        or DEFAULT_PROVIDER
    )
    api_key = _first_env_value(environ, ENV_API_KEY_KEYS) or _as_str(llm_data.get("api_key"))
    model = (
        _first_env_value(environ, ENV_MODEL_KEYS)
        or _as_str(llm_data.get("model"))
        or DEFAULT_MODEL
    )
    temperature = _as_float(llm_data.get("temperature"))
    max_tokens = _as_int(llm_data.get("max_tokens"))
    request_timeout = _as_float(llm_data.get("request_timeout"))

    llm = LLMConfig(
        provider=provider.strip().lower(),
        api_key=api_key or None,
        model=model,
        temperature=DEFAULT_TEMPERATURE if temperature is None else temperature,
        max_tokens=max_tokens or DEFAULT_MAX_TOKENS,
        base_url=(_as_str(llm_data.get("base_url")) or DEFAULT_BASE_URL).rstrip("/"),
        request_timeout=request_timeout or DEFAULT_REQUEST_TIMEOUT,
    )

    prompts_data = _as_dict(data.get("prompts"))
    templates_dir_str = _as_str(prompts_data.get("templates_dir"))
    templates_dir = root / templates_dir_str if templates_dir_str else None

    return ArchitectConfig(
        root=root,
        llm=llm,
        exclude_paths=_as_str_list(data.get("exclude_paths")),
        templates_dir=templates_dir,
    )


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    if config_path.name != CONFIG_FILENAME:
        return (config_path.parent / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Dict[str, Any]:
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise ConfigError(f"Failed to read {path.name}: {exc}") from exc
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    if loaded is None:
        return {}
    if not isinstance(loaded, dict):
        raise ConfigError(f"{path.name} must contain a mapping at the root")
    return loaded


def _first_env_value(environ: Mapping[str, str], keys: Sequence[str]) -> Optional[str]:
    for key in keys:
        value = environ.get(key)
        if value:
            return value
    return None


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    if isinstance(value, bool):
        return None
    return str(value) if isinstance(value, (str, int, float)) else None


def _as_float(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value)
        except ValueError:
            return None
    return None


def _as_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value)
        except ValueError:
            return None
    return None


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, Sequence):
        return [str(item) for item in value if isinstance(item, (str, int, float))]
    return []


__all__ = [
    "ArchitectConfig",
    "CONFIG_FILENAME",
    "LLMConfig",
    "load_config",
]
