"""Exception hierarchy shared by the analysis and commit flows.

Every error raised on purpose by architect derives from ``ArchitectError``
and carries a ``context`` dict with structured metadata (workspace path,
provider name, HTTP status) that the CLI and the service render.

::

    ArchitectError
    ├── NoWorkspaceError
    ├── MissingApiKeyError
    ├── ConfigError
    ├── UnsupportedProviderError
    ├── NetworkError
    └── UnexpectedError
"""

from __future__ import annotations

from typing import Optional


class ArchitectError(RuntimeError):
    """Base class for all architect exceptions."""

    exit_code: int = 1

    def __init__(self, message: str, context: Optional[dict] = None) -> None:
        self.context = context or {}
        super().__init__(message)


class NoWorkspaceError(ArchitectError):
    """Raised when there is no workspace root to scan."""

    exit_code = 2

    def __init__(self, path: str) -> None:
        super().__init__(
            f"No workspace found at {path}",
            context={"workspace": path},
        )


class MissingApiKeyError(ArchitectError):
    """Raised when the configuration carries no API key."""

    exit_code = 2

    def __init__(self, provider: str = "") -> None:
        super().__init__(
            "No API key configured. Set llm.api_key in .architect.yml "
            "or export ARCHITECT_API_KEY.",
            context={"provider": provider},
        )


class ConfigError(ArchitectError):
    """Raised when the configuration file cannot be parsed."""

    exit_code = 2


class UnsupportedProviderError(ArchitectError):
    """Raised by the gateway when no provider is registered under a name."""

    def __init__(self, provider: str, available: Optional[list[str]] = None) -> None:
        names = ", ".join(available or [])
        message = f"Provider '{provider}' is not supported"
        if names:
            message += f". Available: {names}"
        super().__init__(message, context={"provider": provider})


class NetworkError(ArchitectError):
    """Raised when the provider round trip fails; wraps the provider's message."""

    def __init__(
        self,
        message: str,
        *,
        provider: str = "",
        status: Optional[int] = None,
    ) -> None:
        self.status = status
        super().__init__(message, context={"provider": provider, "status": status})


class UnexpectedError(ArchitectError):
    """Catch-all raised at the top of a flow for errors nobody classified."""

    def __init__(self, flow: str, cause: BaseException) -> None:
        super().__init__(
            f"{flow} failed unexpectedly: {cause}",
            context={"flow": flow, "cause": type(cause).__name__},
        )


__all__ = [
    "ArchitectError",
    "ConfigError",
    "MissingApiKeyError",
    "NetworkError",
    "NoWorkspaceError",
    "UnexpectedError",
    "UnsupportedProviderError",
]
