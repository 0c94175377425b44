"""Errors raised by LLM providers."""

from __future__ import annotations

from shared.contracts.results import ErrorCode


class ProviderError(Exception):
    """Upstream provider failure, tagged with a normalized error code."""

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.PROVIDER_ERROR,
        provider: str = "unknown",
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code
        self.provider = provider
