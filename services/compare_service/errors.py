"""
Error taxonomy for the compare service.

Only ValidationError and InternalError abort a whole request. Per-model
problems (UnsupportedModelError, ProviderError) are turned into failure
entries inside an otherwise successful batch.
"""

from __future__ import annotations

from shared.llm_adapter.errors import ProviderError


class CompareError(Exception):
    """Base class for errors raised by the compare service."""


class ValidationError(CompareError):
    """The prompt request itself is unusable (empty prompt or model list)."""


class UnsupportedModelError(CompareError):
    """No provider family claims the model id."""

    def __init__(self, model_id: str) -> None:
        super().__init__(f"Unsupported model: {model_id}")
        self.model_id = model_id


class InternalError(CompareError):
    """Unexpected failure while orchestrating a batch."""


__all__ = [
    "CompareError",
    "InternalError",
    "ProviderError",
    "UnsupportedModelError",
    "ValidationError",
]
