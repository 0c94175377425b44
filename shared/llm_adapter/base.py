"""Abstract base class that all LLM providers must implement."""

from __future__ import annotations

from abc import ABC, abstractmethod

from shared.llm_adapter.models import LLMRequest, LLMResponse


class LLMProvider(ABC):
    """
    Contract for LLM providers.

    Every implementation MUST:
    - Send the request to exactly the model named in LLMRequest.model
    - Return a fully populated LLMResponse including token counts
    - Raise ProviderError (never a raw SDK exception) when the upstream fails
    """

    name: str = "unknown"

    @abstractmethod
    async def generate(self, request: LLMRequest) -> LLMResponse:
        """Send a prompt and return the model's response."""
