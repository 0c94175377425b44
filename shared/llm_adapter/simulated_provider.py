"""
Simulated LLM provider used when no live credential is configured.

Waits a random delay to mimic network latency, then returns a canned
response. Token counts are derived from word counts so the same prompt
always yields the same usage figures. Every response is flagged
simulated=True so callers never mistake it for a real measurement.
"""

from __future__ import annotations

import asyncio
import random

from shared.llm_adapter.base import LLMProvider
from shared.llm_adapter.models import LLMRequest, LLMResponse

_PREVIEW_CHARS = 50


class SimulatedProvider(LLMProvider):

    def __init__(
        self,
        provider_name: str,
        delay_range_ms: tuple[int, int] = (1000, 2500),
        rng: random.Random | None = None,
    ) -> None:
        low, high = delay_range_ms
        if low < 0 or high < low:
            raise ValueError(f"Invalid simulated delay range: {delay_range_ms}")
        self.name = provider_name
        self._delay_range_ms = (low, high)
        self._rng = rng or random.Random()
        self._call_count = 0

    @property
    def call_count(self) -> int:
        return self._call_count

    async def generate(self, request: LLMRequest) -> LLMResponse:
        self._call_count += 1

        low, high = self._delay_range_ms
        delay_ms = self._rng.uniform(low, high)
        if delay_ms > 0:
            await asyncio.sleep(delay_ms / 1000)

        preview = request.prompt[:_PREVIEW_CHARS]
        if len(request.prompt) > _PREVIEW_CHARS:
            preview += "..."
        content = (
            f"Simulated response from {request.model}: this would be a real "
            f"answer if a {self.name} API key were configured. "
            f'Your prompt was: "{preview}"'
        )

        prompt_tokens = len(request.prompt.split())
        completion_tokens = min(len(content.split()), request.max_tokens)

        return LLMResponse(
            content=content,
            model=request.model,
            prompt_tokens=prompt_tokens,
            completion_tokens=completion_tokens,
            total_tokens=prompt_tokens + completion_tokens,
            finish_reason="stop",
            simulated=True,
        )
