"""
Provider adapters -- turn one provider client into normalized ModelResults.

An adapter never raises: whatever the underlying client does, the caller
gets back either a ModelSuccess or a ModelFailure carrying the upstream
error message.
"""

from __future__ import annotations

import logging
import time

from shared.contracts.results import (
    ErrorCode,
    GenerationOptions,
    ModelFailure,
    ModelResult,
    ModelSuccess,
)
from shared.llm_adapter import LLMProvider, LLMRequest, ProviderError
from shared.observability.metrics import (
    llm_cost,
    llm_tokens,
    model_response_time,
)
from services.compare_service.catalog import ModelCatalog

logger = logging.getLogger(__name__)


def _elapsed_ms(started: float) -> int:
    return max(0, round((time.perf_counter() - started) * 1000))


class ProviderAdapter:

    def __init__(self, provider: str, client: LLMProvider, catalog: ModelCatalog) -> None:
        self.provider = provider
        self._client = client
        self._catalog = catalog

    async def test(
        self,
        prompt: str,
        model_id: str,
        options: GenerationOptions | None = None,
    ) -> ModelResult:
        options = options or GenerationOptions()
        started = time.perf_counter()

        try:
            response = await self._client.generate(
                LLMRequest(
                    prompt=prompt,
                    model=model_id,
                    temperature=options.temperature,
                    max_tokens=options.max_tokens,
                )
            )
        except ProviderError as exc:
            elapsed = _elapsed_ms(started)
            logger.warning(
                "Provider %s failed for %s (%s): %s",
                self.provider, model_id, exc.code.value, exc.message,
            )
            return self._failure(prompt, model_id, str(exc), exc.code, elapsed)
        except Exception as exc:
            elapsed = _elapsed_ms(started)
            logger.exception("Unexpected error from %s for %s", self.provider, model_id)
            return self._failure(
                prompt, model_id, str(exc) or type(exc).__name__,
                ErrorCode.PROVIDER_ERROR, elapsed,
            )

        elapsed = _elapsed_ms(started)
        price_in, price_out = self._catalog.pricing_for(model_id)
        cost_input = round(response.prompt_tokens * price_in / 1000, 6)
        cost_output = round(response.completion_tokens * price_out / 1000, 6)
        cost_total = round(cost_input + cost_output, 6)

        model_response_time.labels(provider=self.provider).observe(elapsed / 1000)
        llm_tokens.labels(provider=self.provider, direction="prompt").inc(
            response.prompt_tokens
        )
        llm_tokens.labels(provider=self.provider, direction="completion").inc(
            response.completion_tokens
        )
        if not response.simulated:
            llm_cost.labels(provider=self.provider).inc(cost_total)

        return ModelSuccess(
            model=model_id,
            provider=self.provider,
            prompt=prompt,
            response=response.content,
            tokens_prompt=response.prompt_tokens,
            tokens_completion=response.completion_tokens,
            tokens_total=response.total_tokens,
            cost_input=cost_input,
            cost_output=cost_output,
            cost_total=cost_total,
            response_time_ms=elapsed,
            finish_reason=response.finish_reason,
            simulated=response.simulated,
        )

    def _failure(
        self,
        prompt: str,
        model_id: str,
        message: str,
        code: ErrorCode,
        elapsed_ms: int,
    ) -> ModelFailure:
        return ModelFailure(
            model=model_id,
            provider=self.provider,
            prompt=prompt,
            error_message=message,
            error_code=code,
            response_time_ms=elapsed_ms,
        )
