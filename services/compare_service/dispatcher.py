"""
Prompt dispatcher -- sends one prompt to every requested model and folds
the per-model outcomes into a single batch.

Guarantees:
- exactly one result per requested model id, in request order
- a failing model never aborts the rest of the batch
- the summary is computed over successful results only
"""

from __future__ import annotations

import asyncio
import logging
import math
import time
from typing import Mapping, Sequence

from shared.contracts.results import (
    BatchSummary,
    DispatchOutcome,
    ErrorCode,
    GenerationOptions,
    ModelFailure,
    ModelResult,
    ModelSuccess,
    PromptRequest,
)
from shared.observability.metrics import (
    batch_dispatch_time,
    batches_dispatched,
    model_results,
)
from services.compare_service.adapters import ProviderAdapter
from services.compare_service.catalog import ModelCatalog
from services.compare_service.errors import UnsupportedModelError, ValidationError

logger = logging.getLogger(__name__)

UNKNOWN_PROVIDER = "unknown"


def validate_request(request: PromptRequest) -> None:
    """Raise ValidationError unless the request can be dispatched."""
    if not request.prompt or not request.prompt.strip():
        raise ValidationError("Prompt is required and cannot be empty")
    if not request.models:
        raise ValidationError("At least one model must be selected")
    if any(not m or not m.strip() for m in request.models):
        raise ValidationError("Model ids cannot be empty")


def summarize(results: Sequence[ModelResult]) -> BatchSummary:
    successes = [r for r in results if isinstance(r, ModelSuccess)]
    total_cost = sum(r.cost_total for r in successes)
    if successes:
        mean = sum(r.response_time_ms for r in successes) / len(successes)
        avg_ms = int(math.floor(mean + 0.5))
    else:
        avg_ms = 0

    return BatchSummary(
        total_models=len(results),
        successful_models=len(successes),
        failed_models=len(results) - len(successes),
        simulated_models=sum(1 for r in successes if r.simulated),
        total_tokens=sum(r.tokens_total or 0 for r in successes),
        total_cost=round(total_cost, 6),
        avg_response_time_ms=avg_ms,
    )


class PromptDispatcher:
    """
    Routes each model id to its provider adapter through the catalog.

    mode="sequential" awaits every call before starting the next;
    mode="concurrent" fans out with asyncio.gather. Output order is the
    input order in both modes.
    """

    def __init__(
        self,
        adapters: Mapping[str, ProviderAdapter],
        catalog: ModelCatalog,
        mode: str = "sequential",
    ) -> None:
        if mode not in ("sequential", "concurrent"):
            raise ValueError(f"Unknown dispatch mode '{mode}'")
        self._adapters = dict(adapters)
        self._catalog = catalog
        self.mode = mode

    async def dispatch(self, request: PromptRequest) -> DispatchOutcome:
        validate_request(request)
        options = GenerationOptions(
            temperature=request.temperature,
            max_tokens=request.max_tokens,
        )
        logger.info(
            "Dispatching prompt to %d models (%s)", len(request.models), self.mode
        )

        started = time.perf_counter()
        if self.mode == "concurrent":
            results = list(
                await asyncio.gather(
                    *(self._run_one(request.prompt, m, options) for m in request.models)
                )
            )
        else:
            results = []
            for model_id in request.models:
                results.append(await self._run_one(request.prompt, model_id, options))

        batch_dispatch_time.observe(time.perf_counter() - started)
        batches_dispatched.labels(mode=self.mode).inc()

        summary = summarize(results)
        logger.info(
            "Batch done: %d/%d succeeded, %d tokens, $%.6f",
            summary.successful_models,
            summary.total_models,
            summary.total_tokens,
            summary.total_cost,
        )
        return DispatchOutcome(results=results, summary=summary)

    def _resolve(self, model_id: str) -> ProviderAdapter:
        provider = self._catalog.provider_for(model_id)
        adapter = self._adapters.get(provider) if provider else None
        if adapter is None:
            raise UnsupportedModelError(model_id)
        return adapter

    async def _run_one(
        self, prompt: str, model_id: str, options: GenerationOptions
    ) -> ModelResult:
        try:
            adapter = self._resolve(model_id)
        except UnsupportedModelError as exc:
            logger.warning("Skipping %s: %s", model_id, exc)
            model_results.labels(provider=UNKNOWN_PROVIDER, outcome="unsupported").inc()
            return ModelFailure(
                model=model_id,
                provider=UNKNOWN_PROVIDER,
                prompt=prompt,
                error_message=str(exc),
                error_code=ErrorCode.UNSUPPORTED_MODEL,
                response_time_ms=0,
            )

        started = time.perf_counter()
        try:
            result = await adapter.test(prompt, model_id, options)
        except Exception as exc:
            logger.exception("Adapter %s raised for %s", adapter.provider, model_id)
            result = ModelFailure(
                model=model_id,
                provider=adapter.provider,
                prompt=prompt,
                error_message=str(exc) or type(exc).__name__,
                error_code=ErrorCode.PROVIDER_ERROR,
                response_time_ms=max(0, round((time.perf_counter() - started) * 1000)),
            )

        outcome = "success" if result.success else "failure"
        model_results.labels(provider=adapter.provider, outcome=outcome).inc()
        return result
