"""Shared fixtures and fakes for the compare service tests."""

from __future__ import annotations

import pytest

from shared.contracts.results import (
    GenerationOptions,
    ModelFailure,
    ModelResult,
    ModelSuccess,
)
from shared.llm_adapter import LLMProvider, LLMRequest, LLMResponse
from services.compare_service.catalog import ModelCatalog


class FakeProvider(LLMProvider):
    """Records every request and answers with fixed usage figures."""

    def __init__(
        self,
        name: str = "openai",
        prompt_tokens: int = 10,
        completion_tokens: int = 20,
        error: Exception | None = None,
    ) -> None:
        self.name = name
        self.prompt_tokens = prompt_tokens
        self.completion_tokens = completion_tokens
        self.error = error
        self.requests: list[LLMRequest] = []

    async def generate(self, request: LLMRequest) -> LLMResponse:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        return LLMResponse(
            content=f"answer from {request.model}",
            model=request.model,
            prompt_tokens=self.prompt_tokens,
            completion_tokens=self.completion_tokens,
            total_tokens=self.prompt_tokens + self.completion_tokens,
            finish_reason="stop",
        )


class FakeAdapter:
    """Stand-in for ProviderAdapter with scripted per-model behaviour."""

    def __init__(
        self,
        provider: str,
        cost: float = 0.001,
        tokens: int = 30,
        response_time_ms: int = 100,
        raise_for: set[str] | None = None,
    ) -> None:
        self.provider = provider
        self.cost = cost
        self.tokens = tokens
        self.response_time_ms = response_time_ms
        self.raise_for = raise_for or set()
        self.calls: list[str] = []

    async def test(
        self, prompt: str, model_id: str, options: GenerationOptions | None = None
    ) -> ModelResult:
        self.calls.append(model_id)
        if model_id in self.raise_for:
            raise RuntimeError(f"upstream rejected {model_id}")
        return ModelSuccess(
            model=model_id,
            provider=self.provider,
            prompt=prompt,
            response="ok",
            tokens_prompt=self.tokens // 3,
            tokens_completion=self.tokens - self.tokens // 3,
            tokens_total=self.tokens,
            cost_total=self.cost,
            response_time_ms=self.response_time_ms,
        )


def make_success(model: str = "gpt-4", **overrides) -> ModelSuccess:
    data = {
        "model": model,
        "provider": "openai",
        "prompt": "Hello",
        "response": "Hi",
        "tokens_total": 30,
        "cost_total": 0.001,
        "response_time_ms": 100,
    }
    data.update(overrides)
    return ModelSuccess(**data)


def make_failure(model: str = "unknown-model", **overrides) -> ModelFailure:
    data = {
        "model": model,
        "provider": "unknown",
        "prompt": "Hello",
        "error_message": f"Unsupported model: {model}",
        "error_code": "UNSUPPORTED_MODEL",
    }
    data.update(overrides)
    return ModelFailure(**data)


@pytest.fixture
def catalog() -> ModelCatalog:
    return ModelCatalog()


@pytest.fixture
def fake_adapters() -> dict[str, FakeAdapter]:
    return {
        "openai": FakeAdapter("openai", cost=0.0012, tokens=40, response_time_ms=120),
        "anthropic": FakeAdapter("anthropic", cost=0.0034, tokens=60, response_time_ms=250),
    }


@pytest.fixture
def app_env(monkeypatch):
    """Environment for the FastAPI app: no live keys, no simulated delay."""
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    monkeypatch.delenv("ANTHROPIC_API_KEY", raising=False)
    monkeypatch.delenv("DATABASE_URL", raising=False)
    monkeypatch.setenv("SIMULATED_DELAY_MIN_MS", "0")
    monkeypatch.setenv("SIMULATED_DELAY_MAX_MS", "0")
    monkeypatch.setenv("DISPATCH_MODE", "sequential")
    monkeypatch.setenv("LOG_LEVEL", "WARNING")
    return monkeypatch
