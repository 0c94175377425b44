"""
Normalized contracts for prompt comparison batches.

Every provider answer, whether it succeeded or failed, is reduced to one of
the ModelResult variants below so the dispatcher and the API never have to
know which SDK produced it.
"""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Literal, Union

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator


def utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


class ErrorCode(str, Enum):
    UNSUPPORTED_MODEL = "UNSUPPORTED_MODEL"
    PROVIDER_ERROR = "PROVIDER_ERROR"
    AUTHENTICATION_ERROR = "AUTHENTICATION_ERROR"
    RATE_LIMITED = "RATE_LIMITED"
    TIMEOUT = "TIMEOUT"


class PromptRequest(BaseModel):
    """One user submission. Immutable once built."""

    model_config = ConfigDict(frozen=True)

    prompt: str
    models: list[str]
    temperature: float = Field(default=0.7, ge=0.0, le=2.0)
    max_tokens: int = Field(default=500, ge=1)
    iterations: int = Field(default=1, ge=1)

    @field_validator("prompt")
    @classmethod
    def _strip_prompt(cls, value: str) -> str:
        return value.strip()


class GenerationOptions(BaseModel):
    temperature: float = 0.7
    max_tokens: int = 500


class ModelSuccess(BaseModel):
    success: Literal[True] = True
    model: str
    provider: str
    prompt: str
    response: str
    tokens_prompt: int = Field(default=0, ge=0)
    tokens_completion: int = Field(default=0, ge=0)
    tokens_total: int = Field(default=0, ge=0)
    cost_input: float = Field(default=0.0, ge=0.0)
    cost_output: float = Field(default=0.0, ge=0.0)
    cost_total: float = Field(default=0.0, ge=0.0)
    response_time_ms: int = Field(default=0, ge=0)
    finish_reason: str | None = None
    simulated: bool = False
    timestamp: str = Field(default_factory=utc_now)


class ModelFailure(BaseModel):
    success: Literal[False] = False
    model: str
    provider: str
    prompt: str
    error_message: str
    error_code: ErrorCode
    response_time_ms: int = Field(default=0, ge=0)
    timestamp: str = Field(default_factory=utc_now)


ModelResult = Union[ModelSuccess, ModelFailure]


class BatchSummary(BaseModel):
    total_models: int = 0
    successful_models: int = 0
    failed_models: int = 0
    simulated_models: int = 0
    total_tokens: int = 0
    total_cost: float = 0.0
    avg_response_time_ms: int = 0


class DispatchOutcome(BaseModel):
    results: list[ModelResult]
    summary: BatchSummary


class CatalogEntry(BaseModel):
    id: str
    name: str
    provider: str
    description: str = ""
    max_tokens: int
    cost_per_1k_input: float
    cost_per_1k_output: float
    capabilities: list[str] = Field(default_factory=lambda: ["chat", "completion"])
    status: str = "available"

    @computed_field
    @property
    def cost_per_1k_tokens(self) -> float:
        return self.cost_per_1k_output
