"""
OpenAI Chat Completions provider.

Handles every model id the catalog routes to the "openai" family
(gpt-3.5-turbo, gpt-4, gpt-4-turbo, ...). The model, temperature and
max_tokens are taken from each request; nothing is pinned at the adapter
level.

SDK exceptions are translated into ProviderError so callers only ever see
one error type with a normalized code.
"""

from __future__ import annotations

import os

from shared.contracts.results import ErrorCode
from shared.llm_adapter.base import LLMProvider
from shared.llm_adapter.errors import ProviderError
from shared.llm_adapter.models import LLMRequest, LLMResponse

_DEFAULT_BASE_URL = "https://api.openai.com/v1"


class OpenAIProvider(LLMProvider):
    """
    OpenAI Chat Completions adapter.

    Reads from env when not given explicitly:
      OPENAI_API_KEY       -- API key
      OPENAI_BASE_URL      -- override for OpenAI-compatible gateways
      LLM_REQUEST_TIMEOUT  -- per-request timeout in seconds
    """

    name = "openai"

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str | None = None,
        timeout: float | None = None,
    ) -> None:
        self._api_key = api_key or os.environ.get("OPENAI_API_KEY", "")
        if not self._api_key:
            raise ValueError(
                "An API key is required for provider 'openai'. "
                "Set OPENAI_API_KEY in your environment."
            )

        self._base_url = (
            base_url
            or os.environ.get("OPENAI_BASE_URL", "")
            or _DEFAULT_BASE_URL
        )

        try:
            import openai
        except ImportError as exc:
            raise ImportError(
                "openai package is required. Install it with: pip install openai"
            ) from exc

        self._sdk = openai
        if timeout is None:
            timeout = float(os.environ.get("LLM_REQUEST_TIMEOUT", "120"))
        self._client = openai.AsyncOpenAI(
            api_key=self._api_key,
            base_url=self._base_url,
            timeout=timeout,
        )

    async def generate(self, request: LLMRequest) -> LLMResponse:
        try:
            response = await self._client.chat.completions.create(
                model=request.model,
                temperature=request.temperature,
                max_tokens=request.max_tokens,
                messages=[{"role": "user", "content": request.prompt}],
            )
        except self._sdk.APITimeoutError as exc:
            raise ProviderError(str(exc), ErrorCode.TIMEOUT, self.name) from exc
        except self._sdk.AuthenticationError as exc:
            raise ProviderError(
                str(exc), ErrorCode.AUTHENTICATION_ERROR, self.name
            ) from exc
        except self._sdk.RateLimitError as exc:
            raise ProviderError(str(exc), ErrorCode.RATE_LIMITED, self.name) from exc
        except self._sdk.OpenAIError as exc:
            raise ProviderError(str(exc), ErrorCode.PROVIDER_ERROR, self.name) from exc

        if not response.choices:
            raise ProviderError(
                f"OpenAI returned no choices for model {request.model}",
                ErrorCode.PROVIDER_ERROR,
                self.name,
            )

        choice = response.choices[0]
        usage = response.usage

        return LLMResponse(
            content=choice.message.content or "No response generated",
            model=response.model or request.model,
            prompt_tokens=usage.prompt_tokens if usage else 0,
            completion_tokens=usage.completion_tokens if usage else 0,
            total_tokens=usage.total_tokens if usage else 0,
            finish_reason=choice.finish_reason,
        )
