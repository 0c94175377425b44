"""
Anthropic Messages API provider.

Serves every model id the catalog routes to the "anthropic" family
(claude-3-sonnet-20240229, claude-3-opus-20240229, ...).
"""

from __future__ import annotations

import os

from shared.contracts.results import ErrorCode
from shared.llm_adapter.base import LLMProvider
from shared.llm_adapter.errors import ProviderError
from shared.llm_adapter.models import LLMRequest, LLMResponse


class AnthropicProvider(LLMProvider):
    """
    Anthropic Messages adapter.

    Reads from env when not given explicitly:
      ANTHROPIC_API_KEY    -- API key
      LLM_REQUEST_TIMEOUT  -- per-request timeout in seconds
    """

    name = "anthropic"

    def __init__(
        self,
        api_key: str | None = None,
        timeout: float | None = None,
    ) -> None:
        self._api_key = api_key or os.environ.get("ANTHROPIC_API_KEY", "")
        if not self._api_key:
            raise ValueError(
                "An API key is required for provider 'anthropic'. "
                "Set ANTHROPIC_API_KEY in your environment."
            )

        try:
            import anthropic
        except ImportError as exc:
            raise ImportError(
                "anthropic package is required. Install it with: pip install anthropic"
            ) from exc

        self._sdk = anthropic
        if timeout is None:
            timeout = float(os.environ.get("LLM_REQUEST_TIMEOUT", "120"))
        self._client = anthropic.AsyncAnthropic(api_key=self._api_key, timeout=timeout)

    async def generate(self, request: LLMRequest) -> LLMResponse:
        try:
            response = await self._client.messages.create(
                model=request.model,
                max_tokens=request.max_tokens,
                temperature=request.temperature,
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
        except self._sdk.AnthropicError as exc:
            raise ProviderError(str(exc), ErrorCode.PROVIDER_ERROR, self.name) from exc

        text = "".join(
            block.text for block in response.content if getattr(block, "type", "") == "text"
        ).strip()
        usage = response.usage
        prompt_tokens = usage.input_tokens if usage else 0
        completion_tokens = usage.output_tokens if usage else 0

        return LLMResponse(
            content=text or "No response generated",
            model=response.model or request.model,
            prompt_tokens=prompt_tokens,
            completion_tokens=completion_tokens,
            total_tokens=prompt_tokens + completion_tokens,
            finish_reason=response.stop_reason,
        )
