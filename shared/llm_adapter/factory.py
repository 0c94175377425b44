"""
Provider factory -- builds one client per provider family at startup.

Supported providers:

  openai      OpenAI Chat Completions  -- needs OPENAI_API_KEY
  anthropic   Anthropic Messages       -- needs ANTHROPIC_API_KEY

A provider whose key is missing (or still set to the development
placeholder) is served by SimulatedProvider instead. The returned mapping
is built once and passed explicitly to whoever needs it; there is no
module-level singleton.
"""

from __future__ import annotations

import logging
from typing import Callable

from shared.llm_adapter.base import LLMProvider
from shared.llm_adapter.simulated_provider import SimulatedProvider

logger = logging.getLogger(__name__)

PLACEHOLDER_KEY = "mock_key_for_development"


def _openai(api_key: str, timeout: float) -> LLMProvider:
    from shared.llm_adapter.openai_provider import OpenAIProvider

    return OpenAIProvider(api_key=api_key, timeout=timeout)


def _anthropic(api_key: str, timeout: float) -> LLMProvider:
    from shared.llm_adapter.anthropic_provider import AnthropicProvider

    return AnthropicProvider(api_key=api_key, timeout=timeout)


_PROVIDERS: dict[str, Callable[[str, float], LLMProvider]] = {
    "openai": _openai,
    "anthropic": _anthropic,
}


def has_live_key(api_key: str | None) -> bool:
    return bool(api_key) and api_key != PLACEHOLDER_KEY


def build_provider(
    provider_name: str,
    api_key: str | None,
    timeout: float = 120.0,
    simulated_delay_ms: tuple[int, int] = (1000, 2500),
) -> LLMProvider:
    """
    Return a live client for provider_name, or a SimulatedProvider when no
    usable key is configured.

    Raises ValueError for an unknown provider name.
    """
    name = provider_name.lower()
    factory = _PROVIDERS.get(name)
    if factory is None:
        raise ValueError(
            f"Unknown LLM provider '{provider_name}'. "
            f"Available: {', '.join(sorted(_PROVIDERS))}"
        )

    if not has_live_key(api_key):
        logger.warning(
            "No API key configured for %s; serving simulated responses", name
        )
        return SimulatedProvider(name, delay_range_ms=simulated_delay_ms)

    provider = factory(api_key, timeout)
    logger.info("LLM provider initialized: %s (timeout=%ss)", name, timeout)
    return provider


def build_providers(
    api_keys: dict[str, str | None],
    timeout: float = 120.0,
    simulated_delay_ms: tuple[int, int] = (1000, 2500),
) -> dict[str, LLMProvider]:
    """Build a client for every supported provider, keyed by provider name."""
    return {
        name: build_provider(
            name,
            api_keys.get(name),
            timeout=timeout,
            simulated_delay_ms=simulated_delay_ms,
        )
        for name in _PROVIDERS
    }
