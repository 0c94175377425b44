from shared.llm_adapter.base import LLMProvider
from shared.llm_adapter.errors import ProviderError
from shared.llm_adapter.factory import build_provider, build_providers, has_live_key
from shared.llm_adapter.models import LLMRequest, LLMResponse
from shared.llm_adapter.simulated_provider import SimulatedProvider

__all__ = [
    "LLMProvider",
    "LLMRequest",
    "LLMResponse",
    "ProviderError",
    "SimulatedProvider",
    "build_provider",
    "build_providers",
    "has_live_key",
]
