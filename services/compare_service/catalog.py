"""
Model catalog -- the single source of truth for which provider serves a
model id and what it costs.

The selection UI reads the entries; the dispatcher asks the same catalog
to route ids, so metadata and routing cannot drift apart. Ids that are not
listed but belong to a known family (e.g. "gpt-4o") still route by prefix
and are priced with the family's default model.
"""

from __future__ import annotations

import threading
from collections import Counter
from dataclasses import dataclass
from typing import Callable, Iterable, Optional

from shared.contracts.results import CatalogEntry


@dataclass(frozen=True)
class ProviderFamily:
    name: str
    matches: Callable[[str], bool]
    default_model: str


def _is_openai(model_id: str) -> bool:
    return model_id.startswith("gpt-") or "gpt" in model_id


def _is_anthropic(model_id: str) -> bool:
    return model_id.startswith("claude-")


# Order matters: the first family that matches wins.
DEFAULT_FAMILIES: tuple[ProviderFamily, ...] = (
    ProviderFamily("openai", _is_openai, "gpt-3.5-turbo"),
    ProviderFamily("anthropic", _is_anthropic, "claude-3-sonnet-20240229"),
)

DEFAULT_ENTRIES: tuple[CatalogEntry, ...] = (
    CatalogEntry(
        id="gpt-3.5-turbo",
        name="GPT-3.5 Turbo",
        provider="openai",
        description="Fast and efficient for most tasks",
        max_tokens=4096,
        cost_per_1k_input=0.001,
        cost_per_1k_output=0.002,
    ),
    CatalogEntry(
        id="gpt-4",
        name="GPT-4",
        provider="openai",
        description="Most capable model for complex tasks",
        max_tokens=8192,
        cost_per_1k_input=0.01,
        cost_per_1k_output=0.03,
    ),
    CatalogEntry(
        id="gpt-4-turbo",
        name="GPT-4 Turbo",
        provider="openai",
        description="GPT-4 quality with a larger context window",
        max_tokens=128000,
        cost_per_1k_input=0.01,
        cost_per_1k_output=0.03,
    ),
    CatalogEntry(
        id="claude-3-sonnet-20240229",
        name="Claude 3 Sonnet",
        provider="anthropic",
        description="Balanced performance and speed",
        max_tokens=200000,
        cost_per_1k_input=0.003,
        cost_per_1k_output=0.015,
    ),
    CatalogEntry(
        id="claude-3-opus-20240229",
        name="Claude 3 Opus",
        provider="anthropic",
        description="Most capable Claude model",
        max_tokens=200000,
        cost_per_1k_input=0.015,
        cost_per_1k_output=0.075,
    ),
)


class ModelCatalog:
    """
    In-memory registry of models and the provider families that serve them.

    Built once at startup; lookups are threadsafe.
    """

    def __init__(
        self,
        entries: Iterable[CatalogEntry] = DEFAULT_ENTRIES,
        families: Iterable[ProviderFamily] = DEFAULT_FAMILIES,
    ) -> None:
        self._lock = threading.Lock()
        self._families = {f.name: f for f in families}
        self._entries: dict[str, CatalogEntry] = {}
        for entry in entries:
            self.register(entry)

    def register(self, entry: CatalogEntry) -> None:
        """Register or overwrite a model by id."""
        if entry.provider not in self._families:
            raise ValueError(
                f"Model '{entry.id}' names unknown provider '{entry.provider}'"
            )
        with self._lock:
            self._entries[entry.id] = entry

    def get(self, model_id: str) -> Optional[CatalogEntry]:
        with self._lock:
            return self._entries.get(model_id)

    def list_available(self) -> list[CatalogEntry]:
        """Return a snapshot of all registered models, in registration order."""
        with self._lock:
            return list(self._entries.values())

    def provider_counts(self) -> dict[str, int]:
        counts = Counter(e.provider for e in self.list_available())
        return {name: counts.get(name, 0) for name in self._families}

    def provider_for(self, model_id: str) -> Optional[str]:
        """
        Resolve the provider family for a model id.

        Catalogued ids use their declared provider; anything else falls
        back to the family prefix rules. Returns None when nothing matches.
        """
        entry = self.get(model_id)
        if entry is not None:
            return entry.provider
        for family in self._families.values():
            if family.matches(model_id):
                return family.name
        return None

    def pricing_for(self, model_id: str) -> tuple[float, float]:
        """Return (input, output) USD price per 1K tokens for a model id."""
        entry = self.get(model_id)
        if entry is None:
            provider = self.provider_for(model_id)
            family = self._families.get(provider) if provider else None
            entry = self.get(family.default_model) if family else None
        if entry is None:
            return (0.0, 0.0)
        return (entry.cost_per_1k_input, entry.cost_per_1k_output)
