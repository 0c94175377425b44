"""Tests for the model catalog: metadata, routing and pricing."""

from __future__ import annotations

import pytest

from shared.contracts.results import CatalogEntry
from services.compare_service.catalog import ModelCatalog


def test_default_entries(catalog):
    ids = [e.id for e in catalog.list_available()]
    assert ids == [
        "gpt-3.5-turbo",
        "gpt-4",
        "gpt-4-turbo",
        "claude-3-sonnet-20240229",
        "claude-3-opus-20240229",
    ]


def test_provider_counts(catalog):
    assert catalog.provider_counts() == {"openai": 3, "anthropic": 2}


@pytest.mark.parametrize(
    "model_id, provider",
    [
        ("gpt-3.5-turbo", "openai"),
        ("gpt-4o", "openai"),
        ("ft:gpt-3.5-turbo:acme", "openai"),
        ("claude-3-opus-20240229", "anthropic"),
        ("claude-2.1", "anthropic"),
        ("claude", None),
        ("llama-3-70b", None),
        ("unknown-model", None),
    ],
)
def test_provider_for(catalog, model_id, provider):
    assert catalog.provider_for(model_id) == provider


def test_pricing_for_catalogued_model(catalog):
    assert catalog.pricing_for("claude-3-opus-20240229") == (0.015, 0.075)


def test_pricing_falls_back_to_family_default(catalog):
    assert catalog.pricing_for("gpt-4o") == catalog.pricing_for("gpt-3.5-turbo")
    assert catalog.pricing_for("claude-2.1") == catalog.pricing_for(
        "claude-3-sonnet-20240229"
    )


def test_pricing_for_unknown_model_is_zero(catalog):
    assert catalog.pricing_for("mystery") == (0.0, 0.0)


def test_cost_per_1k_tokens_is_output_price(catalog):
    entry = catalog.get("gpt-4")
    assert entry.cost_per_1k_tokens == entry.cost_per_1k_output
    assert entry.model_dump()["cost_per_1k_tokens"] == 0.03


def test_register_overrides_routing():
    catalog = ModelCatalog(entries=[])
    catalog.register(
        CatalogEntry(
            id="o1-preview",
            name="o1 preview",
            provider="openai",
            max_tokens=32768,
            cost_per_1k_input=0.015,
            cost_per_1k_output=0.06,
        )
    )
    assert catalog.provider_for("o1-preview") == "openai"
    assert catalog.provider_counts() == {"openai": 1, "anthropic": 0}


def test_register_rejects_unknown_provider(catalog):
    with pytest.raises(ValueError, match="unknown provider"):
        catalog.register(
            CatalogEntry(
                id="gemini-pro",
                name="Gemini Pro",
                provider="google",
                max_tokens=32000,
                cost_per_1k_input=0.0,
                cost_per_1k_output=0.0,
            )
        )
