"""Tests for the compare service HTTP surface."""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from conftest import FakeAdapter
from services.compare_service import main
from services.compare_service.dispatcher import PromptDispatcher


@pytest.fixture
def client(app_env):
    with TestClient(main.app) as c:
        yield c


def test_health(client):
    resp = client.get("/health")
    assert resp.status_code == 200
    data = resp.json()
    assert data["status"] == "ok"
    assert data["dispatch_mode"] == "sequential"
    assert data["audit_log"] is False


def test_root_banner(client):
    assert client.get("/").json()["status"] == "running"


def test_metrics_exposed(client):
    client.post("/api/prompts/test", json={"prompt": "Hello", "models": ["gpt-4"]})
    resp = client.get("/metrics")
    assert resp.status_code == 200
    assert "model_results_total" in resp.text


def test_list_models(client):
    resp = client.get("/api/models")
    assert resp.status_code == 200
    data = resp.json()
    assert data["success"] is True
    assert data["count"] == 5
    assert data["providers"] == {"openai": 3, "anthropic": 2}
    gpt4 = next(m for m in data["models"] if m["id"] == "gpt-4")
    assert gpt4["cost_per_1k_tokens"] == 0.03
    assert gpt4["status"] == "available"


def test_prompt_test_with_simulated_providers(client):
    resp = client.post(
        "/api/prompts/test",
        json={"prompt": "  Hello  ", "models": ["gpt-3.5-turbo", "unknown-model"]},
    )
    assert resp.status_code == 200
    data = resp.json()

    assert data["success"] is True
    assert data["test_id"].startswith("test_")
    assert data["prompt"] == "Hello"
    assert data["models"] == ["gpt-3.5-turbo", "unknown-model"]
    assert data["iterations"] == 1

    first, second = data["results"]
    assert first["model"] == "gpt-3.5-turbo"
    assert first["success"] is True
    assert first["simulated"] is True
    assert second["success"] is False
    assert second["error_code"] == "UNSUPPORTED_MODEL"
    assert second["response_time_ms"] == 0

    summary = data["summary"]
    assert summary["total_models"] == 2
    assert summary["successful_models"] == 1
    assert summary["failed_models"] == 1
    assert summary["simulated_models"] == 1
    assert summary["total_tokens"] == first["tokens_total"]


@pytest.mark.parametrize(
    "body, message",
    [
        ({"prompt": "", "models": ["gpt-3.5-turbo"]}, "Prompt is required"),
        ({"prompt": "   ", "models": ["gpt-3.5-turbo"]}, "Prompt is required"),
        ({"models": ["gpt-3.5-turbo"]}, "Prompt is required"),
        ({"prompt": "Hello", "models": []}, "At least one model"),
        ({"prompt": "Hello"}, "At least one model"),
    ],
)
def test_validation_failures_return_400(client, body, message):
    resp = client.post("/api/prompts/test", json=body)
    assert resp.status_code == 400
    data = resp.json()
    assert data["success"] is False
    assert message in data["error"]
    assert "results" not in data


def test_malformed_body_returns_400(client):
    resp = client.post(
        "/api/prompts/test", json={"prompt": "Hello", "models": ["gpt-4"], "temperature": 5}
    )
    assert resp.status_code == 400
    assert resp.json()["error"] == "Invalid request body"


def test_one_failing_model_does_not_abort_batch(client, catalog, monkeypatch):
    adapters = {
        "openai": FakeAdapter("openai", raise_for={"gpt-4"}),
        "anthropic": FakeAdapter("anthropic", cost=0.002, tokens=50),
    }
    monkeypatch.setattr(main, "dispatcher", PromptDispatcher(adapters, catalog))

    resp = client.post(
        "/api/prompts/test",
        json={"prompt": "Hello", "models": ["gpt-4", "claude-3-opus-20240229"]},
    )

    assert resp.status_code == 200
    data = resp.json()
    assert len(data["results"]) == 2
    assert data["results"][0]["error_code"] == "PROVIDER_ERROR"
    assert data["summary"]["successful_models"] == 1
    assert data["summary"]["failed_models"] == 1
    assert data["summary"]["total_cost"] == 0.002
    assert data["summary"]["total_tokens"] == 50


def test_unexpected_error_returns_500(client, monkeypatch):
    async def boom(request):
        raise RuntimeError("catalog exploded")

    monkeypatch.setattr(main.dispatcher, "dispatch", boom)
    resp = client.post("/api/prompts/test", json={"prompt": "Hello", "models": ["gpt-4"]})

    assert resp.status_code == 500
    data = resp.json()
    assert data["success"] is False
    assert data["message"] == "catalog exploded"


def test_history_without_audit_log(client):
    data = client.get("/api/prompts/history").json()
    assert data["success"] is True
    assert data["tests"] == []


def test_history_detail_without_audit_log(client):
    assert client.get("/api/prompts/history/test_abc").status_code == 404


def test_history_with_audit_log(app_env, tmp_path):
    app_env.setenv("DATABASE_URL", f"sqlite+aiosqlite:///{tmp_path / 'audit.db'}")
    with TestClient(main.app) as c:
        posted = c.post(
            "/api/prompts/test",
            json={"prompt": "Hello", "models": ["claude-3-sonnet-20240229", "nope"]},
        ).json()

        history = c.get("/api/prompts/history").json()
        assert history["count"] == 1
        entry = history["tests"][0]
        assert entry["test_id"] == posted["test_id"]
        assert entry["models"] == ["claude-3-sonnet-20240229", "nope"]
        assert entry["summary"]["total_models"] == 2
        assert entry["summary"]["failed_models"] == 1

        detail = c.get(f"/api/prompts/history/{posted['test_id']}").json()
        assert [r["model"] for r in detail["results"]] == ["claude-3-sonnet-20240229", "nope"]
        assert detail["results"][0]["simulated"] is True
        assert detail["results"][1]["error_code"] == "UNSUPPORTED_MODEL"
