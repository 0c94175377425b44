"""
Compare Service -- HTTP entry point for side-by-side prompt testing.

Endpoints:
1. GET  /api/models                   -- catalog of selectable models
2. POST /api/prompts/test             -- dispatch a prompt to several models
3. GET  /api/prompts/history          -- recent batches from the audit log
4. GET  /api/prompts/history/{id}     -- per-model results of one batch
5. GET  /health, GET /metrics

Provider clients are built once in the lifespan and handed to the
dispatcher explicitly. The audit log is optional (DATABASE_URL) and is
written only after a batch has been answered.
"""

from __future__ import annotations

import logging
import uuid
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from shared.contracts.results import PromptRequest
from shared.llm_adapter import build_providers
from shared.logging.logger import setup_logging
from shared.observability.metrics import metrics_response
from services.compare_service.adapters import ProviderAdapter
from services.compare_service.audit import AuditLog
from services.compare_service.catalog import ModelCatalog
from services.compare_service.config import CompareConfig, cors_origins_from_env
from services.compare_service.dispatcher import PromptDispatcher
from services.compare_service.errors import InternalError, ValidationError

SERVICE_NAME = "compare_service"
VERSION = "1.0.0"

cfg: CompareConfig | None = None
catalog: ModelCatalog | None = None
dispatcher: PromptDispatcher | None = None
audit: AuditLog | None = None


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


@asynccontextmanager
async def lifespan(application: FastAPI):
    global cfg, catalog, dispatcher, audit
    cfg = CompareConfig.from_env()
    logger = setup_logging(SERVICE_NAME, cfg.log_level)

    catalog = ModelCatalog()
    clients = build_providers(
        cfg.api_keys,
        timeout=cfg.request_timeout,
        simulated_delay_ms=cfg.simulated_delay_ms,
    )
    adapters = {
        name: ProviderAdapter(name, client, catalog) for name, client in clients.items()
    }
    dispatcher = PromptDispatcher(adapters, catalog, mode=cfg.dispatch_mode)

    if cfg.database_url:
        audit = AuditLog(cfg.database_url)
        await audit.initialize(catalog)
        logger.info("Audit log enabled")

    logger.info(
        "Compare Service ready (%d models, dispatch=%s)",
        len(catalog.list_available()),
        cfg.dispatch_mode,
    )
    yield

    logger.info("Shutting down")
    if audit:
        await audit.close()
        audit = None


app = FastAPI(
    title="Prompt Compare - Compare Service",
    version=VERSION,
    description="Send one prompt to several LLMs and compare response, latency, tokens and cost",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins_from_env(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

logger = logging.getLogger(SERVICE_NAME)


@app.exception_handler(ValidationError)
async def _validation_error(request: Request, exc: ValidationError):
    return JSONResponse(
        status_code=400,
        content={"success": False, "error": str(exc), "timestamp": _now()},
    )


@app.exception_handler(InternalError)
async def _internal_error(request: Request, exc: InternalError):
    return JSONResponse(
        status_code=500,
        content={
            "success": False,
            "error": "Internal server error during prompt testing",
            "message": str(exc),
            "timestamp": _now(),
        },
    )


@app.exception_handler(RequestValidationError)
async def _malformed_body(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=400,
        content={
            "success": False,
            "error": "Invalid request body",
            "details": [
                {"loc": list(e.get("loc", ())), "msg": e.get("msg", "")}
                for e in exc.errors()
            ],
            "timestamp": _now(),
        },
    )


def _get_dispatcher() -> PromptDispatcher:
    if dispatcher is None:
        raise HTTPException(status_code=503, detail="Dispatcher not initialized")
    return dispatcher


def _get_catalog() -> ModelCatalog:
    if catalog is None:
        raise HTTPException(status_code=503, detail="Catalog not initialized")
    return catalog


@app.get("/")
async def root():
    return {
        "message": "Prompt Compare API",
        "version": VERSION,
        "status": "running",
        "timestamp": _now(),
    }


@app.get("/health")
async def health():
    return {
        "status": "ok",
        "service": SERVICE_NAME,
        "dispatch_mode": dispatcher.mode if dispatcher else None,
        "audit_log": audit is not None,
    }


@app.get("/metrics")
async def metrics():
    return metrics_response()


@app.get("/api/models")
async def list_models():
    cat = _get_catalog()
    entries = cat.list_available()
    return {
        "success": True,
        "models": [e.model_dump() for e in entries],
        "count": len(entries),
        "providers": cat.provider_counts(),
        "timestamp": _now(),
    }


class PromptTestRequest(BaseModel):
    prompt: str = ""
    models: list[str] = Field(default_factory=list)
    iterations: int = Field(default=1, ge=1)
    temperature: float = Field(default=0.7, ge=0.0, le=2.0)
    max_tokens: int = Field(default=500, ge=1)


@app.post("/api/prompts/test")
async def test_prompt(req: PromptTestRequest):
    disp = _get_dispatcher()
    request = PromptRequest(
        prompt=req.prompt,
        models=req.models,
        temperature=req.temperature,
        max_tokens=req.max_tokens,
        iterations=req.iterations,
    )

    try:
        outcome = await disp.dispatch(request)
    except ValidationError:
        raise
    except Exception as exc:
        logger.exception("Error in prompt testing")
        raise InternalError(str(exc) or type(exc).__name__) from exc

    test_id = f"test_{uuid.uuid4().hex[:16]}"
    if audit is not None:
        try:
            await audit.record_batch(test_id, request, outcome.results, outcome.summary)
        except Exception:
            logger.exception("Failed to record batch %s in audit log", test_id)

    return {
        "success": True,
        "test_id": test_id,
        "prompt": request.prompt,
        "models": request.models,
        "iterations": request.iterations,
        "results": [r.model_dump(mode="json") for r in outcome.results],
        "summary": outcome.summary.model_dump(),
        "timestamp": _now(),
    }


@app.get("/api/prompts/history")
async def history(limit: int = 20):
    if audit is None:
        return {
            "success": True,
            "tests": [],
            "message": "Audit log disabled; set DATABASE_URL to keep history",
            "timestamp": _now(),
        }
    tests = await audit.recent_tests(limit=max(1, min(limit, 200)))
    return {"success": True, "tests": tests, "count": len(tests), "timestamp": _now()}


@app.get("/api/prompts/history/{test_id}")
async def history_detail(test_id: str):
    if audit is None:
        raise HTTPException(status_code=404, detail="Audit log disabled")
    results = await audit.results_for(test_id)
    if not results:
        raise HTTPException(status_code=404, detail=f"Unknown test {test_id}")
    return {"success": True, "test_id": test_id, "results": results, "timestamp": _now()}
