"""
Batch audit log -- records finished batches for later history queries.

Entirely decoupled from dispatch: the API writes here only after a batch
has been answered, and a write failure never changes that answer.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Sequence

from sqlalchemy import select

from shared.contracts.results import (
    BatchSummary,
    ModelResult,
    ModelSuccess,
    PromptRequest,
)
from services.compare_service.catalog import ModelCatalog
from services.compare_service.database import (
    BatchRecord,
    BatchSummaryRecord,
    ModelRecord,
    ResultRecord,
    close_db,
    get_session,
    init_db,
)

logger = logging.getLogger(__name__)


class AuditLog:

    def __init__(self, database_url: str) -> None:
        self._database_url = database_url

    async def initialize(self, catalog: ModelCatalog | None = None) -> None:
        await init_db(self._database_url)
        if catalog is not None:
            await self.sync_models(catalog)

    async def close(self) -> None:
        await close_db()

    async def sync_models(self, catalog: ModelCatalog) -> int:
        """Upsert every catalog entry into the models table."""
        entries = catalog.list_available()
        async with get_session() as session:
            existing = {
                r.model_id: r
                for r in (await session.execute(select(ModelRecord))).scalars().all()
            }
            for entry in entries:
                row = existing.get(entry.id)
                if row is None:
                    row = ModelRecord(model_id=entry.id)
                    session.add(row)
                row.model_name = entry.name
                row.provider = entry.provider
                row.description = entry.description
                row.max_tokens = entry.max_tokens
                row.cost_per_1k_input = entry.cost_per_1k_input
                row.cost_per_1k_output = entry.cost_per_1k_output
                row.capabilities = json.dumps(entry.capabilities)
                row.status = entry.status
            await session.commit()
        logger.info("Synced %d catalog models into audit log", len(entries))
        return len(entries)

    async def record_batch(
        self,
        test_id: str,
        request: PromptRequest,
        results: Sequence[ModelResult],
        summary: BatchSummary,
    ) -> None:
        async with get_session() as session:
            session.add(
                BatchRecord(
                    test_id=test_id,
                    prompt=request.prompt,
                    models=json.dumps(list(request.models)),
                    temperature=request.temperature,
                    max_tokens=request.max_tokens,
                    iterations=request.iterations,
                )
            )
            for result in results:
                session.add(self._result_row(test_id, request, result))
            session.add(
                BatchSummaryRecord(
                    test_id=test_id,
                    total_models=summary.total_models,
                    successful_models=summary.successful_models,
                    failed_models=summary.failed_models,
                    total_tokens=summary.total_tokens,
                    total_cost=summary.total_cost,
                    avg_response_time=summary.avg_response_time_ms,
                )
            )
            await session.commit()
        logger.debug("Recorded batch %s (%d results)", test_id, len(results))

    @staticmethod
    def _result_row(
        test_id: str, request: PromptRequest, result: ModelResult
    ) -> ResultRecord:
        row = ResultRecord(
            test_id=test_id,
            model_id=result.model,
            provider=result.provider,
            prompt=result.prompt,
            success=result.success,
            response_time=result.response_time_ms,
            temperature=request.temperature,
            max_tokens=request.max_tokens,
        )
        if isinstance(result, ModelSuccess):
            row.response = result.response
            row.simulated = result.simulated
            row.tokens_prompt = result.tokens_prompt
            row.tokens_completion = result.tokens_completion
            row.tokens_total = result.tokens_total
            row.cost_input = result.cost_input
            row.cost_output = result.cost_output
            row.cost_total = result.cost_total
            row.finish_reason = result.finish_reason
        else:
            row.error_message = result.error_message
            row.error_code = result.error_code.value
        return row

    async def recent_tests(self, limit: int = 20) -> list[dict[str, Any]]:
        async with get_session() as session:
            stmt = (
                select(BatchRecord, BatchSummaryRecord)
                .join(
                    BatchSummaryRecord,
                    BatchSummaryRecord.test_id == BatchRecord.test_id,
                    isouter=True,
                )
                .order_by(BatchRecord.id.desc())
                .limit(limit)
            )
            rows = (await session.execute(stmt)).all()
            return [
                {
                    "test_id": test.test_id,
                    "prompt": test.prompt,
                    "models": json.loads(test.models),
                    "temperature": test.temperature,
                    "max_tokens": test.max_tokens,
                    "iterations": test.iterations,
                    "created_at": test.created_at.isoformat() if test.created_at else None,
                    "summary": (
                        {
                            "total_models": summ.total_models,
                            "successful_models": summ.successful_models,
                            "failed_models": summ.failed_models,
                            "total_tokens": summ.total_tokens,
                            "total_cost": summ.total_cost,
                            "avg_response_time_ms": summ.avg_response_time,
                        }
                        if summ is not None
                        else None
                    ),
                }
                for test, summ in rows
            ]

    async def results_for(self, test_id: str) -> list[dict[str, Any]]:
        async with get_session() as session:
            result = await session.execute(
                select(ResultRecord)
                .where(ResultRecord.test_id == test_id)
                .order_by(ResultRecord.id)
            )
            return [
                {
                    "model": r.model_id,
                    "provider": r.provider,
                    "success": r.success,
                    "simulated": r.simulated,
                    "response": r.response,
                    "error_message": r.error_message,
                    "error_code": r.error_code,
                    "tokens_total": r.tokens_total,
                    "cost_total": r.cost_total,
                    "response_time_ms": r.response_time,
                }
                for r in result.scalars().all()
            ]
