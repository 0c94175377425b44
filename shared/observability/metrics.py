from prometheus_client import (
    Counter,
    Histogram,
    generate_latest,
    CONTENT_TYPE_LATEST,
)
from fastapi import Response


batches_dispatched = Counter(
    "prompt_batches_total",
    "Total prompt batches dispatched",
    ["mode"],
)

model_results = Counter(
    "model_results_total",
    "Per-model results by provider and outcome",
    ["provider", "outcome"],
)

model_response_time = Histogram(
    "model_response_time_seconds",
    "Wall-clock latency of a single provider call",
    ["provider"],
    buckets=(0.1, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0, 60.0, 120.0),
)

batch_dispatch_time = Histogram(
    "batch_dispatch_time_seconds",
    "Time spent dispatching a whole batch",
    buckets=(0.5, 1.0, 2.5, 5.0, 10.0, 30.0, 60.0, 120.0, 300.0),
)

llm_tokens = Counter(
    "llm_tokens_total",
    "Total LLM tokens consumed",
    ["provider", "direction"],
)

llm_cost = Counter(
    "llm_cost_usd_total",
    "Estimated LLM spend in USD",
    ["provider"],
)


def metrics_response() -> Response:
    return Response(
        content=generate_latest(),
        media_type=CONTENT_TYPE_LATEST,
    )
