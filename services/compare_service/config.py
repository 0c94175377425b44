from __future__ import annotations

import os
from dataclasses import dataclass

_DISPATCH_MODES = ("sequential", "concurrent")


@dataclass(frozen=True)
class CompareConfig:
    openai_api_key: str
    anthropic_api_key: str
    database_url: str
    log_level: str
    request_timeout: float
    dispatch_mode: str
    simulated_delay_min_ms: int
    simulated_delay_max_ms: int

    @property
    def simulated_delay_ms(self) -> tuple[int, int]:
        return (self.simulated_delay_min_ms, self.simulated_delay_max_ms)

    @property
    def api_keys(self) -> dict[str, str]:
        return {
            "openai": self.openai_api_key,
            "anthropic": self.anthropic_api_key,
        }

    @classmethod
    def from_env(cls) -> CompareConfig:
        mode = os.environ.get("DISPATCH_MODE", "sequential").lower()
        if mode not in _DISPATCH_MODES:
            raise ValueError(
                f"DISPATCH_MODE must be one of {_DISPATCH_MODES}, got '{mode}'"
            )
        return cls(
            openai_api_key=os.environ.get("OPENAI_API_KEY", ""),
            anthropic_api_key=os.environ.get("ANTHROPIC_API_KEY", ""),
            database_url=os.environ.get("DATABASE_URL", ""),
            log_level=os.environ.get("LOG_LEVEL", "INFO"),
            request_timeout=float(os.environ.get("LLM_REQUEST_TIMEOUT", "120") or 120),
            dispatch_mode=mode,
            simulated_delay_min_ms=int(os.environ.get("SIMULATED_DELAY_MIN_MS", "1000")),
            simulated_delay_max_ms=int(os.environ.get("SIMULATED_DELAY_MAX_MS", "2500")),
        )


def cors_origins_from_env() -> list[str]:
    origins = os.environ.get(
        "CORS_ORIGINS", "http://localhost:3000,http://localhost:3001"
    )
    return [o.strip() for o in origins.split(",") if o.strip()]
