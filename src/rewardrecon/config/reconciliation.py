"""Settings consumed by the reconciliation engine."""

from __future__ import annotations

from dataclasses import dataclass

from .env import env_int
from .errors import ConfigurationError

DEFAULT_SCAN_INTERVAL_MS = 60_000
DEFAULT_CONCURRENCY_LIMIT = 4
DEFAULT_PER_CALL_TIMEOUT_MS = 10_000


@dataclass(frozen=True, slots=True)
class ReconciliationConfig:
    """Scan cadence, oracle fan-out bound and per-call oracle timeout."""

    scan_interval_ms: int = DEFAULT_SCAN_INTERVAL_MS
    concurrency_limit: int = DEFAULT_CONCURRENCY_LIMIT
    per_call_timeout_ms: int = DEFAULT_PER_CALL_TIMEOUT_MS

    def __post_init__(self) -> None:
        if self.scan_interval_ms <= 0:
            raise ConfigurationError("scan_interval_ms must be a positive integer")
        if self.concurrency_limit < 1:
            raise ConfigurationError("concurrency_limit must be at least 1")
        if self.per_call_timeout_ms <= 0:
            raise ConfigurationError("per_call_timeout_ms must be a positive integer")

    @property
    def scan_interval_seconds(self) -> float:
        return self.scan_interval_ms / 1000

    @property
    def per_call_timeout_seconds(self) -> float:
        return self.per_call_timeout_ms / 1000


def get_reconciliation_config(
    *,
    scan_interval_ms: int | None = None,
    concurrency_limit: int | None = None,
    per_call_timeout_ms: int | None = None,
) -> ReconciliationConfig:
    """Build engine settings from explicit overrides, then the environment, then defaults."""

    if scan_interval_ms is None:
        scan_interval_ms = env_int("REWARDRECON_SCAN_INTERVAL_MS", DEFAULT_SCAN_INTERVAL_MS)
    if concurrency_limit is None:
        concurrency_limit = env_int("REWARDRECON_CONCURRENCY_LIMIT", DEFAULT_CONCURRENCY_LIMIT)
    if per_call_timeout_ms is None:
        per_call_timeout_ms = env_int(
            "REWARDRECON_PER_CALL_TIMEOUT_MS", DEFAULT_PER_CALL_TIMEOUT_MS
        )
    return ReconciliationConfig(
        scan_interval_ms=scan_interval_ms,
        concurrency_limit=concurrency_limit,
        per_call_timeout_ms=per_call_timeout_ms,
    )
