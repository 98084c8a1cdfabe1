"""Verification oracle configuration values."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum

from .env import env_float, env_int, optional_env_var, require_env_vars
from .errors import ConfigurationError
from .http_resilience import RateLimit, ResilienceConfig, RetryPolicy

JSONRPC_TIMEOUT_SECONDS = 10.0
DEFAULT_MIN_CONFIRMATIONS = 1
DEFAULT_SIMULATED_SUCCESS_RATE = 0.8


class OracleKind(StrEnum):
    JSONRPC = "jsonrpc"
    SIMULATED = "simulated"


@dataclass(frozen=True, slots=True)
class JsonRpcOracleConfig:
    """Ethereum-style JSON-RPC node used to look up transaction receipts."""

    rpc_url: str
    min_confirmations: int = DEFAULT_MIN_CONFIRMATIONS
    resilience: ResilienceConfig = field(
        default_factory=lambda: ResilienceConfig(name="jsonrpc-oracle")
    )

    def __post_init__(self) -> None:
        if self.min_confirmations < 1:
            raise ConfigurationError("min_confirmations must be at least 1")


@dataclass(frozen=True, slots=True)
class SimulatedOracleConfig:
    success_rate: float = DEFAULT_SIMULATED_SUCCESS_RATE
    latency_seconds: float = 0.0
    seed: int | None = None

    def __post_init__(self) -> None:
        if not 0.0 <= self.success_rate <= 1.0:
            raise ConfigurationError("success_rate must be between 0 and 1")
        if self.latency_seconds < 0:
            raise ConfigurationError("latency_seconds must be non-negative")


@dataclass(frozen=True, slots=True)
class OracleConfig:
    kind: OracleKind
    jsonrpc: JsonRpcOracleConfig | None = None
    simulated: SimulatedOracleConfig | None = None


def _parse_kind(value: str | None) -> OracleKind:
    if value is None:
        return OracleKind.JSONRPC
    try:
        return OracleKind(value.lower())
    except ValueError as exc:
        choices = ", ".join(kind.value for kind in OracleKind)
        raise ConfigurationError(f"Unknown oracle kind {value!r} (expected one of: {choices})") from exc


def get_jsonrpc_oracle_config() -> JsonRpcOracleConfig:
    values = require_env_vars(("REWARDRECON_RPC_URL",))
    rpc_url = values["REWARDRECON_RPC_URL"].strip()
    resilience = ResilienceConfig(
        name="jsonrpc-oracle",
        base_url=rpc_url,
        timeout_seconds=JSONRPC_TIMEOUT_SECONDS,
        retry=RetryPolicy(total=2),
        ratelimit=RateLimit(max_calls=10, per_seconds=1.0),
        default_headers={"Content-Type": "application/json"},
    )
    return JsonRpcOracleConfig(
        rpc_url=rpc_url,
        min_confirmations=env_int("REWARDRECON_MIN_CONFIRMATIONS", DEFAULT_MIN_CONFIRMATIONS),
        resilience=resilience,
    )


def get_simulated_oracle_config() -> SimulatedOracleConfig:
    seed = (
        env_int("REWARDRECON_SIMULATED_SEED", 0)
        if optional_env_var("REWARDRECON_SIMULATED_SEED") is not None
        else None
    )
    return SimulatedOracleConfig(
        success_rate=env_float(
            "REWARDRECON_SIMULATED_SUCCESS_RATE", DEFAULT_SIMULATED_SUCCESS_RATE
        ),
        seed=seed,
    )


def get_oracle_config() -> OracleConfig:
    kind = _parse_kind(optional_env_var("REWARDRECON_ORACLE"))
    if kind is OracleKind.SIMULATED:
        return OracleConfig(kind=kind, simulated=get_simulated_oracle_config())
    return OracleConfig(kind=kind, jsonrpc=get_jsonrpc_oracle_config())
