from __future__ import annotations

import pytest

from rewardrecon.config import (
    ConfigurationError,
    MissingConfigurationError,
    OracleKind,
    ReconciliationConfig,
    SimulatedOracleConfig,
    env_float,
    env_int,
    get_oracle_config,
    get_reconciliation_config,
    optional_env_var,
    require_env_var,
    require_env_vars,
)
from rewardrecon.config.oracle import JsonRpcOracleConfig

ENGINE_VARS = (
    "REWARDRECON_SCAN_INTERVAL_MS",
    "REWARDRECON_CONCURRENCY_LIMIT",
    "REWARDRECON_PER_CALL_TIMEOUT_MS",
)


@pytest.fixture
def clean_engine_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ENGINE_VARS:
        monkeypatch.delenv(name, raising=False)


def test_require_env_vars_returns_values(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("EXAMPLE_VAR", "value")

    result = require_env_vars(["EXAMPLE_VAR"])

    assert result["EXAMPLE_VAR"] == "value"


def test_require_env_vars_raises_when_any_missing(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("MISSING_VAR", raising=False)

    with pytest.raises(MissingConfigurationError) as exc:
        require_env_vars(["MISSING_VAR"])

    assert "MISSING_VAR" in str(exc.value)


def test_require_env_var_handles_blank_values(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("EXAMPLE_VAR", "   ")

    with pytest.raises(MissingConfigurationError):
        require_env_var("EXAMPLE_VAR")


def test_optional_env_var_treats_blank_as_unset(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("EXAMPLE_VAR", "  ")

    assert optional_env_var("EXAMPLE_VAR") is None


def test_typed_env_getters_reject_garbage(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("EXAMPLE_INT", "ten")
    monkeypatch.setenv("EXAMPLE_FLOAT", "lots")

    with pytest.raises(ConfigurationError, match="EXAMPLE_INT"):
        env_int("EXAMPLE_INT", 1)
    with pytest.raises(ConfigurationError, match="EXAMPLE_FLOAT"):
        env_float("EXAMPLE_FLOAT", 1.0)


def test_reconciliation_config_defaults(clean_engine_env: None) -> None:
    _ = clean_engine_env

    config = get_reconciliation_config()

    assert config == ReconciliationConfig(
        scan_interval_ms=60_000,
        concurrency_limit=4,
        per_call_timeout_ms=10_000,
    )
    assert config.scan_interval_seconds == 60.0
    assert config.per_call_timeout_seconds == 10.0


def test_reconciliation_config_reads_environment(
    monkeypatch: pytest.MonkeyPatch, clean_engine_env: None
) -> None:
    _ = clean_engine_env
    monkeypatch.setenv("REWARDRECON_SCAN_INTERVAL_MS", "1500")
    monkeypatch.setenv("REWARDRECON_CONCURRENCY_LIMIT", "8")

    config = get_reconciliation_config(per_call_timeout_ms=250)

    assert config.scan_interval_ms == 1500
    assert config.concurrency_limit == 8
    assert config.per_call_timeout_ms == 250


def test_reconciliation_config_explicit_zero_is_not_replaced_by_default(
    clean_engine_env: None,
) -> None:
    _ = clean_engine_env

    with pytest.raises(ConfigurationError, match="concurrency_limit"):
        get_reconciliation_config(concurrency_limit=0)


@pytest.mark.parametrize(
    "overrides",
    [
        {"scan_interval_ms": 0},
        {"concurrency_limit": -1},
        {"per_call_timeout_ms": 0},
    ],
)
def test_reconciliation_config_rejects_non_positive_values(overrides: dict[str, int]) -> None:
    with pytest.raises(ConfigurationError):
        ReconciliationConfig(**overrides)


def test_oracle_config_defaults_to_jsonrpc(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("REWARDRECON_ORACLE", raising=False)
    monkeypatch.setenv("REWARDRECON_RPC_URL", "http://node.local:8545 ")
    monkeypatch.setenv("REWARDRECON_MIN_CONFIRMATIONS", "3")

    config = get_oracle_config()

    assert config.kind is OracleKind.JSONRPC
    assert config.jsonrpc is not None
    assert config.jsonrpc.rpc_url == "http://node.local:8545"
    assert config.jsonrpc.min_confirmations == 3
    assert config.jsonrpc.resilience.ratelimit is not None


def test_oracle_config_jsonrpc_requires_url(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("REWARDRECON_ORACLE", "jsonrpc")
    monkeypatch.delenv("REWARDRECON_RPC_URL", raising=False)

    with pytest.raises(MissingConfigurationError, match="REWARDRECON_RPC_URL"):
        get_oracle_config()


def test_oracle_config_simulated(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("REWARDRECON_ORACLE", "Simulated")
    monkeypatch.setenv("REWARDRECON_SIMULATED_SUCCESS_RATE", "0.5")
    monkeypatch.setenv("REWARDRECON_SIMULATED_SEED", "7")

    config = get_oracle_config()

    assert config.kind is OracleKind.SIMULATED
    assert config.simulated == SimulatedOracleConfig(success_rate=0.5, seed=7)
    assert config.jsonrpc is None


def test_oracle_config_rejects_unknown_kind(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("REWARDRECON_ORACLE", "carrier-pigeon")

    with pytest.raises(ConfigurationError, match="carrier-pigeon"):
        get_oracle_config()


def test_oracle_settings_validate_ranges() -> None:
    with pytest.raises(ConfigurationError):
        SimulatedOracleConfig(success_rate=1.5)
    with pytest.raises(ConfigurationError):
        JsonRpcOracleConfig(rpc_url="http://node.local", min_confirmations=0)
