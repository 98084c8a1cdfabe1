"""Application configuration helpers."""

from __future__ import annotations

from .env import env_float, env_int, optional_env_var, require_env_var, require_env_vars
from .errors import ConfigurationError, MissingConfigurationError
from .http_resilience import RateLimit, ResilienceConfig, RetryPolicy
from .logging import configure_logging
from .oracle import (
    JsonRpcOracleConfig,
    OracleConfig,
    OracleKind,
    SimulatedOracleConfig,
    get_oracle_config,
)
from .reconciliation import ReconciliationConfig, get_reconciliation_config
from .storage import DatabaseConfig, StorageConfig, get_database_config, get_storage_config

__all__ = [
    "ConfigurationError",
    "DatabaseConfig",
    "JsonRpcOracleConfig",
    "MissingConfigurationError",
    "OracleConfig",
    "OracleKind",
    "RateLimit",
    "ReconciliationConfig",
    "ResilienceConfig",
    "RetryPolicy",
    "SimulatedOracleConfig",
    "StorageConfig",
    "configure_logging",
    "env_float",
    "env_int",
    "get_database_config",
    "get_oracle_config",
    "get_reconciliation_config",
    "get_storage_config",
    "optional_env_var",
    "require_env_var",
    "require_env_vars",
]
