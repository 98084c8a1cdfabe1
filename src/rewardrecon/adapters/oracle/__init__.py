"""Verification oracle adapters, one class per oracle kind."""

from __future__ import annotations

from typing import TYPE_CHECKING

from rewardrecon.config.errors import ConfigurationError
from rewardrecon.config.oracle import OracleConfig, OracleKind

from .jsonrpc import JsonRpcVerificationOracle
from .schema import JsonRpcResponse, TransactionReceipt, parse_quantity
from .simulated import SimulatedVerificationOracle

if TYPE_CHECKING:
    from collections.abc import Callable

    from rewardrecon.domain.ports import VerificationOracle


def _build_jsonrpc(config: OracleConfig) -> VerificationOracle:
    if config.jsonrpc is None:
        raise ConfigurationError("jsonrpc oracle selected without JSON-RPC settings")
    return JsonRpcVerificationOracle(config=config.jsonrpc)


def _build_simulated(config: OracleConfig) -> VerificationOracle:
    return SimulatedVerificationOracle(config=config.simulated)


_BUILDERS: dict[OracleKind, Callable[[OracleConfig], VerificationOracle]] = {
    OracleKind.JSONRPC: _build_jsonrpc,
    OracleKind.SIMULATED: _build_simulated,
}


def build_oracle(config: OracleConfig) -> VerificationOracle:
    """Instantiate the oracle selected by ``config.kind``."""

    return _BUILDERS[config.kind](config)


__all__ = [
    "JsonRpcResponse",
    "JsonRpcVerificationOracle",
    "SimulatedVerificationOracle",
    "TransactionReceipt",
    "build_oracle",
    "parse_quantity",
]
