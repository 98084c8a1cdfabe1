"""Verification oracle backed by an Ethereum-style JSON-RPC node."""

from __future__ import annotations

import itertools
from logging import getLogger
from typing import TYPE_CHECKING

import httpx
from pydantic import ValidationError

from rewardrecon.adapters.http_resilience import ResilientClient
from rewardrecon.domain.errors import OracleError
from rewardrecon.domain.model import VerificationOutcome

from .schema import JsonRpcResponse, TransactionReceipt, parse_quantity

if TYPE_CHECKING:
    from collections.abc import Callable
    from types import TracebackType

    from rewardrecon.config.http_resilience import ResilienceConfig
    from rewardrecon.config.oracle import JsonRpcOracleConfig

log = getLogger(__name__)


class JsonRpcVerificationOracle:
    """Confirms a token once its transaction receipt is final enough.

    No receipt yet means "not yet confirmed". A reverted receipt is reported as
    ``OracleError`` because it will never confirm; the claim stays pending and
    the failure shows up in the logs and the retry count.

    Use as an async context manager to share one HTTP client across checks;
    outside of it every check opens and closes its own client.
    """

    def __init__(
        self,
        *,
        config: JsonRpcOracleConfig,
        client_factory: Callable[[ResilienceConfig], ResilientClient] | None = None,
    ) -> None:
        self._config = config
        self._client_factory = client_factory or ResilientClient
        self._client: ResilientClient | None = None
        self._request_ids = itertools.count(1)

    async def __aenter__(self) -> JsonRpcVerificationOracle:
        if self._client is None:
            self._client = self._client_factory(self._config.resilience)
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._client is not None:
            client, self._client = self._client, None
            await client.aclose()

    async def check(self, token: str) -> VerificationOutcome:
        if self._client is not None:
            return await self._check_with(self._client, token)
        async with self._client_factory(self._config.resilience) as client:
            return await self._check_with(client, token)

    async def _check_with(self, client: ResilientClient, token: str) -> VerificationOutcome:
        payload = await self._call(client, "eth_getTransactionReceipt", [token])
        if payload is None:
            return VerificationOutcome.NOT_YET_CONFIRMED

        try:
            receipt = TransactionReceipt.model_validate(payload)
        except ValidationError as exc:
            raise OracleError(f"Malformed receipt for {token}") from exc

        if not receipt.succeeded:
            raise OracleError(f"Transaction {token} reverted in block {receipt.block_number}")

        required = self._config.min_confirmations
        if required <= 1:
            return VerificationOutcome.CONFIRMED

        head_payload = await self._call(client, "eth_blockNumber", [])
        try:
            head = parse_quantity(head_payload)
        except ValueError as exc:
            raise OracleError(f"Malformed block number {head_payload!r}") from exc

        confirmations = head - receipt.block_number + 1
        if confirmations >= required:
            return VerificationOutcome.CONFIRMED
        log.debug("Transaction %s has %s/%s confirmations", token, confirmations, required)
        return VerificationOutcome.NOT_YET_CONFIRMED

    async def _call(self, client: ResilientClient, method: str, params: list[object]) -> object:
        body = {
            "jsonrpc": "2.0",
            "id": next(self._request_ids),
            "method": method,
            "params": params,
        }
        try:
            response = await client.post(self._config.rpc_url, json=body)
            response.raise_for_status()
            payload = response.json()
        except httpx.HTTPError as exc:
            raise OracleError(f"{method} request failed: {exc}") from exc
        except ValueError as exc:
            raise OracleError(f"{method} returned a non-JSON body") from exc

        try:
            envelope = JsonRpcResponse.model_validate(payload)
        except ValidationError as exc:
            raise OracleError(f"Malformed {method} response") from exc

        if envelope.error is not None:
            raise OracleError(
                f"{method} failed with RPC error {envelope.error.code}: {envelope.error.message}"
            )
        return envelope.result


if TYPE_CHECKING:
    from rewardrecon.config.oracle import JsonRpcOracleConfig as _Config
    from rewardrecon.domain.ports import VerificationOracle

    _oracle_check: VerificationOracle = JsonRpcVerificationOracle(
        config=_Config(rpc_url="http://localhost:8545")
    )
