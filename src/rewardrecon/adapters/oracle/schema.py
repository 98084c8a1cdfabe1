"""Pydantic models describing Ethereum JSON-RPC payloads."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator


def parse_quantity(value: object) -> int:
    """Decode a JSON-RPC hex quantity such as ``"0x1b4"``."""

    if isinstance(value, bool):
        raise ValueError("quantity must be a hex string, not a boolean")
    if isinstance(value, int):
        return value
    if not isinstance(value, str) or not value.startswith(("0x", "0X")):
        raise ValueError(f"invalid hex quantity: {value!r}")
    return int(value, 16)


class JsonRpcBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class JsonRpcErrorPayload(JsonRpcBaseModel):
    code: int
    message: str
    data: object | None = None


class JsonRpcResponse(JsonRpcBaseModel):
    jsonrpc: str = "2.0"
    id: int | str | None = None
    result: object | None = None
    error: JsonRpcErrorPayload | None = None


class TransactionReceipt(JsonRpcBaseModel):
    transaction_hash: str = Field(alias="transactionHash")
    block_number: int = Field(alias="blockNumber")
    status: int | None = None

    @field_validator("block_number", mode="before")
    @classmethod
    def _parse_block_number(cls, value: object) -> int:
        return parse_quantity(value)

    @field_validator("status", mode="before")
    @classmethod
    def _parse_status(cls, value: object) -> int | None:
        if value is None:
            return None
        return parse_quantity(value)

    @property
    def succeeded(self) -> bool:
        # pre-Byzantium receipts carry no status field
        return self.status is None or self.status == 1
