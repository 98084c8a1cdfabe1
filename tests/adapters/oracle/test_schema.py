from __future__ import annotations

import pytest
from pydantic import ValidationError

from rewardrecon.adapters.oracle import JsonRpcResponse, TransactionReceipt, parse_quantity


@pytest.mark.parametrize(("raw", "expected"), [("0x0", 0), ("0x1b4", 436), ("0X10", 16), (7, 7)])
def test_parse_quantity(raw: object, expected: int) -> None:
    assert parse_quantity(raw) == expected


@pytest.mark.parametrize("raw", ["12", "", None, True])
def test_parse_quantity_rejects_non_hex(raw: object) -> None:
    with pytest.raises(ValueError):
        parse_quantity(raw)


def test_receipt_decodes_hex_fields_and_ignores_extras() -> None:
    receipt = TransactionReceipt.model_validate(
        {"transactionHash": "0xaa", "blockNumber": "0x20", "status": "0x1", "logs": []}
    )

    assert receipt.block_number == 32
    assert receipt.status == 1
    assert receipt.succeeded


def test_receipt_requires_block_number() -> None:
    with pytest.raises(ValidationError):
        TransactionReceipt.model_validate({"transactionHash": "0xaa", "status": "0x1"})


def test_response_envelope_with_error() -> None:
    envelope = JsonRpcResponse.model_validate(
        {"jsonrpc": "2.0", "id": 3, "error": {"code": -32000, "message": "header not found"}}
    )

    assert envelope.result is None
    assert envelope.error is not None
    assert envelope.error.code == -32000
