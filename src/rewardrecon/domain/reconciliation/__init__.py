"""Reconciliation of unconfirmed claims against an external verification oracle."""

from __future__ import annotations

from .engine import ReconciliationEngine
from .transitions import ClaimDisposition, ScanResult, disposition_for, mutation_for

__all__ = [
    "ClaimDisposition",
    "ReconciliationEngine",
    "ScanResult",
    "disposition_for",
    "mutation_for",
]
