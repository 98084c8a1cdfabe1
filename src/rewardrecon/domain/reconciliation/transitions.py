"""Per-claim state transitions driven by oracle results."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

from rewardrecon.domain.model import ClaimMutation, VerificationOutcome


class ClaimDisposition(StrEnum):
    """What a single reconciliation attempt did to a claim."""

    CONFIRMED = "confirmed"
    PENDING = "pending"
    ERROR = "error"
    STALE = "stale"


def mutation_for(outcome: VerificationOutcome | None) -> ClaimMutation:
    """Map an oracle outcome (``None`` for an error) to the write that records it.

    Confirmation leaves the retry count untouched; inconclusive and failed
    checks both count as one retry.
    """

    if outcome is VerificationOutcome.CONFIRMED:
        return ClaimMutation.confirm()
    return ClaimMutation.record_retry()


def disposition_for(outcome: VerificationOutcome | None) -> ClaimDisposition:
    if outcome is None:
        return ClaimDisposition.ERROR
    if outcome is VerificationOutcome.CONFIRMED:
        return ClaimDisposition.CONFIRMED
    return ClaimDisposition.PENDING


@dataclass(slots=True)
class ScanResult:
    """Counters for one reconciliation scan."""

    scanned: int = 0
    skipped: int = 0
    confirmed: int = 0
    pending: int = 0
    errors: int = 0
    stale: int = 0

    def record(self, disposition: ClaimDisposition) -> None:
        if disposition is ClaimDisposition.CONFIRMED:
            self.confirmed += 1
        elif disposition is ClaimDisposition.PENDING:
            self.pending += 1
        elif disposition is ClaimDisposition.ERROR:
            self.errors += 1
        else:
            self.stale += 1

    @property
    def processed(self) -> int:
        return self.confirmed + self.pending + self.errors + self.stale
