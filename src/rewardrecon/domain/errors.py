"""Error taxonomy for claim submission and reconciliation."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from uuid import UUID


class RewardReconError(Exception):
    """Base class for domain errors."""


class ClaimValidationError(RewardReconError, ValueError):
    """Raised when a claim submission or update is malformed."""


class DuplicateClaimError(RewardReconError):
    """Raised when a subject already holds a claim of the same kind."""

    def __init__(self, subject_id: str, claim_kind: str) -> None:
        super().__init__(f"Subject {subject_id!r} already has a {claim_kind!r} claim")
        self.subject_id = subject_id
        self.claim_kind = claim_kind


class ClaimNotFoundError(RewardReconError, LookupError):
    def __init__(self, claim_id: UUID) -> None:
        super().__init__(f"Claim {claim_id} does not exist")
        self.claim_id = claim_id


class ClaimAlreadyConfirmedError(RewardReconError):
    """Raised when an operator tries to change a claim that reached its terminal state."""

    def __init__(self, claim_id: UUID) -> None:
        super().__init__(f"Claim {claim_id} is already confirmed")
        self.claim_id = claim_id


class OracleError(RewardReconError):
    """The verification oracle could not give a conclusive answer.

    Covers transport failures, timeouts, malformed payloads and reverted
    transactions. The reconciliation engine treats it as a retry signal.
    """


class StoreError(RewardReconError):
    """The claim store is unavailable or failed to complete an operation."""
