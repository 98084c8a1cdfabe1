"""Ports for persisting claims."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence
    from datetime import datetime
    from uuid import UUID

    from rewardrecon.domain.model import Claim, ClaimMutation, ClaimStatus, NewClaim


@runtime_checkable
class ClaimStore(Protocol):
    """Durable claim records with conditional updates.

    Every call is atomic on its own; there are no cross-call transactions.
    Infrastructure failures surface as ``StoreError``.
    """

    def create(self, submission: NewClaim) -> Claim:
        """Persist a new unconfirmed claim or raise ``DuplicateClaimError``."""
        ...

    def get(self, claim_id: UUID) -> Claim | None: ...

    def find_by_status(self, status: ClaimStatus) -> Iterable[Claim]:
        """Return a finite, restartable view of the claims in ``status``."""
        ...

    def compare_and_update(
        self,
        claim_id: UUID,
        expected_status: ClaimStatus,
        mutation: ClaimMutation,
    ) -> bool:
        """Apply ``mutation`` only while the stored status equals ``expected_status``.

        Terminal records are never mutated. Returns whether the write applied.
        """
        ...


@runtime_checkable
class ClaimRepository(Protocol):
    """Session-scoped persistence contract used inside a unit of work."""

    def add(self, claim: Claim) -> None: ...

    def get(self, claim_id: UUID) -> Claim | None: ...

    def exists_for(self, *, subject_id: str, claim_kind: str) -> bool: ...

    def page_by_status(
        self,
        status: ClaimStatus,
        *,
        after: UUID | None,
        limit: int,
    ) -> Sequence[Claim]: ...

    def compare_and_update(
        self,
        claim_id: UUID,
        expected_status: ClaimStatus,
        mutation: ClaimMutation,
        *,
        now: datetime,
    ) -> bool: ...
