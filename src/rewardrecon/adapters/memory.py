"""In-memory claim store used by tests and local experiments."""

from __future__ import annotations

import threading
from typing import TYPE_CHECKING

from rewardrecon.domain.errors import DuplicateClaimError
from rewardrecon.domain.model import Claim, utcnow

if TYPE_CHECKING:
    from collections.abc import Callable
    from datetime import datetime
    from uuid import UUID

    from rewardrecon.domain.model import ClaimMutation, ClaimStatus, NewClaim


class InMemoryClaimStore:
    """Thread-safe claim store keeping copies of every record.

    The lock is held only for the duration of each call, never while callers
    wait on anything else.
    """

    def __init__(self, *, now_provider: Callable[[], datetime] = utcnow) -> None:
        self._claims: dict[UUID, Claim] = {}
        self._lock = threading.Lock()
        self._now = now_provider

    def create(self, submission: NewClaim) -> Claim:
        claim = Claim.from_submission(submission, now_provider=self._now)
        with self._lock:
            for existing in self._claims.values():
                if (
                    existing.subject_id == claim.subject_id
                    and existing.claim_kind == claim.claim_kind
                ):
                    raise DuplicateClaimError(claim.subject_id, claim.claim_kind)
            self._claims[claim.id] = claim
            return claim.copy()

    def get(self, claim_id: UUID) -> Claim | None:
        with self._lock:
            claim = self._claims.get(claim_id)
            return claim.copy() if claim is not None else None

    def find_by_status(self, status: ClaimStatus) -> list[Claim]:
        with self._lock:
            return [claim.copy() for claim in self._claims.values() if claim.status == status]

    def compare_and_update(
        self,
        claim_id: UUID,
        expected_status: ClaimStatus,
        mutation: ClaimMutation,
    ) -> bool:
        with self._lock:
            current = self._claims.get(claim_id)
            if current is None or current.is_terminal or current.status != expected_status:
                return False
            self._claims[claim_id] = mutation.apply(current, now=self._now())
            return True

    def __len__(self) -> int:
        with self._lock:
            return len(self._claims)


if TYPE_CHECKING:
    from rewardrecon.domain.ports import ClaimStore

    _store_check: ClaimStore = InMemoryClaimStore()
