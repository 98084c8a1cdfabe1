"""Claim store running every operation in its own SQLAlchemy unit of work."""

from __future__ import annotations

from collections.abc import Callable
from logging import getLogger
from typing import TYPE_CHECKING

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from rewardrecon.adapters.sqlalchemy.unit_of_work import SqlAlchemyClaimUnitOfWork
from rewardrecon.domain.errors import DuplicateClaimError, StoreError
from rewardrecon.domain.model import Claim, utcnow

if TYPE_CHECKING:
    from collections.abc import Iterator, Sequence
    from datetime import datetime
    from uuid import UUID

    from rewardrecon.domain.model import ClaimMutation, ClaimStatus, NewClaim
    from rewardrecon.domain.ports import ClaimUnitOfWork

log = getLogger(__name__)

DEFAULT_PAGE_SIZE = 500

UnitOfWorkFactory = Callable[[], "ClaimUnitOfWork"]


class ClaimScan:
    """Lazy, restartable iteration over the claims in one status.

    Pages are fetched with keyset pagination on the claim id, each in a fresh
    unit of work, so iterating again re-reads the latest committed state.
    """

    def __init__(
        self,
        load_page: Callable[[UUID | None], Sequence[Claim]],
        *,
        page_size: int,
    ) -> None:
        self._load_page = load_page
        self._page_size = page_size

    def __iter__(self) -> Iterator[Claim]:
        after: UUID | None = None
        while True:
            page = self._load_page(after)
            yield from page
            if len(page) < self._page_size:
                return
            after = page[-1].id


class SqlAlchemyClaimStore:
    def __init__(
        self,
        *,
        unit_of_work_factory: UnitOfWorkFactory | None = None,
        page_size: int = DEFAULT_PAGE_SIZE,
        now_provider: Callable[[], datetime] = utcnow,
    ) -> None:
        if page_size < 1:
            raise ValueError("page_size must be at least 1")
        self._unit_of_work_factory = unit_of_work_factory or SqlAlchemyClaimUnitOfWork
        self._page_size = page_size
        self._now = now_provider

    def create(self, submission: NewClaim) -> Claim:
        claim = Claim.from_submission(submission, now_provider=self._now)
        try:
            with self._unit_of_work_factory() as uow:
                claims = uow.repositories.claims
                if claims.exists_for(subject_id=claim.subject_id, claim_kind=claim.claim_kind):
                    raise DuplicateClaimError(claim.subject_id, claim.claim_kind)
                claims.add(claim)
                uow.commit()
        except IntegrityError as exc:
            # lost a race with a concurrent submission of the same pair
            raise DuplicateClaimError(claim.subject_id, claim.claim_kind) from exc
        except SQLAlchemyError as exc:
            raise StoreError(f"Failed to create claim: {exc}") from exc
        return claim.copy()

    def get(self, claim_id: UUID) -> Claim | None:
        try:
            with self._unit_of_work_factory() as uow:
                claim = uow.repositories.claims.get(claim_id)
                return claim.copy() if claim is not None else None
        except SQLAlchemyError as exc:
            raise StoreError(f"Failed to load claim {claim_id}: {exc}") from exc

    def find_by_status(self, status: ClaimStatus) -> ClaimScan:
        def load_page(after: UUID | None) -> Sequence[Claim]:
            try:
                with self._unit_of_work_factory() as uow:
                    page = uow.repositories.claims.page_by_status(
                        status, after=after, limit=self._page_size
                    )
                    return [claim.copy() for claim in page]
            except SQLAlchemyError as exc:
                raise StoreError(f"Failed to list {status} claims: {exc}") from exc

        return ClaimScan(load_page, page_size=self._page_size)

    def compare_and_update(
        self,
        claim_id: UUID,
        expected_status: ClaimStatus,
        mutation: ClaimMutation,
    ) -> bool:
        try:
            with self._unit_of_work_factory() as uow:
                applied = uow.repositories.claims.compare_and_update(
                    claim_id,
                    expected_status,
                    mutation,
                    now=self._now(),
                )
                uow.commit()
        except SQLAlchemyError as exc:
            raise StoreError(f"Failed to update claim {claim_id}: {exc}") from exc
        if not applied:
            log.debug(
                "Conditional update of claim %s rejected (expected %s)", claim_id, expected_status
            )
        return applied


if TYPE_CHECKING:
    from rewardrecon.domain.ports import ClaimStore

    _store_check: ClaimStore = SqlAlchemyClaimStore()
