"""Repository implementations backed by SQLAlchemy sessions."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, cast

from sqlalchemy import select, update

from rewardrecon.adapters.sqlalchemy.mappings import claim_table
from rewardrecon.domain.model import Claim, ClaimStatus

if TYPE_CHECKING:
    import uuid
    from collections.abc import Sequence
    from datetime import datetime

    from sqlalchemy.engine import CursorResult
    from sqlalchemy.orm import Session

    from rewardrecon.domain.model import ClaimMutation


class SqlAlchemyClaimRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def add(self, claim: Claim) -> None:
        self.session.add(claim)

    def get(self, claim_id: uuid.UUID) -> Claim | None:
        return self.session.get(Claim, claim_id)

    def exists_for(self, *, subject_id: str, claim_kind: str) -> bool:
        stmt = (
            select(claim_table.c.id)
            .where(claim_table.c.subject_id == subject_id)
            .where(claim_table.c.claim_kind == claim_kind)
            .limit(1)
        )
        return self.session.execute(stmt).scalar_one_or_none() is not None

    def page_by_status(
        self,
        status: ClaimStatus,
        *,
        after: uuid.UUID | None,
        limit: int,
    ) -> Sequence[Claim]:
        stmt = select(Claim).where(claim_table.c.status == status)
        if after is not None:
            stmt = stmt.where(claim_table.c.id > after)
        stmt = stmt.order_by(claim_table.c.id).limit(limit)
        return self.session.scalars(stmt).all()

    def compare_and_update(
        self,
        claim_id: uuid.UUID,
        expected_status: ClaimStatus,
        mutation: ClaimMutation,
        *,
        now: datetime,
    ) -> bool:
        values: dict[str, object] = {"updated_at": now}
        if mutation.status is not None:
            values["status"] = mutation.status
        if mutation.retry_increment:
            values["retry_count"] = claim_table.c.retry_count + mutation.retry_increment
        if mutation.verification_token is not None:
            values["verification_token"] = mutation.verification_token

        stmt = (
            update(claim_table)
            .where(claim_table.c.id == claim_id)
            .where(claim_table.c.status == expected_status)
            .where(claim_table.c.status != ClaimStatus.CONFIRMED)
            .values(values)
        )
        result = cast("CursorResult[Any]", self.session.execute(stmt))
        return result.rowcount == 1


if TYPE_CHECKING:
    from rewardrecon.domain.ports import ClaimRepository

    _session_stub = cast("Session", object())
    _repo_check: ClaimRepository = SqlAlchemyClaimRepository(_session_stub)
