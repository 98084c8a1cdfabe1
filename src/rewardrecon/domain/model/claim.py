"""Reward claims awaiting external verification."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import TYPE_CHECKING
from uuid import UUID, uuid4

from .enums import ClaimStatus

if TYPE_CHECKING:
    from collections.abc import Callable


def new_id() -> UUID:
    return uuid4()


def utcnow() -> datetime:
    return datetime.now(UTC)


def normalize_token(token: str | None) -> str | None:
    """Return ``token`` stripped, or ``None`` when it is missing or blank."""
    if token is None:
        return None
    stripped = token.strip()
    return stripped or None


@dataclass(slots=True, frozen=True, kw_only=True)
class NewClaim:
    """Submission payload; the store assigns identity and timestamps."""

    subject_id: str
    claim_kind: str
    verification_token: str | None = None


@dataclass(eq=False, kw_only=True)
class Claim:
    """A subject is owed ``claim_kind``, pending confirmation of ``verification_token``."""

    subject_id: str
    claim_kind: str
    verification_token: str | None = None
    status: ClaimStatus = ClaimStatus.UNCONFIRMED
    retry_count: int = 0
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)
    id: UUID = field(default_factory=new_id)

    @classmethod
    def from_submission(
        cls,
        submission: NewClaim,
        *,
        now_provider: Callable[[], datetime] = utcnow,
    ) -> Claim:
        now = now_provider()
        return cls(
            subject_id=submission.subject_id,
            claim_kind=submission.claim_kind,
            verification_token=normalize_token(submission.verification_token),
            created_at=now,
            updated_at=now,
        )

    @property
    def is_terminal(self) -> bool:
        return self.status.is_terminal

    @property
    def is_verifiable(self) -> bool:
        """Whether the claim carries a token the oracle can be asked about."""
        return normalize_token(self.verification_token) is not None

    def copy(self) -> Claim:
        return Claim(
            id=self.id,
            subject_id=self.subject_id,
            claim_kind=self.claim_kind,
            verification_token=self.verification_token,
            status=self.status,
            retry_count=self.retry_count,
            created_at=self.created_at,
            updated_at=self.updated_at,
        )

    def __repr__(self) -> str:
        return (
            f"Claim(id={self.id}, subject_id={self.subject_id!r}, "
            f"claim_kind={self.claim_kind!r}, status={self.status.value}, "
            f"retry_count={self.retry_count})"
        )


@dataclass(slots=True, frozen=True, kw_only=True)
class ClaimMutation:
    """Declarative change applied through ``ClaimStore.compare_and_update``.

    Stores apply ``retry_increment`` relative to the stored value, so concurrent
    increments are never lost. ``verification_token=None`` leaves the token as is.
    """

    status: ClaimStatus | None = None
    retry_increment: int = 0
    verification_token: str | None = None

    def __post_init__(self) -> None:
        if self.status is not None and self.status is not ClaimStatus.CONFIRMED:
            raise ValueError("claims can only transition to confirmed")
        if self.retry_increment < 0:
            raise ValueError("retry_increment must be non-negative")

    @classmethod
    def confirm(cls) -> ClaimMutation:
        return cls(status=ClaimStatus.CONFIRMED)

    @classmethod
    def record_retry(cls) -> ClaimMutation:
        return cls(retry_increment=1)

    @classmethod
    def set_token(cls, token: str) -> ClaimMutation:
        normalized = normalize_token(token)
        if normalized is None:
            raise ValueError("verification token must not be blank")
        return cls(verification_token=normalized)

    def apply(self, claim: Claim, *, now: datetime) -> Claim:
        """Return a copy of ``claim`` with this mutation applied."""
        updated = claim.copy()
        if self.status is not None:
            updated.status = self.status
        updated.retry_count += self.retry_increment
        if self.verification_token is not None:
            updated.verification_token = self.verification_token
        updated.updated_at = now
        return updated


__all__ = ["Claim", "ClaimMutation", "NewClaim", "new_id", "normalize_token", "utcnow"]
