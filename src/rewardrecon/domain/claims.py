"""Application services for submitting and inspecting reward claims."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from rewardrecon.domain.errors import (
    ClaimAlreadyConfirmedError,
    ClaimNotFoundError,
    ClaimValidationError,
)
from rewardrecon.domain.model import ClaimMutation, ClaimStatus, NewClaim, normalize_token

if TYPE_CHECKING:
    from uuid import UUID

    from rewardrecon.domain.model import Claim
    from rewardrecon.domain.ports import ClaimStore

log = getLogger(__name__)


def _require_text(value: str | None, field_name: str) -> str:
    if value is None or not value.strip():
        raise ClaimValidationError(f"{field_name} is required")
    return value.strip()


def validate_submission(submission: NewClaim) -> NewClaim:
    """Return a normalised copy of ``submission`` or raise ``ClaimValidationError``."""

    return NewClaim(
        subject_id=_require_text(submission.subject_id, "subject_id"),
        claim_kind=_require_text(submission.claim_kind, "claim_kind"),
        verification_token=normalize_token(submission.verification_token),
    )


def submit_claim(store: ClaimStore, submission: NewClaim) -> Claim:
    """Create an unconfirmed claim; duplicates raise ``DuplicateClaimError``."""

    claim = store.create(validate_submission(submission))
    log.info(
        "Claim %s submitted: subject=%s, kind=%s, token=%s",
        claim.id,
        claim.subject_id,
        claim.claim_kind,
        claim.verification_token or "<pending>",
    )
    return claim


def get_claim(store: ClaimStore, claim_id: UUID) -> Claim:
    claim = store.get(claim_id)
    if claim is None:
        raise ClaimNotFoundError(claim_id)
    return claim


def list_unconfirmed(store: ClaimStore) -> list[Claim]:
    return list(store.find_by_status(ClaimStatus.UNCONFIRMED))


def update_verification_token(store: ClaimStore, claim_id: UUID, token: str) -> Claim:
    """Supply or replace the token of a claim that is still unconfirmed."""

    if normalize_token(token) is None:
        raise ClaimValidationError("verification_token is required")
    get_claim(store, claim_id)
    applied = store.compare_and_update(
        claim_id,
        ClaimStatus.UNCONFIRMED,
        ClaimMutation.set_token(token),
    )
    if not applied:
        raise ClaimAlreadyConfirmedError(claim_id)
    log.info("Claim %s verification token updated", claim_id)
    return get_claim(store, claim_id)


def confirm_claim(store: ClaimStore, claim_id: UUID) -> bool:
    """Confirm a claim out of band.

    Returns ``False`` when the claim had already been confirmed, so repeated
    calls are harmless.
    """

    get_claim(store, claim_id)
    applied = store.compare_and_update(
        claim_id,
        ClaimStatus.UNCONFIRMED,
        ClaimMutation.confirm(),
    )
    if applied:
        log.info("Claim %s confirmed manually", claim_id)
    else:
        log.info("Claim %s was already confirmed", claim_id)
    return applied
