"""Claim domain model."""

from __future__ import annotations

from .claim import Claim, ClaimMutation, NewClaim, new_id, normalize_token, utcnow
from .enums import ClaimStatus, VerificationOutcome

__all__ = [
    "Claim",
    "ClaimMutation",
    "ClaimStatus",
    "NewClaim",
    "VerificationOutcome",
    "new_id",
    "normalize_token",
    "utcnow",
]
