"""Domain enums (pure, dependency-light)."""

from __future__ import annotations

from enum import StrEnum


class ClaimStatus(StrEnum):
    UNCONFIRMED = "unconfirmed"
    CONFIRMED = "confirmed"

    @property
    def is_terminal(self) -> bool:
        return self is ClaimStatus.CONFIRMED


class VerificationOutcome(StrEnum):
    """Conclusive answers an oracle can give; failures are raised as ``OracleError``."""

    CONFIRMED = "confirmed"
    NOT_YET_CONFIRMED = "not_yet_confirmed"
