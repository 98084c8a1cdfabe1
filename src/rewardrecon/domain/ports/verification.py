"""Port for the external verification oracle."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from rewardrecon.domain.model import VerificationOutcome


@runtime_checkable
class VerificationOracle(Protocol):
    """Asks an external system whether a verification token has been confirmed.

    Implementations return a conclusive ``VerificationOutcome`` or raise
    ``OracleError``. They must tolerate concurrent calls.
    """

    async def check(self, token: str) -> VerificationOutcome: ...
