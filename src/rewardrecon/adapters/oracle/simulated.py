"""Stand-in oracle that confirms tokens at random."""

from __future__ import annotations

import asyncio
import random

from rewardrecon.config.oracle import SimulatedOracleConfig
from rewardrecon.domain.model import VerificationOutcome


class SimulatedVerificationOracle:
    """Confirms each check with probability ``success_rate``; for demos and load tests."""

    def __init__(
        self,
        *,
        config: SimulatedOracleConfig | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self._config = config or SimulatedOracleConfig()
        self._rng = rng or random.Random(self._config.seed)  # noqa: S311

    async def check(self, token: str) -> VerificationOutcome:
        _ = token
        if self._config.latency_seconds:
            await asyncio.sleep(self._config.latency_seconds)
        if self._rng.random() < self._config.success_rate:
            return VerificationOutcome.CONFIRMED
        return VerificationOutcome.NOT_YET_CONFIRMED
