"""Periodic reconciliation of unconfirmed claims against the verification oracle.

The engine keeps no per-claim state between scans: status and retry counts live
in the claim store, and every write goes through ``compare_and_update``. Two
engines sharing one store therefore stay correct; they only duplicate oracle
calls.
"""

from __future__ import annotations

import asyncio
import contextlib
from collections import deque
from logging import getLogger
from typing import TYPE_CHECKING

from rewardrecon.config.reconciliation import ReconciliationConfig
from rewardrecon.domain.errors import OracleError, StoreError
from rewardrecon.domain.model import ClaimStatus

from .transitions import ClaimDisposition, ScanResult, disposition_for, mutation_for

if TYPE_CHECKING:
    from rewardrecon.domain.model import Claim, VerificationOutcome
    from rewardrecon.domain.ports import ClaimStore, VerificationOracle

log = getLogger(__name__)


class ReconciliationEngine:
    """Drive every unconfirmed claim towards confirmation.

    ``start`` schedules a scan immediately and then every ``scan_interval_ms``
    on the running event loop. ``run_once`` performs a single scan and can be
    awaited directly. Oracle calls within a scan are bounded by
    ``concurrency_limit`` and each is cut off after ``per_call_timeout_ms``.
    """

    def __init__(
        self,
        *,
        store: ClaimStore,
        oracle: VerificationOracle,
        config: ReconciliationConfig | None = None,
    ) -> None:
        self._store = store
        self._oracle = oracle
        self.config = config or ReconciliationConfig()
        self._stopping = asyncio.Event()
        self._task: asyncio.Task[None] | None = None

    @property
    def oracle(self) -> VerificationOracle:
        return self._oracle

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    @property
    def stopping(self) -> bool:
        return self._stopping.is_set()

    def start(self) -> asyncio.Task[None]:
        """Schedule the recurring scan; must be called from a running event loop."""

        if self._task is not None:
            raise RuntimeError("Reconciliation engine already started")
        self._task = asyncio.create_task(self._run_periodically(), name="claim-reconciliation")
        return self._task

    async def stop(self, *, drain_timeout: float | None = None) -> None:
        """Stop scheduling scans and wait for the in-flight scan to drain.

        The in-flight scan dispatches no further claims; calls already sent to the
        oracle finish and their results are written. When ``drain_timeout``
        elapses first, the scan is cancelled and its pending oracle calls with it.
        """

        self._stopping.set()
        task = self._task
        if task is None or task.done():
            return
        try:
            async with asyncio.timeout(drain_timeout):
                await asyncio.shield(task)
        except TimeoutError:
            log.warning("Reconciliation drain exceeded %.1fs, cancelling scan", drain_timeout)
            task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await task

    async def run_once(self) -> ScanResult:
        """Run one scan over all unconfirmed claims.

        Raises ``StoreError`` when the store fails; claims not yet dispatched in
        this scan are left for the next one.
        """

        result = ScanResult()
        claims = await asyncio.to_thread(self._load_unconfirmed)
        eligible: list[Claim] = []
        for claim in claims:
            result.scanned += 1
            if claim.is_verifiable:
                eligible.append(claim)
            else:
                result.skipped += 1

        if eligible:
            await self._dispatch(eligible, result)

        log.info(
            "Scan finished: scanned=%s, skipped=%s, confirmed=%s, pending=%s, errors=%s, "
            "stale=%s",
            result.scanned,
            result.skipped,
            result.confirmed,
            result.pending,
            result.errors,
            result.stale,
        )
        return result

    async def _run_periodically(self) -> None:
        log.info(
            "Reconciliation engine started: interval=%sms, concurrency=%s, timeout=%sms",
            self.config.scan_interval_ms,
            self.config.concurrency_limit,
            self.config.per_call_timeout_ms,
        )
        while not self._stopping.is_set():
            try:
                await self.run_once()
            except StoreError:
                log.exception("Scan aborted: claim store unavailable")
            except Exception:
                log.exception("Scan failed")
            with contextlib.suppress(TimeoutError):
                async with asyncio.timeout(self.config.scan_interval_seconds):
                    await self._stopping.wait()
        log.info("Reconciliation engine stopped")

    def _load_unconfirmed(self) -> list[Claim]:
        return list(self._store.find_by_status(ClaimStatus.UNCONFIRMED))

    async def _dispatch(self, claims: list[Claim], result: ScanResult) -> None:
        queue: deque[Claim] = deque(claims)
        failures: list[StoreError] = []

        async def worker() -> None:
            while queue and not failures and not self._stopping.is_set():
                claim = queue.popleft()
                try:
                    disposition = await self._reconcile(claim)
                except StoreError as exc:
                    failures.append(exc)
                    return
                result.record(disposition)

        async with asyncio.TaskGroup() as group:
            for _ in range(min(self.config.concurrency_limit, len(claims))):
                group.create_task(worker())

        if failures:
            if queue:
                log.warning("Scan aborted with %s claims left unprocessed", len(queue))
            raise failures[0]

    async def _reconcile(self, claim: Claim) -> ClaimDisposition:
        outcome = await self._check(claim)
        applied = await asyncio.to_thread(
            self._store.compare_and_update,
            claim.id,
            ClaimStatus.UNCONFIRMED,
            mutation_for(outcome),
        )
        if not applied:
            log.debug("Discarding stale result for claim %s: no longer unconfirmed", claim.id)
            return ClaimDisposition.STALE

        disposition = disposition_for(outcome)
        if disposition is ClaimDisposition.CONFIRMED:
            log.info("Claim %s confirmed (subject=%s)", claim.id, claim.subject_id)
        elif disposition is ClaimDisposition.PENDING:
            log.info(
                "Claim %s not yet confirmed, retry %s", claim.id, claim.retry_count + 1
            )
        return disposition

    async def _check(self, claim: Claim) -> VerificationOutcome | None:
        token = claim.verification_token or ""
        try:
            async with asyncio.timeout(self.config.per_call_timeout_seconds):
                return await self._oracle.check(token)
        except TimeoutError:
            log.warning(
                "Oracle timed out after %sms for claim %s",
                self.config.per_call_timeout_ms,
                claim.id,
            )
        except OracleError as exc:
            log.warning("Oracle error for claim %s: %s", claim.id, exc)
        except Exception:
            log.exception("Unexpected oracle failure for claim %s", claim.id)
        return None
