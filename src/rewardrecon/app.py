"""Application orchestration entry points."""

from __future__ import annotations

import asyncio
import contextlib
import signal
from logging import getLogger
from typing import TYPE_CHECKING

from rewardrecon.adapters.oracle import build_oracle
from rewardrecon.adapters.sqlalchemy import SqlAlchemyClaimStore, is_started, startup
from rewardrecon.config import get_oracle_config, get_reconciliation_config
from rewardrecon.domain.claims import (
    confirm_claim,
    get_claim,
    list_unconfirmed,
    submit_claim,
    update_verification_token,
)
from rewardrecon.domain.model import NewClaim
from rewardrecon.domain.reconciliation import ReconciliationEngine

if TYPE_CHECKING:
    from uuid import UUID

    from rewardrecon.config import ReconciliationConfig
    from rewardrecon.domain.model import Claim
    from rewardrecon.domain.ports import ClaimStore, VerificationOracle
    from rewardrecon.domain.reconciliation import ScanResult

log = getLogger(__name__)

SHUTDOWN_SIGNALS = (signal.SIGINT, signal.SIGTERM)


def default_store() -> ClaimStore:
    """SQLAlchemy store on the configured database, initialising the adapter once."""

    if not is_started():
        startup()
    return SqlAlchemyClaimStore()


def _resolve_store(store: ClaimStore | None) -> ClaimStore:
    return store if store is not None else default_store()


def submit_reward_claim(
    *,
    subject_id: str,
    claim_kind: str,
    verification_token: str | None = None,
    store: ClaimStore | None = None,
) -> Claim:
    submission = NewClaim(
        subject_id=subject_id,
        claim_kind=claim_kind,
        verification_token=verification_token,
    )
    return submit_claim(_resolve_store(store), submission)


def show_claim(claim_id: UUID, *, store: ClaimStore | None = None) -> Claim:
    return get_claim(_resolve_store(store), claim_id)


def list_pending_claims(*, store: ClaimStore | None = None) -> list[Claim]:
    return list_unconfirmed(_resolve_store(store))


def set_claim_token(claim_id: UUID, token: str, *, store: ClaimStore | None = None) -> Claim:
    return update_verification_token(_resolve_store(store), claim_id, token)


def confirm_reward_claim(claim_id: UUID, *, store: ClaimStore | None = None) -> bool:
    return confirm_claim(_resolve_store(store), claim_id)


def build_engine(
    *,
    store: ClaimStore | None = None,
    oracle: VerificationOracle | None = None,
    config: ReconciliationConfig | None = None,
) -> ReconciliationEngine:
    """Assemble an engine from explicit collaborators, falling back to configuration."""

    return ReconciliationEngine(
        store=_resolve_store(store),
        oracle=oracle or build_oracle(get_oracle_config()),
        config=config or get_reconciliation_config(),
    )


def reconcile_once(
    *,
    store: ClaimStore | None = None,
    oracle: VerificationOracle | None = None,
    config: ReconciliationConfig | None = None,
) -> ScanResult:
    """Run a single reconciliation scan and return its counters."""

    engine = build_engine(store=store, oracle=oracle, config=config)

    async def scan() -> ScanResult:
        async with _oracle_session(engine.oracle):
            return await engine.run_once()

    return asyncio.run(scan())


async def serve(
    engine: ReconciliationEngine,
    *,
    stop_requested: asyncio.Event | None = None,
    drain_timeout: float | None = None,
) -> None:
    """Run ``engine`` until ``stop_requested`` is set or a shutdown signal arrives."""

    stop_requested = stop_requested or asyncio.Event()
    loop = asyncio.get_running_loop()
    installed: list[signal.Signals] = []
    for sig in SHUTDOWN_SIGNALS:
        try:
            loop.add_signal_handler(sig, stop_requested.set)
        except (NotImplementedError, RuntimeError, ValueError):
            # not available on this platform or outside the main thread
            continue
        installed.append(sig)

    try:
        async with _oracle_session(engine.oracle):
            engine.start()
            await stop_requested.wait()
            log.info("Shutdown requested, draining in-flight checks")
            await engine.stop(drain_timeout=drain_timeout)
    finally:
        for sig in installed:
            loop.remove_signal_handler(sig)


def run_reconciliation_service(
    *,
    store: ClaimStore | None = None,
    oracle: VerificationOracle | None = None,
    config: ReconciliationConfig | None = None,
    drain_timeout: float | None = None,
) -> None:
    """Run the periodic reconciliation loop until SIGINT or SIGTERM."""

    engine = build_engine(store=store, oracle=oracle, config=config)
    asyncio.run(serve(engine, drain_timeout=drain_timeout))


def _oracle_session(
    oracle: VerificationOracle,
) -> contextlib.AbstractAsyncContextManager[object]:
    # oracles holding connections are entered for the whole run
    if isinstance(oracle, contextlib.AbstractAsyncContextManager):
        return oracle
    return contextlib.nullcontext()
