from __future__ import annotations

import threading
import uuid
from datetime import UTC, datetime, timedelta

import pytest

from rewardrecon.adapters.memory import InMemoryClaimStore
from rewardrecon.domain.errors import DuplicateClaimError
from rewardrecon.domain.model import ClaimMutation, ClaimStatus
from tests.helpers.claims import make_submission


def test_returned_claims_are_copies(memory_store: InMemoryClaimStore) -> None:
    claim = memory_store.create(make_submission())

    claim.retry_count = 99
    loaded = memory_store.get(claim.id)

    assert loaded is not None
    assert loaded.retry_count == 0


def test_second_writer_with_stale_expectation_loses(memory_store: InMemoryClaimStore) -> None:
    claim = memory_store.create(make_submission())

    first = memory_store.compare_and_update(
        claim.id, ClaimStatus.UNCONFIRMED, ClaimMutation.confirm()
    )
    second = memory_store.compare_and_update(
        claim.id, ClaimStatus.UNCONFIRMED, ClaimMutation.record_retry()
    )

    loaded = memory_store.get(claim.id)
    assert (first, second) == (True, False)
    assert loaded is not None
    assert loaded.status is ClaimStatus.CONFIRMED
    assert loaded.retry_count == 0


def test_confirmed_claims_reject_every_mutation(memory_store: InMemoryClaimStore) -> None:
    claim = memory_store.create(make_submission())
    memory_store.compare_and_update(claim.id, ClaimStatus.UNCONFIRMED, ClaimMutation.confirm())

    for mutation in (
        ClaimMutation.confirm(),
        ClaimMutation.record_retry(),
        ClaimMutation.set_token("0xother"),
    ):
        assert not memory_store.compare_and_update(claim.id, ClaimStatus.CONFIRMED, mutation)


def test_unknown_claim_is_not_updated(memory_store: InMemoryClaimStore) -> None:
    assert not memory_store.compare_and_update(
        uuid.uuid4(), ClaimStatus.UNCONFIRMED, ClaimMutation.confirm()
    )


def test_updated_at_advances_on_write() -> None:
    ticks = iter(datetime(2025, 1, 1, tzinfo=UTC) + timedelta(minutes=n) for n in range(10))
    store = InMemoryClaimStore(now_provider=lambda: next(ticks))
    claim = store.create(make_submission())

    store.compare_and_update(claim.id, ClaimStatus.UNCONFIRMED, ClaimMutation.record_retry())

    loaded = store.get(claim.id)
    assert loaded is not None
    assert loaded.created_at == datetime(2025, 1, 1, tzinfo=UTC)
    assert loaded.updated_at == datetime(2025, 1, 1, 0, 1, tzinfo=UTC)


def test_concurrent_confirmations_apply_once(memory_store: InMemoryClaimStore) -> None:
    claim = memory_store.create(make_submission())
    barrier = threading.Barrier(8)
    outcomes: list[bool] = []
    lock = threading.Lock()

    def contend() -> None:
        barrier.wait()
        applied = memory_store.compare_and_update(
            claim.id, ClaimStatus.UNCONFIRMED, ClaimMutation.confirm()
        )
        with lock:
            outcomes.append(applied)

    threads = [threading.Thread(target=contend) for _ in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert outcomes.count(True) == 1


def test_duplicate_pair_is_rejected(memory_store: InMemoryClaimStore) -> None:
    memory_store.create(make_submission(subject_id="u", claim_kind="k"))

    with pytest.raises(DuplicateClaimError):
        memory_store.create(make_submission(subject_id="u", claim_kind="k", token=None))
