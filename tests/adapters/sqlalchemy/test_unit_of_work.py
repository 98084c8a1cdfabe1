from __future__ import annotations

from typing import TYPE_CHECKING

import pytest
from sqlalchemy import create_engine

from rewardrecon.adapters.sqlalchemy.unit_of_work import (
    SqlAlchemyClaimUnitOfWork,
    StartupError,
    configured_engine,
    is_started,
    shutdown,
    startup,
)
from rewardrecon.domain.model import Claim

if TYPE_CHECKING:
    from collections.abc import Iterator

    from sqlalchemy.engine import Engine


@pytest.fixture(autouse=True)
def reset_unit_of_work_state() -> Iterator[None]:
    shutdown()
    yield
    shutdown()


def test_sqlalchemy_unit_of_work_requires_startup() -> None:
    with pytest.raises(StartupError):
        SqlAlchemyClaimUnitOfWork()


def test_startup_requires_force_for_reconfiguration() -> None:
    engine_a = create_engine("sqlite+pysqlite:///:memory:", future=True)
    engine_b = create_engine("sqlite+pysqlite:///:memory:", future=True)

    startup(engine=engine_a, force=True)

    with pytest.raises(StartupError):
        startup(engine=engine_b)

    startup(engine=engine_b, force=True)
    assert configured_engine() is engine_b
    assert is_started()


def test_unit_of_work_persists_claims(sqlite_engine: Engine) -> None:
    startup(engine=sqlite_engine, force=True)

    with SqlAlchemyClaimUnitOfWork() as uow:
        claim = Claim(subject_id="user-1", claim_kind="signup", verification_token="0x1")
        uow.repositories.claims.add(claim)
        uow.commit()

    with SqlAlchemyClaimUnitOfWork() as uow:
        claims = uow.repositories.claims
        assert claims.exists_for(subject_id="user-1", claim_kind="signup")
        loaded = claims.get(claim.id)
        assert loaded is not None
        assert loaded.verification_token == "0x1"


def test_unit_of_work_rolls_back_on_error(sqlite_engine: Engine) -> None:
    startup(engine=sqlite_engine, force=True)
    claim = Claim(subject_id="user-1", claim_kind="signup")

    with pytest.raises(RuntimeError), SqlAlchemyClaimUnitOfWork() as uow:
        uow.repositories.claims.add(claim)
        uow.session.flush()
        raise RuntimeError("boom")

    with SqlAlchemyClaimUnitOfWork() as uow:
        assert uow.repositories.claims.get(claim.id) is None


def test_repositories_require_an_open_session(sqlite_engine: Engine) -> None:
    startup(engine=sqlite_engine, force=True)
    uow = SqlAlchemyClaimUnitOfWork()

    with pytest.raises(StartupError):
        _ = uow.repositories
