from __future__ import annotations

import os
from typing import TYPE_CHECKING

import pytest
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine  # noqa: TC002

from rewardrecon.adapters.memory import InMemoryClaimStore
from rewardrecon.adapters.sqlalchemy import (
    SqlAlchemyClaimStore,
    SqlAlchemyClaimUnitOfWork,
    create_all_tables,
    shutdown,
    start_mappers,
    startup,
)

os.environ.setdefault("DATABASE_URI", "sqlite+pysqlite:///:memory:")

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator
    from pathlib import Path


@pytest.fixture
def sqlite_engine(tmp_path: Path) -> Iterator[Engine]:
    # file-backed so worker threads share one database
    engine = create_engine(f"sqlite+pysqlite:///{tmp_path / 'claims.db'}", future=True)
    start_mappers()
    create_all_tables(engine)
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture
def sqlite_unit_of_work(
    sqlite_engine: Engine,
) -> Iterator[Callable[[], SqlAlchemyClaimUnitOfWork]]:
    startup(engine=sqlite_engine, force=True)

    def factory() -> SqlAlchemyClaimUnitOfWork:
        return SqlAlchemyClaimUnitOfWork()

    try:
        yield factory
    finally:
        shutdown()


@pytest.fixture
def sql_store(
    sqlite_unit_of_work: Callable[[], SqlAlchemyClaimUnitOfWork],
) -> SqlAlchemyClaimStore:
    return SqlAlchemyClaimStore(unit_of_work_factory=sqlite_unit_of_work, page_size=2)


@pytest.fixture
def memory_store() -> InMemoryClaimStore:
    return InMemoryClaimStore()
