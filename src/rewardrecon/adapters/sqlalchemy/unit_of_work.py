"""SQLAlchemy-backed units of work for claim persistence."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING, Literal

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

from rewardrecon.adapters.sqlalchemy.mappings import create_all_tables, start_mappers
from rewardrecon.adapters.sqlalchemy.repositories import SqlAlchemyClaimRepository
from rewardrecon.config.storage import get_database_config
from rewardrecon.domain.ports.unit_of_work import ClaimRepositories, RepositoryCollection

if TYPE_CHECKING:
    from types import TracebackType

    from sqlalchemy.engine import Engine

log = getLogger(__name__)


class StartupError(RuntimeError):
    """Raised when a SQLAlchemy unit of work is used before initialisation."""


@dataclass(slots=True)
class _AdapterState:
    engine: Engine | None = None
    session_factory: sessionmaker[Session] | None = None

    def bind(self, engine: Engine | None) -> None:
        self.engine = engine
        self.session_factory = (
            sessionmaker(bind=engine, expire_on_commit=False) if engine is not None else None
        )

    def require_session_factory(self) -> sessionmaker[Session]:
        if self.session_factory is None:
            raise StartupError(
                "SQLAlchemy adapter not initialised. Call rewardrecon.adapters.sqlalchemy."
                "startup() before opening a unit of work."
            )
        return self.session_factory


_STATE = _AdapterState()


def startup(
    *,
    engine: Engine | None = None,
    database_uri: str | None = None,
    force: bool = False,
) -> None:
    """Create the engine (unless given), map the claim model and ensure its table exists."""

    if _STATE.engine is not None and not force:
        raise StartupError(
            "SQLAlchemy adapter already initialised. Pass force=True to reconfigure."
        )

    resolved_engine = engine or create_engine(
        database_uri or get_database_config().uri, future=True
    )
    start_mappers()
    create_all_tables(resolved_engine)
    if _STATE.engine is not None and _STATE.engine is not resolved_engine:
        _STATE.engine.dispose()
    _STATE.bind(resolved_engine)
    log.info("Claim store ready on %s", resolved_engine.url.render_as_string(hide_password=True))


def configured_engine() -> Engine | None:
    return _STATE.engine


def is_started() -> bool:
    return _STATE.engine is not None


def shutdown() -> None:
    """Dispose the managed engine and forget it."""

    if _STATE.engine is not None:
        _STATE.engine.dispose()
    _STATE.bind(None)


class BaseSqlAlchemyUnitOfWork[TRepositories: RepositoryCollection](ABC):
    """One session per ``with`` block; rolled back when the block raises."""

    def __init__(self) -> None:
        self.session_factory = _STATE.require_session_factory()
        self._session: Session | None = None
        self._repositories: TRepositories | None = None

    @abstractmethod
    def _build_repositories(self, session: Session) -> TRepositories: ...

    def __enter__(self) -> BaseSqlAlchemyUnitOfWork[TRepositories]:
        if self._session is not None:
            raise StartupError("Unit of work session already open")
        self._session = self.session_factory()
        self._repositories = self._build_repositories(self._session)
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> Literal[False]:
        session = self.session
        try:
            if exc_type is not None:
                session.rollback()
        finally:
            session.close()
            self._session = None
            self._repositories = None
        return False

    def commit(self) -> None:
        self.session.commit()

    def rollback(self) -> None:
        self.session.rollback()

    @property
    def session(self) -> Session:
        if self._session is None:
            raise StartupError("Unit of work session not open")
        return self._session

    @property
    def repositories(self) -> TRepositories:
        if self._repositories is None:
            raise StartupError("Unit of work session not open")
        return self._repositories


class SqlAlchemyClaimUnitOfWork(BaseSqlAlchemyUnitOfWork[ClaimRepositories]):
    """Unit of work exposing the claim repository."""

    def _build_repositories(self, session: Session) -> ClaimRepositories:
        return ClaimRepositories(claims=SqlAlchemyClaimRepository(session))


if TYPE_CHECKING:
    from rewardrecon.domain.ports.unit_of_work import ClaimUnitOfWork

    _uow_check: ClaimUnitOfWork = SqlAlchemyClaimUnitOfWork()
