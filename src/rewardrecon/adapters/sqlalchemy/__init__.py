"""SQLAlchemy adapter package for rewardrecon."""

from __future__ import annotations

from .mappings import claim_table, create_all_tables, mapper_registry, start_mappers
from .repositories import SqlAlchemyClaimRepository
from .store import ClaimScan, SqlAlchemyClaimStore
from .unit_of_work import (
    SqlAlchemyClaimUnitOfWork,
    StartupError,
    configured_engine,
    is_started,
    shutdown,
    startup,
)

__all__ = [
    "ClaimScan",
    "SqlAlchemyClaimRepository",
    "SqlAlchemyClaimStore",
    "SqlAlchemyClaimUnitOfWork",
    "StartupError",
    "claim_table",
    "configured_engine",
    "create_all_tables",
    "is_started",
    "mapper_registry",
    "shutdown",
    "start_mappers",
    "startup",
]
