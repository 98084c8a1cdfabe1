"""Domain port definitions for adapters."""

from __future__ import annotations

from .persistence import ClaimRepository, ClaimStore
from .unit_of_work import ClaimRepositories, ClaimUnitOfWork, RepositoryCollection, UnitOfWork
from .verification import VerificationOracle

__all__ = [
    "ClaimRepositories",
    "ClaimRepository",
    "ClaimStore",
    "ClaimUnitOfWork",
    "RepositoryCollection",
    "UnitOfWork",
    "VerificationOracle",
]
