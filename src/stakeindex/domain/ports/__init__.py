"""Domain port definitions for adapters."""

from __future__ import annotations

from .chain_state import BlockContext, ChainStateSnapshot, ChainStateSnapshotFactory, StakeBond
from .persistence import (
    AccountRepository,
    CollatorRepository,
    DelegatorRepository,
    HistoryElementRepository,
    Repository,
    StakerRepository,
)
from .unit_of_work import (
    RepositoryCollection,
    StakingRepositories,
    StakingUnitOfWork,
    UnitOfWork,
)

__all__ = [
    "AccountRepository",
    "BlockContext",
    "ChainStateSnapshot",
    "ChainStateSnapshotFactory",
    "CollatorRepository",
    "DelegatorRepository",
    "HistoryElementRepository",
    "Repository",
    "RepositoryCollection",
    "StakeBond",
    "StakerRepository",
    "StakingRepositories",
    "StakingUnitOfWork",
    "UnitOfWork",
]
