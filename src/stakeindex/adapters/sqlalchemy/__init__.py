"""SQLAlchemy adapter package for stakeindex."""

from __future__ import annotations

from .mappings import mapper_registry, start_mappers
from .repositories import (
    SqlAlchemyAccountRepository,
    SqlAlchemyCollatorRepository,
    SqlAlchemyDelegatorRepository,
    SqlAlchemyHistoryElementRepository,
    SqlAlchemyStakerRepository,
)
from .unit_of_work import SqlAlchemyStakingUnitOfWork, shutdown, startup

__all__ = [
    "SqlAlchemyAccountRepository",
    "SqlAlchemyCollatorRepository",
    "SqlAlchemyDelegatorRepository",
    "SqlAlchemyHistoryElementRepository",
    "SqlAlchemyStakerRepository",
    "SqlAlchemyStakingUnitOfWork",
    "mapper_registry",
    "shutdown",
    "start_mappers",
    "startup",
]
