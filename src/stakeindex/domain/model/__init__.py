"""Public domain model surface."""

from __future__ import annotations

from stakeindex.domain.model.account import Account
from stakeindex.domain.model.entity import Entity
from stakeindex.domain.model.enums import EntityType, StakerRole, StakingEventType
from stakeindex.domain.model.staking import Collator, Delegator, HistoryElement, Staker

__all__ = [  # noqa: RUF022
    # base
    "Entity",
    # identity
    "Account",
    # staking
    "Staker",
    "Collator",
    "Delegator",
    "HistoryElement",
    # enums
    "EntityType",
    "StakerRole",
    "StakingEventType",
]
