"""Staker resolution: get-or-create for accounts, stakers and their role records."""

from __future__ import annotations

from .accounts import get_or_create_account, get_or_create_accounts
from .context import ResolutionContext, unique_ids
from .errors import (
    InvalidStakerRoleError,
    SnapshotUnavailableError,
    StakeIndexError,
    StorageUnavailableError,
)
from .events import StakingEvent, handle_staking_event, handle_staking_events
from .factory import StakerData, create_staker
from .stakers import (
    Classification,
    CollatorBond,
    DelegatorBond,
    classify_stake,
    get_or_create_staker,
    get_or_create_stakers,
)

__all__ = [
    "Classification",
    "CollatorBond",
    "DelegatorBond",
    "InvalidStakerRoleError",
    "ResolutionContext",
    "SnapshotUnavailableError",
    "StakeIndexError",
    "StakerData",
    "StakingEvent",
    "StorageUnavailableError",
    "classify_stake",
    "create_staker",
    "get_or_create_account",
    "get_or_create_accounts",
    "get_or_create_staker",
    "get_or_create_stakers",
    "handle_staking_event",
    "handle_staking_events",
    "unique_ids",
]
