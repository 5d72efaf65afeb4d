"""Domain enums (pure, dependency-light)."""

from __future__ import annotations

from enum import StrEnum


class EntityType(StrEnum):
    """Discriminator for persisted records."""

    ACCOUNT = "account"
    STAKER = "staker"
    COLLATOR = "collator"
    DELEGATOR = "delegator"
    HISTORY_ELEMENT = "history_element"


class StakerRole(StrEnum):
    COLLATOR = "collator"
    DELEGATOR = "delegator"


class StakingEventType(StrEnum):
    REWARDED = "rewarded"
    SLASHED = "slashed"
    BONDED = "bonded"
    UNBONDED = "unbonded"
    WITHDRAWN = "withdrawn"
