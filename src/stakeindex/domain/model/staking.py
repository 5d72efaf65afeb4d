"""Staking participants and their role markers."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, ClassVar

from stakeindex.domain.model.entity import Entity
from stakeindex.domain.model.enums import EntityType, StakerRole, StakingEventType

if TYPE_CHECKING:
    from datetime import datetime

    from stakeindex.domain.model.account import Account


@dataclass(eq=False, kw_only=True)
class Staker(Entity):
    """A collator or delegator, keyed by its stash account id.

    The role is fixed at creation. ``commission`` (Perbill) only carries meaning for
    collators.
    """

    ENTITY_TYPE: ClassVar[EntityType] = EntityType.STAKER

    stash: Account = field(repr=False)
    role: StakerRole
    active_bond: int = 0
    total_reward: int = 0
    commission: int | None = None

    def __post_init__(self) -> None:
        if self.id != self.stash.id:
            raise ValueError(f"Staker id {self.id!r} must equal its stash id {self.stash.id!r}")
        if self.active_bond < 0:
            raise ValueError("active_bond must be non-negative")
        if self.total_reward < 0:
            raise ValueError("total_reward must be non-negative")

    @property
    def is_collator(self) -> bool:
        return self.role is StakerRole.COLLATOR

    def add_reward(self, amount: int) -> None:
        if amount < 0:
            raise ValueError("reward amount must be non-negative")
        self.total_reward += amount


@dataclass(eq=False, kw_only=True)
class Collator(Entity):
    ENTITY_TYPE: ClassVar[EntityType] = EntityType.COLLATOR


@dataclass(eq=False, kw_only=True)
class Delegator(Entity):
    ENTITY_TYPE: ClassVar[EntityType] = EntityType.DELEGATOR


@dataclass(eq=False, kw_only=True)
class HistoryElement(Entity):
    """One recorded staking event.

    ``staker`` stays empty when the account could not be classified at the time the
    event was processed.
    """

    ENTITY_TYPE: ClassVar[EntityType] = EntityType.HISTORY_ELEMENT

    block_number: int
    type: StakingEventType
    amount: int
    staker: Staker | None = field(default=None, repr=False)
    timestamp: datetime | None = None
