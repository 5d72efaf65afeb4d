"""Account: the identity anchor every participant hangs off."""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar

from stakeindex.domain.model.entity import Entity
from stakeindex.domain.model.enums import EntityType


@dataclass(eq=False, kw_only=True)
class Account(Entity):
    ENTITY_TYPE: ClassVar[EntityType] = EntityType.ACCOUNT

    last_update_block: int

    def touch(self, height: int) -> None:
        """Record a mutation at ``height``; the marker never moves backwards."""
        self.last_update_block = max(self.last_update_block, height)
