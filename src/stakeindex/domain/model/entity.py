"""
Base building blocks:
chain-derived string identity and the entity_type contract.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, ClassVar

if TYPE_CHECKING:
    from stakeindex.domain.model.enums import EntityType


@dataclass(eq=False, kw_only=True)
class Entity:
    """Identity is assigned by the chain (an encoded account id), never generated here."""

    id: str

    # class-level discriminator; subclasses must override
    ENTITY_TYPE: ClassVar[EntityType]

    @property
    def entity_type(self) -> EntityType:
        return self.ENTITY_TYPE
