"""Ports for reading prior chain state."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Sequence
    from datetime import datetime


@dataclass(frozen=True, slots=True)
class BlockContext:
    """The block currently being processed."""

    height: int
    timestamp: datetime | None = None

    def __post_init__(self) -> None:
        if self.height < 1:
            raise ValueError(f"block height must be positive, got {self.height}")

    @property
    def previous_height(self) -> int:
        return self.height - 1


@dataclass(frozen=True, slots=True)
class StakeBond:
    """An id that holds a role at the snapshot height, with its bond in that role."""

    id: str
    bond: int


@runtime_checkable
class ChainStateSnapshot(Protocol):
    """Read-only view of staking storage at one fixed height.

    Both queries tolerate unknown ids: they are simply absent from the result.
    """

    @property
    def height(self) -> int: ...

    def collator_data(self, ids: Sequence[str]) -> list[StakeBond]: ...

    def delegator_data(self, ids: Sequence[str]) -> list[StakeBond]: ...


ChainStateSnapshotFactory = Callable[[int], ChainStateSnapshot]


__all__ = ["BlockContext", "ChainStateSnapshot", "ChainStateSnapshotFactory", "StakeBond"]
