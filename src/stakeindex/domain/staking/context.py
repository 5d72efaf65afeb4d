"""Per-block resolution context."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from stakeindex.config.staking import StakingConfig

if TYPE_CHECKING:
    from collections.abc import Iterable

    from stakeindex.domain.ports.chain_state import (
        BlockContext,
        ChainStateSnapshot,
        ChainStateSnapshotFactory,
    )
    from stakeindex.domain.ports.unit_of_work import StakingRepositories


@dataclass(slots=True)
class ResolutionContext:
    """Everything a resolution call needs, scoped to the block being processed.

    The repositories belong to the caller's unit of work; nothing here commits.
    """

    repositories: StakingRepositories
    block: BlockContext
    snapshot_factory: ChainStateSnapshotFactory
    settings: StakingConfig = field(default_factory=StakingConfig)

    def open_snapshot(self) -> ChainStateSnapshot:
        """Return a fresh snapshot of the state as of the block before this one."""
        return self.snapshot_factory(self.block.previous_height)


def unique_ids(ids: Iterable[str]) -> list[str]:
    """De-duplicate ids, keeping first-seen order."""
    return list(dict.fromkeys(ids))
