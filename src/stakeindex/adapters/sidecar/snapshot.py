"""Chain-state snapshot port implemented over the sidecar."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

import httpx
from pydantic import BaseModel, ValidationError

from stakeindex.config import get_chain_state_config
from stakeindex.domain.ports.chain_state import StakeBond
from stakeindex.domain.staking.errors import SnapshotUnavailableError

from .client import SidecarAPIError, SidecarClient
from .schema import CandidateInfo, DelegatorState

if TYPE_CHECKING:
    from collections.abc import Sequence

    from stakeindex.config.chain import ChainStateConfig
    from stakeindex.domain.ports.chain_state import ChainStateSnapshot, ChainStateSnapshotFactory

log = getLogger(__name__)


class SidecarChainStateSnapshot:
    """Staking storage as of one block height. Create a new one per block."""

    def __init__(self, *, client: SidecarClient, config: ChainStateConfig, height: int) -> None:
        self._client = client
        self._config = config
        self._height = height

    @property
    def height(self) -> int:
        return self._height

    def collator_data(self, ids: Sequence[str]) -> list[StakeBond]:
        bonds: list[StakeBond] = []
        for staker_id, info in self._read(
            self._config.collator_storage_item, ids, CandidateInfo
        ).items():
            bonds.append(StakeBond(id=staker_id, bond=info.bond))
        return bonds

    def delegator_data(self, ids: Sequence[str]) -> list[StakeBond]:
        bonds: list[StakeBond] = []
        for staker_id, state in self._read(
            self._config.delegator_storage_item, ids, DelegatorState
        ).items():
            bonds.append(StakeBond(id=staker_id, bond=state.total))
        return bonds

    def _read[TValue: BaseModel](
        self,
        storage_item: str,
        ids: Sequence[str],
        value_model: type[TValue],
    ) -> dict[str, TValue]:
        try:
            responses = self._client.fetch_storage(
                storage_item=storage_item,
                keys=ids,
                height=self._height,
            )
            return {
                key: value_model.model_validate(response.value)
                for key, response in responses.items()
                if response.value is not None
            }
        except (httpx.HTTPError, SidecarAPIError, ValidationError) as exc:
            raise SnapshotUnavailableError(
                f"Cannot read {self._config.pallet}.{storage_item} at block {self._height}: {exc}",
                height=self._height,
            ) from exc


def build_sidecar_snapshot_factory(
    config: ChainStateConfig | None = None,
    *,
    client: SidecarClient | None = None,
) -> ChainStateSnapshotFactory:
    """Return a factory producing one sidecar-backed snapshot per requested height."""

    effective_config = config or get_chain_state_config()
    effective_client = client or SidecarClient(config=effective_config)

    def factory(height: int) -> ChainStateSnapshot:
        log.debug("Opening chain-state snapshot at block %s", height)
        return SidecarChainStateSnapshot(
            client=effective_client,
            config=effective_config,
            height=height,
        )

    return factory
