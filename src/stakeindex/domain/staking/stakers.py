"""Get-or-create for stakers.

An unknown id is classified against the chain state of the previous block. Collator
data takes precedence over delegator data in both the single and the batch path, so
every created staker has exactly one role.
"""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from stakeindex.domain.model import StakerRole
from stakeindex.domain.staking.accounts import get_or_create_accounts
from stakeindex.domain.staking.context import unique_ids
from stakeindex.domain.staking.factory import StakerData, create_staker

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from stakeindex.domain.model import Staker
    from stakeindex.domain.ports.chain_state import ChainStateSnapshot, StakeBond
    from stakeindex.domain.staking.context import ResolutionContext

log = getLogger(__name__)


@dataclass(frozen=True, slots=True)
class CollatorBond:
    bond: int


@dataclass(frozen=True, slots=True)
class DelegatorBond:
    bond: int


type Classification = CollatorBond | DelegatorBond | None


def classify_stake(snapshot: ChainStateSnapshot, staker_id: str) -> Classification:
    """Classify one id; the delegator query only runs when the collator query misses."""

    collator_bonds = _bonds_by_id(snapshot.collator_data([staker_id]), [staker_id])
    if staker_id in collator_bonds:
        return CollatorBond(collator_bonds[staker_id])

    delegator_bonds = _bonds_by_id(snapshot.delegator_data([staker_id]), [staker_id])
    if staker_id in delegator_bonds:
        return DelegatorBond(delegator_bonds[staker_id])

    return None


def get_or_create_staker(ctx: ResolutionContext, staker_id: str) -> Staker | None:
    """Return the staker for ``staker_id``, creating it from chain state if needed.

    Returns ``None`` when the id is neither a collator nor a delegator.
    """

    existing = ctx.repositories.stakers.get(staker_id)
    if existing is not None:
        return existing

    classification = classify_stake(ctx.open_snapshot(), staker_id)
    if isinstance(classification, CollatorBond):
        return create_staker(
            ctx,
            StakerData(
                stash_id=staker_id,
                role=StakerRole.COLLATOR,
                active_bond=classification.bond,
            ),
        )
    if isinstance(classification, DelegatorBond):
        return create_staker(
            ctx,
            StakerData(
                stash_id=staker_id,
                role=StakerRole.DELEGATOR,
                active_bond=classification.bond,
            ),
        )

    log.debug("%s is not staking at block %s", staker_id, ctx.block.previous_height)
    return None


def get_or_create_stakers(ctx: ResolutionContext, ids: Iterable[str]) -> list[Staker]:
    """Resolve many ids at once.

    Existing stakers are returned untouched and never looked up in chain state. The
    remaining ids are split into two disjoint passes sharing one snapshot: collators
    first, then delegators among the ids the collator pass did not claim. Ids that
    match neither are left out of the result.
    """

    requested = unique_ids(ids)
    if not requested:
        return []

    existing = {staker.id: staker for staker in ctx.repositories.stakers.find_by_ids(requested)}
    missing = [staker_id for staker_id in requested if staker_id not in existing]
    if not missing:
        return list(existing.values())

    snapshot = ctx.open_snapshot()

    collator_bonds = _bonds_by_id(snapshot.collator_data(missing), missing)
    still_missing = [staker_id for staker_id in missing if staker_id not in collator_bonds]
    delegator_bonds = (
        _bonds_by_id(snapshot.delegator_data(still_missing), still_missing)
        if still_missing
        else {}
    )

    # one batch read/write for every stash about to be referenced
    get_or_create_accounts(ctx, [*collator_bonds, *delegator_bonds])

    created: dict[str, Staker] = {}
    for staker_id, bond in collator_bonds.items():
        created[staker_id] = create_staker(
            ctx,
            StakerData(
                stash_id=staker_id,
                role=StakerRole.COLLATOR,
                active_bond=bond,
                commission=ctx.settings.default_collator_commission,
            ),
        )
    for staker_id, bond in delegator_bonds.items():
        created[staker_id] = create_staker(
            ctx,
            StakerData(stash_id=staker_id, role=StakerRole.DELEGATOR, active_bond=bond),
        )

    unclassified = len(missing) - len(created)
    log.info(
        "Resolved stakers at block %s: existing=%d, collators=%d, delegators=%d, "
        "unclassified=%d",
        ctx.block.height,
        len(existing),
        len(collator_bonds),
        len(delegator_bonds),
        unclassified,
    )

    return [*existing.values(), *created.values()]


def _bonds_by_id(bonds: Sequence[StakeBond], requested: Sequence[str]) -> dict[str, int]:
    """Index snapshot answers by id, in request order, ignoring ids nobody asked for."""

    answered: dict[str, int] = {}
    for entry in bonds:
        answered.setdefault(entry.id, entry.bond)
    return {staker_id: answered[staker_id] for staker_id in requested if staker_id in answered}
