"""Creation of stakers together with their role marker."""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from stakeindex.domain.model import Collator, Delegator, Staker, StakerRole
from stakeindex.domain.staking.accounts import get_or_create_account
from stakeindex.domain.staking.errors import InvalidStakerRoleError

if TYPE_CHECKING:
    from stakeindex.domain.staking.context import ResolutionContext

log = getLogger(__name__)


@dataclass(frozen=True, slots=True)
class StakerData:
    stash_id: str
    role: StakerRole | str
    active_bond: int | None = None
    commission: int | None = None


def create_staker(ctx: ResolutionContext, data: StakerData) -> Staker:
    """Persist a new staker and exactly one matching Collator/Delegator record.

    The role is validated before anything is written, so an invalid role never leaves a
    staker without its marker behind.
    """

    role = _coerce_role(data.role)
    repositories = ctx.repositories
    stash = get_or_create_account(ctx, data.stash_id)

    commission = data.commission
    if commission is None and role is StakerRole.COLLATOR:
        commission = ctx.settings.default_collator_commission

    staker = Staker(
        id=data.stash_id,
        stash=stash,
        role=role,
        active_bond=data.active_bond or 0,
        total_reward=0,
        commission=commission,
    )
    repositories.stakers.insert(staker)

    if role is StakerRole.COLLATOR:
        repositories.collators.insert(Collator(id=data.stash_id))
    else:
        repositories.delegators.insert(Delegator(id=data.stash_id))

    log.debug("Created %s %s with bond %s", role, data.stash_id, staker.active_bond)
    return staker


def _coerce_role(value: StakerRole | str) -> StakerRole:
    try:
        return StakerRole(value)
    except ValueError as exc:
        raise InvalidStakerRoleError(f"Unknown staker role: {value!r}") from exc
