"""Recording of decoded staking events against resolved stakers."""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from stakeindex.domain.model import HistoryElement, StakingEventType
from stakeindex.domain.staking.stakers import get_or_create_staker, get_or_create_stakers

if TYPE_CHECKING:
    from collections.abc import Sequence

    from stakeindex.domain.model import Staker
    from stakeindex.domain.staking.context import ResolutionContext

log = getLogger(__name__)


@dataclass(frozen=True, slots=True)
class StakingEvent:
    """A staking event already decoded from the chain.

    ``id`` is unique per event (typically ``<block>-<index>``); ``account`` is the
    encoded stash id the event refers to.
    """

    id: str
    account: str
    amount: int
    type: StakingEventType

    def __post_init__(self) -> None:
        if self.amount < 0:
            raise ValueError(f"Event {self.id} has a negative amount: {self.amount}")


def handle_staking_event(ctx: ResolutionContext, event: StakingEvent) -> HistoryElement:
    staker = get_or_create_staker(ctx, event.account)
    return _record(ctx, event, staker)


def handle_staking_events(
    ctx: ResolutionContext,
    events: Sequence[StakingEvent],
) -> list[HistoryElement]:
    """Record a block's worth of events, resolving every referenced id in one batch."""

    if not events:
        return []
    stakers = {
        staker.id: staker
        for staker in get_or_create_stakers(ctx, [event.account for event in events])
    }
    return [_record(ctx, event, stakers.get(event.account)) for event in events]


def _record(
    ctx: ResolutionContext,
    event: StakingEvent,
    staker: Staker | None,
) -> HistoryElement:
    repositories = ctx.repositories
    if staker is None:
        log.warning(
            "Recording %s event %s without staker: %s is not staking",
            event.type,
            event.id,
            event.account,
        )
    else:
        staker.stash.touch(ctx.block.height)
        if event.type is StakingEventType.REWARDED:
            staker.add_reward(event.amount)
        repositories.accounts.save(staker.stash)
        repositories.stakers.save(staker)

    element = HistoryElement(
        id=event.id,
        block_number=ctx.block.height,
        type=event.type,
        amount=event.amount,
        staker=staker,
        timestamp=ctx.block.timestamp,
    )
    repositories.history.insert(element)
    return element
