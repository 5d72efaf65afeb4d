from __future__ import annotations

import logging
from datetime import UTC, datetime

import pytest

from stakeindex.config import StakingConfig
from stakeindex.domain.model import StakerRole, StakingEventType
from stakeindex.domain.ports.chain_state import BlockContext
from stakeindex.domain.staking import (
    ResolutionContext,
    StakingEvent,
    handle_staking_event,
    handle_staking_events,
)
from tests.helpers.staking import FakeChainState, InMemoryRepositories, make_context


def _event(
    account: str,
    amount: int,
    event_type: StakingEventType = StakingEventType.REWARDED,
    index: int = 0,
) -> StakingEvent:
    return StakingEvent(id=f"100-{index}", account=account, amount=amount, type=event_type)


def test_staking_event_rejects_negative_amount() -> None:
    with pytest.raises(ValueError, match="negative"):
        _event("col", -1)


def test_rewarded_event_resolves_staker_and_adds_reward(
    repositories: InMemoryRepositories,
    chain_state: FakeChainState,
) -> None:
    chain_state.collators["col"] = 1_000
    ctx = make_context(repositories, chain_state, height=100)

    element = handle_staking_event(ctx, _event("col", 25))

    assert element.staker is not None
    assert element.staker.role is StakerRole.COLLATOR
    assert element.staker.total_reward == 25
    assert element.staker.stash.last_update_block == 100
    assert element.block_number == 100
    assert repositories.history.inserted == ["100-0"]


def test_non_reward_event_leaves_total_reward_alone(
    repositories: InMemoryRepositories,
    chain_state: FakeChainState,
) -> None:
    chain_state.delegators["del"] = 50
    ctx = make_context(repositories, chain_state)

    element = handle_staking_event(ctx, _event("del", 7, StakingEventType.SLASHED))

    assert element.staker is not None
    assert element.staker.total_reward == 0
    assert element.type is StakingEventType.SLASHED


def test_event_carries_block_timestamp(
    repositories: InMemoryRepositories,
    chain_state: FakeChainState,
) -> None:
    chain_state.delegators["del"] = 50
    timestamp = datetime(2024, 5, 1, 12, tzinfo=UTC)
    ctx = ResolutionContext(
        repositories=repositories.as_collection(),
        block=BlockContext(height=10, timestamp=timestamp),
        snapshot_factory=chain_state.factory,
        settings=StakingConfig(),
    )

    element = handle_staking_event(ctx, _event("del", 1, StakingEventType.BONDED))

    assert element.timestamp == timestamp


def test_unresolvable_event_is_recorded_without_staker(
    repositories: InMemoryRepositories,
    chain_state: FakeChainState,
    caplog: pytest.LogCaptureFixture,
) -> None:
    ctx = make_context(repositories, chain_state)

    with caplog.at_level(logging.WARNING, logger="stakeindex.domain.staking.events"):
        element = handle_staking_event(ctx, _event("nobody", 3))

    assert element.staker is None
    assert repositories.history.inserted == ["100-0"]
    assert repositories.stakers.rows == {}
    assert "nobody" in caplog.text


def test_handle_staking_events_resolves_all_accounts_in_one_batch(
    repositories: InMemoryRepositories,
    chain_state: FakeChainState,
) -> None:
    chain_state.collators["col"] = 1_000
    chain_state.delegators["del"] = 10
    ctx = make_context(repositories, chain_state)
    events = [
        _event("col", 5, index=0),
        _event("del", 2, index=1),
        _event("col", 6, index=2),
        _event("ghost", 1, index=3),
    ]

    elements = handle_staking_events(ctx, events)

    assert [element.id for element in elements] == ["100-0", "100-1", "100-2", "100-3"]
    assert chain_state.opened_at == [99]
    assert chain_state.collator_queries == [["col", "del", "ghost"]]
    collator = repositories.stakers.rows["col"]
    assert collator.total_reward == 11
    assert elements[3].staker is None
    assert repositories.history.for_staker("col") == [elements[0], elements[2]]


def test_handle_staking_events_empty_batch(
    repositories: InMemoryRepositories,
    chain_state: FakeChainState,
) -> None:
    ctx = make_context(repositories, chain_state)

    assert handle_staking_events(ctx, []) == []
    assert chain_state.opened_at == []
