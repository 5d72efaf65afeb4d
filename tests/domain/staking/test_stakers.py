from __future__ import annotations

import logging

import pytest

from stakeindex.config import DEFAULT_COLLATOR_COMMISSION, StakingConfig
from stakeindex.domain.model import Account, Staker, StakerRole
from stakeindex.domain.staking import (
    CollatorBond,
    DelegatorBond,
    SnapshotUnavailableError,
    classify_stake,
    get_or_create_staker,
    get_or_create_stakers,
)
from tests.helpers.staking import (
    FakeChainState,
    FakeSnapshot,
    InMemoryRepositories,
    make_context,
    seed_account,
)


def _seed_staker(
    repositories: InMemoryRepositories,
    staker_id: str,
    role: StakerRole = StakerRole.DELEGATOR,
) -> Staker:
    account = seed_account(repositories, staker_id)
    staker = Staker(id=staker_id, stash=account, role=role, active_bond=10)
    repositories.stakers.rows[staker_id] = staker
    return staker


# single id


def test_classify_stake_prefers_collator(chain_state: FakeChainState) -> None:
    chain_state.collators["both"] = 100
    chain_state.delegators["both"] = 5

    assert classify_stake(chain_state.factory(9), "both") == CollatorBond(100)
    assert chain_state.delegator_queries == []


def test_classify_stake_falls_back_to_delegator(chain_state: FakeChainState) -> None:
    chain_state.delegators["del"] = 5

    assert classify_stake(chain_state.factory(9), "del") == DelegatorBond(5)
    assert chain_state.collator_queries == [["del"]]
    assert chain_state.delegator_queries == [["del"]]


def test_classify_stake_returns_none_for_unknown_id(chain_state: FakeChainState) -> None:
    assert classify_stake(chain_state.factory(9), "nobody") is None


def test_get_or_create_staker_returns_existing_without_snapshot(
    repositories: InMemoryRepositories,
    chain_state: FakeChainState,
) -> None:
    existing = _seed_staker(repositories, "known")
    chain_state.collators["known"] = 999
    ctx = make_context(repositories, chain_state)

    assert get_or_create_staker(ctx, "known") is existing
    assert chain_state.opened_at == []
    assert repositories.stakers.writes == 0


def test_get_or_create_staker_creates_collator_from_previous_block(
    repositories: InMemoryRepositories,
    chain_state: FakeChainState,
) -> None:
    chain_state.collators["col"] = 1_000
    ctx = make_context(repositories, chain_state, height=50)

    staker = get_or_create_staker(ctx, "col")

    assert staker is not None
    assert staker.role is StakerRole.COLLATOR
    assert staker.active_bond == 1_000
    assert staker.commission == DEFAULT_COLLATOR_COMMISSION
    assert chain_state.opened_at == [49]
    assert repositories.collators.inserted == ["col"]


def test_get_or_create_staker_creates_delegator(
    repositories: InMemoryRepositories,
    chain_state: FakeChainState,
) -> None:
    chain_state.delegators["del"] = 500
    ctx = make_context(repositories, chain_state)

    staker = get_or_create_staker(ctx, "del")

    assert staker is not None
    assert staker.role is StakerRole.DELEGATOR
    assert staker.active_bond == 500
    assert staker.commission is None
    assert repositories.delegators.inserted == ["del"]
    assert repositories.collators.inserted == []


def test_get_or_create_staker_collator_wins_when_both_roles_answer(
    repositories: InMemoryRepositories,
    chain_state: FakeChainState,
) -> None:
    chain_state.collators["both"] = 100
    chain_state.delegators["both"] = 5
    ctx = make_context(repositories, chain_state)

    staker = get_or_create_staker(ctx, "both")

    assert staker is not None
    assert staker.role is StakerRole.COLLATOR
    assert repositories.collators.inserted == ["both"]
    assert repositories.delegators.inserted == []


def test_get_or_create_staker_returns_none_and_writes_nothing_for_unknown_id(
    repositories: InMemoryRepositories,
    chain_state: FakeChainState,
) -> None:
    ctx = make_context(repositories, chain_state)

    assert get_or_create_staker(ctx, "nobody") is None
    assert repositories.accounts.rows == {}
    assert repositories.stakers.rows == {}


def test_get_or_create_staker_is_idempotent(
    repositories: InMemoryRepositories,
    chain_state: FakeChainState,
) -> None:
    chain_state.collators["col"] = 1
    ctx = make_context(repositories, chain_state)

    first = get_or_create_staker(ctx, "col")
    second = get_or_create_staker(ctx, "col")

    assert first is second
    assert repositories.stakers.inserted == ["col"]
    assert len(chain_state.opened_at) == 1


def test_get_or_create_staker_reuses_existing_account(
    repositories: InMemoryRepositories,
    chain_state: FakeChainState,
) -> None:
    account = seed_account(repositories, "del", block=12)
    chain_state.delegators["del"] = 3
    ctx = make_context(repositories, chain_state)

    staker = get_or_create_staker(ctx, "del")

    assert staker is not None
    assert staker.stash is account
    assert account.last_update_block == 12
    assert repositories.accounts.inserted == []


def test_get_or_create_staker_propagates_snapshot_failure(
    repositories: InMemoryRepositories,
) -> None:
    class BrokenChainState(FakeChainState):
        def factory(self, height: int) -> FakeSnapshot:
            raise SnapshotUnavailableError(f"no state at {height}")

    ctx = make_context(repositories, BrokenChainState())

    with pytest.raises(SnapshotUnavailableError):
        get_or_create_staker(ctx, "col")
    assert repositories.stakers.rows == {}


# batch


def test_get_or_create_stakers_end_to_end(
    repositories: InMemoryRepositories,
    chain_state: FakeChainState,
) -> None:
    existing = _seed_staker(repositories, "S1")
    chain_state.collators["S2"] = 1_000
    chain_state.delegators["S3"] = 500
    ctx = make_context(repositories, chain_state)

    stakers = get_or_create_stakers(ctx, ["S1", "S2", "S3"])

    by_id = {staker.id: staker for staker in stakers}
    assert sorted(by_id) == ["S1", "S2", "S3"]
    assert by_id["S1"] is existing
    assert by_id["S2"].role is StakerRole.COLLATOR
    assert by_id["S2"].active_bond == 1_000
    assert by_id["S2"].commission == DEFAULT_COLLATOR_COMMISSION
    assert by_id["S3"].role is StakerRole.DELEGATOR
    assert by_id["S3"].active_bond == 500
    assert "S1" not in chain_state.queried_ids
    assert repositories.collators.inserted == ["S2"]
    assert repositories.delegators.inserted == ["S3"]


def test_get_or_create_stakers_partitions_collators_and_delegators(
    repositories: InMemoryRepositories,
    chain_state: FakeChainState,
) -> None:
    chain_state.collators.update({"c1": 1, "both": 2})
    chain_state.delegators.update({"d1": 3, "both": 4})
    ctx = make_context(repositories, chain_state)

    stakers = get_or_create_stakers(ctx, ["c1", "d1", "both", "nobody"])

    roles = {staker.id: staker.role for staker in stakers}
    assert roles == {
        "c1": StakerRole.COLLATOR,
        "both": StakerRole.COLLATOR,
        "d1": StakerRole.DELEGATOR,
    }
    assert chain_state.collator_queries == [["c1", "d1", "both", "nobody"]]
    assert chain_state.delegator_queries == [["d1", "nobody"]]
    assert set(repositories.collators.rows).isdisjoint(repositories.delegators.rows)


def test_get_or_create_stakers_shares_one_snapshot(
    repositories: InMemoryRepositories,
    chain_state: FakeChainState,
) -> None:
    chain_state.collators["c"] = 1
    chain_state.delegators["d"] = 1
    ctx = make_context(repositories, chain_state, height=7)

    get_or_create_stakers(ctx, ["c", "d"])

    assert chain_state.opened_at == [6]


def test_get_or_create_stakers_deduplicates_input(
    repositories: InMemoryRepositories,
    chain_state: FakeChainState,
) -> None:
    chain_state.collators["c"] = 1
    chain_state.delegators["d"] = 1
    ctx = make_context(repositories, chain_state)

    stakers = get_or_create_stakers(ctx, ["c", "d", "c", "d", "c"])

    assert sorted(staker.id for staker in stakers) == ["c", "d"]
    assert sorted(repositories.stakers.inserted) == ["c", "d"]
    assert sorted(repositories.accounts.inserted) == ["c", "d"]
    assert chain_state.collator_queries == [["c", "d"]]


def test_get_or_create_stakers_skips_snapshot_when_everything_exists(
    repositories: InMemoryRepositories,
    chain_state: FakeChainState,
) -> None:
    _seed_staker(repositories, "a")
    _seed_staker(repositories, "b", role=StakerRole.COLLATOR)
    ctx = make_context(repositories, chain_state)

    stakers = get_or_create_stakers(ctx, ["a", "b"])

    assert sorted(staker.id for staker in stakers) == ["a", "b"]
    assert chain_state.opened_at == []
    assert repositories.stakers.reads == 1


def test_get_or_create_stakers_skips_delegator_query_when_collators_claim_all(
    repositories: InMemoryRepositories,
    chain_state: FakeChainState,
) -> None:
    chain_state.collators.update({"a": 1, "b": 2})
    ctx = make_context(repositories, chain_state)

    get_or_create_stakers(ctx, ["a", "b"])

    assert chain_state.delegator_queries == []


def test_get_or_create_stakers_never_defaults_delegator_commission(
    repositories: InMemoryRepositories,
    chain_state: FakeChainState,
) -> None:
    chain_state.collators["c"] = 1
    chain_state.delegators["d"] = 1
    ctx = make_context(
        repositories,
        chain_state,
        settings=StakingConfig(default_collator_commission=10_000_000),
    )

    by_id = {staker.id: staker for staker in get_or_create_stakers(ctx, ["c", "d"])}

    assert by_id["c"].commission == 10_000_000
    assert not by_id["d"].commission


def test_get_or_create_stakers_creates_accounts_in_one_batch(
    repositories: InMemoryRepositories,
    chain_state: FakeChainState,
) -> None:
    chain_state.collators.update({f"c{index}": index for index in range(5)})
    chain_state.delegators.update({f"d{index}": index for index in range(5)})
    ctx = make_context(repositories, chain_state, height=20)

    get_or_create_stakers(ctx, [*chain_state.collators, *chain_state.delegators])

    assert repositories.accounts.writes == 1
    assert len(repositories.accounts.rows) == 10
    assert all(
        isinstance(account, Account) and account.last_update_block == 19
        for account in repositories.accounts.rows.values()
    )


def test_get_or_create_stakers_repeated_calls_are_idempotent(
    repositories: InMemoryRepositories,
    chain_state: FakeChainState,
) -> None:
    chain_state.collators["c"] = 1
    chain_state.delegators["d"] = 2

    first = get_or_create_stakers(make_context(repositories, chain_state, height=10), ["c", "d"])
    second = get_or_create_stakers(make_context(repositories, chain_state, height=11), ["d", "c"])

    assert {id(staker) for staker in first} == {id(staker) for staker in second}
    assert len(repositories.stakers.rows) == 2
    assert chain_state.opened_at == [9]


def test_get_or_create_stakers_empty_input(
    repositories: InMemoryRepositories,
    chain_state: FakeChainState,
) -> None:
    ctx = make_context(repositories, chain_state)

    assert get_or_create_stakers(ctx, []) == []
    assert repositories.stakers.reads == 0


def test_get_or_create_stakers_logs_summary(
    repositories: InMemoryRepositories,
    chain_state: FakeChainState,
    caplog: pytest.LogCaptureFixture,
) -> None:
    chain_state.collators["c"] = 1
    ctx = make_context(repositories, chain_state, height=5)

    with caplog.at_level(logging.INFO, logger="stakeindex.domain.staking.stakers"):
        get_or_create_stakers(ctx, ["c", "nobody"])

    assert "collators=1" in caplog.text
    assert "unclassified=1" in caplog.text
