"""Ports for persisting staking records."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

from stakeindex.domain.model import Account, Collator, Delegator, HistoryElement, Staker

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence


@runtime_checkable
class Repository[TEntity](Protocol):
    """Minimal key-addressed store contract.

    ``insert`` persists a single new record immediately; ``save`` persists one or many
    records in one round-trip.
    """

    def get(self, entity_id: str) -> TEntity | None: ...

    def insert(self, entity: TEntity) -> None: ...

    def save(self, entities: TEntity | Iterable[TEntity]) -> None: ...


@runtime_checkable
class AccountRepository(Repository[Account], Protocol):
    """Persistence contract for accounts."""

    def find_by_ids(self, ids: Iterable[str]) -> Sequence[Account]: ...


@runtime_checkable
class StakerRepository(Repository[Staker], Protocol):
    """Persistence contract for stakers (loaded together with their stash account)."""

    def find_by_ids(self, ids: Iterable[str]) -> Sequence[Staker]: ...


@runtime_checkable
class CollatorRepository(Repository[Collator], Protocol):
    """Persistence contract for collator markers."""


@runtime_checkable
class DelegatorRepository(Repository[Delegator], Protocol):
    """Persistence contract for delegator markers."""


@runtime_checkable
class HistoryElementRepository(Repository[HistoryElement], Protocol):
    """Persistence contract for recorded staking events."""

    def for_staker(self, staker_id: str) -> Sequence[HistoryElement]: ...
