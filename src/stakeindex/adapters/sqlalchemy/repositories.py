"""Repository implementations backed by SQLAlchemy sessions."""

from __future__ import annotations

from contextlib import contextmanager
from typing import TYPE_CHECKING, cast

from sqlalchemy import select
from sqlalchemy.exc import OperationalError

from stakeindex.adapters.sqlalchemy.mappings import (
    account_table,
    history_element_table,
    staker_table,
)
from stakeindex.domain.model import (
    Account,
    Collator,
    Delegator,
    Entity,
    HistoryElement,
    Staker,
)
from stakeindex.domain.staking.errors import StorageUnavailableError

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator, Sequence

    from sqlalchemy import Table
    from sqlalchemy.orm import Session


@contextmanager
def storage_errors(action: str) -> Iterator[None]:
    """Translate driver-level outages into ``StorageUnavailableError``."""

    try:
        yield
    except OperationalError as exc:
        raise StorageUnavailableError(f"Storage unavailable while {action}: {exc}") from exc


class SqlAlchemyRepository[TEntity: Entity]:
    """Shared key-addressed operations for every staking record.

    ``insert`` and ``save`` flush immediately so later lookups in the same unit of work
    see the new rows; committing stays with the unit of work.
    """

    def __init__(self, session: Session, entity_cls: type[TEntity]) -> None:
        self.session = session
        self._entity_cls = entity_cls

    def get(self, entity_id: str) -> TEntity | None:
        with storage_errors(f"loading {self._entity_cls.__name__} {entity_id}"):
            return self.session.get(self._entity_cls, entity_id)

    def insert(self, entity: TEntity) -> None:
        with storage_errors(f"inserting {self._entity_cls.__name__} {entity.id}"):
            self.session.add(entity)
            self.session.flush()

    def save(self, entities: TEntity | Iterable[TEntity]) -> None:
        batch: list[TEntity] = (
            [cast("TEntity", entities)]
            if isinstance(entities, self._entity_cls)
            else list(cast("Iterable[TEntity]", entities))
        )
        if not batch:
            return
        with storage_errors(f"saving {len(batch)} {self._entity_cls.__name__} records"):
            self.session.add_all(batch)
            self.session.flush()

    def _find_by_ids(self, table: Table, ids: Iterable[str]) -> list[TEntity]:
        requested = list(dict.fromkeys(ids))
        if not requested:
            return []
        stmt = select(self._entity_cls).where(table.c.id.in_(requested))
        with storage_errors(f"querying {len(requested)} {self._entity_cls.__name__} ids"):
            return list(self.session.execute(stmt).unique().scalars())


class SqlAlchemyAccountRepository(SqlAlchemyRepository[Account]):
    def __init__(self, session: Session) -> None:
        super().__init__(session, Account)

    def find_by_ids(self, ids: Iterable[str]) -> Sequence[Account]:
        return self._find_by_ids(account_table, ids)


class SqlAlchemyStakerRepository(SqlAlchemyRepository[Staker]):
    def __init__(self, session: Session) -> None:
        super().__init__(session, Staker)

    def find_by_ids(self, ids: Iterable[str]) -> Sequence[Staker]:
        return self._find_by_ids(staker_table, ids)


class SqlAlchemyCollatorRepository(SqlAlchemyRepository[Collator]):
    def __init__(self, session: Session) -> None:
        super().__init__(session, Collator)


class SqlAlchemyDelegatorRepository(SqlAlchemyRepository[Delegator]):
    def __init__(self, session: Session) -> None:
        super().__init__(session, Delegator)


class SqlAlchemyHistoryElementRepository(SqlAlchemyRepository[HistoryElement]):
    def __init__(self, session: Session) -> None:
        super().__init__(session, HistoryElement)

    def for_staker(self, staker_id: str) -> Sequence[HistoryElement]:
        stmt = (
            select(HistoryElement)
            .where(history_element_table.c.staker_id == staker_id)
            .order_by(history_element_table.c.block_number, history_element_table.c.id)
        )
        with storage_errors(f"loading history of {staker_id}"):
            return list(self.session.execute(stmt).scalars())


if TYPE_CHECKING:
    from stakeindex.domain.ports.persistence import (
        AccountRepository,
        CollatorRepository,
        DelegatorRepository,
        HistoryElementRepository,
        StakerRepository,
    )

    _session_stub = cast("Session", object())
    _account_repo: AccountRepository = SqlAlchemyAccountRepository(_session_stub)
    _staker_repo: StakerRepository = SqlAlchemyStakerRepository(_session_stub)
    _collator_repo: CollatorRepository = SqlAlchemyCollatorRepository(_session_stub)
    _delegator_repo: DelegatorRepository = SqlAlchemyDelegatorRepository(_session_stub)
    _history_repo: HistoryElementRepository = SqlAlchemyHistoryElementRepository(_session_stub)
