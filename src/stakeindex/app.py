"""Application orchestration entry points: one unit of work per block."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from stakeindex.adapters.sidecar import build_sidecar_snapshot_factory
from stakeindex.adapters.sqlalchemy.unit_of_work import (
    SqlAlchemyStakingUnitOfWork,
    is_started,
    startup,
)
from stakeindex.config import get_staking_config
from stakeindex.domain.ports.chain_state import BlockContext
from stakeindex.domain.ports.unit_of_work import StakingUnitOfWork
from stakeindex.domain.staking import (
    ResolutionContext,
    get_or_create_stakers,
    handle_staking_events,
)

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence
    from datetime import datetime

    from stakeindex.config import StakingConfig
    from stakeindex.domain.model import Staker
    from stakeindex.domain.ports.chain_state import ChainStateSnapshotFactory
    from stakeindex.domain.staking import StakingEvent

UnitOfWorkFactory = Callable[[], StakingUnitOfWork]


log = getLogger(__name__)


@dataclass(slots=True)
class IngestStakingEventsResult:
    """Outcome of recording one block's staking events."""

    height: int
    recorded: int
    unresolved: int


def resolve_stakers(
    ids: Iterable[str],
    *,
    height: int,
    timestamp: datetime | None = None,
    snapshot_factory: ChainStateSnapshotFactory | None = None,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
    settings: StakingConfig | None = None,
) -> list[Staker]:
    """Resolve (and create where missing) the stakers for ``ids`` at block ``height``."""

    requested = list(ids)
    effective_uow = _unit_of_work_factory(unit_of_work_factory)
    log.info("Resolving %d ids at block %s", len(requested), height)

    with effective_uow() as uow:
        ctx = _build_context(uow, height, timestamp, snapshot_factory, settings)
        stakers = get_or_create_stakers(ctx, requested)
        uow.commit()

    return stakers


def ingest_staking_events(
    events: Sequence[StakingEvent],
    *,
    height: int,
    timestamp: datetime | None = None,
    snapshot_factory: ChainStateSnapshotFactory | None = None,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
    settings: StakingConfig | None = None,
) -> IngestStakingEventsResult:
    """Record all staking events of one block atomically."""

    effective_uow = _unit_of_work_factory(unit_of_work_factory)
    log.info("Ingesting %d staking events at block %s", len(events), height)

    with effective_uow() as uow:
        ctx = _build_context(uow, height, timestamp, snapshot_factory, settings)
        elements = handle_staking_events(ctx, events)
        uow.commit()

    result = IngestStakingEventsResult(
        height=height,
        recorded=len(elements),
        unresolved=sum(1 for element in elements if element.staker is None),
    )
    log.info(
        "Finished block %s: recorded=%s, unresolved=%s",
        result.height,
        result.recorded,
        result.unresolved,
    )
    return result


def _unit_of_work_factory(factory: UnitOfWorkFactory | None) -> UnitOfWorkFactory:
    if factory is not None:
        return factory
    if not is_started():
        startup()
    return SqlAlchemyStakingUnitOfWork


def _build_context(
    uow: StakingUnitOfWork,
    height: int,
    timestamp: datetime | None,
    snapshot_factory: ChainStateSnapshotFactory | None,
    settings: StakingConfig | None,
) -> ResolutionContext:
    return ResolutionContext(
        repositories=uow.repositories,
        block=BlockContext(height=height, timestamp=timestamp),
        snapshot_factory=snapshot_factory or build_sidecar_snapshot_factory(),
        settings=settings or get_staking_config(),
    )
