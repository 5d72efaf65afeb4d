"""SQLAlchemy mapping metadata for the staking domain model."""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from functools import cache

from sqlalchemy import (
    Column,
    DateTime,
    Dialect,
    Enum,
    ForeignKey,
    Integer,
    String,
    Table,
    TypeDecorator,
    orm,
)
from sqlalchemy.orm import configure_mappers, relationship

from stakeindex.domain.model import (
    Account,
    Collator,
    Delegator,
    HistoryElement,
    Staker,
    StakerRole,
    StakingEventType,
)

log = logging.getLogger(__name__)

# u128 balances do not fit a 64-bit INTEGER column
AMOUNT_MAX_DIGITS = 40


class UTCDateTime(TypeDecorator[datetime]):
    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        if value.tzinfo is None:
            value = value.replace(tzinfo=UTC)
        return value.astimezone(UTC)

    def process_result_value(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        return value if value.tzinfo else value.replace(tzinfo=UTC)


class Amount(TypeDecorator[int]):
    """Arbitrary-precision non-negative integer stored as its decimal string."""

    impl = String(AMOUNT_MAX_DIGITS)
    cache_ok = True

    def process_bind_param(self, value: int | None, dialect: Dialect) -> str | None:
        _ = dialect
        if value is None:
            return None
        amount = int(value)
        if amount < 0:
            raise ValueError(f"Amounts must be non-negative, got {amount}")
        return str(amount)

    def process_result_value(self, value: str | None, dialect: Dialect) -> int | None:
        _ = dialect
        if value is None:
            return None
        return int(value)


mapper_registry = orm.registry()
mapper_registry.metadata.naming_convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_label)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_label)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

account_table = Table(
    "account",
    mapper_registry.metadata,
    Column("id", String, primary_key=True),
    Column("last_update_block", Integer, nullable=False),
)

staker_table = Table(
    "staker",
    mapper_registry.metadata,
    Column("id", String, primary_key=True),
    Column(
        "stash_id",
        String,
        ForeignKey("account.id", ondelete="RESTRICT"),
        nullable=False,
        unique=True,
    ),
    Column("role", Enum(StakerRole, native_enum=False), nullable=False),
    Column("active_bond", Amount(), nullable=False, default=0),
    Column("total_reward", Amount(), nullable=False, default=0),
    Column("commission", Integer, nullable=True),
)

collator_table = Table(
    "collator",
    mapper_registry.metadata,
    Column("id", String, ForeignKey("staker.id", ondelete="CASCADE"), primary_key=True),
)

delegator_table = Table(
    "delegator",
    mapper_registry.metadata,
    Column("id", String, ForeignKey("staker.id", ondelete="CASCADE"), primary_key=True),
)

history_element_table = Table(
    "history_element",
    mapper_registry.metadata,
    Column("id", String, primary_key=True),
    Column("block_number", Integer, nullable=False, index=True),
    Column(
        "staker_id",
        String,
        ForeignKey("staker.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    ),
    Column("timestamp", UTCDateTime(), nullable=True),
    Column("type", Enum(StakingEventType, native_enum=False), nullable=False),
    Column("amount", Amount(), nullable=False),
)


@cache
def start_mappers() -> orm.registry:
    """Map the domain dataclasses onto their tables (idempotent)."""

    log.debug("Configuring staking mappers")

    mapper_registry.map_imperatively(Account, account_table)

    mapper_registry.map_imperatively(
        Staker,
        staker_table,
        properties={
            # stakers are always read together with their stash
            "stash": relationship(Account, lazy="joined", innerjoin=True),
        },
    )

    mapper_registry.map_imperatively(Collator, collator_table)

    mapper_registry.map_imperatively(Delegator, delegator_table)

    mapper_registry.map_imperatively(
        HistoryElement,
        history_element_table,
        properties={
            "staker": relationship(Staker),
        },
    )

    configure_mappers()
    return mapper_registry
