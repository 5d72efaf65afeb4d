"""Staking resolution settings."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Final

from .env import optional_env_int
from .errors import ConfigurationError

PERBILL: Final[int] = 1_000_000_000
DEFAULT_COLLATOR_COMMISSION: Final[int] = 200_000_000  # 20% in Perbill


@dataclass(frozen=True, slots=True)
class StakingConfig:
    """Values threaded into every resolution call.

    ``default_collator_commission`` is a Perbill amount applied to newly created
    collators when the caller supplies none.
    """

    default_collator_commission: int = DEFAULT_COLLATOR_COMMISSION

    def __post_init__(self) -> None:
        if not 0 <= self.default_collator_commission <= PERBILL:
            raise ConfigurationError(
                "default_collator_commission must be within 0..1_000_000_000 (Perbill), "
                f"got {self.default_collator_commission}"
            )


def get_staking_config() -> StakingConfig:
    return StakingConfig(
        default_collator_commission=optional_env_int(
            "STAKEINDEX_DEFAULT_COLLATOR_COMMISSION",
            DEFAULT_COLLATOR_COMMISSION,
        )
    )
