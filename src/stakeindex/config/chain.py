"""Chain-state (Substrate API Sidecar) configuration values."""

from __future__ import annotations

import os
from dataclasses import dataclass

from .env import require_env_var
from .http_resilience import CacheConfig, RateLimit, ResilienceConfig, RetryPolicy

DEFAULT_STAKING_PALLET = "parachainStaking"
DEFAULT_COLLATOR_STORAGE_ITEM = "candidateInfo"
DEFAULT_DELEGATOR_STORAGE_ITEM = "delegatorState"
SIDECAR_TIMEOUT_SECONDS = 15.0


@dataclass(frozen=True, slots=True)
class ChainStateConfig:
    """Where and how prior-block staking storage is read."""

    resilience: ResilienceConfig
    pallet: str = DEFAULT_STAKING_PALLET
    collator_storage_item: str = DEFAULT_COLLATOR_STORAGE_ITEM
    delegator_storage_item: str = DEFAULT_DELEGATOR_STORAGE_ITEM


def get_chain_state_config(*, resilience: ResilienceConfig | None = None) -> ChainStateConfig:
    base_url = require_env_var("STAKEINDEX_SIDECAR_URL")
    pallet = os.getenv("STAKEINDEX_STAKING_PALLET") or DEFAULT_STAKING_PALLET
    return ChainStateConfig(
        pallet=pallet,
        resilience=resilience
        or ResilienceConfig(
            base_url=base_url.rstrip("/"),
            timeout_seconds=SIDECAR_TIMEOUT_SECONDS,
            retry=RetryPolicy(total=3),
            ratelimit=RateLimit(max_calls=10, per_seconds=1.0),
            cache=CacheConfig(should_cache=_is_storage_answer),
        ),
    )


def _is_storage_answer(payload: object) -> bool:
    # storage read at a fixed height never changes; error bodies must not stick
    return isinstance(payload, dict) and "at" in payload and "storageItem" in payload
