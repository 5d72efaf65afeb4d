from __future__ import annotations

import pytest

from stakeindex.config import ChainStateConfig, ResilienceConfig, RetryPolicy


@pytest.fixture
def chain_config() -> ChainStateConfig:
    return ChainStateConfig(
        resilience=ResilienceConfig(
            base_url="http://sidecar.test",
            retry=RetryPolicy(total=0),
            cache=None,
        )
    )
