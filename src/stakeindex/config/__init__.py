"""Application configuration helpers."""

from __future__ import annotations

from .chain import ChainStateConfig, get_chain_state_config
from .env import optional_env_int, require_env_var, require_env_vars
from .errors import ConfigurationError, MissingConfigurationError
from .http_resilience import CacheConfig, RateLimit, ResilienceConfig, RetryPolicy
from .logging import configure_logging
from .staking import DEFAULT_COLLATOR_COMMISSION, StakingConfig, get_staking_config
from .storage import DatabaseConfig, StorageConfig, get_database_config, get_storage_config

__all__ = [
    "DEFAULT_COLLATOR_COMMISSION",
    "CacheConfig",
    "ChainStateConfig",
    "ConfigurationError",
    "DatabaseConfig",
    "MissingConfigurationError",
    "RateLimit",
    "ResilienceConfig",
    "RetryPolicy",
    "StakingConfig",
    "StorageConfig",
    "configure_logging",
    "get_chain_state_config",
    "get_database_config",
    "get_staking_config",
    "get_storage_config",
    "optional_env_int",
    "require_env_var",
    "require_env_vars",
]
