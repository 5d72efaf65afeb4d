"""Substrate API Sidecar adapter: prior-block staking storage."""

from __future__ import annotations

from .client import SidecarAPIError, SidecarClient
from .snapshot import SidecarChainStateSnapshot, build_sidecar_snapshot_factory

__all__ = [
    "SidecarAPIError",
    "SidecarChainStateSnapshot",
    "SidecarClient",
    "build_sidecar_snapshot_factory",
]
