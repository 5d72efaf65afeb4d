"""Substrate API Sidecar client for historical pallet storage."""

from __future__ import annotations

import asyncio
from logging import getLogger
from typing import TYPE_CHECKING

from stakeindex.adapters.http_resilience import ResilientClient

from .schema import SidecarStorageResponse

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from stakeindex.config.chain import ChainStateConfig
    from stakeindex.config.http_resilience import ResilienceConfig

log = getLogger(__name__)


class SidecarAPIError(RuntimeError):
    """Raised when the sidecar returns an unexpected response."""


class SidecarClient:
    """Low-level HTTP client for ``/pallets/{pallet}/storage/{item}``."""

    def __init__(
        self,
        *,
        config: ChainStateConfig,
        client_factory: Callable[[ResilienceConfig], ResilientClient] | None = None,
    ) -> None:
        self._config = config
        self._resilience = config.resilience
        self._client_factory = client_factory or ResilientClient

    def fetch_storage(
        self,
        *,
        storage_item: str,
        keys: Sequence[str],
        height: int,
    ) -> dict[str, SidecarStorageResponse]:
        """Read ``storage_item`` for every key at ``height``, keyed by the requested key."""

        if not keys:
            return {}
        return asyncio.run(
            self._fetch_storage_async(storage_item=storage_item, keys=keys, height=height)
        )

    async def _fetch_storage_async(
        self,
        *,
        storage_item: str,
        keys: Sequence[str],
        height: int,
    ) -> dict[str, SidecarStorageResponse]:
        unique_keys = list(dict.fromkeys(keys))
        path = f"pallets/{self._config.pallet}/storage/{storage_item}"
        log.debug("Querying %s for %d keys at %s", path, len(unique_keys), height)

        async with self._client_factory(self._resilience) as client:
            responses = await asyncio.gather(
                *(
                    self._perform_request(client=client, path=path, key=key, height=height)
                    for key in unique_keys
                )
            )
        return dict(zip(unique_keys, responses, strict=True))

    async def _perform_request(
        self,
        *,
        client: ResilientClient,
        path: str,
        key: str,
        height: int,
    ) -> SidecarStorageResponse:
        if self._resilience.base_url is None:
            raise SidecarAPIError("Missing sidecar base_url in resilience configuration")
        response = await client.get(path, params={"keys[]": key, "at": str(height)})
        response.raise_for_status()

        payload = response.json()
        if not isinstance(payload, dict):
            raise SidecarAPIError(f"Unexpected sidecar payload for {path} ({key})")

        storage = SidecarStorageResponse.model_validate(payload)
        if storage.at.height != height:
            raise SidecarAPIError(
                f"Sidecar answered {path} at height {storage.at.height}, expected {height}"
            )
        return storage
