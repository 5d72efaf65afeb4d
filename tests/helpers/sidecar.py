"""Mock-transport plumbing for the sidecar client."""

from __future__ import annotations

from typing import TYPE_CHECKING

import httpx

from stakeindex.adapters.http_resilience import ResilientClient

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping

    from stakeindex.config import ResilienceConfig

type Handler = Callable[[httpx.Request], httpx.Response]


def make_client_factory(handler: Handler) -> Callable[[ResilienceConfig], ResilientClient]:
    async def async_handler(request: httpx.Request) -> httpx.Response:
        return handler(request)

    def factory(resilience: ResilienceConfig) -> ResilientClient:
        client = ResilientClient(resilience)
        client._client = httpx.AsyncClient(  # noqa: SLF001  # type: ignore[reportPrivateUsage]
            base_url=resilience.base_url or "",
            transport=httpx.MockTransport(async_handler),
        )
        return client

    return factory


def storage_payload(
    request: httpx.Request,
    values: Mapping[str, dict[str, object] | None],
    *,
    height: int | None = None,
) -> dict[str, object]:
    """Render the sidecar answer for the key and height carried by ``request``."""

    key = request.url.params["keys[]"]
    at = height if height is not None else int(request.url.params["at"])
    _, _, pallet, _, storage_item = request.url.path.split("/")
    return {
        "at": {"hash": f"0x{at:064x}", "height": str(at)},
        "pallet": pallet,
        "palletIndex": "20",
        "storageItem": storage_item,
        "keys": [key],
        "value": values.get(key),
    }


def make_transport_client_factory(
    handler: Handler,
) -> Callable[[ResilienceConfig], ResilientClient]:
    """Like :func:`make_client_factory` but keeps the retry and cache layers in place."""

    async def async_handler(request: httpx.Request) -> httpx.Response:
        return handler(request)

    def factory(resilience: ResilienceConfig) -> ResilientClient:
        return ResilientClient(resilience, transport=httpx.MockTransport(async_handler))

    return factory
