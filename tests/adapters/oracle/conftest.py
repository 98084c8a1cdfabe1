from __future__ import annotations

from typing import TYPE_CHECKING

import httpx
import pytest

from rewardrecon.adapters.http_resilience import ResilientClient

if TYPE_CHECKING:
    from collections.abc import Callable

    from rewardrecon.config import ResilienceConfig

type Handler = Callable[[httpx.Request], httpx.Response]
type ClientFactory = Callable[[ResilienceConfig], ResilientClient]


class ClientFactoryRecorder:
    """Builds resilient clients whose transport is an ``httpx.MockTransport``."""

    def __init__(self) -> None:
        self.created = 0

    def __call__(self, handler: Handler) -> ClientFactory:
        async def async_handler(request: httpx.Request) -> httpx.Response:
            return handler(request)

        def factory(resilience: ResilienceConfig) -> ResilientClient:
            self.created += 1
            client = ResilientClient(resilience)
            client._client = httpx.AsyncClient(transport=httpx.MockTransport(async_handler))  # noqa: SLF001  # type: ignore[reportPrivateUsage]
            return client

        return factory


@pytest.fixture
def client_factory() -> ClientFactoryRecorder:
    return ClientFactoryRecorder()
