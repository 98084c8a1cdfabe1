"""Async HTTP client with retries and an optional client-side rate limit."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

import httpx
from aiolimiter import AsyncLimiter
from httpx_retries import Retry, RetryTransport

from rewardrecon.config.http_resilience import RateLimit, ResilienceConfig, RetryPolicy

if TYPE_CHECKING:
    from collections.abc import Mapping
    from types import TracebackType

__all__ = [
    "RateLimit",
    "ResilienceConfig",
    "ResilientClient",
    "RetryPolicy",
    "build_retry",
]

log = getLogger(__name__)


def build_retry(policy: RetryPolicy) -> Retry:
    return Retry(
        total=policy.total,
        backoff_factor=policy.backoff_factor,
        max_backoff_wait=policy.max_backoff_wait,
        respect_retry_after_header=policy.respect_retry_after_header,
        allowed_methods=tuple(policy.allowed_methods),
        status_forcelist=tuple(policy.status_forcelist),
        retry_on_exceptions=policy.retry_on_exceptions,
        backoff_jitter=policy.backoff_jitter,
    )


class ResilientClient:
    """``httpx.AsyncClient`` behind a retrying transport, throttled by ``config.ratelimit``.

    Safe to share between concurrent tasks; the limiter is the only shared state
    besides the connection pool.
    """

    def __init__(self, config: ResilienceConfig) -> None:
        self.config = config
        self._limiter = _build_limiter(config.ratelimit)
        self._client = httpx.AsyncClient(
            base_url=config.base_url or "",
            timeout=config.timeout_seconds,
            transport=RetryTransport(retry=build_retry(config.retry)),
            headers=dict(config.default_headers or {}),
            event_hooks={"response": list(config.response_hooks)},
        )

    async def __aenter__(self) -> ResilientClient:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def request(
        self,
        method: str,
        url: str,
        *,
        json: object | None = None,
        params: Mapping[str, str] | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> httpx.Response:
        log.debug("%s %s %s", self.config.name, method, url)
        if self._limiter is None:
            return await self._client.request(
                method, url, json=json, params=params, headers=headers
            )
        async with self._limiter:
            return await self._client.request(
                method, url, json=json, params=params, headers=headers
            )

    async def get(
        self,
        url: str,
        *,
        params: Mapping[str, str] | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> httpx.Response:
        return await self.request("GET", url, params=params, headers=headers)

    async def post(
        self,
        url: str,
        *,
        json: object | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> httpx.Response:
        return await self.request("POST", url, json=json, headers=headers)


def _build_limiter(ratelimit: RateLimit | None) -> AsyncLimiter | None:
    if ratelimit is None:
        return None
    return AsyncLimiter(ratelimit.max_calls, ratelimit.per_seconds)
