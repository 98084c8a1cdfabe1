from __future__ import annotations

import asyncio

import httpx

from rewardrecon.adapters.http_resilience import (
    RateLimit,
    ResilienceConfig,
    ResilientClient,
    RetryPolicy,
    build_retry,
)


def test_build_retry_carries_policy_values() -> None:
    retry = build_retry(RetryPolicy(total=5, backoff_factor=0.25))

    assert retry.total == 5
    assert retry.backoff_factor == 0.25


def test_requests_pass_through_the_limiter_and_default_headers() -> None:
    seen: list[httpx.Request] = []

    async def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"ok": True})

    config = ResilienceConfig(
        name="test",
        base_url="http://node.test",
        ratelimit=RateLimit(max_calls=5, per_seconds=1.0),
        default_headers={"X-Client": "rewardrecon"},
    )

    async def scenario() -> list[int]:
        async with ResilientClient(config) as client:
            client._client = httpx.AsyncClient(  # noqa: SLF001  # type: ignore[reportPrivateUsage]
                base_url="http://node.test",
                headers={"X-Client": "rewardrecon"},
                transport=httpx.MockTransport(handler),
            )
            responses = await asyncio.gather(
                client.post("/rpc", json={"id": 1}),
                client.get("/health", params={"verbose": "1"}),
            )
        return [response.status_code for response in responses]

    assert asyncio.run(scenario()) == [200, 200]
    assert {request.url.path for request in seen} == {"/rpc", "/health"}
    assert all(request.headers["X-Client"] == "rewardrecon" for request in seen)
