from __future__ import annotations

from typing import TYPE_CHECKING

import httpx
import pytest

from coursesync.adapters.http_resilience import ResilientClient
from coursesync.config import ResilienceConfig, RetryPolicy, SheetsConfig

if TYPE_CHECKING:
    from collections.abc import Callable

SHEETS_URL = "https://script.example.com/macros/s/deployment/exec"

type ClientFactory = Callable[[ResilienceConfig], ResilientClient]


@pytest.fixture
def sheets_config() -> SheetsConfig:
    return SheetsConfig(
        api_url=SHEETS_URL,
        resilience=ResilienceConfig(name="sheets-test", retry=RetryPolicy(total=0)),
    )


@pytest.fixture
def make_client_factory() -> Callable[[Callable[[httpx.Request], httpx.Response]], ClientFactory]:
    def build(handler: Callable[[httpx.Request], httpx.Response]) -> ClientFactory:
        async def async_handler(request: httpx.Request) -> httpx.Response:
            return handler(request)

        def factory(resilience: ResilienceConfig) -> ResilientClient:
            client = ResilientClient(resilience)
            transport = httpx.MockTransport(async_handler)
            client._client = httpx.AsyncClient(transport=transport)  # noqa: SLF001
            return client

        return factory

    return build
