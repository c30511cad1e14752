from __future__ import annotations

import json
from typing import Callable, List

import httpx
import pytest
import pytest_asyncio

from pistonexec.client import ExecutionClient
from pistonexec.languages import default_registry

TEST_BASE_URL = "https://sandbox.test/api/v2/piston"


class FakeSandbox:
    """Records requests and answers them with a canned handler."""

    def __init__(self) -> None:
        self.requests: List[httpx.Request] = []
        self.respond: Callable[[httpx.Request], httpx.Response] = lambda request: httpx.Response(
            200, json={"run": {"output": "", "stderr": ""}}
        )

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.respond(request)

    def reply(self, status_code: int = 200, **kwargs) -> None:
        self.respond = lambda request: httpx.Response(status_code, **kwargs)

    def raise_error(self, exc: Exception) -> None:
        def _raise(request: httpx.Request) -> httpx.Response:
            raise exc

        self.respond = _raise

    def last_body(self) -> dict:
        return json.loads(self.requests[-1].content)


@pytest.fixture
def sandbox() -> FakeSandbox:
    return FakeSandbox()


@pytest_asyncio.fixture
async def http_client(sandbox):
    async with httpx.AsyncClient(transport=httpx.MockTransport(sandbox)) as http_client:
        yield http_client


@pytest.fixture
def client(http_client) -> ExecutionClient:
    return ExecutionClient(default_registry(), base_url=TEST_BASE_URL, http_client=http_client)


@pytest.fixture
def routed_httpx(sandbox, monkeypatch):
    """Send every ``httpx.AsyncClient`` the package opens to the fake sandbox."""
    real_async_client = httpx.AsyncClient

    def _async_client(**kwargs):
        return real_async_client(transport=httpx.MockTransport(sandbox), **kwargs)

    monkeypatch.setattr(httpx, "AsyncClient", _async_client)
    return sandbox
