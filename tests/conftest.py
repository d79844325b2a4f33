"""Shared fixtures: a fake Metricool API behind httpx.MockTransport.

Only the network is faked; client, dispatcher, shapers and sessions are real.
"""

from __future__ import annotations

from typing import Any

import httpx
import pytest

from metricool_mcp.client import MetricoolClient
from metricool_mcp.config import Credentials
from metricool_mcp.dispatcher import ToolDispatcher

BASE_URL = "https://metricool.test/api"
USER_ID = "4242"
USER_TOKEN = "s3cret-token"
BLOG_ID = "1001"


class FakeMetricool:
    """Records every request and answers from a path -> response table."""

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self._responses: dict[str, tuple[int, dict[str, Any]]] = {}

    def reply(self, path: str, status_code: int = 200, json: Any = None, **kwargs: Any) -> None:
        if json is not None:
            kwargs["json"] = json
        self._responses[path] = (status_code, kwargs)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.raw_path.decode().split("?")[0]
        path = path[len("/api"):] if path.startswith("/api") else path
        if path not in self._responses:
            return httpx.Response(404, json={"message": f"no fake route for {path}"})
        status_code, kwargs = self._responses[path]
        return httpx.Response(status_code, **kwargs)

    def http_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self.handler))

    @property
    def last_params(self) -> dict[str, str]:
        return dict(self.requests[-1].url.params)


@pytest.fixture
def fake_api() -> FakeMetricool:
    return FakeMetricool()


@pytest.fixture
def credentials() -> Credentials:
    return Credentials(user_id=USER_ID, user_token=USER_TOKEN, default_blog_id=BLOG_ID)


@pytest.fixture
def credentials_without_blog() -> Credentials:
    return Credentials(user_id=USER_ID, user_token=USER_TOKEN)


@pytest.fixture
def client(fake_api, credentials) -> MetricoolClient:
    return MetricoolClient(credentials, base_url=BASE_URL, http=fake_api.http_client())


@pytest.fixture
def dispatcher(client) -> ToolDispatcher:
    return ToolDispatcher(client)


@pytest.fixture
def dispatcher_without_blog(fake_api, credentials_without_blog) -> ToolDispatcher:
    return ToolDispatcher(
        MetricoolClient(credentials_without_blog, base_url=BASE_URL, http=fake_api.http_client())
    )
