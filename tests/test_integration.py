"""Integration tests that hit the real Metricool API.

They only read data (brands, timelines, reports) and never create anything.
They require credentials in the OS keychain or the METRICOOL_* env vars.

Run with: uv run pytest tests/test_integration.py -v
Skipped automatically when credentials are missing.
"""

from __future__ import annotations

import json

import pytest

from metricool_mcp.client import MetricoolClient
from metricool_mcp.config import get_credentials
from metricool_mcp.dispatcher import ToolDispatcher

_creds = get_credentials()
pytestmark = [
    pytest.mark.skipif(
        not (_creds.user_id and _creds.token),
        reason="No Metricool credentials found in keychain or env vars",
    ),
    pytest.mark.integration,
]


@pytest.fixture
def dispatcher():
    """Real client with real credentials."""
    return ToolDispatcher(MetricoolClient(_creds))


class TestLiveTools:
    @pytest.mark.asyncio
    async def test_list_brands(self, dispatcher):
        result = await dispatcher.call("metricool-list-brands", {})
        assert result.isError is False
        brands = json.loads(result.content[0].text)
        assert isinstance(brands, list)
        for brand in brands:
            assert set(brand) <= {"id", "label", "title", "timezone"}
        await dispatcher.client.aclose()

    @pytest.mark.asyncio
    async def test_timeline_returns_numeric_points(self, dispatcher):
        if not _creds.default_blog_id:
            pytest.skip("METRICOOL_BLOG_ID not configured")
        result = await dispatcher.call("metricool-get-timeline", {"metric": "SessionsCount"})
        await dispatcher.client.aclose()
        if result.isError:
            pytest.skip(f"Metric not available for this brand: {result.content[0].text}")
        for point in json.loads(result.content[0].text):
            assert set(point) == {"date", "value"}
