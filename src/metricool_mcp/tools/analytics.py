"""Analytics tools: brands, metric timelines, category values, website posts."""

from __future__ import annotations

from typing import Any

from ..catalog import GET_POSTS, GET_TIMELINE, GET_VALUES, LIST_BRANDS
from ..client import MetricoolClient, quote_segment
from ..dispatcher import tool_handler
from ..shaping import shape_brands, shape_posts, shape_timeline, shape_values
from .arguments import optional_str, required_str


@tool_handler(LIST_BRANDS)
async def list_brands(client: MetricoolClient, arguments: dict[str, Any]) -> list[dict[str, Any]]:
    """List every brand (blog) on the account."""
    blogs = await client.get("/admin/simpleProfiles")
    return shape_brands(blogs)


@tool_handler(GET_TIMELINE)
async def get_timeline(client: MetricoolClient, arguments: dict[str, Any]) -> list[dict[str, Any]]:
    """Daily data points for one metric between ``start`` and ``end``."""
    metric = required_str(arguments, "metric")
    raw_points = await client.get(
        f"/stats/timeline/{quote_segment(metric)}",
        query={
            "start": optional_str(arguments, "start"),
            "end": optional_str(arguments, "end"),
        },
        blog_id=optional_str(arguments, "blogId"),
    )
    return shape_timeline(raw_points)


@tool_handler(GET_VALUES)
async def get_values(client: MetricoolClient, arguments: dict[str, Any]) -> dict[str, Any]:
    """Aggregated values of a category on one day."""
    category = required_str(arguments, "category")
    values = await client.get(
        f"/stats/values/{quote_segment(category)}",
        query={"date": optional_str(arguments, "date")},
        blog_id=optional_str(arguments, "blogId"),
    )
    return shape_values(values)


@tool_handler(GET_POSTS)
async def get_posts(client: MetricoolClient, arguments: dict[str, Any]) -> list[dict[str, Any]]:
    posts = await client.get(
        "/stats/posts",
        query={
            "start": optional_str(arguments, "start"),
            "end": optional_str(arguments, "end"),
        },
        blog_id=optional_str(arguments, "blogId"),
    )
    return shape_posts(posts)
