"""Tool catalog: the single table of tool names, descriptions and input schemas.

Both transports (HTTP and stdio) list tools from here and dispatch by the
``name`` field.
"""

from __future__ import annotations

from typing import Any

from mcp import types

LIST_BRANDS = "metricool-list-brands"
GET_TIMELINE = "metricool-get-timeline"
GET_VALUES = "metricool-get-values"
GET_POSTS = "metricool-get-posts"
LIST_REPORTS = "metricool-list-reports"
REPORT_STATUS = "metricool-report-status"

_DATE_PATTERN = r"^\d{8}$"

_BLOG_ID = {
    "type": "string",
    "description": (
        "Specific brand/blog ID to query. If not provided, uses the default configured "
        f"brand. Get available IDs using {LIST_BRANDS}."
    ),
}


def _date(description: str, examples: list[str]) -> dict[str, Any]:
    return {
        "type": "string",
        "description": description,
        "pattern": _DATE_PATTERN,
        "examples": examples,
    }


def _schema(properties: dict[str, Any], required: list[str] | None = None) -> dict[str, Any]:
    schema: dict[str, Any] = {"type": "object", "properties": properties}
    if required:
        schema["required"] = required
    schema["additionalProperties"] = False
    return schema


TOOL_TABLE: list[dict[str, Any]] = [
    {
        "name": LIST_BRANDS,
        "description": (
            "List all brands (websites/blogs) available to the Metricool account. Use this "
            "first to discover available brand IDs for other operations. Returns brand details "
            "including names, domains, and IDs."
        ),
        "inputSchema": _schema({}),
    },
    {
        "name": GET_TIMELINE,
        "description": (
            "Fetch historical data points for a specific metric over time. Useful for trend "
            "analysis, growth tracking, and performance monitoring. Returns time-series data "
            "with dates and values."
        ),
        "inputSchema": _schema(
            {
                "metric": {
                    "type": "string",
                    "description": (
                        "Metric identifier. Popular metrics include: 'igFollowers' (Instagram "
                        "followers), 'facebookLikes' (Facebook page likes), 'SessionsCount' "
                        "(website sessions), 'twitterFollowers', 'linkedinFollowers'. Use exact "
                        "metric names."
                    ),
                    "examples": [
                        "igFollowers",
                        "facebookLikes",
                        "SessionsCount",
                        "twitterFollowers",
                        "linkedinFollowers",
                    ],
                },
                "start": _date(
                    "Start date in YYYYMMDD format (e.g., '20240101' for January 1, 2024). "
                    "If omitted, defaults to 30 days ago.",
                    ["20240101", "20240315"],
                ),
                "end": _date(
                    "End date in YYYYMMDD format (e.g., '20240131' for January 31, 2024). "
                    "If omitted, defaults to today.",
                    ["20240131", "20240331"],
                ),
                "blogId": _BLOG_ID,
            },
            required=["metric"],
        ),
    },
    {
        "name": GET_VALUES,
        "description": (
            "Get current aggregated metrics and KPIs for a specific category on a given day. "
            "Perfect for getting current status, daily snapshots, or comparing specific dates."
        ),
        "inputSchema": _schema(
            {
                "category": {
                    "type": "string",
                    "description": (
                        "Analytics category to retrieve. Available categories: 'Audience' "
                        "(follower counts across platforms), 'Facebook' (Facebook-specific "
                        "metrics), 'Instagram' (Instagram-specific metrics), 'FacebookAds' "
                        "(Facebook advertising metrics), 'Twitter', 'LinkedIn'. Use exact "
                        "category names."
                    ),
                    "examples": [
                        "Audience",
                        "Facebook",
                        "Instagram",
                        "FacebookAds",
                        "Twitter",
                        "LinkedIn",
                    ],
                },
                "date": _date(
                    "Date in YYYYMMDD format (e.g., '20240315' for March 15, 2024). "
                    "If omitted, returns data for today.",
                    ["20240315", "20240101"],
                ),
                "blogId": _BLOG_ID,
            },
            required=["category"],
        ),
    },
    {
        "name": GET_POSTS,
        "description": (
            "Retrieve website posts/articles published within a specific time period. Useful "
            "for content analysis, publication tracking, and performance monitoring."
        ),
        "inputSchema": _schema(
            {
                "start": _date(
                    "Start date in YYYYMMDD format (e.g., '20240101'). "
                    "If omitted, defaults to 30 days ago.",
                    ["20240101", "20240301"],
                ),
                "end": _date(
                    "End date in YYYYMMDD format (e.g., '20240131'). "
                    "If omitted, defaults to today.",
                    ["20240131", "20240331"],
                ),
                "blogId": _BLOG_ID,
            }
        ),
    },
    {
        "name": LIST_REPORTS,
        "description": (
            "List all generated analytics reports for a brand. Reports contain comprehensive "
            "data exports and analysis. Returns report metadata including IDs, names, creation "
            "dates, and status."
        ),
        "inputSchema": _schema(
            {
                "blogId": {
                    "type": "string",
                    "description": (
                        "Brand/blog identifier to query reports for. If not provided, uses the "
                        f"default configured brand. Get available IDs using {LIST_BRANDS}."
                    ),
                },
            }
        ),
    },
    {
        "name": REPORT_STATUS,
        "description": (
            "Check the processing status and availability of a specific report job. Use this "
            "to monitor report generation progress and get download links when ready."
        ),
        "inputSchema": _schema(
            {
                "jobId": {
                    "type": "string",
                    "description": (
                        "Report job identifier returned from a report generation request or "
                        f"found in {LIST_REPORTS}."
                    ),
                },
                "blogId": {
                    "type": "string",
                    "description": (
                        "Brand/blog identifier that owns the report. If not provided, uses "
                        "the default configured brand."
                    ),
                },
            },
            required=["jobId"],
        ),
    },
]

TOOL_NAMES: tuple[str, ...] = tuple(entry["name"] for entry in TOOL_TABLE)


def list_tools() -> list[types.Tool]:
    """Return the catalog as MCP ``Tool`` descriptors, in table order."""
    return [types.Tool(**entry) for entry in TOOL_TABLE]
