"""Argument helpers shared by the tool handlers.

All checks here run before any upstream call, so a failing check never costs
a network round trip.
"""

from __future__ import annotations

from typing import Any

from ..client import MetricoolClient
from ..errors import ToolInputError


def required_str(arguments: dict[str, Any], name: str) -> str:
    """Coerce a required argument to a trimmed string; empty is an error."""
    raw = arguments.get(name)
    value = "" if raw is None else str(raw).strip()
    if not value:
        raise ToolInputError(f"{name} is required")
    return value


def optional_str(arguments: dict[str, Any], name: str) -> str | None:
    """Return the argument as a string, or None when it is absent or empty."""
    raw = arguments.get(name)
    if raw is None:
        return None
    value = str(raw).strip()
    return value or None


def require_blog_id(client: MetricoolClient, arguments: dict[str, Any], purpose: str) -> str:
    """Resolve the brand id: explicit ``blogId`` argument, then the configured default."""
    blog_id = client.resolve_blog_id(optional_str(arguments, "blogId"))
    if not blog_id:
        raise ToolInputError(
            f"blogId is required for {purpose}. Set METRICOOL_BLOG_ID or pass blogId."
        )
    return blog_id
