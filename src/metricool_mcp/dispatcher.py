"""Tool dispatcher: routes a tool invocation by name to exactly one handler."""

from __future__ import annotations

import json
import logging
from typing import Any, Awaitable, Callable

from mcp import types

from .catalog import TOOL_NAMES
from .client import MetricoolClient
from .errors import MetricoolResponseError, UnknownToolError, UpstreamError

logger = logging.getLogger(__name__)

ToolHandler = Callable[[MetricoolClient, dict[str, Any]], Awaitable[Any]]

HANDLERS: dict[str, ToolHandler] = {}


def tool_handler(name: str) -> Callable[[ToolHandler], ToolHandler]:
    """Register the decorated coroutine as the handler for catalog tool ``name``."""
    if name not in TOOL_NAMES:
        raise ValueError(f"{name!r} is not in the tool catalog")

    def decorator(func: ToolHandler) -> ToolHandler:
        HANDLERS[name] = func
        return func

    return decorator


def format_as_json(data: Any) -> str:
    return json.dumps(data, indent=2, ensure_ascii=False)


def text_result(text: str, *, is_error: bool = False) -> types.CallToolResult:
    return types.CallToolResult(
        content=[types.TextContent(type="text", text=text)],
        isError=is_error,
    )


def upstream_error_text(exc: UpstreamError) -> str:
    """Caller-facing text for a failed upstream call.

    Contract violations (non-JSON or unusable payloads) get their own prefix so
    callers can tell them apart from errors the API itself reported.
    """
    if isinstance(exc, MetricoolResponseError):
        return f"Metricool API returned an unexpected response: {exc}"
    return f"Metricool API call failed: {exc}"


class ToolDispatcher:
    """Resolves handlers from the registry and runs them against one client."""

    def __init__(self, client: MetricoolClient) -> None:
        from .tools import register_all_tools

        register_all_tools()
        self.client = client

    async def dispatch(self, name: str, arguments: dict[str, Any] | None = None) -> Any:
        """Run the handler for ``name`` and return its shaped (unformatted) result.

        Raises UnknownToolError, ToolInputError or an UpstreamError subclass.
        """
        handler = HANDLERS.get(name)
        if handler is None:
            raise UnknownToolError(name)
        return await handler(self.client, dict(arguments or {}))

    async def call(self, name: str, arguments: dict[str, Any] | None = None) -> types.CallToolResult:
        """Run a tool and wrap the outcome as an MCP tool result.

        Upstream failures become ``isError`` results; client errors
        (UnknownToolError, ToolInputError) propagate to the transport.
        """
        logger.info("CallTool %s %s", name, json.dumps(arguments or {}, default=str))
        try:
            data = await self.dispatch(name, arguments)
        except UpstreamError as exc:
            logger.warning("Tool %s failed upstream: %s", name, exc)
            return text_result(upstream_error_text(exc), is_error=True)
        return text_result(format_as_json(data))
