"""The MCP SDK low-level server, wired to the tool catalog and dispatcher.

Both transports serve this one server definition; the SDK owns the protocol
(handshake, version negotiation, framing, ping). Client errors are raised as
``McpError`` so the SDK answers them with a JSON-RPC error, while upstream
failures come back from the dispatcher as ``isError`` tool results.
"""

from __future__ import annotations

from typing import Callable

from mcp import types
from mcp.server.lowlevel import Server
from mcp.shared.exceptions import McpError
from starlette.requests import Request

from . import SERVER_NAME, __version__
from .catalog import list_tools
from .dispatcher import ToolDispatcher
from .errors import InvalidSessionError, ToolInputError, UnknownToolError
from .sessions import INVALID_SESSION

# Receives the HTTP request behind the current message (None over stdio).
DispatcherResolver = Callable[[Request | None], ToolDispatcher]


def _rpc_error(code: int, exc: Exception) -> McpError:
    return McpError(types.ErrorData(code=code, message=str(exc)))


def create_mcp_server(resolve_dispatcher: DispatcherResolver) -> Server:
    server: Server = Server(SERVER_NAME, version=__version__)

    @server.list_tools()
    async def handle_list_tools() -> list[types.Tool]:
        return list_tools()

    async def handle_call_tool(request: types.CallToolRequest) -> types.ServerResult:
        params = request.params
        try:
            dispatcher = resolve_dispatcher(server.request_context.request)
            result = await dispatcher.call(params.name, params.arguments)
        except UnknownToolError as exc:
            raise _rpc_error(types.METHOD_NOT_FOUND, exc) from exc
        except ToolInputError as exc:
            raise _rpc_error(types.INVALID_PARAMS, exc) from exc
        except InvalidSessionError as exc:
            raise _rpc_error(INVALID_SESSION, exc) from exc
        return types.ServerResult(result)

    # Registered directly: the @server.call_tool() wrapper would turn client
    # errors into isError results instead of JSON-RPC errors.
    server.request_handlers[types.CallToolRequest] = handle_call_tool
    return server
