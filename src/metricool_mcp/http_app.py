"""Starlette application serving MCP over streamable HTTP.

Routes:
    POST /mcp    JSON-RPC messages, answered by the MCP SDK session manager
                 with JSON responses once the session id has been checked
    GET  /mcp    short server-sent-event stream for an existing session
    GET  /health liveness check
"""

from __future__ import annotations

import json
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

import httpx
from mcp import types
from mcp.server.streamable_http_manager import StreamableHTTPSessionManager
from starlette.applications import Starlette
from starlette.requests import Request
from starlette.responses import JSONResponse, Response, StreamingResponse
from starlette.routing import Route
from starlette.types import Message, Receive, Scope, Send

from . import __version__
from .client import MetricoolClient
from .config import Credentials, Settings
from .dispatcher import ToolDispatcher
from .errors import ConfigurationError, InvalidSessionError
from .mcp_server import create_mcp_server
from .sessions import (
    INVALID_SESSION,
    JSONRPC_VERSION,
    SESSION_ID_HEADER,
    SessionRegistry,
    error_response,
    is_initialize_request,
)

logger = logging.getLogger(__name__)

MCP_ENDPOINT = "/mcp"

# Per-session credentials for multi-tenant deployments.
USER_ID_HEADER = "x-metricool-user-id"
USER_TOKEN_HEADER = "x-metricool-user-token"
BLOG_ID_HEADER = "x-metricool-blog-id"

STREAM_MESSAGES = (
    "Metricool stream established. Use tools to query analytics.",
    "Remember to provide METRICOOL_USER_TOKEN, METRICOOL_USER_ID, and optionally "
    "METRICOOL_BLOG_ID in the server environment.",
)


def _json_error(status_code: int, code: int, message: str) -> JSONResponse:
    return JSONResponse(error_response(None, code, message), status_code=status_code)


def _invalid_session() -> JSONResponse:
    return _json_error(400, INVALID_SESSION, "Bad Request: invalid session ID.")


def _response_header(message: Message, name: str) -> str | None:
    for key, value in message.get("headers", []):
        if key.decode("latin-1").lower() == name:
            return value.decode("latin-1")
    return None


def _replay_body(body: bytes, receive: Receive) -> Receive:
    """A ``receive`` that hands out the already-read body once, then defers to ``receive``."""
    pending: list[Message] = [{"type": "http.request", "body": body, "more_body": False}]

    async def replay() -> Message:
        if pending:
            return pending.pop()
        return await receive()

    return replay


class MetricoolHTTPServer:
    """ASGI endpoint for ``/mcp``: checks session ids, then hands POSTs to the SDK.

    Single-tenant when ``credentials`` is given: every session shares one
    Metricool client, and missing credentials fail here, at construction.
    Multi-tenant when ``credentials`` is None: each ``initialize`` request must
    carry its own credentials in the ``X-Metricool-*`` headers.
    """

    def __init__(
        self,
        credentials: Credentials | None,
        *,
        settings: Settings | None = None,
        registry: SessionRegistry | None = None,
        http: httpx.AsyncClient | None = None,
    ) -> None:
        if credentials is not None:
            credentials.require()
        self.settings = settings or Settings()
        self.registry = registry if registry is not None else SessionRegistry()
        self._owns_http = http is None
        if http is None:
            http = (
                httpx.AsyncClient(timeout=self.settings.timeout)
                if self.settings.timeout is not None
                else httpx.AsyncClient()
            )
        self.http = http
        self._shared_dispatcher: ToolDispatcher | None = None
        if credentials is not None:
            self._shared_dispatcher = ToolDispatcher(self._build_client(credentials))
        self.mcp_server = create_mcp_server(self.dispatcher_for)
        # Sessions end only with the process, so the SDK's idle reaping is off.
        self.session_manager = StreamableHTTPSessionManager(
            app=self.mcp_server,
            json_response=True,
            stateless=False,
            session_idle_timeout=None,
        )

    @property
    def multi_tenant(self) -> bool:
        return self._shared_dispatcher is None

    def _build_client(self, credentials: Credentials) -> MetricoolClient:
        return MetricoolClient(credentials, base_url=self.settings.base_url, http=self.http)

    def _dispatcher_for_initialize(self, request: Request) -> ToolDispatcher:
        if self._shared_dispatcher is not None:
            return self._shared_dispatcher
        user_id = request.headers.get(USER_ID_HEADER, "").strip()
        user_token = request.headers.get(USER_TOKEN_HEADER, "").strip()
        if not user_id:
            raise ConfigurationError(f"{USER_ID_HEADER} header is required")
        if not user_token:
            raise ConfigurationError(f"{USER_TOKEN_HEADER} header is required")
        credentials = Credentials(
            user_id=user_id,
            user_token=user_token,
            default_blog_id=request.headers.get(BLOG_ID_HEADER, "").strip() or None,
        )
        return ToolDispatcher(self._build_client(credentials))

    def dispatcher_for(self, request: Request | None) -> ToolDispatcher:
        """Dispatcher for a tool call arriving on ``request``'s session."""
        if self._shared_dispatcher is not None:
            return self._shared_dispatcher
        session_id = request.headers.get(SESSION_ID_HEADER) if request is not None else None
        return self.registry.lookup(session_id).dispatcher

    async def aclose(self) -> None:
        if self._owns_http:
            await self.http.aclose()

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        request = Request(scope, receive)
        if request.method == "POST":
            await self.handle_post(request, send)
        else:
            response = self.handle_get(request)
            await response(scope, receive, send)

    async def handle_post(self, request: Request, send: Send) -> None:
        scope, receive = request.scope, request.receive
        session_id = request.headers.get(SESSION_ID_HEADER)
        if session_id:
            try:
                self.registry.lookup(session_id)
            except InvalidSessionError as exc:
                logger.warning("Rejected POST: %s", exc)
                await _invalid_session()(scope, receive, send)
                return
            logger.info("Reusing session %s", session_id)
            await self.session_manager.handle_request(scope, receive, send)
            return

        body = await request.body()
        try:
            message = json.loads(body)
        except (json.JSONDecodeError, UnicodeDecodeError):
            await _json_error(400, types.PARSE_ERROR, "Parse error")(scope, receive, send)
            return
        if not is_initialize_request(message):
            logger.warning("Rejected POST: missing session id")
            await _invalid_session()(scope, receive, send)
            return
        try:
            dispatcher = self._dispatcher_for_initialize(request)
        except ConfigurationError as exc:
            logger.warning("Rejected initialize: %s", exc)
            await _json_error(400, types.INVALID_REQUEST, str(exc))(scope, receive, send)
            return

        async def register_session(message: Message) -> None:
            if message["type"] == "http.response.start" and message["status"] < 400:
                new_id = _response_header(message, SESSION_ID_HEADER)
                if new_id:
                    self.registry.create(dispatcher, session_id=new_id)
            await send(message)

        await self.session_manager.handle_request(
            scope, _replay_body(body, receive), register_session
        )

    def handle_get(self, request: Request) -> Response:
        try:
            session = self.registry.lookup(request.headers.get(SESSION_ID_HEADER))
        except InvalidSessionError:
            return _invalid_session()
        logger.info("Attaching SSE stream for session %s", session.id)
        return StreamingResponse(
            self._stream(),
            media_type="text/event-stream",
            headers={SESSION_ID_HEADER: session.id, "Cache-Control": "no-cache"},
        )

    async def _stream(self) -> AsyncIterator[str]:
        for text in STREAM_MESSAGES:
            notification = {
                "jsonrpc": JSONRPC_VERSION,
                "method": "notifications/message",
                "params": {"level": "info", "data": text},
            }
            yield f"event: message\ndata: {json.dumps(notification)}\n\n"

    async def health(self, request: Request) -> Response:
        return JSONResponse(
            {
                "status": "healthy",
                "version": __version__,
                "sessions": len(self.registry),
                "multiTenant": self.multi_tenant,
            }
        )


def create_app(
    credentials: Credentials | None,
    *,
    settings: Settings | None = None,
    registry: SessionRegistry | None = None,
    http: httpx.AsyncClient | None = None,
) -> Starlette:
    """Build the Starlette app. Raises ConfigurationError for incomplete credentials."""
    server = MetricoolHTTPServer(credentials, settings=settings, registry=registry, http=http)

    @asynccontextmanager
    async def lifespan(app: Starlette) -> AsyncIterator[None]:
        try:
            async with server.session_manager.run():
                logger.info(
                    "Metricool MCP server ready (%s)",
                    "multi-tenant" if server.multi_tenant else "single-tenant",
                )
                yield
                logger.info("Shutting down Metricool MCP server...")
        finally:
            await server.aclose()

    app = Starlette(
        routes=[
            Route(MCP_ENDPOINT, endpoint=server, methods=["GET", "POST"]),
            Route("/health", server.health, methods=["GET"]),
        ],
        lifespan=lifespan,
    )
    app.state.mcp_server = server
    return app
