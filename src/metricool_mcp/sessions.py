"""Session registry for the streamable HTTP transport.

A session is opened by an ``initialize`` request that carries no session id
and lives as long as the process; there is no eviction. Every later request
must present the id. The registry sits in front of the MCP SDK session
manager: unknown ids are rejected before the SDK sees the request, and each
entry keeps the tool dispatcher its session was opened with.
"""

from __future__ import annotations

import logging
import uuid
from typing import Any, Callable

from .dispatcher import ToolDispatcher
from .errors import InvalidSessionError

logger = logging.getLogger(__name__)

SESSION_ID_HEADER = "mcp-session-id"
JSONRPC_VERSION = "2.0"

# Not a JSON-RPC reserved code; used for a missing or unknown session id.
INVALID_SESSION = -32000


def error_response(request_id: Any, code: int, message: str) -> dict[str, Any]:
    return {
        "jsonrpc": JSONRPC_VERSION,
        "id": request_id,
        "error": {"code": code, "message": message},
    }


def is_initialize_request(body: Any) -> bool:
    """True for a JSON-RPC ``initialize`` request (not a notification)."""
    return (
        isinstance(body, dict)
        and body.get("jsonrpc") == JSONRPC_VERSION
        and body.get("method") == "initialize"
        and "id" in body
    )


class McpSession:
    """One registered session and the dispatcher that serves its tool calls."""

    def __init__(self, session_id: str, dispatcher: ToolDispatcher) -> None:
        self.id = session_id
        self.dispatcher = dispatcher


class SessionRegistry:
    """Maps session ids to McpSession instances.

    Accessed only from the event loop thread, so it carries no lock.
    """

    def __init__(self, id_factory: Callable[[], str] | None = None) -> None:
        self._sessions: dict[str, McpSession] = {}
        self._new_id = id_factory or (lambda: str(uuid.uuid4()))

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, session_id: object) -> bool:
        return session_id in self._sessions

    def create(self, dispatcher: ToolDispatcher, session_id: str | None = None) -> McpSession:
        """Register a new session.

        ``session_id`` is the id the transport already handed out; when omitted
        a fresh one is generated. Reusing a registered id is a ValueError.
        """
        if session_id is None:
            session_id = self._new_id()
            while session_id in self._sessions:
                session_id = self._new_id()
        elif session_id in self._sessions:
            raise ValueError(f"session id {session_id!r} is already registered")
        session = McpSession(session_id, dispatcher)
        self._sessions[session_id] = session
        logger.info("Created session %s", session_id)
        return session

    def lookup(self, session_id: str | None) -> McpSession:
        """Return the session for ``session_id`` or raise InvalidSessionError."""
        session = self._sessions.get(session_id) if session_id else None
        if session is None:
            raise InvalidSessionError(f"unknown session id {session_id!r}")
        return session
