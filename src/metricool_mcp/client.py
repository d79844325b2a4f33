"""Async Metricool API client: one authenticated HTTP call per tool invocation."""

from __future__ import annotations

import json
import logging
from typing import Any, Mapping
from urllib.parse import quote

import httpx

from .config import DEFAULT_BASE_URL, Credentials
from .errors import MetricoolAPIError, MetricoolResponseError, MetricoolTransportError

logger = logging.getLogger(__name__)

# Upper bound on how much of an error body is echoed back to callers.
MAX_ERROR_TEXT = 500

QueryValue = str | int | float | bool | None


def quote_segment(value: str) -> str:
    """Escape a value for use as a single URL path segment."""
    return quote(value, safe="")


class MetricoolClient:
    """Thin wrapper around ``httpx.AsyncClient`` for the Metricool REST API.

    Every request carries ``userId`` and ``userToken`` in the query string and,
    when one can be resolved, a ``blogId``. The ``http`` client may be shared
    between several MetricoolClient instances (one per tenant); only clients
    created here are closed by ``aclose()``.
    """

    def __init__(
        self,
        credentials: Credentials,
        *,
        base_url: str = DEFAULT_BASE_URL,
        http: httpx.AsyncClient | None = None,
        timeout: float | None = None,
    ) -> None:
        self.credentials = credentials.require()
        self.base_url = base_url.rstrip("/")
        self._owns_http = http is None
        if http is None:
            kwargs: dict[str, Any] = {}
            if timeout is not None:
                kwargs["timeout"] = timeout
            http = httpx.AsyncClient(**kwargs)
        self._http = http

    @property
    def default_blog_id(self) -> str | None:
        return self.credentials.default_blog_id

    def resolve_blog_id(self, override: str | None = None) -> str | None:
        return override or self.credentials.default_blog_id

    async def aclose(self) -> None:
        if self._owns_http:
            await self._http.aclose()

    async def get(
        self,
        path: str,
        *,
        query: Mapping[str, QueryValue] | None = None,
        blog_id: str | None = None,
    ) -> Any:
        return await self.request("GET", path, query=query, blog_id=blog_id)

    async def post(
        self,
        path: str,
        *,
        query: Mapping[str, QueryValue] | None = None,
        body: Any = None,
        blog_id: str | None = None,
    ) -> Any:
        return await self.request("POST", path, query=query, body=body, blog_id=blog_id)

    async def put(
        self,
        path: str,
        *,
        query: Mapping[str, QueryValue] | None = None,
        body: Any = None,
        blog_id: str | None = None,
    ) -> Any:
        return await self.request("PUT", path, query=query, body=body, blog_id=blog_id)

    def build_params(
        self,
        query: Mapping[str, QueryValue] | None = None,
        blog_id: str | None = None,
    ) -> dict[str, str]:
        """Query string for a request. Unset values are left out entirely."""
        params = {
            "userId": self.credentials.user_id,
            "userToken": self.credentials.token,
        }
        effective_blog_id = self.resolve_blog_id(blog_id)
        if effective_blog_id:
            params["blogId"] = effective_blog_id
        for key, value in (query or {}).items():
            if value is None or value == "":
                continue
            if isinstance(value, bool):
                value = "true" if value else "false"
            params[key] = str(value)
        return params

    async def request(
        self,
        method: str,
        path: str,
        *,
        query: Mapping[str, QueryValue] | None = None,
        body: Any = None,
        blog_id: str | None = None,
    ) -> Any:
        """Send one request and decode the JSON response.

        Returns None for 204 responses. Raises MetricoolAPIError for non-2xx
        statuses, MetricoolResponseError for bodies that are not JSON and
        MetricoolTransportError when no response arrives at all.
        """
        headers = {"Accept": "application/json"}
        kwargs: dict[str, Any] = {}
        if body is not None:
            kwargs["json"] = body

        logger.info("Metricool API %s %s", method, path)
        try:
            response = await self._http.request(
                method,
                f"{self.base_url}{path}",
                params=self.build_params(query, blog_id),
                headers=headers,
                **kwargs,
            )
        except httpx.RequestError as exc:
            raise MetricoolTransportError(
                f"Metricool API {method} {path} failed: {exc.__class__.__name__}"
            ) from exc

        if not response.is_success:
            message = self._redact(self._error_message(response))
            logger.warning(
                "Metricool API %s %s returned %s", method, path, response.status_code
            )
            raise MetricoolAPIError(method, path, response.status_code, message)

        if response.status_code == 204:
            return None

        content_type = response.headers.get("content-type", "")
        if content_type and "json" not in content_type.lower():
            raise MetricoolResponseError(
                f"Metricool API {method} {path} returned non-JSON content type "
                f"{content_type.split(';')[0]!r}"
            )
        try:
            return response.json()
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            raise MetricoolResponseError(
                f"Metricool API {method} {path} returned malformed JSON: {exc}"
            ) from exc

    def _redact(self, text: str) -> str:
        token = self.credentials.token
        return text.replace(token, "***") if token else text

    @staticmethod
    def _error_message(response: httpx.Response) -> str:
        """Best-effort human readable message from an error response."""
        try:
            payload = response.json()
        except (json.JSONDecodeError, UnicodeDecodeError):
            payload = None
        if isinstance(payload, dict):
            for key in ("message", "error", "detail"):
                value = payload.get(key)
                if isinstance(value, str) and value:
                    return value
        text = response.text.strip()
        if text:
            return text[:MAX_ERROR_TEXT]
        return response.reason_phrase or "no response body"
