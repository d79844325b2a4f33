"""Exception taxonomy shared by the client, the tool handlers and the transports."""

from __future__ import annotations


class MetricoolError(Exception):
    """Base class for every error raised by this package."""


class ConfigurationError(MetricoolError):
    """Credentials or settings are missing or invalid. Fatal at construction."""


class ToolInputError(MetricoolError):
    """A tool was invoked with missing or unusable arguments.

    Raised before any upstream call is attempted.
    """


class UnknownToolError(MetricoolError):
    def __init__(self, name: str) -> None:
        super().__init__(f"Unknown tool: {name}")
        self.name = name


class UpstreamError(MetricoolError):
    """Base class for failures that come from talking to the Metricool API."""


class MetricoolAPIError(UpstreamError):
    """The Metricool API answered with a non-2xx status."""

    def __init__(self, method: str, path: str, status_code: int, message: str) -> None:
        super().__init__(
            f"Metricool API {method} {path} failed with {status_code}: {message}"
        )
        self.method = method
        self.path = path
        self.status_code = status_code
        self.message = message


class MetricoolResponseError(UpstreamError):
    """The Metricool API answered 2xx but the body is not usable JSON."""


class MetricoolTransportError(UpstreamError):
    """No response was received (connection failure, timeout)."""


class InvalidSessionError(MetricoolError):
    """A request carried no session id, or one the registry does not know."""
