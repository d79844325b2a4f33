"""MCP server exposing Metricool analytics through a fixed set of tools."""

__version__ = "0.1.0"

SERVER_NAME = "metricool-mcp"
