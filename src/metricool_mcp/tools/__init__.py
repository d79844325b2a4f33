"""Tool registration: imports every tool module so @tool_handler() decorators fire."""

from __future__ import annotations


def register_all_tools() -> None:
    """Import all tool modules, which register handlers via module-level @tool_handler() decorators."""
    from . import analytics, reports  # noqa: F401
