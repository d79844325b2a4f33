"""Command line entry point: ``metricool-mcp``.

Runs the MCP server over streamable HTTP (default) or stdio.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys

import uvicorn

from .client import MetricoolClient
from .config import get_credentials, get_settings, save_credentials
from .dispatcher import ToolDispatcher
from .errors import ConfigurationError
from .http_app import create_app
from .stdio import run_stdio

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="metricool-mcp",
        description="Expose Metricool analytics to MCP clients.",
    )
    parser.add_argument("--transport", choices=("http", "stdio"), default="http")
    parser.add_argument("--host", help="HTTP bind address (default: $HOST or 127.0.0.1)")
    parser.add_argument("--port", type=int, help="HTTP port (default: $PORT or 8123)")
    parser.add_argument(
        "--multi-tenant",
        action="store_true",
        help="Take credentials from X-Metricool-* headers on initialize instead of the environment.",
    )
    parser.add_argument("--log-level", help="Logging level (default: $LOG_LEVEL or INFO)")
    parser.add_argument(
        "--save-credentials",
        action="store_true",
        help="Store the credentials found in the environment in the OS keychain and exit.",
    )
    return parser


def configure_logging(level: str) -> None:
    # stdout carries the stdio transport, so logs always go to stderr.
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )
    # httpx logs every request URL at INFO, and the URL carries the user token.
    for name in ("httpx", "httpcore"):
        logging.getLogger(name).setLevel(logging.WARNING)


def run(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        settings = get_settings()
    except ConfigurationError as exc:
        print(f"Configuration error: {exc}", file=sys.stderr)
        return 1
    configure_logging(args.log_level or settings.log_level)

    try:
        if args.save_credentials:
            save_credentials(get_credentials().require())
            logger.info("Credentials stored in the OS keychain")
            return 0

        if args.transport == "stdio":
            client = MetricoolClient(
                get_credentials(), base_url=settings.base_url, timeout=settings.timeout
            )
            asyncio.run(run_stdio(ToolDispatcher(client)))
            return 0

        credentials = None if args.multi_tenant else get_credentials()
        app = create_app(credentials, settings=settings)
    except ConfigurationError as exc:
        logger.error("Configuration error: %s", exc)
        return 1

    host = args.host or settings.host
    port = args.port or settings.port
    logger.info("Metricool MCP server listening on %s:%s", host, port)
    uvicorn.run(app, host=host, port=port, log_level=(args.log_level or settings.log_level).lower())
    return 0


def main() -> None:
    """Entry point for the console script."""
    sys.exit(run())
