"""Main entry point for memory-mcp server."""

from __future__ import annotations

import argparse
import asyncio
import dataclasses
import logging
import sys

from .config import Config, get_config
from .container import Container
from .domain.exceptions import DatabaseError
from .infra.database import DatabaseConnection
from .server import create_server


def setup_logging(level: str = "INFO") -> None:
    """Configure logging for the application.

    Logs go to stderr; stdout carries the stdio transport.
    """
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="memory-mcp - SQL access to the memory database over MCP"
    )
    parser.add_argument(
        "--url",
        default=None,
        help="libSQL server URL (default: from LIBSQL_URL or http://localhost:8080)",
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=None,
        help="Log level (default: from MEMORY_MCP_LOG_LEVEL or INFO)",
    )
    return parser.parse_args(argv)


async def check_database(config: Config) -> None:
    """Open a short-lived connection and ping the server.

    Raises:
        DatabaseError: The server could not be reached.
    """
    db = DatabaseConnection(url=config.database_url, auth_token=config.auth_token)
    try:
        await db.ping()
    finally:
        await db.close()


def main(argv: list[str] | None = None) -> None:
    """Run the memory-mcp server."""
    args = parse_args(argv)
    config = get_config()

    # CLI args override config/env
    overrides = {}
    if args.url:
        overrides["database_url"] = args.url
    if args.log_level:
        overrides["log_level"] = args.log_level
    if overrides:
        config = dataclasses.replace(config, **overrides)

    setup_logging(config.log_level)
    logger = logging.getLogger(__name__)

    logger.info("Starting memory-mcp")
    logger.info(f"Database URL: {config.database_url}")

    try:
        asyncio.run(check_database(config))
    except DatabaseError as e:
        logger.error(f"Failed to reach libSQL at {config.database_url}: {e}")
        sys.exit(1)

    mcp = create_server(Container.create(config))
    mcp.run()


if __name__ == "__main__":
    main()
