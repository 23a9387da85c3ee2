"""MCP Server for memory-mcp."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator, Awaitable
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING, Annotated

import anyio
from mcp.server.fastmcp import FastMCP
from mcp.server.fastmcp.exceptions import ToolError
from pydantic import Field

from .domain.exceptions import MemoryMcpError

if TYPE_CHECKING:
    from .container import Container

logger = logging.getLogger(__name__)


# =============================================================================
# Static Text
# =============================================================================

SERVER_NAME = "memory-mcp"
SCHEMA_URI = "memory://schema"

SCHEMA_TEXT = """\
-- memory database schema

entities (id, name, entity_type, created_at)
observations (id, entity_id, content, created_at)
relations (id, from_id, to_id, relation_type, created_at)
tags (id, name, description, created_at)
observation_tags (observation_id, tag_id)

All observations are categorized via tags. Query tags first to see available categories:
  SELECT name, description FROM tags

When inserting observations, the 'tags' parameter is required in execute tool.
"""

QUERY_DESCRIPTION = """\
Execute a SELECT query and return results.

All observations are tagged with broad categories. Check tags first to find what you're looking for:
  SELECT name, description FROM tags

Then filter observations by tag via observation_tags junction table. Build whatever query you need from there."""

EXECUTE_DESCRIPTION_TEMPLATE = """\
Execute INSERT, UPDATE, or DELETE statement. Use this for writing data.

IMPORTANT: When inserting observations, you MUST provide the tags parameter.
Tags are broad categories: {suggested}.
Query 'SELECT name, description FROM tags' to see available tags.
If you need a new tag, ask the user first before creating it."""

SERVER_INSTRUCTIONS = """\
memory-mcp gives you SQL access to a long-term memory database of entities,
observations about them, and relations between them.

- Use `query` for SELECT statements and `execute` for INSERT, UPDATE, DELETE.
- Schema changes (DROP, TRUNCATE, ALTER, CREATE, ATTACH, DETACH) are blocked.
- Every observation must be tagged. Read the `memory://schema` resource and
  run `SELECT name, description FROM tags` before inserting observations.
"""


async def _run_tool(tool: str, call: Awaitable[str]) -> str:
    """Await a service call, turning domain errors into tool-level errors."""
    try:
        return await call
    except MemoryMcpError as e:
        logger.info(f"{tool} rejected: {e}")
        raise ToolError(str(e)) from e


# =============================================================================
# Server Setup
# =============================================================================


def create_server(container: Container) -> FastMCP:
    """Build the MCP server around a container.

    Args:
        container: Supplies the SQL service and owns the database connection.

    Returns:
        A FastMCP server exposing the ``query`` and ``execute`` tools and the
        schema resource.
    """

    @asynccontextmanager
    async def lifespan(server: FastMCP) -> AsyncIterator[None]:
        try:
            yield
        finally:
            with anyio.CancelScope(shield=True):
                await container.aclose()

    mcp = FastMCP(SERVER_NAME, instructions=SERVER_INSTRUCTIONS, lifespan=lifespan)

    @mcp.resource(
        SCHEMA_URI,
        name="Database schema",
        description="Table definitions for the memory database",
        mime_type="text/plain",
    )
    def schema() -> str:
        return SCHEMA_TEXT

    @mcp.tool(name="query", description=QUERY_DESCRIPTION)
    async def query(
        sql: Annotated[str, Field(description="SQL SELECT statement to execute")],
    ) -> str:
        """Run a read-only statement."""
        logger.debug(f"query: {sql}")
        return await _run_tool("query", container.sql_service.query(sql))

    @mcp.tool(
        name="execute",
        description=EXECUTE_DESCRIPTION_TEMPLATE.format(
            suggested=", ".join(container.config.suggested_tags)
        ),
    )
    async def execute(
        sql: Annotated[
            str, Field(description="SQL statement (INSERT, UPDATE, or DELETE)")
        ],
        tags: Annotated[
            str,
            Field(
                description="Required for observation inserts. Comma-separated "
                "tag names, e.g. 'homelab' or 'career,personal'"
            ),
        ] = "",
    ) -> str:
        """Run a write statement."""
        logger.debug(f"execute: {sql} (tags={tags!r})")
        return await _run_tool("execute", container.sql_service.execute(sql, tags))

    return mcp
