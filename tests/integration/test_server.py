"""Integration tests for the MCP server over an in-memory transport."""

from __future__ import annotations

import pytest
from mcp.shared.memory import create_connected_server_and_client_session
from pydantic import AnyUrl

from memory_mcp.server import SCHEMA_TEXT, SCHEMA_URI, create_server


@pytest.fixture
def mcp(container):
    return create_server(container)


def _text(result) -> str:
    return result.content[0].text


class TestServerTools:
    """End-to-end tool calls through the MCP protocol."""

    async def test_tools_listed(self, mcp):
        async with create_connected_server_and_client_session(
            mcp._mcp_server
        ) as client:
            tools = {tool.name: tool for tool in (await client.list_tools()).tools}

        assert set(tools) == {"query", "execute"}
        assert tools["query"].inputSchema["required"] == ["sql"]
        assert "tags" in tools["execute"].inputSchema["properties"]
        assert "homelab, career, drinks, personal" in tools["execute"].description

    async def test_query_returns_rows(self, mcp):
        async with create_connected_server_and_client_session(
            mcp._mcp_server
        ) as client:
            result = await client.call_tool("query", {"sql": "SELECT * FROM entities"})

        assert result.isError is False
        assert _text(result).startswith("rows: 1")

    @pytest.mark.parametrize("tool", ["query", "execute"])
    async def test_drop_is_tool_level_error(self, mcp, fake_db, tool):
        async with create_connected_server_and_client_session(
            mcp._mcp_server
        ) as client:
            result = await client.call_tool(tool, {"sql": "DROP TABLE entities"})

        assert result.isError is True
        assert "dangerous operation not allowed" in _text(result)
        assert fake_db.scalar("SELECT COUNT(*) FROM entities") == 1

    async def test_select_through_execute_rejected(self, mcp):
        async with create_connected_server_and_client_session(
            mcp._mcp_server
        ) as client:
            result = await client.call_tool("execute", {"sql": "SELECT * FROM entities"})

        assert result.isError is True
        assert "use query tool instead" in _text(result)

    async def test_observation_insert_flow(self, mcp, fake_db):
        sql = "INSERT INTO observations (entity_id, content) VALUES (1,'x')"

        async with create_connected_server_and_client_session(
            mcp._mcp_server
        ) as client:
            missing = await client.call_tool("execute", {"sql": sql})
            unknown = await client.call_tool(
                "execute", {"sql": sql, "tags": "nonexistent_tag_xyz"}
            )
            created = await client.call_tool("execute", {"sql": sql, "tags": "homelab"})

        assert missing.isError is True
        assert "tags parameter is required" in _text(missing)

        assert unknown.isError is True
        assert "unknown tag(s): nonexistent_tag_xyz" in _text(unknown)
        assert "homelab (Home lab infrastructure)" in _text(unknown)

        observation_id = fake_db.scalar("SELECT MAX(id) FROM observations")
        assert created.isError is False
        assert _text(created) == (
            f"success: observation {observation_id} created with tags: homelab"
        )

    async def test_empty_sql(self, mcp):
        async with create_connected_server_and_client_session(
            mcp._mcp_server
        ) as client:
            result = await client.call_tool("query", {"sql": "  "})

        assert result.isError is True
        assert "sql parameter is required" in _text(result)

    async def test_database_closed_when_session_ends(self, mcp, fake_db):
        async with create_connected_server_and_client_session(mcp._mcp_server):
            pass

        assert fake_db.closed is True


class TestSchemaResource:
    """Tests for the schema resource."""

    async def test_read_schema(self, mcp):
        async with create_connected_server_and_client_session(
            mcp._mcp_server
        ) as client:
            resources = (await client.list_resources()).resources
            result = await client.read_resource(AnyUrl(SCHEMA_URI))

        assert [str(r.uri).rstrip("/") for r in resources] == [SCHEMA_URI]
        assert resources[0].mimeType == "text/plain"
        assert result.contents[0].text == SCHEMA_TEXT
        assert "observation_tags (observation_id, tag_id)" in SCHEMA_TEXT
