"""memory-mcp: SQL access to the memory database over MCP."""

__version__ = "1.0.0"
