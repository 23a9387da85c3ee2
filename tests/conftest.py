"""Pytest fixtures for memory-mcp tests."""

from __future__ import annotations

import os
import re
import sqlite3
from collections.abc import Generator, Sequence
from typing import Any

import pytest

from memory_mcp.config import Config, reset_config
from memory_mcp.container import Container
from memory_mcp.domain.exceptions import DatabaseError
from memory_mcp.infra.database import ResultSet

# Statements that produce a row id; sqlite3 repeats the previous id after others
INSERT_STATEMENT = re.compile(r"^\s*(INSERT|REPLACE)\b", re.IGNORECASE)

SCHEMA = """
CREATE TABLE entities (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    name TEXT NOT NULL UNIQUE CHECK (length(name) > 0),
    entity_type TEXT NOT NULL,
    created_at TEXT DEFAULT CURRENT_TIMESTAMP
);
CREATE TABLE observations (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    entity_id INTEGER NOT NULL REFERENCES entities(id) ON DELETE CASCADE,
    content TEXT NOT NULL CHECK (length(content) > 0),
    created_at TEXT DEFAULT CURRENT_TIMESTAMP
);
CREATE TABLE relations (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    from_id INTEGER NOT NULL REFERENCES entities(id),
    to_id INTEGER NOT NULL REFERENCES entities(id),
    relation_type TEXT NOT NULL,
    created_at TEXT DEFAULT CURRENT_TIMESTAMP
);
CREATE TABLE tags (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    name TEXT NOT NULL UNIQUE,
    description TEXT,
    created_at TEXT DEFAULT CURRENT_TIMESTAMP
);
CREATE TABLE observation_tags (
    observation_id INTEGER NOT NULL REFERENCES observations(id) ON DELETE CASCADE,
    tag_id INTEGER NOT NULL REFERENCES tags(id),
    PRIMARY KEY (observation_id, tag_id)
);

INSERT INTO entities (name, entity_type) VALUES ('proxmox', 'Server');
INSERT INTO tags (name, description) VALUES ('homelab', 'Home lab infrastructure');
INSERT INTO tags (name, description) VALUES ('career', 'Work and career');
INSERT INTO tags (name, description) VALUES ('personal', NULL);
"""


class FakeDatabase:
    """In-process stand-in for DatabaseConnection backed by SQLite.

    libSQL speaks the SQLite dialect and reports the same constraint
    messages, so the SQL the service sends behaves as it would remotely.
    Statements containing any substring in ``fail_on`` raise DatabaseError.
    """

    def __init__(self) -> None:
        self.conn = sqlite3.connect(":memory:", isolation_level=None)
        self.conn.execute("PRAGMA foreign_keys = ON")
        self.conn.executescript(SCHEMA)
        self.fail_on: list[str] = []
        self.statements: list[str] = []
        self.closed = False

    async def execute(self, sql: str, args: Sequence[Any] | None = None) -> ResultSet:
        self.statements.append(sql)
        for needle in self.fail_on:
            if needle in sql:
                raise DatabaseError(f"injected failure for: {needle}")
        try:
            cursor = self.conn.execute(sql, list(args or []))
        except sqlite3.Error as e:
            raise DatabaseError(str(e)) from e

        columns = [d[0] for d in cursor.description or []]
        rows = [tuple(r) for r in cursor.fetchall()]
        return ResultSet(
            columns=columns,
            rows=rows,
            rows_affected=max(cursor.rowcount, 0),
            last_insert_id=(
                (cursor.lastrowid or 0) if INSERT_STATEMENT.match(sql) else 0
            ),
        )

    async def ping(self) -> None:
        await self.execute("SELECT 1")

    async def close(self) -> None:
        self.closed = True

    def scalar(self, sql: str, *args: Any) -> Any:
        """Read a single value directly, bypassing the service."""
        return self.conn.execute(sql, args).fetchone()[0]


@pytest.fixture
def test_config() -> Config:
    """Create a test configuration."""
    return Config(
        database_url="http://localhost:8080",
        suggested_tags=("homelab", "career", "drinks", "personal"),
    )


@pytest.fixture
def fake_db() -> Generator[FakeDatabase, None, None]:
    """Create a seeded in-memory database."""
    db = FakeDatabase()
    yield db
    db.conn.close()


@pytest.fixture
def container(test_config: Config, fake_db: FakeDatabase) -> Container:
    """Create a test container wired to the fake database."""
    return Container(config=test_config, _database=fake_db)


@pytest.fixture(autouse=True)
def isolate_env() -> Generator[None, None, None]:
    """Keep environment-driven config out of tests."""
    names = (
        "LIBSQL_URL",
        "LIBSQL_AUTH_TOKEN",
        "MEMORY_MCP_SUGGESTED_TAGS",
        "MEMORY_MCP_LOG_LEVEL",
    )
    saved = {name: os.environ.pop(name, None) for name in names}
    reset_config()
    yield
    for name, value in saved.items():
        if value is not None:
            os.environ[name] = value
        else:
            os.environ.pop(name, None)
    reset_config()
