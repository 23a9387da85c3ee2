"""Database connection management for libSQL over HTTP."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

import aiohttp
import libsql_client

from ..domain.exceptions import DatabaseError

if TYPE_CHECKING:
    from libsql_client import Client

logger = logging.getLogger(__name__)


@dataclass
class ResultSet:
    """Driver-neutral result of a single statement."""

    columns: list[str] = field(default_factory=list)
    rows: list[tuple[Any, ...]] = field(default_factory=list)
    rows_affected: int = 0
    last_insert_id: int = 0


class DatabaseConnection:
    """Manages the shared libSQL client.

    The underlying client is async and bound to the event loop it was
    created in, so it is opened lazily on first use. One instance is shared
    by every tool invocation; the client handles request concurrency.
    """

    def __init__(self, url: str, auth_token: str | None = None) -> None:
        """Initialize the database connection.

        Args:
            url: libSQL server URL (http, https, ws, wss or file).
            auth_token: Optional bearer token for authenticated servers.
        """
        self._url = url
        self._auth_token = auth_token
        self._client: Client | None = None

    @property
    def url(self) -> str:
        return self._url

    @property
    def client(self) -> Client:
        """Get the libSQL client, creating it if needed."""
        if self._client is None:
            logger.info(f"Connecting to libSQL at: {self._url}")
            self._client = libsql_client.create_client(
                self._url, auth_token=self._auth_token
            )
        return self._client

    async def execute(
        self, sql: str, args: Sequence[Any] | None = None
    ) -> ResultSet:
        """Execute a single statement.

        Raises:
            DatabaseError: The server rejected the statement or could not
                be reached. The driver message is preserved.
        """
        try:
            if args is None:
                result = await self.client.execute(sql)
            else:
                result = await self.client.execute(sql, list(args))
        except (libsql_client.LibsqlError, aiohttp.ClientError) as e:
            raise DatabaseError(str(e)) from e

        columns = [str(c) for c in result.columns]
        rows = [tuple(row[i] for i in range(len(columns))) for row in result.rows]

        return ResultSet(
            columns=columns,
            rows=rows,
            rows_affected=result.rows_affected or 0,
            last_insert_id=result.last_insert_rowid or 0,
        )

    async def ping(self) -> None:
        """Check that the server is reachable."""
        await self.execute("SELECT 1")

    async def close(self) -> None:
        """Close the client."""
        if self._client is not None:
            await self._client.close()
            self._client = None
            logger.info("Database connection closed")
