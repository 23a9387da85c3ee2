"""SQL tool services for memory-mcp.

Implements the behaviour behind the ``query`` and ``execute`` tools. Every
rejection or failure is raised as a :class:`MemoryMcpError` subclass whose
message is meant to be shown to the calling agent verbatim.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import TYPE_CHECKING, Any

from .classifier import StatementClassifier
from .exceptions import (
    DatabaseError,
    ExecuteFailedError,
    MissingParameterError,
    PartialSuccessError,
    QueryFailedError,
    TagsRequiredError,
)
from .models import ExecuteResult, QueryResult
from .tags import parse_tag_names

if TYPE_CHECKING:
    from ..infra.database import DatabaseConnection
    from ..infra.repositories import TagRepository

logger = logging.getLogger(__name__)

NO_RESULTS = "no results"

# Substring of the driver message -> prefix shown to the caller
_EXECUTE_ERROR_PREFIXES = (
    ("UNIQUE constraint", "duplicate entry"),
    ("FOREIGN KEY constraint", "referenced entity does not exist"),
    ("CHECK constraint", "validation failed (empty or invalid value)"),
)


# =============================================================================
# Formatting
# =============================================================================


def render_value(value: Any) -> str:
    """Convert a column value to display text.

    BLOBs render as lowercase hex, NULL as ``NULL``.
    """
    if value is None:
        return "NULL"
    if isinstance(value, (bytes, bytearray, memoryview)):
        return bytes(value).hex()
    return str(value)


def render_rows(result: QueryResult) -> str:
    """Render a result set as text.

    Returns ``no results`` for an empty result, otherwise a ``rows: N``
    header followed by one block per row with ``column: value`` lines.
    """
    if not result.rows:
        return NO_RESULTS

    lines = [f"rows: {result.row_count}", ""]
    for index, row in enumerate(result.rows, start=1):
        lines.append(f"--- row {index} ---")
        for column in result.columns:
            lines.append(f"{column}: {render_value(row.get(column))}")
        lines.append("")

    return "\n".join(lines) + "\n"


def render_execute_result(result: ExecuteResult) -> str:
    if result.last_insert_id > 0:
        return (
            f"success: {result.rows_affected} row(s) affected, "
            f"last insert id: {result.last_insert_id}"
        )
    return f"success: {result.rows_affected} row(s) affected"


def format_execute_error(error: Exception) -> str:
    """Map a database error to a caller-facing message by constraint type."""
    message = str(error)
    for needle, prefix in _EXECUTE_ERROR_PREFIXES:
        if needle in message:
            return f"{prefix}: {message}"
    return f"execute error: {message}"


def _require(value: str | None, parameter: str) -> str:
    if value is None or not value.strip():
        raise MissingParameterError(parameter)
    return value


# =============================================================================
# Service
# =============================================================================


class SqlService:
    """Runs validated SQL against the memory database.

    Holds no per-request state, so one instance serves all tool calls.
    """

    def __init__(
        self,
        db: DatabaseConnection,
        classifier: StatementClassifier,
        tags: TagRepository,
        suggested_tags: Sequence[str],
    ) -> None:
        self._db = db
        self._classifier = classifier
        self._tags = tags
        self._suggested_tags = tuple(suggested_tags)

    async def run_query(self, sql: str) -> QueryResult:
        """Execute a read statement and collect its rows.

        Raises:
            MissingParameterError, DangerousOperationError, WriteNotAllowedError:
                The statement was rejected.
            QueryFailedError: The database returned an error.
        """
        sql = _require(sql, "sql")
        self._classifier.validate(sql, allow_write=False)

        try:
            result = await self._db.execute(sql)
        except DatabaseError as e:
            logger.warning(f"Query failed: {e}")
            raise QueryFailedError(f"query error: {e}") from e

        rows = [dict(zip(result.columns, values)) for values in result.rows]
        return QueryResult(columns=result.columns, rows=rows)

    async def query(self, sql: str) -> str:
        """Execute a read statement and render the rows as text."""
        return render_rows(await self.run_query(sql))

    async def execute(self, sql: str, tags: str | None = "") -> str:
        """Execute a write statement.

        Inserts into ``observations`` must name existing tags; the new
        observation is linked to each of them after the insert.

        Args:
            sql: INSERT, UPDATE or DELETE statement.
            tags: Comma-separated tag names, required for observation inserts.

        Returns:
            Success text describing the outcome.

        Raises:
            ValidationError: The statement or tags were rejected; nothing was
                written.
            ExecuteFailedError: The database rejected the statement.
            PartialSuccessError: The observation was written but linking its
                tags failed.
        """
        sql = _require(sql, "sql")
        self._classifier.validate(sql, allow_write=True)
        tags = tags or ""

        if self._classifier.is_observation_insert(sql):
            return await self._insert_observation(sql, tags)

        result = await self._execute_write(sql)
        return render_execute_result(result)

    async def _insert_observation(self, sql: str, tags: str) -> str:
        # Separators alone (",,") name no tags
        tag_names = parse_tag_names(tags)
        if not tag_names:
            raise TagsRequiredError(self._suggested_tags)

        tag_ids = await self._tags.validate_tags(tag_names)

        result = await self._execute_write(sql)
        observation_id = result.last_insert_id

        if observation_id > 0:
            try:
                await self._tags.link_tags(observation_id, tag_ids)
            except DatabaseError as e:
                logger.warning(
                    f"Observation {observation_id} created but tag linking failed: {e}"
                )
                raise PartialSuccessError(observation_id, e) from e

        logger.info(f"Observation {observation_id} created with tags: {tags}")
        return f"success: observation {observation_id} created with tags: {tags}"

    async def _execute_write(self, sql: str) -> ExecuteResult:
        try:
            result = await self._db.execute(sql)
        except DatabaseError as e:
            logger.warning(f"Execute failed: {e}")
            raise ExecuteFailedError(format_execute_error(e)) from e

        return ExecuteResult(
            rows_affected=result.rows_affected,
            last_insert_id=result.last_insert_id,
        )
