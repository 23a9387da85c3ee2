"""Domain models for memory-mcp."""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class StatementCategory(str, Enum):
    """Category of a SQL statement, decided by its leading keyword."""

    DANGEROUS = "dangerous"  # Schema mutation, always blocked
    WRITE = "write"  # Data mutation, execute tool only
    READ = "read"  # Anything else, query tool only


# Leading keywords per category. Order matters: the first matching category wins.
STATEMENT_KEYWORDS: dict[StatementCategory, tuple[str, ...]] = {
    StatementCategory.DANGEROUS: (
        "DROP",
        "TRUNCATE",
        "ALTER",
        "CREATE",
        "ATTACH",
        "DETACH",
    ),
    StatementCategory.WRITE: ("INSERT", "UPDATE", "DELETE"),
}


class StatementClassification(BaseModel):
    """Result of classifying a SQL statement."""

    model_config = ConfigDict(frozen=True)

    category: StatementCategory
    keyword: str | None = Field(
        default=None, description="Matched leading keyword, upper-cased"
    )

    @property
    def dangerous(self) -> bool:
        return self.category is StatementCategory.DANGEROUS

    @property
    def is_write(self) -> bool:
        return self.category is StatementCategory.WRITE


class Tag(BaseModel):
    """A named category used to classify observations."""

    id: int | None = None
    name: str
    description: str = ""

    def describe(self) -> str:
        """Format as ``name (description)`` for listings."""
        return f"{self.name} ({self.description})"


class QueryResult(BaseModel):
    """Rows returned by a read statement."""

    columns: list[str] = Field(default_factory=list)
    rows: list[dict[str, Any]] = Field(
        default_factory=list,
        description="One mapping per row, keys in column order",
    )

    @property
    def row_count(self) -> int:
        return len(self.rows)


class ExecuteResult(BaseModel):
    """Outcome of a write statement."""

    rows_affected: int = 0
    last_insert_id: int = Field(
        default=0, description="Row id of the last insert, 0 when none was produced"
    )
