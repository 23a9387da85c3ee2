"""Custom exceptions for memory-mcp.

Every exception here is reported back to the calling agent as a tool-level
error result; none of them terminate the server.
"""

from __future__ import annotations

from collections.abc import Sequence


class MemoryMcpError(Exception):
    """Base exception for memory-mcp."""

    pass


class ValidationError(MemoryMcpError):
    """Raised when a tool call is rejected before touching the database."""

    pass


class MissingParameterError(ValidationError):
    """Raised when a required tool argument is empty."""

    def __init__(self, parameter: str) -> None:
        self.parameter = parameter
        super().__init__(f"{parameter} parameter is required")


class DangerousOperationError(ValidationError):
    """Raised for schema-mutating statements."""

    def __init__(self, keywords: Sequence[str]) -> None:
        self.keywords = tuple(keywords)
        super().__init__(
            "dangerous operation not allowed: "
            f"{', '.join(self.keywords)} are blocked"
        )


class WriteNotAllowedError(ValidationError):
    """Raised when a write statement is sent to the query tool."""

    def __init__(self) -> None:
        super().__init__(
            "write operations not allowed in query tool, use execute tool instead"
        )


class ReadNotAllowedError(ValidationError):
    """Raised when a read statement is sent to the execute tool."""

    def __init__(self) -> None:
        super().__init__("SELECT not allowed in execute tool, use query tool instead")


class TagsRequiredError(ValidationError):
    """Raised when an observation insert arrives without tags."""

    def __init__(self, suggested_tags: Sequence[str]) -> None:
        self.suggested_tags = tuple(suggested_tags)
        super().__init__(
            "tags parameter is required when inserting observations. "
            f"Use broad categories like: {', '.join(self.suggested_tags)}. "
            "Query 'SELECT name, description FROM tags' to see all available tags."
        )


class UnknownTagsError(ValidationError):
    """Raised when one or more tag names do not exist.

    ``available`` holds ``name (description)`` lines; it is ``None`` when the
    tag listing itself could not be fetched.
    """

    def __init__(
        self, missing: Sequence[str], available: Sequence[str] | None = None
    ) -> None:
        self.missing = tuple(missing)
        self.available = tuple(available) if available is not None else None

        message = f"unknown tag(s): {', '.join(self.missing)}"
        if self.available is not None:
            message += (
                "\n\nAvailable tags:\n"
                + "\n".join(self.available)
                + "\n\nIf you need a new tag, ask the user first before creating it "
                "with: INSERT INTO tags (name, description) "
                "VALUES ('name', 'description')"
            )
        super().__init__(message)


class DatabaseError(MemoryMcpError):
    """Raised when a database operation fails."""

    pass


class QueryFailedError(DatabaseError):
    """Raised when a read statement fails."""

    pass


class ExecuteFailedError(DatabaseError):
    """Raised when a write statement fails."""

    pass


class PartialSuccessError(DatabaseError):
    """Raised when an observation was inserted but tag linking failed.

    The observation and any tags linked before the failure stay committed.
    """

    def __init__(self, observation_id: int, cause: Exception) -> None:
        self.observation_id = observation_id
        super().__init__(f"observation created but failed to link tags: {cause}")
