"""Domain layer for memory-mcp.

- classifier: StatementClassifier
- services: SqlService and the text rendering helpers
- tags: parse_tag_names
- models: StatementCategory, StatementClassification, Tag, QueryResult, ExecuteResult
- exceptions: MemoryMcpError and its subclasses
"""

from .classifier import StatementClassifier
from .exceptions import (
    DangerousOperationError,
    DatabaseError,
    ExecuteFailedError,
    MemoryMcpError,
    MissingParameterError,
    PartialSuccessError,
    QueryFailedError,
    ReadNotAllowedError,
    TagsRequiredError,
    UnknownTagsError,
    ValidationError,
    WriteNotAllowedError,
)
from .models import (
    STATEMENT_KEYWORDS,
    ExecuteResult,
    QueryResult,
    StatementCategory,
    StatementClassification,
    Tag,
)
from .services import SqlService
from .tags import parse_tag_names

__all__ = [
    # Services
    "SqlService",
    "StatementClassifier",
    "parse_tag_names",
    # Models
    "STATEMENT_KEYWORDS",
    "ExecuteResult",
    "QueryResult",
    "StatementCategory",
    "StatementClassification",
    "Tag",
    # Exceptions
    "DangerousOperationError",
    "DatabaseError",
    "ExecuteFailedError",
    "MemoryMcpError",
    "MissingParameterError",
    "PartialSuccessError",
    "QueryFailedError",
    "ReadNotAllowedError",
    "TagsRequiredError",
    "UnknownTagsError",
    "ValidationError",
    "WriteNotAllowedError",
]
