"""SQL statement classification.

Only the leading keyword of a statement is inspected. Keywords that appear
later in the text (inside string literals, column values, subqueries) never
change the category.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping

from .exceptions import (
    DangerousOperationError,
    ReadNotAllowedError,
    WriteNotAllowedError,
)
from .models import STATEMENT_KEYWORDS, StatementCategory, StatementClassification

logger = logging.getLogger(__name__)


def _leading_keyword_pattern(keywords: tuple[str, ...]) -> re.Pattern[str]:
    alternatives = "|".join(re.escape(k) for k in keywords)
    return re.compile(rf"^\s*({alternatives})\b", re.IGNORECASE)


class StatementClassifier:
    """Classifies SQL statements and enforces tool separation.

    Patterns are compiled once per instance from ``keywords``.
    """

    OBSERVATION_INSERT = re.compile(
        r"^\s*INSERT\s+INTO\s+observations\b", re.IGNORECASE
    )

    def __init__(
        self,
        keywords: Mapping[StatementCategory, tuple[str, ...]] = STATEMENT_KEYWORDS,
    ) -> None:
        self._keywords = dict(keywords)
        self._patterns = [
            (category, _leading_keyword_pattern(words))
            for category, words in self._keywords.items()
            if words
        ]

    @property
    def dangerous_keywords(self) -> tuple[str, ...]:
        return self._keywords.get(StatementCategory.DANGEROUS, ())

    def classify(self, sql: str) -> StatementClassification:
        """Classify a statement by its leading keyword."""
        for category, pattern in self._patterns:
            match = pattern.match(sql)
            if match:
                return StatementClassification(
                    category=category, keyword=match.group(1).upper()
                )
        return StatementClassification(category=StatementCategory.READ)

    def validate(self, sql: str, allow_write: bool) -> StatementClassification:
        """Check that a statement may run through a tool.

        Args:
            sql: The statement text.
            allow_write: True for the execute tool, False for the query tool.

        Returns:
            The statement's classification.

        Raises:
            DangerousOperationError: Schema-mutating statement.
            WriteNotAllowedError: Write statement with ``allow_write=False``.
            ReadNotAllowedError: Non-write statement with ``allow_write=True``.
        """
        classification = self.classify(sql)

        if classification.dangerous:
            logger.info(f"Blocked dangerous statement: {classification.keyword}")
            raise DangerousOperationError(self.dangerous_keywords)
        if classification.is_write and not allow_write:
            raise WriteNotAllowedError()
        if not classification.is_write and allow_write:
            raise ReadNotAllowedError()

        return classification

    def is_observation_insert(self, sql: str) -> bool:
        """Check whether a statement inserts into the observations table."""
        return self.OBSERVATION_INSERT.match(sql) is not None
