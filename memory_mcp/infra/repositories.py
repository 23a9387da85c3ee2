"""Repositories for the externally-owned memory schema."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import TYPE_CHECKING

from ..domain.exceptions import DatabaseError, UnknownTagsError
from ..domain.models import Tag

if TYPE_CHECKING:
    from .database import DatabaseConnection

logger = logging.getLogger(__name__)


class TagRepository:
    """Looks up tags and links them to observations."""

    def __init__(self, db: DatabaseConnection) -> None:
        self._db = db

    async def find_tag_id(self, name: str) -> int | None:
        """Get a tag id by exact name, or None when no such tag exists."""
        result = await self._db.execute("SELECT id FROM tags WHERE name = ?", [name])
        if not result.rows:
            return None
        return int(result.rows[0][0])

    async def list_tags(self) -> list[Tag]:
        """List all tags alphabetically by name."""
        result = await self._db.execute(
            "SELECT id, name, description FROM tags ORDER BY name"
        )
        return [
            Tag(id=int(tag_id), name=str(name), description=str(description or ""))
            for tag_id, name, description in result.rows
        ]

    async def validate_tags(self, names: Sequence[str]) -> list[int]:
        """Resolve tag names to ids.

        Args:
            names: Tag names in the order given by the caller.

        Returns:
            Tag ids in lookup order.

        Raises:
            UnknownTagsError: One or more names have no tag row. Lists the
                available tags unless the listing itself failed.
            DatabaseError: A lookup failed for a reason other than no match.
        """
        tag_ids: list[int] = []
        missing: list[str] = []

        for name in names:
            try:
                tag_id = await self.find_tag_id(name)
            except DatabaseError as e:
                raise DatabaseError(f"error checking tag '{name}': {e}") from e
            if tag_id is None:
                missing.append(name)
            else:
                tag_ids.append(tag_id)

        if missing:
            logger.info(f"Rejected unknown tags: {missing}")
            try:
                available = await self.list_tags()
            except DatabaseError as e:
                logger.warning(f"Failed to list available tags: {e}")
                raise UnknownTagsError(missing) from e
            raise UnknownTagsError(missing, [tag.describe() for tag in available])

        return tag_ids

    async def link_tags(self, observation_id: int, tag_ids: Sequence[int]) -> None:
        """Insert one observation_tags row per tag id.

        Stops at the first failure; rows already linked are kept.
        """
        for tag_id in tag_ids:
            await self._db.execute(
                "INSERT INTO observation_tags (observation_id, tag_id) VALUES (?, ?)",
                [observation_id, tag_id],
            )
        logger.debug(f"Linked observation {observation_id} to tags {list(tag_ids)}")
