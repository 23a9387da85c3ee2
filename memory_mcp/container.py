"""Dependency injection container for memory-mcp."""

from __future__ import annotations

from dataclasses import dataclass

from .config import Config, get_config
from .domain.classifier import StatementClassifier
from .domain.services import SqlService
from .infra.database import DatabaseConnection
from .infra.repositories import TagRepository


@dataclass
class Container:
    """Dependency injection container.

    Builds every component from an explicit config on first access.
    """

    config: Config
    _database: DatabaseConnection | None = None
    _classifier: StatementClassifier | None = None
    _tag_repository: TagRepository | None = None
    _service: SqlService | None = None

    @classmethod
    def create(cls, config: Config | None = None) -> Container:
        """Create a new container with the given config.

        Args:
            config: Optional config. Uses global config if not provided.

        Returns:
            A new Container instance.
        """
        return cls(config=config or get_config())

    @property
    def database(self) -> DatabaseConnection:
        """Get the database connection (lazy initialization)."""
        if self._database is None:
            self._database = DatabaseConnection(
                url=self.config.database_url,
                auth_token=self.config.auth_token,
            )
        return self._database

    @property
    def classifier(self) -> StatementClassifier:
        """Get the statement classifier (lazy initialization)."""
        if self._classifier is None:
            self._classifier = StatementClassifier()
        return self._classifier

    @property
    def tag_repository(self) -> TagRepository:
        """Get the tag repository (lazy initialization)."""
        if self._tag_repository is None:
            self._tag_repository = TagRepository(db=self.database)
        return self._tag_repository

    @property
    def sql_service(self) -> SqlService:
        """Get the SQL service (lazy initialization)."""
        if self._service is None:
            self._service = SqlService(
                db=self.database,
                classifier=self.classifier,
                tags=self.tag_repository,
                suggested_tags=self.config.suggested_tags,
            )
        return self._service

    async def aclose(self) -> None:
        """Close all resources."""
        if self._database is not None:
            await self._database.close()
            self._database = None
        self._tag_repository = None
        self._service = None
