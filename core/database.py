"""
Database connection management with SQLAlchemy async
"""

from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional
from sqlalchemy.ext.asyncio import (
    create_async_engine, AsyncEngine, AsyncSession, async_sessionmaker
)
from sqlalchemy.pool import NullPool
from core.exceptions import DatabaseError, SchemaMigrationError
import logging

logger = logging.getLogger(__name__)


class Database:
    """
    Owns the engine and session factory for the single-file store.

    Lifecycle:
    - init(): create engine, run the schema evolution procedure
    - session(): hand out an AsyncSession per unit of work
    - dispose(): close every pooled connection
    """

    def __init__(self, url: str, echo: bool = False):
        self.url = url
        self.echo = echo
        self.engine: Optional[AsyncEngine] = None
        self.session_maker: Optional[async_sessionmaker] = None

    async def init(self, migrate: bool = True) -> None:
        """Create the engine and bring the schema up to date."""
        # Imported here so that models are registered before the migration runs
        from models.migrations import evolve_schema

        self.engine = create_async_engine(
            self.url,
            echo=self.echo,
            poolclass=NullPool,  # SQLite file: a connection per session
            future=True
        )
        self.session_maker = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
            autocommit=False,
            autoflush=False
        )

        if not migrate:
            return

        try:
            async with self.engine.begin() as conn:
                outcome = await conn.run_sync(evolve_schema)
        except SchemaMigrationError:
            raise
        except Exception as e:
            raise SchemaMigrationError(
                "Schema evolution failed",
                context={"database": self.safe_url},
                original_exception=e
            )

        logger.info(f"Schema evolution finished: {outcome.value}")

    @property
    def safe_url(self) -> str:
        return self.url.split("@")[1] if "@" in self.url else self.url

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        """Yield a session bound to this database."""
        if self.session_maker is None:
            raise DatabaseError(
                "Database used before init()",
                context={"database": self.safe_url}
            )
        async with self.session_maker() as session:
            yield session

    async def dispose(self) -> None:
        if self.engine is not None:
            await self.engine.dispose()
            logger.info("Database connections closed")
        self.engine = None
        self.session_maker = None
