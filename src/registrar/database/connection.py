"""
Database connection management
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any

from sqlalchemy import event, text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from ..config import get_async_database_url, is_postgres_url, settings
from ..dbmodels import target_metadata
from ..logging import get_logger

logger = get_logger(__name__)


class Database:
    """Process-wide store handle.

    Created once at startup, connected before the app serves requests and
    closed on shutdown. Resolvers receive it through the GraphQL context and
    open one short-lived session per operation.
    """

    def __init__(self, database_url: str | None = None, *, echo: bool | None = None):
        self.database_url = database_url or settings.database_url
        self.echo = settings.sql_echo if echo is None else echo
        self._engine: AsyncEngine | None = None
        self._session_local: async_sessionmaker[AsyncSession] | None = None

    @property
    def is_connected(self) -> bool:
        return self._engine is not None

    @property
    def engine(self) -> AsyncEngine:
        if self._engine is None:
            raise RuntimeError("Database not connected. Call connect() first.")
        return self._engine

    async def connect(self) -> None:
        """Create the async engine and session factory."""
        if self._engine is not None:
            return

        async_url = get_async_database_url(self.database_url)
        engine_kwargs: dict[str, Any] = {"echo": self.echo}
        if is_postgres_url(self.database_url):
            engine_kwargs["pool_size"] = settings.database_pool_size
            engine_kwargs["max_overflow"] = settings.database_max_overflow

        self._engine = create_async_engine(async_url, **engine_kwargs)

        if async_url.startswith("sqlite"):
            # SQLite only honours foreign keys when asked to, per connection
            @event.listens_for(self._engine.sync_engine, "connect")
            def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):  # noqa: ARG001
                cursor = dbapi_connection.cursor()
                cursor.execute("PRAGMA foreign_keys=ON")
                cursor.close()

        self._session_local = async_sessionmaker(
            self._engine,
            class_=AsyncSession,
            autoflush=False,
            expire_on_commit=False,
        )
        logger.info("Database initialized", database_url=_redact_url(self.database_url))

    async def close(self) -> None:
        """Dispose of the engine and its connection pool."""
        if self._engine is None:
            return
        await self._engine.dispose()
        self._engine = None
        self._session_local = None
        logger.info("Database connection closed")

    async def create_schema(self) -> None:
        """Create the tables if they do not exist yet."""
        async with self.engine.begin() as conn:
            await conn.run_sync(target_metadata.create_all)
        logger.info("Database schema ensured", tables=sorted(target_metadata.tables))

    async def check_connection(self) -> tuple[bool, str | None]:
        """
        Test the database connection and return a helpful error message.

        Returns:
            tuple: (success: bool, error_message: str | None)
        """
        if self._engine is None:
            return False, "Database engine not initialized"

        try:
            async with self._engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
                return True, None
        except Exception as e:
            error_str = str(e)
            error_type = type(e).__name__

            if "Connection refused" in error_str or "could not connect" in error_str:
                return False, (
                    f"Cannot connect to database server: {error_str}\n"
                    f"The database server appears to be down or unreachable."
                )
            elif "password authentication failed" in error_str:
                return False, (
                    f"Database authentication failed: {error_str}\n"
                    f"Please check your database credentials."
                )
            else:
                return False, f"Database connection error ({error_type}): {error_str}"

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """Open a session that commits on success and rolls back on error."""
        if self._session_local is None:
            raise RuntimeError("Database not connected. Call connect() first.")

        async with self._session_local() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise


def _redact_url(database_url: str) -> str:
    """Hide the password portion of a database URL for logging."""
    scheme, sep, rest = database_url.partition("://")
    if not sep or "@" not in rest:
        return database_url
    credentials, _, host = rest.rpartition("@")
    user = credentials.split(":", 1)[0]
    return f"{scheme}://{user}:***@{host}"
