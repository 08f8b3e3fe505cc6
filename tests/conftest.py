"""
Shared pytest fixtures and configuration for all tests.
"""

import os
from collections.abc import AsyncGenerator, Awaitable, Callable, Generator
from pathlib import Path
from typing import Any
from unittest.mock import MagicMock

import pytest
import pytest_asyncio
import strawberry

from registrar.database import Database


@pytest.fixture
def database_url(tmp_path: Path) -> str:
    """A fresh SQLite database file per test."""
    return f"sqlite+aiosqlite:///{tmp_path / 'registrar.db'}"


@pytest_asyncio.fixture
async def database(database_url: str) -> AsyncGenerator[Database, None]:
    """A connected store handle with the schema created."""
    db = Database(database_url, echo=False)
    await db.connect()
    await db.create_schema()
    yield db
    await db.close()


@pytest.fixture
def execute(database: Database) -> Callable[..., Awaitable[Any]]:
    """Execute a GraphQL document against the schema with the test database."""
    from registrar.graphql.schema import schema

    async def _execute(query: str, variables: dict[str, Any] | None = None) -> Any:
        return await schema.execute(
            query,
            variable_values=variables,
            context_value={"database": database},
        )

    return _execute


@pytest.fixture
def mock_info(database: Database) -> MagicMock:
    """Create a mock GraphQL info object carrying the test database."""
    info = MagicMock(spec=strawberry.Info)
    info.context = {"request": MagicMock(), "database": database}
    return info


@pytest.fixture(autouse=True)
def reset_environment() -> Generator[None, None, None]:
    """Reset environment variables for each test."""
    original_env = os.environ.copy()
    yield
    os.environ.clear()
    os.environ.update(original_env)
