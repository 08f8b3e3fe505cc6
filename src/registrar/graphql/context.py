"""
Helpers for reading the per-request GraphQL context
"""

from uuid import UUID

import strawberry

from ..database import Database
from ..errors import InvalidArgument


def get_database_from_info(info: strawberry.Info) -> Database:
    """Return the store handle injected into the GraphQL context."""
    database = info.context.get("database")
    if database is None:
        raise RuntimeError("No database in GraphQL context")
    return database


def parse_id(value: str | UUID, field: str = "id") -> UUID:
    """Parse a GraphQL ID argument into a UUID.

    Raises:
        InvalidArgument: the value is not a well-formed UUID
    """
    if isinstance(value, UUID):
        return value
    try:
        return UUID(str(value))
    except ValueError as e:
        raise InvalidArgument(f"Invalid {field}: {value!r}") from e


def provided_fields(input: object, fields: tuple[str, ...]) -> dict[str, object]:
    """Collect the input fields the client actually sent (explicit nulls included)."""
    values = {}
    for field in fields:
        value = getattr(input, field, strawberry.UNSET)
        if value is not strawberry.UNSET:
            values[field] = value
    return values
