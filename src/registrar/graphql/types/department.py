"""
Department GraphQL type definitions
"""

from datetime import datetime
from typing import TYPE_CHECKING, Annotated

import strawberry

if TYPE_CHECKING:
    from .student import Student


@strawberry.type
class Department:
    """Department type for GraphQL API."""

    id: strawberry.ID
    name: str
    code: str
    hod: str
    building: str | None
    created_at: datetime
    updated_at: datetime

    @strawberry.field
    async def students(
        self, info: strawberry.Info
    ) -> list[Annotated["Student", strawberry.lazy(".student")]]:
        """Get the students enrolled in this department."""
        from ..resolvers.department import resolve_department_students

        return await resolve_department_students(self, info)
