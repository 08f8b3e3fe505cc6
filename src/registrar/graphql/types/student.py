"""
Student GraphQL type definitions
"""

from datetime import datetime
from typing import TYPE_CHECKING, Annotated
from uuid import UUID

import strawberry

if TYPE_CHECKING:
    from .department import Department


@strawberry.type
class Student:
    """Student type for GraphQL API."""

    id: strawberry.ID
    name: str
    email: str
    roll_number: str
    age: int | None
    phone: str | None
    created_at: datetime
    updated_at: datetime
    department_id: strawberry.Private[UUID]

    @strawberry.field
    async def department(
        self, info: strawberry.Info
    ) -> Annotated["Department", strawberry.lazy(".department")] | None:
        """Get the department this student belongs to."""
        from ..resolvers.student import resolve_student_department

        return await resolve_student_department(self, info)
