"""
Root GraphQL query definitions
"""

import strawberry

from ..types.department import Department
from ..types.student import Student


@strawberry.type
class Query:
    """Root GraphQL query type."""

    @strawberry.field
    async def student(self, info: strawberry.Info, id: strawberry.ID) -> Student | None:
        """Get a student by ID."""
        from ..resolvers.student import resolve_student_by_id

        return await resolve_student_by_id(info, id)

    @strawberry.field
    async def students(self, info: strawberry.Info) -> list[Student]:
        """Get all students."""
        from ..resolvers.student import resolve_students

        return await resolve_students(info)

    @strawberry.field
    async def department(self, info: strawberry.Info, id: strawberry.ID) -> Department | None:
        """Get a department by ID."""
        from ..resolvers.department import resolve_department_by_id

        return await resolve_department_by_id(info, id)

    @strawberry.field
    async def departments(self, info: strawberry.Info) -> list[Department]:
        """Get all departments."""
        from ..resolvers.department import resolve_departments

        return await resolve_departments(info)

    @strawberry.field
    async def search_students(self, info: strawberry.Info, name: str) -> list[Student]:
        """Search for students whose name contains the given text, ignoring case."""
        from ..resolvers.student import search_students

        return await search_students(info, name)

    @strawberry.field
    async def students_by_department(
        self, info: strawberry.Info, department_id: strawberry.ID
    ) -> list[Student]:
        """Get the students of one department."""
        from ..resolvers.student import resolve_students_by_department

        return await resolve_students_by_department(info, department_id)
