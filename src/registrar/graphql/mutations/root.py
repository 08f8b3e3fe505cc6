"""
Root GraphQL mutation definitions
"""

import strawberry

from ..types.department import Department
from ..types.student import Student


# Input types for mutations
@strawberry.input
class AddDepartmentInput:
    """Input for creating a new department."""

    name: str
    code: str
    hod: str
    building: str | None = None


@strawberry.input
class UpdateDepartmentInput:
    """Input for updating a department. Omitted fields are left unchanged."""

    id: strawberry.ID
    name: str | None = strawberry.UNSET
    code: str | None = strawberry.UNSET
    hod: str | None = strawberry.UNSET
    building: str | None = strawberry.UNSET


@strawberry.input
class AddStudentInput:
    """Input for creating a new student."""

    name: str
    email: str
    roll_number: str
    department_id: strawberry.ID
    age: int | None = None
    phone: str | None = None


@strawberry.input
class UpdateStudentInput:
    """Input for updating a student. Omitted fields are left unchanged."""

    id: strawberry.ID
    name: str | None = strawberry.UNSET
    email: str | None = strawberry.UNSET
    roll_number: str | None = strawberry.UNSET
    age: int | None = strawberry.UNSET
    phone: str | None = strawberry.UNSET
    department_id: strawberry.ID | None = strawberry.UNSET


@strawberry.type
class Mutation:
    """Root GraphQL mutation type."""

    # Department mutations
    @strawberry.mutation(name="addDepartment")
    async def add_department(self, info: strawberry.Info, input: AddDepartmentInput) -> Department:
        """Create a new department."""
        from ..resolvers.department import add_department

        return await add_department(info, input)

    @strawberry.mutation(name="updateDepartment")
    async def update_department(
        self, info: strawberry.Info, input: UpdateDepartmentInput
    ) -> Department | None:
        """Update an existing department."""
        from ..resolvers.department import update_department

        return await update_department(info, input)

    @strawberry.mutation(name="deleteDepartment")
    async def delete_department(
        self, info: strawberry.Info, id: strawberry.ID
    ) -> Department | None:
        """Delete a department that has no students."""
        from ..resolvers.department import delete_department

        return await delete_department(info, id)

    # Student mutations
    @strawberry.mutation(name="addStudent")
    async def add_student(self, info: strawberry.Info, input: AddStudentInput) -> Student:
        """Create a new student."""
        from ..resolvers.student import add_student

        return await add_student(info, input)

    @strawberry.mutation(name="updateStudent")
    async def update_student(
        self, info: strawberry.Info, input: UpdateStudentInput
    ) -> Student | None:
        """Update an existing student."""
        from ..resolvers.student import update_student

        return await update_student(info, input)

    @strawberry.mutation(name="deleteStudent")
    async def delete_student(self, info: strawberry.Info, id: strawberry.ID) -> Student | None:
        """Delete a student."""
        from ..resolvers.student import delete_student

        return await delete_student(info, id)
