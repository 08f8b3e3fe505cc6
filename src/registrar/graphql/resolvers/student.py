from __future__ import annotations

from typing import TYPE_CHECKING

import strawberry

from ...database import repository
from ...dbmodels import Students
from ...errors import NotFound
from ...logging import get_logger
from ..context import get_database_from_info, parse_id, provided_fields

if TYPE_CHECKING:
    from ..mutations.root import AddStudentInput, UpdateStudentInput
    from ..types.department import Department
    from ..types.student import Student

logger = get_logger(__name__)


def student_from_model(student: Students) -> Student:
    """Convert a SQLAlchemy row to the GraphQL type."""
    from ..types.student import Student as StudentType

    return StudentType(
        id=strawberry.ID(str(student.id)),
        name=student.name,
        email=student.email,
        roll_number=student.roll_number,
        age=student.age,
        phone=student.phone,
        created_at=student.created_at,
        updated_at=student.updated_at,
        department_id=student.department_id,
    )


# Query resolvers
async def resolve_student_by_id(info: strawberry.Info, id: strawberry.ID) -> Student | None:
    student_id = parse_id(id)
    database = get_database_from_info(info)

    async with database.session() as session:
        student = await repository.get_student(session, student_id)
        if student is None:
            logger.info("Student not found", student_id=str(student_id))
            return None
        return student_from_model(student)


async def resolve_students(info: strawberry.Info) -> list[Student]:
    database = get_database_from_info(info)

    async with database.session() as session:
        students = await repository.list_students(session)
        return [student_from_model(s) for s in students]


async def search_students(info: strawberry.Info, name: str) -> list[Student]:
    database = get_database_from_info(info)

    async with database.session() as session:
        students = await repository.search_students(session, name)
        logger.debug("Student search", query=name, matches=len(students))
        return [student_from_model(s) for s in students]


async def resolve_students_by_department(
    info: strawberry.Info, department_id: strawberry.ID
) -> list[Student]:
    parsed_department_id = parse_id(department_id, "departmentId")
    database = get_database_from_info(info)

    async with database.session() as session:
        students = await repository.list_students_by_department(session, parsed_department_id)
        return [student_from_model(s) for s in students]


# Field resolvers
async def resolve_student_department(student: Student, info: strawberry.Info) -> Department | None:
    """The referenced department, or None when the reference is dangling."""
    from .department import department_from_model

    database = get_database_from_info(info)

    async with database.session() as session:
        department = await repository.get_department(session, student.department_id)
        if department is None:
            logger.warning(
                "Student references a missing department",
                student_id=str(student.id),
                department_id=str(student.department_id),
            )
            return None
        return department_from_model(department)


# Mutation resolvers
async def add_student(info: strawberry.Info, input: AddStudentInput) -> Student:
    department_id = parse_id(input.department_id, "departmentId")
    database = get_database_from_info(info)

    async with database.session() as session:
        student = await repository.create_student(
            session,
            name=input.name,
            email=input.email,
            roll_number=input.roll_number,
            department_id=department_id,
            age=input.age,
            phone=input.phone,
        )

        logger.info(
            "Student created",
            student_id=str(student.id),
            department_id=str(department_id),
        )
        return student_from_model(student)


async def update_student(info: strawberry.Info, input: UpdateStudentInput) -> Student | None:
    """
    Update an existing student.

    Only fields present in the input are written; returns None when the
    student does not exist.
    """
    student_id = parse_id(input.id)
    changes = provided_fields(input, repository.STUDENT_UPDATABLE_FIELDS)
    if changes.get("department_id") is not None:
        changes["department_id"] = parse_id(changes["department_id"], "departmentId")
    database = get_database_from_info(info)

    async with database.session() as session:
        try:
            student = await repository.update_student(session, student_id, changes)
        except NotFound:
            logger.info("Student not found for update", student_id=str(student_id))
            return None

        logger.info(
            "Student updated",
            student_id=str(student_id),
            updated_fields=sorted(changes),
        )
        return student_from_model(student)


async def delete_student(info: strawberry.Info, id: strawberry.ID) -> Student | None:
    """Delete a student, returning its state before deletion."""
    student_id = parse_id(id)
    database = get_database_from_info(info)

    async with database.session() as session:
        try:
            student = await repository.delete_student(session, student_id)
        except NotFound:
            logger.info("Student not found for delete", student_id=str(student_id))
            return None

        logger.info("Student deleted", student_id=str(student_id))
        return student_from_model(student)
