from __future__ import annotations

from typing import TYPE_CHECKING

import strawberry

from ...database import repository
from ...dbmodels import Departments
from ...errors import IntegrityViolation, NotFound
from ...logging import get_logger
from ..context import get_database_from_info, parse_id, provided_fields

if TYPE_CHECKING:
    from ..mutations.root import AddDepartmentInput, UpdateDepartmentInput
    from ..types.department import Department
    from ..types.student import Student

logger = get_logger(__name__)


def department_from_model(department: Departments) -> Department:
    """Convert a SQLAlchemy row to the GraphQL type."""
    from ..types.department import Department as DepartmentType

    return DepartmentType(
        id=strawberry.ID(str(department.id)),
        name=department.name,
        code=department.code,
        hod=department.hod,
        building=department.building,
        created_at=department.created_at,
        updated_at=department.updated_at,
    )


# Query resolvers
async def resolve_department_by_id(info: strawberry.Info, id: strawberry.ID) -> Department | None:
    department_id = parse_id(id)
    database = get_database_from_info(info)

    async with database.session() as session:
        department = await repository.get_department(session, department_id)
        if department is None:
            logger.info("Department not found", department_id=str(department_id))
            return None
        return department_from_model(department)


async def resolve_departments(info: strawberry.Info) -> list[Department]:
    database = get_database_from_info(info)

    async with database.session() as session:
        departments = await repository.list_departments(session)
        return [department_from_model(d) for d in departments]


# Field resolvers
async def resolve_department_students(
    department: Department, info: strawberry.Info
) -> list[Student]:
    """Students whose stored department reference is this department."""
    from .student import student_from_model

    database = get_database_from_info(info)

    async with database.session() as session:
        students = await repository.list_students_by_department(
            session, parse_id(department.id)
        )
        return [student_from_model(s) for s in students]


# Mutation resolvers
async def add_department(info: strawberry.Info, input: AddDepartmentInput) -> Department:
    database = get_database_from_info(info)

    async with database.session() as session:
        department = await repository.create_department(
            session,
            name=input.name,
            code=input.code,
            hod=input.hod,
            building=input.building,
        )

        logger.info(
            "Department created",
            department_id=str(department.id),
            code=department.code,
        )
        return department_from_model(department)


async def update_department(
    info: strawberry.Info, input: UpdateDepartmentInput
) -> Department | None:
    """
    Update an existing department.

    Only fields present in the input are written; returns None when the
    department does not exist.
    """
    department_id = parse_id(input.id)
    changes = provided_fields(input, repository.DEPARTMENT_UPDATABLE_FIELDS)
    database = get_database_from_info(info)

    async with database.session() as session:
        try:
            department = await repository.update_department(session, department_id, changes)
        except NotFound:
            logger.info("Department not found for update", department_id=str(department_id))
            return None

        logger.info(
            "Department updated",
            department_id=str(department_id),
            updated_fields=sorted(changes),
        )
        return department_from_model(department)


async def delete_department(info: strawberry.Info, id: strawberry.ID) -> Department | None:
    """
    Delete a department.

    Refused while any student still references the department.
    """
    department_id = parse_id(id)
    database = get_database_from_info(info)

    async with database.session() as session:
        try:
            department = await repository.delete_department(session, department_id)
        except NotFound:
            logger.info("Department not found for delete", department_id=str(department_id))
            return None
        except IntegrityViolation:
            logger.warning(
                "Department delete blocked by referencing students",
                department_id=str(department_id),
            )
            raise

        logger.info("Department deleted", department_id=str(department_id))
        return department_from_model(department)
