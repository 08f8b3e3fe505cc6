"""Repository helpers for department and student records."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from datetime import UTC, datetime
from typing import Any
from uuid import UUID

from sqlalchemy import delete, exists, func, select
from sqlalchemy.exc import DataError, IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from ..dbmodels import STUDENT_MAX_AGE, STUDENT_MIN_AGE, Base, Departments, Students
from ..errors import ConstraintViolation, IntegrityViolation, NotFound
from ..logging import get_logger

logger = get_logger(__name__)

DEPARTMENT_REQUIRED_FIELDS = ("name", "code", "hod")
DEPARTMENT_UPDATABLE_FIELDS = ("name", "code", "hod", "building")
STUDENT_REQUIRED_FIELDS = ("name", "email", "roll_number", "department_id")
STUDENT_UPDATABLE_FIELDS = ("name", "email", "roll_number", "age", "phone", "department_id")

# Column name -> field name as the API spells it
API_FIELD_NAMES = {"roll_number": "rollNumber", "department_id": "departmentId"}

DEPARTMENT_HAS_STUDENTS = "Cannot delete department with students"


def _api_name(field: str) -> str:
    return API_FIELD_NAMES.get(field, field)


def _check_required(values: Mapping[str, Any], fields: Sequence[str]) -> None:
    for field in fields:
        if field not in values:
            continue
        value = values[field]
        if value is None or (isinstance(value, str) and not value.strip()):
            raise ConstraintViolation(f"Field '{_api_name(field)}' is required")


def _check_lengths(model: type[Base], values: Mapping[str, Any]) -> None:
    """Reject strings longer than their column allows.

    PostgreSQL refuses these at write time and SQLite silently stores them.
    """
    columns = model.__table__.c
    for field, value in values.items():
        if not isinstance(value, str):
            continue
        limit = getattr(columns[field].type, "length", None)
        if limit is not None and len(value) > limit:
            raise ConstraintViolation(
                f"Field '{_api_name(field)}' must be at most {limit} characters"
            )


def _check_age(age: int | None) -> None:
    if age is not None and not STUDENT_MIN_AGE <= age <= STUDENT_MAX_AGE:
        raise ConstraintViolation(
            f"Field 'age' must be between {STUDENT_MIN_AGE} and {STUDENT_MAX_AGE}, got {age}"
        )


async def _flush(session: AsyncSession) -> None:
    try:
        await session.flush()
    except IntegrityError as e:
        raise ConstraintViolation(str(e.orig)) from e
    except DataError as e:
        # The driver message carries the statement and parameters; keep it server-side
        logger.warning("Store rejected a field value", error=str(e.orig))
        raise ConstraintViolation("A field value was rejected by the store") from e


# Departments


async def get_department(session: AsyncSession, department_id: UUID) -> Departments | None:
    return await session.get(Departments, department_id)


async def list_departments(session: AsyncSession) -> Sequence[Departments]:
    res = await session.execute(select(Departments))
    return res.scalars().all()


async def department_exists(session: AsyncSession, department_id: UUID) -> bool:
    stmt = select(exists().where(Departments.id == department_id))
    res = await session.execute(stmt)
    return bool(res.scalar())


async def create_department(
    session: AsyncSession,
    *,
    name: str,
    code: str,
    hod: str,
    building: str | None = None,
) -> Departments:
    values = {"name": name, "code": code, "hod": hod, "building": building}
    _check_required(values, DEPARTMENT_REQUIRED_FIELDS)
    _check_lengths(Departments, values)

    now = datetime.now(UTC)
    department = Departments(
        name=name,
        code=code,
        hod=hod,
        building=building,
        created_at=now,
        updated_at=now,
    )
    session.add(department)
    await _flush(session)
    return department


async def update_department(
    session: AsyncSession, department_id: UUID, changes: Mapping[str, Any]
) -> Departments:
    """Overwrite the supplied fields of a department.

    Raises:
        NotFound: no department has this id
        ConstraintViolation: a required field was cleared or a unique field collides
    """
    unknown = set(changes) - set(DEPARTMENT_UPDATABLE_FIELDS)
    if unknown:
        raise ValueError(f"Cannot update department fields: {sorted(unknown)}")

    department = await get_department(session, department_id)
    if department is None:
        raise NotFound("Department", department_id)

    _check_required(changes, DEPARTMENT_REQUIRED_FIELDS)
    _check_lengths(Departments, changes)

    for field, value in changes.items():
        setattr(department, field, value)
    department.updated_at = datetime.now(UTC)

    await _flush(session)
    return department


async def count_department_students(session: AsyncSession, department_id: UUID) -> int:
    stmt = select(func.count()).select_from(Students).where(Students.department_id == department_id)
    res = await session.execute(stmt)
    return int(res.scalar_one())


async def delete_department(session: AsyncSession, department_id: UUID) -> Departments:
    """Delete a department that no student references.

    The reference count is checked first so the common case fails fast; the
    delete itself is conditional on no student referencing the department, so
    a student attached between the two statements still blocks it.

    Raises:
        NotFound: no department has this id
        IntegrityViolation: at least one student references the department
    """
    department = await get_department(session, department_id)
    if department is None:
        raise NotFound("Department", department_id)

    if await count_department_students(session, department_id) > 0:
        raise IntegrityViolation(DEPARTMENT_HAS_STUDENTS)

    stmt = (
        delete(Departments)
        .where(
            Departments.id == department_id,
            ~exists().where(Students.department_id == department_id),
        )
        .execution_options(synchronize_session=False)
    )
    try:
        res = await session.execute(stmt)
    except IntegrityError as e:
        raise IntegrityViolation(DEPARTMENT_HAS_STUDENTS) from e

    if res.rowcount == 0:
        raise IntegrityViolation(DEPARTMENT_HAS_STUDENTS)

    session.expunge(department)
    return department


# Students


async def get_student(session: AsyncSession, student_id: UUID) -> Students | None:
    return await session.get(Students, student_id)


async def list_students(session: AsyncSession) -> Sequence[Students]:
    res = await session.execute(select(Students))
    return res.scalars().all()


async def count_students(session: AsyncSession) -> int:
    res = await session.execute(select(func.count()).select_from(Students))
    return int(res.scalar_one())


def _escape_like(value: str) -> str:
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


async def search_students(session: AsyncSession, name: str) -> Sequence[Students]:
    """Students whose name contains `name`, ignoring case."""
    pattern = f"%{_escape_like(name)}%"
    stmt = select(Students).where(Students.name.ilike(pattern, escape="\\"))
    res = await session.execute(stmt)
    return res.scalars().all()


async def list_students_by_department(
    session: AsyncSession, department_id: UUID
) -> Sequence[Students]:
    stmt = select(Students).where(Students.department_id == department_id)
    res = await session.execute(stmt)
    return res.scalars().all()


async def _check_department_reference(session: AsyncSession, department_id: UUID) -> None:
    if not await department_exists(session, department_id):
        raise ConstraintViolation(f"Department does not exist: {department_id}")


async def create_student(
    session: AsyncSession,
    *,
    name: str,
    email: str,
    roll_number: str,
    department_id: UUID,
    age: int | None = None,
    phone: str | None = None,
) -> Students:
    values = {
        "name": name,
        "email": email,
        "roll_number": roll_number,
        "department_id": department_id,
        "phone": phone,
    }
    _check_required(values, STUDENT_REQUIRED_FIELDS)
    _check_lengths(Students, values)
    _check_age(age)
    await _check_department_reference(session, department_id)

    now = datetime.now(UTC)
    student = Students(
        name=name,
        email=email,
        roll_number=roll_number,
        age=age,
        phone=phone,
        department_id=department_id,
        created_at=now,
        updated_at=now,
    )
    session.add(student)
    await _flush(session)
    return student


async def update_student(
    session: AsyncSession, student_id: UUID, changes: Mapping[str, Any]
) -> Students:
    """Overwrite the supplied fields of a student.

    Raises:
        NotFound: no student has this id
        ConstraintViolation: required/range/unique/reference check failed
    """
    unknown = set(changes) - set(STUDENT_UPDATABLE_FIELDS)
    if unknown:
        raise ValueError(f"Cannot update student fields: {sorted(unknown)}")

    student = await get_student(session, student_id)
    if student is None:
        raise NotFound("Student", student_id)

    _check_required(changes, STUDENT_REQUIRED_FIELDS)
    _check_lengths(Students, changes)
    if "age" in changes:
        _check_age(changes["age"])
    if "department_id" in changes and changes["department_id"] != student.department_id:
        await _check_department_reference(session, changes["department_id"])

    for field, value in changes.items():
        setattr(student, field, value)
    student.updated_at = datetime.now(UTC)

    await _flush(session)
    return student


async def delete_student(session: AsyncSession, student_id: UUID) -> Students:
    """Delete a student and return the row as it was before deletion.

    Raises:
        NotFound: no student has this id
    """
    student = await get_student(session, student_id)
    if student is None:
        raise NotFound("Student", student_id)

    await session.delete(student)
    await session.flush()
    return student
