"""
Reusable seed data functions for local development.

Inserts a handful of sample departments and students. Re-running the seed is
safe: departments are matched on `code` and students on `roll_number`.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..dbmodels import Departments, Students
from ..logging import get_logger
from . import repository

logger = get_logger(__name__)

SAMPLE_DEPARTMENTS: list[dict[str, Any]] = [
    {"name": "Computer Science", "code": "CS01", "hod": "Dr. Meera Iyer", "building": "Block A"},
    {"name": "Mechanical Engineering", "code": "ME01", "hod": "Dr. Rahul Verma", "building": None},
    {"name": "Mathematics", "code": "MA01", "hod": "Dr. Ada Collins", "building": "Block C"},
]

SAMPLE_STUDENTS: list[dict[str, Any]] = [
    {
        "name": "Anna Thomas",
        "email": "anna.thomas@example.edu",
        "roll_number": "CS2024001",
        "age": 19,
        "phone": "555-0101",
        "department_code": "CS01",
    },
    {
        "name": "Ansh Kapoor",
        "email": "ansh.kapoor@example.edu",
        "roll_number": "CS2024002",
        "age": 20,
        "phone": None,
        "department_code": "CS01",
    },
    {
        "name": "Bob Martin",
        "email": "bob.martin@example.edu",
        "roll_number": "ME2024001",
        "age": 21,
        "phone": "555-0199",
        "department_code": "ME01",
    },
]


async def ensure_department(db: AsyncSession, **fields: Any) -> tuple[Departments, bool]:
    """Return the department with this code, creating it if needed.

    Returns:
        (department, created)
    """
    stmt = select(Departments).where(Departments.code == fields["code"])
    result = await db.execute(stmt)
    existing = result.scalar_one_or_none()
    if existing is not None:
        return existing, False

    department = await repository.create_department(db, **fields)
    logger.info("Seeded department", department_id=str(department.id), code=department.code)
    return department, True


async def seed_sample_data(db: AsyncSession) -> dict[str, int]:
    """Seed sample departments and students.

    Returns:
        Counts of newly created records, keyed by kind.
    """
    created = {"departments": 0, "students": 0}
    departments_by_code: dict[str, Departments] = {}

    for dept_fields in SAMPLE_DEPARTMENTS:
        department, is_new = await ensure_department(db, **dept_fields)
        departments_by_code[department.code] = department
        if is_new:
            created["departments"] += 1

    for student_fields in SAMPLE_STUDENTS:
        fields = dict(student_fields)
        department = departments_by_code[fields.pop("department_code")]

        stmt = select(Students).where(Students.roll_number == fields["roll_number"])
        result = await db.execute(stmt)
        if result.scalar_one_or_none() is not None:
            continue

        student = await repository.create_student(db, department_id=department.id, **fields)
        created["students"] += 1
        logger.info("Seeded student", student_id=str(student.id), roll_number=student.roll_number)

    logger.info("Sample data seeded", **created)
    return created
