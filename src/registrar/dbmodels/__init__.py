"""
Database models for Registrar (authoritative ORM definitions).

Defines the SQLAlchemy Base with a naming convention so constraint names are
stable across backends, and exposes `target_metadata` for schema creation.
"""

from datetime import UTC, datetime
from uuid import UUID, uuid4

from sqlalchemy import (
    CheckConstraint,
    DateTime,
    ForeignKeyConstraint,
    Index,
    Integer,
    MetaData,
    PrimaryKeyConstraint,
    String,
    UniqueConstraint,
    Uuid,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column
from sqlalchemy.types import TypeDecorator

# Naming convention for deterministic constraint/index names
naming_convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

STUDENT_MIN_AGE = 17
STUDENT_MAX_AGE = 30


class UTCDateTime(TypeDecorator[datetime]):
    """Timezone-aware timestamp that always loads as UTC.

    SQLite has no timezone storage and hands back naive values; those are
    stored as UTC and get the UTC tzinfo reattached on load.
    """

    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is not None and value.tzinfo is not None:
            value = value.astimezone(UTC)
        return value

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        if value.tzinfo is None:
            return value.replace(tzinfo=UTC)
        return value.astimezone(UTC)


class Base(DeclarativeBase):
    """Base class for all database models with type checking support."""

    metadata = MetaData(naming_convention=naming_convention)


class Departments(Base):
    __tablename__ = "departments"
    __table_args__ = (
        PrimaryKeyConstraint("id"),
        UniqueConstraint("name"),
        UniqueConstraint("code"),
    )

    id: Mapped[UUID] = mapped_column(Uuid, default=uuid4)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    code: Mapped[str] = mapped_column(String(50), nullable=False)
    hod: Mapped[str] = mapped_column(String(255), nullable=False)
    building: Mapped[str | None] = mapped_column(String(255))
    created_at: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False)


class Students(Base):
    __tablename__ = "students"
    __table_args__ = (
        PrimaryKeyConstraint("id"),
        UniqueConstraint("email"),
        UniqueConstraint("roll_number"),
        ForeignKeyConstraint(["department_id"], ["departments.id"], ondelete="RESTRICT"),
        CheckConstraint(
            f"age IS NULL OR (age >= {STUDENT_MIN_AGE} AND age <= {STUDENT_MAX_AGE})",
            name="age_range",
        ),
        Index("ix_students_department_id", "department_id"),
    )

    id: Mapped[UUID] = mapped_column(Uuid, default=uuid4)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False)
    roll_number: Mapped[str] = mapped_column(String(50), nullable=False)
    age: Mapped[int | None] = mapped_column(Integer)
    phone: Mapped[str | None] = mapped_column(String(50))
    department_id: Mapped[UUID] = mapped_column(Uuid, nullable=False)
    created_at: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False)


target_metadata = Base.metadata

__all__ = [
    "Base",
    "Departments",
    "Students",
    "STUDENT_MIN_AGE",
    "STUDENT_MAX_AGE",
    "UTCDateTime",
    "target_metadata",
]
