"""
Error types raised by the record store and GraphQL resolvers
"""


class RegistrarError(Exception):
    """Base class for all application errors."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message


class InvalidArgument(RegistrarError):
    """An argument is syntactically malformed (e.g. an id that is not a UUID)."""


class ConstraintViolation(RegistrarError):
    """A unique, required, range or reference constraint was breached on write."""


class NotFound(RegistrarError):
    """No record exists for the given id."""

    def __init__(self, kind: str, record_id: object):
        super().__init__(f"{kind} not found: {record_id}")
        self.kind = kind
        self.record_id = record_id


class IntegrityViolation(RegistrarError):
    """A write was refused because it would leave dangling references."""
