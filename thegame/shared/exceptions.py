"""
Domain Exceptions

Typed errors raised by the data-access layer. Each error carries an
``ErrorType`` discriminator so the API layer can translate it into a
response without inspecting exception classes.
"""

from enum import Enum


class ErrorType(str, Enum):
    """Error type enumeration for discriminated unions."""

    VALIDATION = "validation"
    NOT_FOUND = "not_found"
    CONSTRAINT_VIOLATION = "constraint_violation"
    REPOSITORY = "repository"


class DomainError(Exception):
    """Base class for all domain errors with type discrimination."""

    def __init__(
        self,
        message: str,
        error_type: ErrorType,
        details: dict[str, str | int | bool | None] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.error_type = error_type
        self.details = details or {}

    def to_dict(self) -> dict[str, str | dict[str, str | int | bool | None]]:
        """Convert error to dictionary for API responses."""
        return {
            "type": self.error_type.value,
            "message": self.message,
            "details": self.details,
        }


class ValidationError(DomainError):
    """Raised when an input is rejected before reaching the database."""

    def __init__(
        self,
        field_name: str,
        value: str | int | bool | None,
        message: str,
    ) -> None:
        self.field_name = field_name
        self.value = value
        super().__init__(
            f"Validation failed for field '{field_name}': {message}",
            ErrorType.VALIDATION,
            {"field": field_name, "value": None if value is None else str(value)},
        )


# Repository exceptions
class RepositoryError(DomainError):
    """Base class for repository-related errors."""

    def __init__(
        self,
        message: str,
        error_type: ErrorType = ErrorType.REPOSITORY,
        details: dict[str, str | int | bool | None] | None = None,
    ) -> None:
        super().__init__(message, error_type, details)


class EntityNotFoundError(RepositoryError):
    """Raised when entity is not found in repository."""

    def __init__(self, entity_type: str, entity_id: str) -> None:
        super().__init__(
            f"{entity_type} not found: {entity_id}",
            ErrorType.NOT_FOUND,
            {"entity_type": entity_type, "entity_id": str(entity_id)},
        )
        self.entity_type = entity_type
        self.entity_id = entity_id


class DataIntegrityError(RepositoryError):
    """Raised when data integrity constraints are violated."""

    def __init__(self, message: str) -> None:
        super().__init__(message, ErrorType.CONSTRAINT_VIOLATION)


class DatabaseError(RepositoryError):
    """Raised when a database operation fails."""

    pass
