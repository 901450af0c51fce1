"""Shared domain error messages and error types."""


class DomainError(ValueError):
    """Base class for domain-level errors.

    Every per-call failure is converted to one of these before it reaches
    the operation boundary, where its message becomes the caller-facing
    error string.
    """


class ValidationError(DomainError):
    """Malformed payload or failed validation in domain logic."""


class NotFoundError(DomainError):
    """Requested operation or entity does not exist."""


class ConflictError(DomainError):
    """Uniqueness violation, such as a duplicate primary key."""


class DependencyError(DomainError):
    """Foreign-key violation: a parent row is missing or still referenced."""


class StorageError(DomainError):
    """Connectivity, disk or corruption failure in the storage engine."""


class StartupError(RuntimeError):
    """Schema migration or initial connection failure.

    Not a DomainError: the process must not serve operations after this.
    """


def still_referenced() -> str:
    """Return message for a foreign-key violation."""
    return "This item cannot be deleted or saved because it is still referenced elsewhere."


def already_exists() -> str:
    """Return message for a duplicate identifier."""
    return "An item with this identifier already exists."


def storage_failure(context: str) -> str:
    """Return message for a generic storage fault during ``context``."""
    return f"Database error while {context}."


def missing_field(entity: str, field_name: str) -> str:
    """Return message for a required payload field that is absent."""
    return f"Missing required field '{field_name}' for {entity}"


def invalid_field(entity: str, field_name: str, expected: str) -> str:
    """Return message for a payload field of the wrong type."""
    return f"Field '{field_name}' for {entity} must be {expected}"


def unknown_command(name: str) -> str:
    """Return message for an operation name that is not registered."""
    return f"Unknown command '{name}'"


def unstorable_value(context: str) -> str:
    """Return message for a value the storage engine cannot represent."""
    return f"A value is out of range or not valid text while {context}."


def scheduled_changed(scheduled_id: str) -> str:
    """Return message for a scheduled transaction modified during processing."""
    return f"Scheduled transaction '{scheduled_id}' changed while being processed"
