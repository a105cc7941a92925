"""Error hierarchy for Archivist.

Error layers:
- ArchivistError: Base class for all Archivist errors
- DomainError: Business rule violations, validation failures, stale writes
- InfrastructureError: System-level failures like storage issues

Callers (the HTTP layer, the CLI) translate these into user-facing responses.
"""

from collections.abc import Mapping


class ArchivistError(Exception):
    """Base class for all Archivist errors."""

    def __init__(self, message: str, code: str | None = None) -> None:
        self.message = message
        self.code = code or self.__class__.__name__
        super().__init__(message)


# =============================================================================
# Domain Errors (client-fixable or retryable conditions)
# =============================================================================


class DomainError(ArchivistError):
    """Base class for domain/business errors."""


class NotFoundError(DomainError):
    """Resource not found."""


class CrossRepositoryError(NotFoundError):
    """Record addressed from outside its repository.

    Subclasses NotFoundError and carries the same message shape so that
    callers cannot tell a foreign record apart from a missing one.
    """


class ValidationError(DomainError):
    """Record representation failed schema validation.

    ``errors`` always blocks persistence; ``warnings`` are carried along so the
    caller can show them next to the errors.
    """

    def __init__(
        self,
        message: str,
        errors: Mapping[str, str] | None = None,
        warnings: Mapping[str, str] | None = None,
        field: str | None = None,
    ) -> None:
        super().__init__(message, code="VALIDATION_ERROR")
        self.errors: dict[str, str] = dict(errors or {})
        self.warnings: dict[str, str] = dict(warnings or {})
        if field is not None and field not in self.errors:
            self.errors[field] = message
        self.field = field


class ConflictError(DomainError):
    """Stale version on update, or a uniqueness conflict."""

    def __init__(self, message: str, current_version: int | None = None) -> None:
        super().__init__(message, code="CONFLICT")
        self.current_version = current_version


class AuthorizationError(DomainError):
    """Principal not allowed to perform this operation."""


# =============================================================================
# Infrastructure Errors (system-level failures, not retryable by the caller)
# =============================================================================


class InfrastructureError(ArchivistError):
    """Base class for infrastructure/system errors."""


class StorageError(InfrastructureError):
    """Storage backend failed while executing an operation."""


class ConfigurationError(InfrastructureError):
    """System misconfiguration detected."""
