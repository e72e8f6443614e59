"""Error hierarchy for metad.

Error layers:
- MetadError: Base class for all metad errors
- DomainError: Business rule violations, illegal status transitions
- InfrastructureError: System-level failures like storage/network issues

The pipeline driver treats InfrastructureError as recoverable (log and move on)
and lets DomainError propagate: a domain error inside the driver is a bug.
"""


class MetadError(Exception):
    """Base class for all metad errors."""

    def __init__(self, message: str, code: str | None = None) -> None:
        self.message = message
        self.code = code or self.__class__.__name__
        super().__init__(message)


# =============================================================================
# Domain Errors (business logic violations)
# =============================================================================


class DomainError(MetadError):
    """Base class for domain/business errors."""


class NotFoundError(DomainError):
    """Resource not found."""


class InvalidStateError(DomainError):
    """Operation not allowed in current state."""


# =============================================================================
# Infrastructure Errors (system-level failures)
# =============================================================================


class InfrastructureError(MetadError):
    """Base class for infrastructure/system errors."""


class StorageUnavailableError(InfrastructureError):
    """Record store (database) is unavailable or a statement failed."""
