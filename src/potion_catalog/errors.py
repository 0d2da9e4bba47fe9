"""Error taxonomy shared by services and the HTTP layer."""

from potion_catalog.domain.users import FieldError


class ApiError(Exception):
    """Base error carrying the HTTP status it maps to."""

    status_code = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationFailed(ApiError):
    """Malformed or missing input."""

    status_code = 400

    def __init__(
        self, message: str, field_errors: list[FieldError] | None = None
    ) -> None:
        super().__init__(message)
        self.field_errors = field_errors or []


class Unauthorized(ApiError):
    """Missing or invalid session."""

    status_code = 401


class NotFound(ApiError):
    """Resource id does not resolve."""

    status_code = 404


class SystemFailure(ApiError):
    """Store or infrastructure failure."""

    status_code = 500


class StoreFailure(Exception):
    """Raised by storage adapters when a write is rejected."""


class DuplicateKeyFailure(StoreFailure):
    """Raised when a write violates a unique index."""
