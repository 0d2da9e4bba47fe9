"""Domain models for users and sessions."""

from dataclasses import dataclass


@dataclass(frozen=True)
class UserRecord:
    """Represents a user stored in the credential store."""

    id: str
    name: str
    password_hash: str


@dataclass(frozen=True)
class SessionUser:
    """Identity carried by a verified session token."""

    id: str
    name: str


@dataclass(frozen=True)
class FieldError:
    """A single field-level validation error."""

    field: str
    message: str
