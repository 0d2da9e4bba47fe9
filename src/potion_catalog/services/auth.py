"""Registration, login and session verification."""

import logging
from dataclasses import dataclass
from typing import Protocol

from potion_catalog.domain.users import FieldError, SessionUser, UserRecord
from potion_catalog.errors import (
    DuplicateKeyFailure,
    StoreFailure,
    SystemFailure,
    Unauthorized,
    ValidationFailed,
)

logger = logging.getLogger(__name__)

NAME_MIN_LENGTH = 3
NAME_MAX_LENGTH = 30
PASSWORD_MIN_LENGTH = 6

_ESCAPES = str.maketrans(
    {
        "&": "&amp;",
        '"': "&quot;",
        "'": "&#x27;",
        "<": "&lt;",
        ">": "&gt;",
        "/": "&#x2F;",
        "\\": "&#x5C;",
        "`": "&#96;",
    }
)


class UserRepository(Protocol):
    """Persistence interface for user credentials."""

    def get_by_name(self, name: str) -> UserRecord | None:
        """Return the user with this exact name, if present."""

    def create_user(self, name: str, password_hash: str) -> UserRecord:
        """Insert a user, raising DuplicateKeyFailure when the name exists."""


class PasswordHasher(Protocol):
    """One-way salted password derivation."""

    def hash(self, password: str) -> str:
        """Return the derived hash."""

    def verify(self, password: str, password_hash: str) -> bool:
        """Return true when the password matches the hash."""


class TokenCodec(Protocol):
    """Signs and verifies session tokens."""

    def encode(self, claims: dict[str, object]) -> str:
        """Return a signed token for the claims."""

    def decode(self, token: str) -> dict[str, object] | None:
        """Return verified claims, or None when the token is invalid."""


@dataclass
class AuthService:
    """Application service for the session lifecycle."""

    repository: UserRepository
    hasher: PasswordHasher
    tokens: TokenCodec

    def register(self, name: object, password: object) -> UserRecord:
        """Validate credentials and create a user."""
        clean_name = sanitize(name)
        clean_password = sanitize(password)
        errors = validate_registration(clean_name, clean_password)
        if errors:
            raise ValidationFailed("Invalid registration data", field_errors=errors)

        password_hash = self.hasher.hash(clean_password)
        try:
            user = self.repository.create_user(clean_name, password_hash)
        except DuplicateKeyFailure as exc:
            logger.warning("Registration rejected by unique index")
            raise SystemFailure("System error") from exc
        except StoreFailure as exc:
            raise ValidationFailed(str(exc)) from exc
        logger.info("User registered", extra={"user_id": user.id})
        return user

    def login(self, name: object, password: object) -> str:
        """Check credentials and return a signed session token."""
        clean_name = sanitize(name)
        user = self.repository.get_by_name(clean_name)
        if user is None or not self.hasher.verify(
            sanitize(password), user.password_hash
        ):
            logger.info("Login failed", extra={"user_name": clean_name})
            raise Unauthorized("Invalid credentials")
        logger.info("Login succeeded", extra={"user_id": user.id})
        return self.tokens.encode({"id": user.id, "name": user.name})

    def authenticate(self, token: str | None) -> SessionUser:
        """Return the identity carried by a valid session token."""
        if not token:
            raise Unauthorized("Authentication required")
        claims = self.tokens.decode(token)
        if claims is None:
            raise Unauthorized("Invalid or expired session")
        user_id = claims.get("id")
        user_name = claims.get("name")
        if not isinstance(user_id, str) or not isinstance(user_name, str):
            raise Unauthorized("Invalid or expired session")
        return SessionUser(id=user_id, name=user_name)


def sanitize(value: object) -> str:
    """Coerce a body value to a trimmed, HTML-escaped string."""
    if value is None:
        return ""
    return str(value).strip().translate(_ESCAPES)


def validate_registration(name: str, password: str) -> list[FieldError]:
    """Return field errors in check order; empty when valid."""
    errors = []
    if not name:
        errors.append(FieldError("name", "Username is required."))
    if not NAME_MIN_LENGTH <= len(name) <= NAME_MAX_LENGTH:
        errors.append(
            FieldError(
                "name",
                f"Must be between {NAME_MIN_LENGTH} and "
                f"{NAME_MAX_LENGTH} characters.",
            )
        )
    if not password:
        errors.append(FieldError("password", "Password is required."))
    if len(password) < PASSWORD_MIN_LENGTH:
        errors.append(
            FieldError("password", f"Minimum {PASSWORD_MIN_LENGTH} characters.")
        )
    return errors
