"""Password hashing and session token primitives."""

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta

import bcrypt
import jwt

TOKEN_TTL = timedelta(hours=24)
# bcrypt only looks at the first 72 bytes of a password.
_BCRYPT_MAX_BYTES = 72


@dataclass
class BcryptPasswordHasher:
    """Salted one-way password hashing backed by bcrypt."""

    rounds: int = 12

    def hash(self, password: str) -> str:
        """Return a salted bcrypt hash of the password."""
        salt = bcrypt.gensalt(rounds=self.rounds)
        return bcrypt.hashpw(_encode(password), salt).decode("utf-8")

    def verify(self, password: str, password_hash: str) -> bool:
        """Return true when the password matches the stored hash."""
        try:
            return bcrypt.checkpw(_encode(password), password_hash.encode("utf-8"))
        except ValueError:
            return False


@dataclass
class JwtTokenCodec:
    """HMAC-signed JWTs with a fixed validity window."""

    secret: str
    ttl: timedelta = TOKEN_TTL
    algorithm: str = "HS256"

    def encode(self, claims: dict[str, object]) -> str:
        """Sign the claims, adding issue and expiry times."""
        now = datetime.now(tz=UTC)
        payload = {**claims, "iat": now, "exp": now + self.ttl}
        return jwt.encode(payload, self.secret, algorithm=self.algorithm)

    def decode(self, token: str) -> dict[str, object] | None:
        """Return the verified claims, or None for any invalid token."""
        try:
            return jwt.decode(
                token,
                self.secret,
                algorithms=[self.algorithm],
                options={"require": ["exp", "iat"]},
            )
        except jwt.PyJWTError:
            return None


def _encode(password: str) -> bytes:
    return password.encode("utf-8")[:_BCRYPT_MAX_BYTES]
