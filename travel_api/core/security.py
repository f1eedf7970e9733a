"""Password hashing and JWT issuance/verification for authentication."""

import uuid
from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Any

import bcrypt
import jwt
from pydantic import ValidationError

from travel_api.core.config import Settings
from travel_api.core.errors import InvalidTokenError
from travel_api.schemas.auth import TokenPayload


def hash_password(plain_password: str, rounds: int) -> str:
    """
    Hash a plain-text password for storage. Do not store plain passwords.
    rounds is the bcrypt cost, Settings.BCRYPT_ROUNDS in the app.
    """
    # bcrypt has a 72-byte limit; truncate to avoid errors (validation already limits length).
    pw_bytes = plain_password.encode("utf-8")[:72]
    return bcrypt.hashpw(pw_bytes, bcrypt.gensalt(rounds=rounds)).decode("utf-8")


def verify_password(plain_password: str, hashed: str) -> bool:
    """Verify a plain password against a stored hash."""
    pw_bytes = plain_password.encode("utf-8")[:72]
    try:
        return bcrypt.checkpw(pw_bytes, hashed.encode("utf-8"))
    except (ValueError, TypeError):
        return False


def _utcnow() -> datetime:
    return datetime.now(UTC)


@dataclass(frozen=True)
class TokenPair:
    access_token: str
    refresh_token: str


class TokenCodec:
    """
    Signs and verifies the JWTs used as access and refresh tokens.

    Both kinds carry the same claims (sub, role, iat, exp, jti); they differ only
    in lifetime and in how the client transports them. The secret and lifetimes
    are fixed at construction, once per process.
    """

    def __init__(
        self,
        secret: str,
        algorithm: str = "HS256",
        default_lifetime: timedelta = timedelta(days=1),
        remember_lifetime: timedelta = timedelta(days=30),
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        if not secret:
            raise ValueError("TokenCodec secret must be non-empty")
        self._secret = secret
        self._algorithm = algorithm
        self.default_lifetime = default_lifetime
        self.remember_lifetime = remember_lifetime
        self._clock = clock

    @classmethod
    def from_settings(cls, settings: Settings) -> "TokenCodec":
        return cls(
            secret=settings.JWT_SECRET.get_secret_value(),
            algorithm=settings.JWT_ALGORITHM,
            default_lifetime=timedelta(minutes=settings.JWT_EXPIRE_MINUTES),
            remember_lifetime=timedelta(minutes=settings.JWT_REMEMBER_EXPIRE_MINUTES),
        )

    def issue(self, payload: TokenPayload, lifetime: timedelta) -> str:
        """Create a signed token for payload that expires lifetime from now."""
        now = self._clock()
        claims: dict[str, Any] = {
            "sub": str(payload.user_id),
            "role": payload.role.value,
            "iat": now,
            "exp": now + lifetime,
            # Keeps tokens minted in the same second for the same user distinct.
            "jti": uuid.uuid4().hex,
        }
        return jwt.encode(claims, self._secret, algorithm=self._algorithm)

    def issue_pair(self, payload: TokenPayload, remember_me: bool = False) -> TokenPair:
        """
        Issue an access/refresh pair for payload.

        The access token is long-lived only when remember_me is set; the refresh
        token always gets the long lifetime so it outlives the access token.
        """
        access_lifetime = self.remember_lifetime if remember_me else self.default_lifetime
        return TokenPair(
            access_token=self.issue(payload, access_lifetime),
            refresh_token=self.issue(payload, self.remember_lifetime),
        )

    def verify(self, token: str) -> TokenPayload:
        """
        Decode and validate token; return its payload.
        Raises InvalidTokenError on bad signature, malformed token, bad claims, or expiry.

        Expiry is checked against the codec's clock, strictly: a token is expired
        from the instant now == exp, with no leeway.
        """
        try:
            claims = jwt.decode(
                token,
                self._secret,
                algorithms=[self._algorithm],
                options={
                    "require": ["sub", "role", "exp"],
                    "verify_exp": False,
                    "verify_iat": False,
                },
            )
        except jwt.PyJWTError as e:
            raise InvalidTokenError("Invalid token") from e
        try:
            expires = datetime.fromtimestamp(claims["exp"], tz=UTC)
        except (TypeError, ValueError, OverflowError, OSError) as e:
            raise InvalidTokenError("Invalid token payload") from e
        if self._clock() >= expires:
            raise InvalidTokenError("Token has expired")
        try:
            return TokenPayload(user_id=int(claims["sub"]), role=claims["role"])
        except (TypeError, ValueError, ValidationError) as e:
            raise InvalidTokenError("Invalid token payload") from e
