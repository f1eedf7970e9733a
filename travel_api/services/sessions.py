"""Session manager: register, login, refresh-token rotation, and logout.

Sessions are not stored. A session is an access token plus a refresh token, and
every successful use of a refresh token replaces both.
"""

from dataclasses import dataclass

from travel_api.core.errors import (
    EmailInUseError,
    InvalidCredentialsError,
    InvalidTokenError,
    NoTokenError,
    UserNotFoundError,
)
from travel_api.core.logging import log_auth_event
from travel_api.core.security import (
    TokenCodec,
    hash_password,
    verify_password,
)
from travel_api.models.user import User
from travel_api.schemas.auth import Role, TokenPayload, UserPublic
from travel_api.services.users import UserRepository


@dataclass(frozen=True)
class AuthResult:
    """Tokens and public user fields produced by a successful auth operation."""

    access_token: str
    refresh_token: str
    user: UserPublic


def to_public(user: User) -> UserPublic:
    return UserPublic(id=user.id, email=user.email, name=user.name, role=Role(user.role))


class SessionManager:
    def __init__(
        self,
        users: UserRepository,
        codec: TokenCodec,
        bcrypt_rounds: int,
    ) -> None:
        self._users = users
        self._codec = codec
        self._bcrypt_rounds = bcrypt_rounds

    def _issue(self, user: User, remember_me: bool) -> AuthResult:
        payload = TokenPayload(user_id=user.id, role=Role(user.role))
        pair = self._codec.issue_pair(payload, remember_me=remember_me)
        return AuthResult(
            access_token=pair.access_token,
            refresh_token=pair.refresh_token,
            user=to_public(user),
        )

    def register(
        self, name: str, email: str, password: str, remember_me: bool = False
    ) -> AuthResult:
        """
        Create a 'user' account and issue its first token pair.
        Raises EmailInUseError if the email is already registered.
        """
        log_auth_event("register_attempt", email=email)
        if self._users.get_by_email(email) is not None:
            log_auth_event("register_failed", email=email, reason="email_exists")
            raise EmailInUseError()

        user = self._users.create(
            name=name,
            email=email,
            password_hash=hash_password(password, rounds=self._bcrypt_rounds),
            role=Role.USER,
        )
        result = self._issue(user, remember_me)
        log_auth_event("register_success", user_id=user.id, email=user.email, role=user.role)
        return result

    def login(self, email: str, password: str, remember_me: bool = False) -> AuthResult:
        """
        Verify credentials and issue a token pair.

        Unknown email and wrong password both raise the same InvalidCredentialsError;
        only the log line records which one happened.
        """
        log_auth_event("login_attempt", email=email)
        user = self._users.get_by_email(email)
        if user is None:
            log_auth_event("login_failed", email=email, reason="user_not_found")
            raise InvalidCredentialsError()
        if not verify_password(password, user.password_hash):
            log_auth_event("login_failed", email=email, reason="invalid_password")
            raise InvalidCredentialsError()

        result = self._issue(user, remember_me)
        log_auth_event("login_success", user_id=user.id, email=user.email, role=user.role)
        return result

    def refresh(self, refresh_token: str | None, remember_me: bool = False) -> AuthResult:
        """
        Exchange a refresh token for a new access/refresh pair (rotation).

        Raises NoTokenError when no token is given, InvalidTokenError when it is
        expired or tampered with, and UserNotFoundError when its user is gone.
        The returned user fields, role included, are read fresh from the store.
        """
        if not refresh_token:
            log_auth_event("refresh_token_failed", reason="no_token")
            raise NoTokenError()

        try:
            payload = self._codec.verify(refresh_token)
        except InvalidTokenError as e:
            log_auth_event("refresh_token_failed", reason="invalid_token", error=e.message)
            raise

        user = self._users.get_by_id(payload.user_id)
        if user is None:
            log_auth_event("refresh_token_failed", reason="user_not_found", user_id=payload.user_id)
            raise UserNotFoundError()

        result = self._issue(user, remember_me)
        log_auth_event("refresh_token_success", user_id=user.id)
        return result

    def logout(self, user_id: int | None = None) -> None:
        """Nothing to revoke server-side; the caller clears the refresh cookie."""
        log_auth_event("logout", user_id=user_id)
