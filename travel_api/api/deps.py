"""Request dependencies: app-scoped services, the auth gate, and the role gate."""

import logging
from collections.abc import Callable
from typing import Annotated

from fastapi import Depends, Request, Response
from sqlalchemy.orm import Session

from travel_api.core.config import Settings
from travel_api.core.cookies import set_refresh_cookie
from travel_api.core.database import get_db
from travel_api.core.errors import (
    AuthError,
    AuthInternalError,
    ForbiddenError,
    InvalidTokenError,
    UnauthenticatedError,
)
from travel_api.core.security import TokenCodec
from travel_api.schemas.auth import CurrentUser, Role
from travel_api.services.sessions import SessionManager
from travel_api.services.users import UserRepository

logger = logging.getLogger(__name__)

BEARER_PREFIX = "Bearer"


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_token_codec(request: Request) -> TokenCodec:
    return request.app.state.token_codec


def get_user_repository(db: Annotated[Session, Depends(get_db)]) -> UserRepository:
    return UserRepository(db)


def get_session_manager(
    users: Annotated[UserRepository, Depends(get_user_repository)],
    codec: Annotated[TokenCodec, Depends(get_token_codec)],
    settings: Annotated[Settings, Depends(get_app_settings)],
) -> SessionManager:
    return SessionManager(users, codec, bcrypt_rounds=settings.BCRYPT_ROUNDS)


def _bearer_token(request: Request) -> str:
    """Extract the token from 'Authorization: Bearer <token>' or raise UnauthenticatedError."""
    auth_header = request.headers.get("Authorization")
    if not auth_header:
        raise UnauthenticatedError("No token provided")
    parts = auth_header.split(" ")
    if len(parts) != 2 or parts[0] != BEARER_PREFIX or not parts[1]:
        raise UnauthenticatedError("Invalid token format")
    return parts[1]


def _renew_from_refresh_cookie(
    request: Request,
    response: Response,
    manager: SessionManager,
    settings: Settings,
) -> CurrentUser:
    """
    Silent renewal after the access token failed to verify.

    Rotates the pair with the default (not remembered) access lifetime, sets the
    new refresh cookie, and returns the new access token in the Authorization
    response header for the client to pick up.
    """
    refresh_token = request.cookies.get(settings.REFRESH_COOKIE_NAME)
    if not refresh_token:
        raise UnauthenticatedError("Access token expired and no refresh token provided")

    try:
        result = manager.refresh(refresh_token, remember_me=False)
    except AuthError as e:
        logger.warning("Token refresh failed: %s", e.message)
        raise UnauthenticatedError("Invalid refresh token", clear_refresh_cookie=True) from e
    except Exception as e:
        logger.exception("Authentication error during token refresh")
        raise AuthInternalError() from e

    set_refresh_cookie(response, result.refresh_token, settings)
    response.headers["Authorization"] = f"{BEARER_PREFIX} {result.access_token}"
    return CurrentUser(user_id=result.user.id, role=result.user.role)


def get_current_user(
    request: Request,
    response: Response,
    codec: Annotated[TokenCodec, Depends(get_token_codec)],
    manager: Annotated[SessionManager, Depends(get_session_manager)],
    settings: Annotated[Settings, Depends(get_app_settings)],
) -> CurrentUser:
    """
    Auth gate for protected routes: require a valid Bearer access token.

    An expired or otherwise invalid access token is not rejected outright; the
    refresh-token cookie is tried first (see _renew_from_refresh_cookie).
    Raises UnauthenticatedError (401) when neither works.
    """
    token = _bearer_token(request)
    try:
        payload = codec.verify(token)
    except InvalidTokenError:
        return _renew_from_refresh_cookie(request, response, manager, settings)
    return CurrentUser(user_id=payload.user_id, role=payload.role)


def get_optional_user(
    request: Request,
    codec: Annotated[TokenCodec, Depends(get_token_codec)],
) -> CurrentUser | None:
    """Caller identity from a valid Bearer access token if present; never renews, never fails."""
    try:
        payload = codec.verify(_bearer_token(request))
    except (UnauthenticatedError, InvalidTokenError):
        return None
    return CurrentUser(user_id=payload.user_id, role=payload.role)


def require_role(role: Role) -> Callable[..., CurrentUser]:
    """Role gate factory: dependency that runs the auth gate, then requires exactly role."""

    def dependency(
        current_user: Annotated[CurrentUser, Depends(get_current_user)],
    ) -> CurrentUser:
        if current_user.role != role:
            raise ForbiddenError()
        return current_user

    return dependency


require_admin = require_role(Role.ADMIN)
