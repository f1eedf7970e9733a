"""Auth endpoints: register, login, refresh, and logout.

The refresh token never appears in a response body; it travels only in the
HTTP-only refresh cookie.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Request, Response, status

from travel_api.api.deps import get_app_settings, get_optional_user, get_session_manager
from travel_api.core.config import Settings
from travel_api.core.cookies import clear_refresh_cookie, set_refresh_cookie
from travel_api.schemas.auth import (
    AuthResponse,
    CurrentUser,
    LoginRequest,
    MessageResponse,
    RefreshRequest,
    RegisterRequest,
)
from travel_api.services.sessions import AuthResult, SessionManager

router = APIRouter()


def _auth_response(response: Response, result: AuthResult, settings: Settings) -> AuthResponse:
    set_refresh_cookie(response, result.refresh_token, settings)
    return AuthResponse(access_token=result.access_token, user=result.user)


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def register(
    body: RegisterRequest,
    response: Response,
    manager: Annotated[SessionManager, Depends(get_session_manager)],
    settings: Annotated[Settings, Depends(get_app_settings)],
) -> AuthResponse:
    """
    Create an account with role 'user' and sign it in.
    Returns the access token; the refresh token is set as a cookie.
    """
    result = manager.register(body.name, body.email, body.password, body.remember_me)
    return _auth_response(response, result, settings)


@router.post("/login", response_model=AuthResponse)
def login(
    body: LoginRequest,
    response: Response,
    manager: Annotated[SessionManager, Depends(get_session_manager)],
    settings: Annotated[Settings, Depends(get_app_settings)],
) -> AuthResponse:
    """
    Authenticate with email and password; returns a JWT access token.
    Include the token in the Authorization header as: Bearer <access_token>
    """
    result = manager.login(body.email, body.password, body.remember_me)
    return _auth_response(response, result, settings)


@router.post("/refresh", response_model=AuthResponse)
def refresh(
    request: Request,
    response: Response,
    manager: Annotated[SessionManager, Depends(get_session_manager)],
    settings: Annotated[Settings, Depends(get_app_settings)],
    body: RefreshRequest | None = None,
) -> AuthResponse:
    """Exchange the refresh cookie for a new access token; the cookie is rotated."""
    remember_me = body.remember_me if body is not None else False
    result = manager.refresh(request.cookies.get(settings.REFRESH_COOKIE_NAME), remember_me)
    return _auth_response(response, result, settings)


@router.post("/logout", response_model=MessageResponse)
def logout(
    response: Response,
    manager: Annotated[SessionManager, Depends(get_session_manager)],
    settings: Annotated[Settings, Depends(get_app_settings)],
    current_user: Annotated[CurrentUser | None, Depends(get_optional_user)],
) -> MessageResponse:
    """Clear the refresh cookie. Access tokens already issued stay valid until they expire."""
    manager.logout(current_user.user_id if current_user is not None else None)
    clear_refresh_cookie(response, settings)
    return MessageResponse(message="Logged out successfully")
