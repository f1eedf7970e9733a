"""Authentication error taxonomy and the FastAPI handlers that render it."""

import logging

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from travel_api.core.cookies import clear_refresh_cookie

logger = logging.getLogger(__name__)


class AuthError(Exception):
    """
    Base class for failures the auth flow reports to clients.

    code and status_code pick the response; clears_refresh_cookie decides whether
    the error response also expires the refresh-token cookie.
    """

    code = "AUTH_ERROR"
    status_code = status.HTTP_401_UNAUTHORIZED
    clears_refresh_cookie = True

    def __init__(self, message: str, clear_refresh_cookie: bool | None = None) -> None:
        self.message = message
        if clear_refresh_cookie is not None:
            self.clears_refresh_cookie = clear_refresh_cookie
        super().__init__(message)


class EmailInUseError(AuthError):
    """Raised when registering with an email that already belongs to a user."""

    code = "EMAIL_IN_USE"
    status_code = status.HTTP_400_BAD_REQUEST
    clears_refresh_cookie = False

    def __init__(self, message: str = "Email already in use") -> None:
        super().__init__(message)


class InvalidCredentialsError(AuthError):
    """Raised for an unknown email or a wrong password; callers cannot tell which."""

    code = "INVALID_CREDENTIALS"

    def __init__(self, message: str = "Invalid credentials") -> None:
        super().__init__(message)


class NoTokenError(AuthError):
    code = "NO_TOKEN"

    def __init__(self, message: str = "No refresh token provided") -> None:
        super().__init__(message)


class InvalidTokenError(AuthError):
    """Raised when a token has a bad signature, bad encoding, bad claims, or has expired."""

    code = "INVALID_TOKEN"

    def __init__(self, message: str = "Invalid token") -> None:
        super().__init__(message)


class UserNotFoundError(AuthError):
    """Raised when a verified token names a user id the store no longer has."""

    code = "USER_NOT_FOUND"

    def __init__(self, message: str = "User not found") -> None:
        super().__init__(message)


class UnauthenticatedError(AuthError):
    code = "UNAUTHENTICATED"
    clears_refresh_cookie = False


class ForbiddenError(AuthError):
    code = "FORBIDDEN"
    status_code = status.HTTP_403_FORBIDDEN
    clears_refresh_cookie = False

    def __init__(self, message: str = "Insufficient permissions") -> None:
        super().__init__(message)


class AuthInternalError(AuthError):
    """Raised when the auth flow itself breaks (store or codec failure), as opposed to rejecting a token."""

    code = "INTERNAL_ERROR"
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    clears_refresh_cookie = False

    def __init__(self, message: str = "Internal server error during authentication") -> None:
        super().__init__(message)


def _auth_error_handler(request: Request, exc: AuthError) -> JSONResponse:
    headers = {"WWW-Authenticate": "Bearer"} if exc.status_code == 401 else None
    response = JSONResponse(
        status_code=exc.status_code,
        content={"code": exc.code, "detail": exc.message},
        headers=headers,
    )
    if exc.clears_refresh_cookie:
        clear_refresh_cookie(response, request.app.state.settings)
    return response


def _validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "code": "VALIDATION_FAILED",
            "detail": "Request validation failed",
            "errors": jsonable_encoder(exc.errors()),
        },
    )


def _unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(
        "Unhandled error",
        extra={"method": request.method, "path": request.url.path},
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"code": "INTERNAL_ERROR", "detail": "Internal server error"},
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Attach the auth, validation, and catch-all handlers to app."""
    app.add_exception_handler(AuthError, _auth_error_handler)
    app.add_exception_handler(RequestValidationError, _validation_error_handler)
    app.add_exception_handler(Exception, _unexpected_error_handler)
