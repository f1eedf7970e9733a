"""Pydantic request/response schemas."""

from travel_api.schemas.auth import (
    AuthResponse,
    CurrentUser,
    LoginRequest,
    MessageResponse,
    RefreshRequest,
    RegisterRequest,
    Role,
    TokenPayload,
    UserPublic,
    UsersListResponse,
)
from travel_api.schemas.health import HealthResponse

__all__ = [
    "AuthResponse",
    "CurrentUser",
    "HealthResponse",
    "LoginRequest",
    "MessageResponse",
    "RefreshRequest",
    "RegisterRequest",
    "Role",
    "TokenPayload",
    "UserPublic",
    "UsersListResponse",
]
