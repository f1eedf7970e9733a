"""Request/response schemas for auth endpoints, plus the token payload and caller identity."""

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator
from pydantic.alias_generators import to_camel

# Password bounds for registration and login (login keeps the same floor so
# obviously short input is rejected before hitting bcrypt).
PASSWORD_MIN_LEN = 6
PASSWORD_MAX_LEN = 128
NAME_MAX_LEN = 255


class Role(StrEnum):
    """Closed set of roles a user can hold."""

    USER = "user"
    ADMIN = "admin"


class CamelModel(BaseModel):
    """Base for API bodies: camelCase on the wire, snake_case accepted on input."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class TokenPayload(BaseModel):
    """Identity carried inside access and refresh tokens."""

    model_config = ConfigDict(frozen=True)

    user_id: int
    role: Role


class CurrentUser(BaseModel):
    """Authenticated caller, as resolved by the auth gate for one request."""

    model_config = ConfigDict(frozen=True)

    user_id: int
    role: Role


class RegisterRequest(CamelModel):
    """Body for POST /auth/register."""

    name: str = Field(..., min_length=1, max_length=NAME_MAX_LEN, description="Display name")
    email: EmailStr = Field(..., description="Login email, unique per user")
    password: str = Field(
        ..., min_length=PASSWORD_MIN_LEN, max_length=PASSWORD_MAX_LEN, description="Password"
    )
    remember_me: bool = Field(default=False, description="Issue a long-lived access token")

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Name is required")
        return v.strip()


class LoginRequest(CamelModel):
    """Credentials for login."""

    email: EmailStr = Field(..., description="Login email")
    password: str = Field(
        ..., min_length=PASSWORD_MIN_LEN, max_length=PASSWORD_MAX_LEN, description="Password"
    )
    remember_me: bool = Field(default=False, description="Issue a long-lived access token")


class RefreshRequest(CamelModel):
    """Optional body for POST /auth/refresh."""

    remember_me: bool = False


class UserPublic(CamelModel):
    """User fields safe to return to clients (never the password hash)."""

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, from_attributes=True
    )

    id: int
    email: str
    name: str
    role: Role


class AuthResponse(CamelModel):
    """Access token and user returned by register, login, and refresh."""

    access_token: str = Field(..., description="JWT access token; send as Authorization: Bearer <token>")
    user: UserPublic


class MessageResponse(BaseModel):
    message: str


class UsersListResponse(BaseModel):
    """Response for GET /admin/users (admin only)."""

    users: list[UserPublic]
