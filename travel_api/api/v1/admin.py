"""Admin-only endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends

from travel_api.api.deps import get_user_repository, require_admin
from travel_api.schemas.auth import CurrentUser, UsersListResponse
from travel_api.services.sessions import to_public
from travel_api.services.users import UserRepository

router = APIRouter()


@router.get("/users", response_model=UsersListResponse)
def list_users(
    _admin: Annotated[CurrentUser, Depends(require_admin)],
    users: Annotated[UserRepository, Depends(get_user_repository)],
) -> UsersListResponse:
    """List all users (admin only)."""
    return UsersListResponse(users=[to_public(u) for u in users.list_all()])
