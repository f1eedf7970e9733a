"""Endpoints for the authenticated caller's own account."""

from typing import Annotated

from fastapi import APIRouter, Depends

from travel_api.api.deps import get_current_user, get_user_repository
from travel_api.core.errors import UserNotFoundError
from travel_api.schemas.auth import CurrentUser, UserPublic
from travel_api.services.sessions import to_public
from travel_api.services.users import UserRepository

router = APIRouter()


@router.get("/me", response_model=UserPublic)
def get_me(
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    users: Annotated[UserRepository, Depends(get_user_repository)],
) -> UserPublic:
    """Return the caller's public profile."""
    user = users.get_by_id(current_user.user_id)
    if user is None:
        raise UserNotFoundError()
    return to_public(user)
