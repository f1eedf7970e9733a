"""Refresh-token cookie: one place that knows its name and flags."""

from starlette.responses import Response

from travel_api.core.config import Settings


def set_refresh_cookie(response: Response, refresh_token: str, settings: Settings) -> None:
    """
    Store refresh_token as an HTTP-only cookie on response.

    Max age comes from REFRESH_COOKIE_MAX_AGE_DAYS and does not follow the
    token's own expiry; an expired token inside a live cookie is rejected on use.
    """
    response.set_cookie(
        key=settings.REFRESH_COOKIE_NAME,
        value=refresh_token,
        max_age=settings.refresh_cookie_max_age_seconds,
        path="/",
        httponly=True,
        secure=settings.refresh_cookie_secure,
        samesite=settings.REFRESH_COOKIE_SAMESITE,
    )


def clear_refresh_cookie(response: Response, settings: Settings) -> None:
    """Expire the refresh cookie; flags must match the ones it was set with."""
    response.delete_cookie(
        key=settings.REFRESH_COOKIE_NAME,
        path="/",
        httponly=True,
        secure=settings.refresh_cookie_secure,
        samesite=settings.REFRESH_COOKIE_SAMESITE,
    )
