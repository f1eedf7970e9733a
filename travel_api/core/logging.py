"""Logging setup, sensitive-field masking, auth event and request logging."""

import logging
import time
import uuid
from collections.abc import Awaitable, Callable
from typing import Any

from starlette.requests import Request
from starlette.responses import Response

from travel_api.core.config import Settings

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"
LOG_DATEFMT = "%Y-%m-%dT%H:%M:%SZ"

# Any key containing one of these (case-insensitive) is masked before logging.
SENSITIVE_KEY_PARTS = ("password", "token", "authorization", "cookie", "secret")
MASK = "********"

REQUEST_ID_HEADER = "X-Request-ID"

auth_logger = logging.getLogger("travel_api.auth")
request_logger = logging.getLogger("travel_api.request")


def configure_logging(settings: Settings) -> None:
    """Configure root logging once for the process."""
    logging.basicConfig(
        level=settings.LOG_LEVEL,
        format=LOG_FORMAT,
        datefmt=LOG_DATEFMT,
    )


def mask_sensitive(data: Any) -> Any:
    """Return a copy of data with values under sensitive keys replaced, recursing into dicts and lists."""
    if isinstance(data, dict):
        masked: dict[str, Any] = {}
        for key, value in data.items():
            if any(part in str(key).lower() for part in SENSITIVE_KEY_PARTS):
                masked[key] = MASK
            else:
                masked[key] = mask_sensitive(value)
        return masked
    if isinstance(data, list):
        return [mask_sensitive(item) for item in data]
    return data


def log_auth_event(event: str, **details: Any) -> None:
    """Log an authentication event (login_failed, refresh_token_success, ...) with masked details."""
    masked = mask_sensitive(details)
    rendered = " ".join(f"{k}={v}" for k, v in masked.items())
    auth_logger.info(
        "Authentication event: %s %s",
        event,
        rendered,
        extra={"auth_event": event, "auth_details": masked},
    )


async def log_requests(
    request: Request, call_next: Callable[[Request], Awaitable[Response]]
) -> Response:
    """HTTP middleware: log method, path, status, and duration; echo a request id."""
    request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex[:12]
    start = time.perf_counter()
    try:
        response = await call_next(request)
    except Exception:
        duration_ms = (time.perf_counter() - start) * 1000
        request_logger.error(
            "%s %s failed after %.1fms request_id=%s",
            request.method,
            request.url.path,
            duration_ms,
            request_id,
        )
        raise
    duration_ms = (time.perf_counter() - start) * 1000
    level = logging.WARNING if response.status_code >= 400 else logging.INFO
    request_logger.log(
        level,
        "%s %s -> %s in %.1fms request_id=%s",
        request.method,
        request.url.path,
        response.status_code,
        duration_ms,
        request_id,
        extra={"request_id": request_id, "status_code": response.status_code},
    )
    response.headers[REQUEST_ID_HEADER] = request_id
    return response
