"""Caller identity dependency and optional API-key middleware.

Authentication happens upstream: the gateway in front of the Direct API
forwards the authenticated user id and roles as request headers. When an
API key is configured, every ``/api/`` request must also carry it in
``X-API-Key``.
"""

from __future__ import annotations

import hmac
import logging

from fastapi import Header, Request
from fastapi.responses import JSONResponse, Response

from direct_api.config import get_config
from direct_api.errors import UnauthorizedError
from direct_api.query.values import parse_int
from direct_api.security import AccessLevel, Identity

logger = logging.getLogger(__name__)

USER_ID_HEADER = "X-Direct-User-Id"
ROLES_HEADER = "X-Direct-Roles"

_PUBLIC_PATH_PREFIXES = (
    "/health",
    "/docs",
    "/redoc",
    "/openapi.json",
)


def _parse_roles(raw: str | None) -> frozenset[AccessLevel]:
    """Parse a comma separated role list, ignoring unknown roles."""
    levels = set()
    for role in (raw or "").split(","):
        role = role.strip().upper()
        if role in AccessLevel.__members__:
            levels.add(AccessLevel[role])
    return frozenset(levels)


def get_identity(
    user_id: str | None = Header(None, alias=USER_ID_HEADER),
    roles: str | None = Header(None, alias=ROLES_HEADER),
) -> Identity:
    """FastAPI dependency resolving the caller's identity from headers.

    Raises:
        UnauthorizedError: If the user id header is missing or not an integer.
    """
    parsed = parse_int(user_id.strip()) if user_id else None
    if parsed is None:
        raise UnauthorizedError.from_code("E-5001")
    return Identity(user_id=parsed, access_levels=_parse_roles(roles))


def get_expected_api_key() -> str:
    """Return configured API key; empty string means the check is disabled."""
    return get_config().auth.api_key.strip()


def should_authenticate(path: str) -> bool:
    """Return True when this path should be protected by API-key auth."""
    if path.startswith(_PUBLIC_PATH_PREFIXES):
        return False
    return path.startswith("/api/")


async def maybe_require_api_key(request: Request, call_next) -> Response:
    """FastAPI middleware entrypoint for optional API-key auth."""
    if request.method.upper() == "OPTIONS":
        return await call_next(request)

    expected_key = get_expected_api_key()
    if not expected_key or not should_authenticate(request.url.path):
        return await call_next(request)

    provided_key = request.headers.get("X-API-Key", "")
    if not provided_key or not hmac.compare_digest(provided_key, expected_key):
        logger.warning("Rejected request to %s: invalid or missing API key", request.url.path)
        error = UnauthorizedError.from_code("E-5001")
        return JSONResponse(status_code=error.http_status, content=error.to_response())
    return await call_next(request)
