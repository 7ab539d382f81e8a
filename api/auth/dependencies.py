"""
Auth dependencies for protected FastAPI routes.
"""

from __future__ import annotations

import logging

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from core.config import Settings
from core.errors import forbidden, unauthorized

from . import permissions, repository, security
from .permissions import Identity

logger = logging.getLogger(__name__)

# Errors are raised below so they keep the `{error}` body; the scheme only documents the header.
bearer_scheme = HTTPBearer(auto_error=False, scheme_name="bearerAuth", bearerFormat="JWT")


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def _extract_bearer_token(authorization: str | None) -> str:
    raw = (authorization or "").strip()
    if not raw:
        raise unauthorized("Missing Authorization header.")

    parts = raw.split(" ", 1)
    if len(parts) != 2:
        raise unauthorized("Invalid Authorization header format.")

    scheme, token = parts[0].strip().lower(), parts[1].strip()
    if scheme != "bearer" or not token:
        raise unauthorized("Authorization must be: Bearer <token>.")
    return token


async def get_bearer_token(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> str:
    if credentials is not None and credentials.credentials.strip():
        return credentials.credentials.strip()
    # No usable credentials; the raw header tells which message applies.
    return _extract_bearer_token(request.headers.get("Authorization"))


async def get_current_identity(
    access_token: str = Depends(get_bearer_token),
    settings: Settings = Depends(get_settings),
) -> Identity:
    try:
        payload = security.decode_access_token(access_token, settings=settings)
    except security.AuthSecurityError as exc:
        raise unauthorized(str(exc)) from exc

    subject = str(payload.get("sub") or "").strip()
    if not subject:
        raise unauthorized("Invalid access token subject.")
    return Identity(user_id=subject)


async def get_privileged_identity(identity: Identity = Depends(get_current_identity)) -> Identity:
    """
    Resolve the caller's role without failing; admins come back with `is_admin`.
    """
    role = await repository.get_user_role(identity.user_id)
    decision = permissions.check_admin(role)
    return Identity(user_id=identity.user_id, is_admin=isinstance(decision, permissions.Allowed))


async def require_admin(identity: Identity = Depends(get_current_identity)) -> Identity:
    role = await repository.get_user_role(identity.user_id)
    decision = permissions.check_admin(role)
    if isinstance(decision, permissions.Denied):
        logger.info("admin_denied user_id=%s role=%s", identity.user_id, role)
        raise forbidden(decision.reason)
    return Identity(user_id=identity.user_id, is_admin=True)
