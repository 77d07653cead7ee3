from __future__ import annotations

import logging
from typing import Callable, Optional

import jwt
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from .errors import Forbidden, Unauthorized
from .models import Principal, TaskEntity
from .settings import get_settings

logger = logging.getLogger(__name__)

_security = HTTPBearer(auto_error=False)


def _principal_from_claims(claims: dict) -> Principal:
    raw_id = claims.get("id")
    role = claims.get("role")
    # JSON numbers may arrive as floats; booleans are not identities
    if isinstance(raw_id, bool) or not isinstance(raw_id, (int, float)):
        raise Unauthorized("invalid token claims")
    if isinstance(raw_id, float) and not raw_id.is_integer():
        raise Unauthorized("invalid token claims")
    if not isinstance(role, str) or not role:
        raise Unauthorized("invalid token claims")
    email = claims.get("email")
    return Principal(id=int(raw_id), role=role, email=email if isinstance(email, str) else None)


# PUBLIC_INTERFACE
def get_current_principal(
    creds: Optional[HTTPAuthorizationCredentials] = Depends(_security),
) -> Principal:
    """
    Authenticate the caller from the `Authorization: Bearer <jwt>` header.

    The token is verified with JWT_SECRET_KEY / JWT_ALGORITHM and must carry an
    integer `id` and a string `role` claim; `email` is optional.

    Raises:
        Unauthorized: if the header is missing, the token does not verify
            (bad signature, expired, malformed) or the claims are incomplete.
    """
    if creds is None or not creds.credentials:
        raise Unauthorized("missing bearer token")

    settings = get_settings()
    try:
        claims = jwt.decode(
            creds.credentials,
            settings.jwt_secret_key,
            algorithms=[settings.jwt_algorithm],
        )
    except jwt.ExpiredSignatureError:
        logger.warning("rejected expired bearer token")
        raise Unauthorized("token has expired") from None
    except jwt.InvalidTokenError as exc:
        logger.warning("rejected bearer token: %s", exc)
        raise Unauthorized("invalid token") from exc
    return _principal_from_claims(claims)


# PUBLIC_INTERFACE
def require_roles(*roles: str) -> Callable[..., Principal]:
    """
    Return a FastAPI dependency that authenticates the caller and lets the
    request through only if the caller's role is one of `roles`.

    Usage:
        user_only = require_roles("user")
        @router.post("/")
        def handler(principal: Principal = Depends(user_only)): ...

    The dependency raises Forbidden (403) on a role mismatch.
    """
    allowed = frozenset(roles)

    def _enforce(principal: Principal = Depends(get_current_principal)) -> Principal:
        if principal.role not in allowed:
            logger.warning("user %s with role %r denied; requires %s", principal.id, principal.role, sorted(allowed))
            raise Forbidden()
        return principal

    return _enforce


# PUBLIC_INTERFACE
def ensure_task_owner(task: TaskEntity, principal: Principal) -> None:
    """
    Let a task mutation proceed only when the caller created the task.

    Raises:
        Unauthorized: if the task belongs to another identity.
    """
    if task["user_id"] != principal.id:
        logger.warning("user %s may not modify task %s owned by %s", principal.id, task["id"], task["user_id"])
        raise Unauthorized()
