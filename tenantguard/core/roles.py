"""
Role checks for tenantguard.

Rules:
- Roles are ADMIN and USER (uppercase, stored as-is)
- The founding user of a tenant is ADMIN; every other user is USER
- Never trust role or tenant information from the client; always from token claims
"""
from __future__ import annotations
from enum import Enum
from typing import Callable

from fastapi import Depends

from tenantguard.core.auth import TokenClaims, auth_required
from tenantguard.core.errors import http_error, ErrorCode


class Role(str, Enum):
    ADMIN = "ADMIN"
    USER = "USER"


# Role hierarchy (lower number = higher privilege)
ROLE_HIERARCHY = {
    Role.ADMIN.value: 0,
    Role.USER.value: 1,
}


def _forbidden(claims: TokenClaims, meta: dict):
    return http_error(
        status_code=403,
        code=ErrorCode.FORBIDDEN,
        message="You do not have permission for this action",
        meta={**meta, "current_role": claims.role, "tenant_id": claims.tenant_id},
    )


def require_roles(*allowed: str) -> Callable:
    """
    Dependency factory ensuring the caller's role (from the verified token) is in `allowed`.

    Example:
        @router.post("/endpoint")
        def endpoint(claims: TokenClaims = Depends(require_roles("ADMIN"))):
            ...
    """
    allowed_values = [Role(a).value for a in allowed]

    def _inner(claims: TokenClaims = Depends(auth_required)) -> TokenClaims:
        if claims.role not in allowed_values:
            raise _forbidden(claims, {"required_roles": allowed_values})
        return claims
    return _inner


def require_min_role(min_role: str) -> Callable:
    """
    Dependency factory ensuring the caller's role meets a minimum privilege level.

    Role hierarchy: ADMIN > USER
    """
    if min_role not in ROLE_HIERARCHY:
        raise ValueError(f"Invalid role: {min_role}. Must be one of {list(ROLE_HIERARCHY.keys())}")

    min_level = ROLE_HIERARCHY[min_role]

    def _inner(claims: TokenClaims = Depends(auth_required)) -> TokenClaims:
        # Unknown roles = lowest privilege
        if ROLE_HIERARCHY.get(claims.role, 999) > min_level:
            raise _forbidden(claims, {"required_min_role": min_role})
        return claims
    return _inner
