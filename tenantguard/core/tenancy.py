"""
Tenant resolution gate.

Two layers:
- TenantHeaderMiddleware: syntactic check (header present and non-empty) on every route
  outside the allow-list. Never touches the store.
- resolve_tenant: FastAPI dependency that looks the tenant up and hands handlers an explicit
  TenantContext. Read-only; performs no writes.

Rules:
- Tenant identity for tenant-scoped work comes from the gate, never from request bodies
- A token issued for one tenant is not accepted on a request resolved to another
"""
from __future__ import annotations
import fnmatch
from dataclasses import dataclass
from typing import Iterable, Mapping, Optional, Tuple

from fastapi import Request
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import Response
from starlette.types import ASGIApp

from tenantguard.core.auth import TokenClaims
from tenantguard.core.config import settings
from tenantguard.core.db import transaction
from tenantguard.core.errors import ErrorCode, TenantIdentifierMissing, TenantNotFound, http_error
from tenantguard.core.logger import log_security_event
from tenantguard.repositories.tenant_repository import find_tenant_by_id

# (method, path pattern) pairs that skip the gate entirely.
EXEMPT_ROUTES: Tuple[Tuple[str, str], ...] = (
    ("POST", "/api/v1/tenants"),
    ("POST", "/api/v1/auth/*"),
    ("GET", "/"),
)


@dataclass(frozen=True)
class TenantContext:
    """Tenant resolved for the current request."""
    tenant_id: str
    name: str


def extract_tenant_id(headers: Mapping[str, str], header: Optional[str] = None) -> Optional[str]:
    """
    Read the tenant identifier from request headers.

    Header names match case-insensitively; a blank value counts as absent.
    """
    wanted = (header or settings.TENANT_HEADER).lower()
    for key, value in headers.items():
        if key.lower() == wanted:
            value = value.strip()
            return value or None
    return None


def is_exempt(method: str, path: str, exempt: Iterable[Tuple[str, str]] = EXEMPT_ROUTES) -> bool:
    normalized = path.rstrip("/") or "/"
    return any(
        method.upper() == m and fnmatch.fnmatchcase(normalized, pattern)
        for m, pattern in exempt
    )


class TenantHeaderMiddleware(BaseHTTPMiddleware):
    """Rejects requests without a tenant header before any handler runs."""

    def __init__(self, app: ASGIApp, exempt: Iterable[Tuple[str, str]] = EXEMPT_ROUTES):
        super().__init__(app)
        self.exempt = tuple(exempt)

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        if request.method == "OPTIONS" or is_exempt(request.method, request.url.path, self.exempt):
            return await call_next(request)

        if extract_tenant_id(request.headers) is None:
            log_security_event(
                action="tenant_gate",
                result="denied",
                meta={"reason": "missing_header", "path": request.url.path},
                level="warning",
            )
            err = TenantIdentifierMissing()
            return JSONResponse(status_code=err.status_code, content=err.to_body())

        return await call_next(request)


def resolve_tenant(request: Request) -> TenantContext:
    """
    FastAPI dependency: validate the tenant header against the store.

    Raises:
        TenantIdentifierMissing: header absent or blank (no store round-trip)
        TenantNotFound: header does not name an existing tenant
    """
    tenant_id = extract_tenant_id(request.headers)
    if tenant_id is None:
        raise TenantIdentifierMissing()

    with transaction() as session:
        tenant = find_tenant_by_id(session, tenant_id)
        if tenant is None:
            log_security_event(
                action="tenant_gate",
                result="denied",
                meta={"reason": "unknown_tenant", "path": request.url.path},
                level="warning",
            )
            raise TenantNotFound()
        return TenantContext(tenant_id=str(tenant.id), name=tenant.name)


def enforce_token_tenant(claims: TokenClaims, ctx: TenantContext) -> TokenClaims:
    """Reject a token whose tenant differs from the one resolved for the request."""
    if claims.tenant_id != ctx.tenant_id:
        log_security_event(
            action="tenant_gate",
            result="denied",
            user_id=claims.user_id,
            tenant_id=ctx.tenant_id,
            meta={"reason": "token_tenant_mismatch"},
            level="warning",
        )
        raise http_error(
            status_code=403,
            code=ErrorCode.FORBIDDEN,
            message="Wrong tenant in token",
        )
    return claims
