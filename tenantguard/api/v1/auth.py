"""
Authentication endpoints.

- Validate input with Pydantic schemas
- Login failures are indistinguishable: 401 with one fixed body
"""
from __future__ import annotations
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field

from tenantguard.core.auth import TokenClaims
from tenantguard.core.roles import Role, require_min_role
from tenantguard.core.tenancy import TenantContext, enforce_token_tenant, resolve_tenant
from tenantguard.schemas.identity import LoginIn
from tenantguard.services.auth_service import login as login_user

router = APIRouter(prefix="/api/v1/auth", tags=["auth"])


class MeOut(BaseModel):
    """Response schema for /me endpoint."""
    model_config = ConfigDict(populate_by_name=True)

    success: bool
    user_id: str = Field(..., alias="userId")
    email: str
    name: str
    role: str
    tenant_id: str = Field(..., alias="tenantId")


@router.post("/login")
def login(body: LoginIn) -> JSONResponse:
    """
    Authenticate user and issue a session token.

    Returns:
        200 with success, message, userId and accessToken, or
        401 with {"success": false, "message": "Invalid credentials"}
    """
    result = login_user(body.email, body.password)
    return JSONResponse(
        status_code=200 if result.success else 401,
        content=result.to_response(),
    )


@router.get("/me", response_model=MeOut, response_model_by_alias=True)
def me(
    ctx: TenantContext = Depends(resolve_tenant),
    claims: TokenClaims = Depends(require_min_role(Role.USER.value)),
) -> dict:
    enforce_token_tenant(claims, ctx)
    return {"success": True, **claims.model_dump()}
