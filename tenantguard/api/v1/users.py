# tenantguard/api/v1/users.py
from fastapi import APIRouter, Depends, status

from tenantguard.core.auth import TokenClaims
from tenantguard.core.roles import Role, require_min_role, require_roles
from tenantguard.core.tenancy import TenantContext, enforce_token_tenant, resolve_tenant
from tenantguard.schemas.identity import UserCreate, UserOut
from tenantguard.services import user_service

router = APIRouter(prefix="/api/v1/users", tags=["users"])


@router.post(
    "",
    response_model=UserOut,
    response_model_by_alias=True,
    status_code=status.HTTP_201_CREATED,
)
def create_user(
    body: UserCreate,
    ctx: TenantContext = Depends(resolve_tenant),
    claims: TokenClaims = Depends(require_roles(Role.ADMIN.value)),
) -> UserOut:
    # Tenant comes from the gate; role is fixed by the service.
    enforce_token_tenant(claims, ctx)
    return user_service.create_user(body, ctx.tenant_id)


@router.get("", response_model=list[UserOut], response_model_by_alias=True)
def list_users(
    ctx: TenantContext = Depends(resolve_tenant),
    claims: TokenClaims = Depends(require_min_role(Role.USER.value)),
) -> list[UserOut]:
    enforce_token_tenant(claims, ctx)
    return user_service.list_users(ctx.tenant_id)
