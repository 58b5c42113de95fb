"""
Tenant endpoints.

- POST is on the gate's allow-list: it is how a tenant comes to exist
- DELETE wipes every user and tenant (reset utility); the x-tenant header must
  still name an existing tenant
"""
from __future__ import annotations
from fastapi import APIRouter, Depends, Query, Response, status

from tenantguard.core.tenancy import TenantContext, resolve_tenant
from tenantguard.schemas.identity import TenantCreate, TenantCreated, TenantLookupOut
from tenantguard.services import tenant_service

router = APIRouter(prefix="/api/v1/tenants", tags=["tenants"])


@router.post(
    "",
    response_model=TenantCreated,
    response_model_by_alias=True,
    status_code=status.HTTP_201_CREATED,
)
def create_tenant(body: TenantCreate) -> TenantCreated:
    """
    Create a tenant and its founding admin in one transaction.

    Returns:
        The admin's public projection and an access token for the admin
    """
    return tenant_service.create_tenant(
        name=body.name,
        tenant_email=body.email,
        admin_name=body.admin_name,
        admin_email=body.admin_email,
        admin_password=body.admin_password,
    )


@router.get("/lookup", response_model=TenantLookupOut)
def lookup_tenant(
    email: str = Query(..., min_length=1, description="Tenant contact email"),
    ctx: TenantContext = Depends(resolve_tenant),
) -> dict:
    return {"found": tenant_service.tenant_exists(email)}


@router.delete("", status_code=status.HTTP_204_NO_CONTENT)
def delete_all_tenants(ctx: TenantContext = Depends(resolve_tenant)) -> Response:
    tenant_service.delete_all_tenants(requested_by=ctx.tenant_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
