"""
Service layer for tenant provisioning.

Rules:
- A tenant and its founding admin are created in one transaction, or not at all
- Uniqueness checks and writes share that transaction; the unique constraints are the backstop
- Keep clean separation: API → service → repository → DB
"""
from __future__ import annotations
from typing import Optional
from sqlalchemy.exc import IntegrityError

from tenantguard.core.auth import claims_for, issue_token
from tenantguard.core.db import transaction
from tenantguard.core.errors import TenantAlreadyExists, UserAlreadyExists
from tenantguard.core.logger import log_security_event
from tenantguard.core.roles import Role
from tenantguard.core.security import hash_password
from tenantguard.repositories import tenant_repository, user_repo
from tenantguard.schemas.identity import TenantCreated, UserOut


def create_tenant(
    name: str,
    tenant_email: str,
    admin_name: str,
    admin_email: str,
    admin_password: str,
) -> TenantCreated:
    """
    Create a tenant together with its founding ADMIN user.

    Args:
        name: Tenant display name
        tenant_email: Tenant contact email (unique across tenants)
        admin_name: Founding admin name
        admin_email: Founding admin email (unique across users)
        admin_password: Founding admin plaintext password

    Returns:
        TenantCreated: the admin's public projection plus an access token

    Raises:
        TenantAlreadyExists: a tenant already uses tenant_email (nothing written)
        UserAlreadyExists: a user already uses admin_email (nothing written)
        StoreUnavailable: the store could not complete the transaction
    """
    password_hash = hash_password(admin_password)

    try:
        with transaction() as session:
            if tenant_repository.find_tenant_by_email(session, tenant_email) is not None:
                raise TenantAlreadyExists()
            if user_repo.find_user_by_email(session, admin_email) is not None:
                raise UserAlreadyExists()

            tenant = tenant_repository.create_tenant(session, name=name, email=tenant_email)
            admin = user_repo.create_user(
                session,
                name=admin_name,
                email=admin_email,
                password_hash=password_hash,
                role=Role.ADMIN,
                tenant_id=tenant.id,
            )
            projection = UserOut.from_user(admin)
            claims = claims_for(admin)
    except (TenantAlreadyExists, UserAlreadyExists) as exc:
        log_security_event(
            action="tenant_create",
            result="failure",
            meta={"reason": exc.code.value},
            level="warning",
        )
        raise
    except IntegrityError as exc:
        # Deferred constraint at commit; attributed to the tenant row.
        log_security_event(
            action="tenant_create",
            result="failure",
            meta={"reason": "constraint_violation"},
            level="warning",
        )
        raise TenantAlreadyExists() from exc

    log_security_event(
        action="tenant_create",
        result="success",
        user_id=projection.id,
        tenant_id=projection.tenant_id,
    )
    return TenantCreated(**projection.model_dump(), access_token=issue_token(claims))


def tenant_exists(email: str) -> bool:
    """Whether a tenant with this contact email exists."""
    with transaction() as session:
        return tenant_repository.find_tenant_by_email(session, email) is not None


def delete_all_tenants(requested_by: Optional[str] = None) -> None:
    """
    Remove every user, then every tenant, in one transaction.

    Reset utility: unconditional and total.
    """
    with transaction() as session:
        users = user_repo.delete_all_users(session)
        tenants = tenant_repository.delete_all_tenants(session)

    log_security_event(
        action="tenants_purge",
        result="success",
        tenant_id=requested_by,
        meta={"users_deleted": users, "tenants_deleted": tenants},
        level="warning",
    )
