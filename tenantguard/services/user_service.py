"""
Service layer for tenant-scoped users.

Rules:
- tenant_id always comes from the resolved request context, never from the payload
- Users created here are always role USER
- Email is unique across all users, not per tenant
"""
from __future__ import annotations
from sqlalchemy.exc import IntegrityError

from tenantguard.core.db import transaction
from tenantguard.core.errors import TenantNotFound, UserAlreadyExists
from tenantguard.core.logger import log_security_event
from tenantguard.core.roles import Role
from tenantguard.core.security import hash_password
from tenantguard.repositories import tenant_repository, user_repo
from tenantguard.schemas.identity import UserCreate, UserOut


def create_user(payload: UserCreate, tenant_id: str) -> UserOut:
    """
    Create a regular user inside an existing tenant.

    Args:
        payload: Name, email and password; role or tenant sent by the client never reaches here
        tenant_id: Tenant resolved from the request context

    Returns:
        UserOut: public projection of the new user

    Raises:
        TenantNotFound: tenant_id does not name a tenant (nothing written)
        UserAlreadyExists: any user, in any tenant, already has this email (nothing written)
    """
    password_hash = hash_password(payload.password)

    try:
        with transaction() as session:
            tenant = tenant_repository.find_tenant_by_id(session, tenant_id)
            if tenant is None:
                raise TenantNotFound()
            if user_repo.find_user_by_email(session, payload.email) is not None:
                raise UserAlreadyExists()

            user = user_repo.create_user(
                session,
                name=payload.name,
                email=payload.email,
                password_hash=password_hash,
                role=Role.USER,
                tenant_id=tenant.id,
            )
            created = UserOut.from_user(user)
    except (TenantNotFound, UserAlreadyExists) as exc:
        log_security_event(
            action="user_create",
            result="failure",
            tenant_id=str(tenant_id),
            meta={"reason": exc.code.value},
            level="warning",
        )
        raise
    except IntegrityError as exc:
        raise UserAlreadyExists() from exc

    log_security_event(
        action="user_create",
        result="success",
        user_id=created.id,
        tenant_id=created.tenant_id,
        meta={"role": created.role},
    )
    return created


def list_users(tenant_id: str) -> list[UserOut]:
    """Public projections of every user in the tenant, oldest first."""
    with transaction() as session:
        tenant = tenant_repository.find_tenant_by_id(session, tenant_id)
        if tenant is None:
            raise TenantNotFound()
        return [UserOut.from_user(u) for u in user_repo.list_users_by_tenant(session, tenant.id)]
