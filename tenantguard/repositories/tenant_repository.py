# tenantguard/repositories/tenant_repository.py
from typing import Optional

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from tenantguard.core.errors import TenantAlreadyExists
from tenantguard.domain.sqlalchemy_models import Tenant


def find_tenant_by_email(session: Session, email: str) -> Optional[Tenant]:
    return session.execute(select(Tenant).where(Tenant.email == email)).scalar_one_or_none()


def find_tenant_by_id(session: Session, tenant_id: str) -> Optional[Tenant]:
    # Ids are BIGINT; anything else cannot name a tenant.
    tid = str(tenant_id).strip()
    if not (tid.isascii() and tid.isdigit()) or len(tid) > 18:
        return None
    return session.get(Tenant, int(tid))


def create_tenant(session: Session, name: str, email: str) -> Tenant:
    tenant = Tenant(name=name, email=email)
    session.add(tenant)
    try:
        session.flush()
    except IntegrityError as exc:
        raise TenantAlreadyExists() from exc
    return tenant


def delete_all_tenants(session: Session) -> int:
    return session.execute(delete(Tenant)).rowcount
