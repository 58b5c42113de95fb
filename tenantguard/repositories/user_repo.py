# tenantguard/repositories/user_repo.py
from typing import Optional

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from tenantguard.core.errors import UserAlreadyExists
from tenantguard.core.roles import Role
from tenantguard.domain.sqlalchemy_models import User


def find_user_by_email(session: Session, email: str) -> Optional[User]:
    return session.execute(select(User).where(User.email == email)).scalar_one_or_none()


def create_user(
    session: Session,
    *,
    name: str,
    email: str,
    password_hash: str,
    role: Role,
    tenant_id: int,
) -> User:
    user = User(
        name=name,
        email=email,
        password_hash=password_hash,
        role=role,
        tenant_id=tenant_id,
    )
    session.add(user)
    try:
        session.flush()
    except IntegrityError as exc:
        raise UserAlreadyExists() from exc
    return user


def list_users_by_tenant(session: Session, tenant_id: int) -> list[User]:
    rows = session.execute(
        select(User).where(User.tenant_id == tenant_id).order_by(User.id)
    )
    return list(rows.scalars())


def delete_all_users(session: Session) -> int:
    return session.execute(delete(User)).rowcount
