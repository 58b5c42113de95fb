"""
SQLAlchemy models for the tenantguard credential store.

Every user belongs to exactly one tenant; tenant_id is set at creation and never reassigned.
Email is unique across all users and, separately, across all tenants.
"""
from __future__ import annotations
from datetime import datetime, timezone
from sqlalchemy import (
    BigInteger, Column, Enum as SQLEnum, ForeignKey, Integer, String, TIMESTAMP
)
from sqlalchemy.orm import declarative_base, relationship, validates

from tenantguard.core.roles import Role

Base = declarative_base()

# BIGINT autoincrement on Postgres, INTEGER PRIMARY KEY (rowid alias) on SQLite
_Id = BigInteger().with_variant(Integer, "sqlite")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Tenant(Base):
    """
    Tenant model representing an isolated customer/organization.

    Owns zero or more users. Destroyed only by the bulk purge, which removes users first.
    """
    __tablename__ = "tenants"

    id = Column(_Id, primary_key=True, autoincrement=True)
    name = Column(String, nullable=False)
    email = Column(String, unique=True, nullable=False, index=True)
    created_at = Column(TIMESTAMP(timezone=True), nullable=False, default=_utcnow)

    users = relationship("User", back_populates="tenant", passive_deletes=True)

    def __repr__(self) -> str:
        return f"<Tenant(id={self.id}, name={self.name})>"


class User(Base):
    """User model. Passwords are stored only as bcrypt hashes."""
    __tablename__ = "users"

    id = Column(_Id, primary_key=True, autoincrement=True)
    name = Column(String, nullable=False)
    email = Column(String, unique=True, nullable=False, index=True)
    password_hash = Column(String, nullable=False)
    role = Column(SQLEnum(Role, name="user_role"), nullable=False, default=Role.USER)
    tenant_id = Column(_Id, ForeignKey("tenants.id"), nullable=False, index=True)
    created_at = Column(TIMESTAMP(timezone=True), nullable=False, default=_utcnow)

    tenant = relationship("Tenant", back_populates="users")

    @validates("tenant_id")
    def _tenant_id_is_immutable(self, key, value):
        if self.tenant_id is not None and self.tenant_id != value:
            raise ValueError("User.tenant_id cannot be reassigned")
        return value

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email={self.email}, role={self.role})>"
