"""
Pydantic schemas for tenant, user and auth endpoints.

Rules:
- ALWAYS use Pydantic models for request/response
- Response schemas never carry password hashes
- Role and tenant are never accepted from the request body for user creation
"""
from __future__ import annotations
from datetime import datetime
from typing import Literal, Optional
from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from tenantguard.core.security import MAX_PASSWORD_BYTES, password_fits


class LoginIn(BaseModel):
    """Request schema for user login."""
    email: EmailStr = Field(..., description="User email address")
    password: str = Field(..., description="User password")


class LoginResult(BaseModel):
    """Outcome of a login attempt. Failures always carry the same message and nothing else."""
    model_config = ConfigDict(populate_by_name=True)

    success: bool
    message: str
    user_id: Optional[str] = Field(default=None, alias="userId")
    access_token: Optional[str] = Field(default=None, alias="accessToken")

    def to_response(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True)


class TenantCreate(BaseModel):
    """Request schema for tenant provisioning (tenant plus founding admin)."""
    name: str = Field(..., min_length=1, description="Tenant display name")
    email: str = Field(..., min_length=1, description="Tenant contact email (unique across tenants)")
    admin_name: str = Field(..., min_length=1, alias="adminName", description="Founding admin name")
    admin_email: EmailStr = Field(..., alias="adminEmail", description="Founding admin email (unique across users)")
    admin_password: str = Field(..., min_length=1, alias="adminPassword", description="Founding admin password")

    model_config = ConfigDict(populate_by_name=True)

    @field_validator("admin_password")
    @classmethod
    def admin_password_within_limit(cls, value: str) -> str:
        if not password_fits(value):
            raise ValueError(f"Password must be at most {MAX_PASSWORD_BYTES} bytes")
        return value


class UserCreate(BaseModel):
    """
    Request schema for tenant-scoped user creation.

    Extra fields (role, tenantId, ...) are accepted and dropped.
    """
    name: str = Field(..., min_length=1, description="Full name")
    email: EmailStr = Field(..., description="User email (unique across all tenants)")
    password: str = Field(..., min_length=1, description="User password")

    model_config = ConfigDict(extra="ignore")

    @field_validator("password")
    @classmethod
    def password_within_limit(cls, value: str) -> str:
        if not password_fits(value):
            raise ValueError(f"Password must be at most {MAX_PASSWORD_BYTES} bytes")
        return value


class UserOut(BaseModel):
    """Public projection of a user."""
    model_config = ConfigDict(populate_by_name=True)

    id: str
    name: str
    email: str
    role: Literal["ADMIN", "USER"]
    tenant_id: str = Field(..., alias="tenantId")
    created_at: datetime = Field(..., alias="createdAt")

    @classmethod
    def from_user(cls, user) -> "UserOut":
        return cls(
            id=str(user.id),
            name=user.name,
            email=user.email,
            role=user.role.value,
            tenant_id=str(user.tenant_id),
            created_at=user.created_at,
        )


class TenantCreated(UserOut):
    """Founding admin projection plus a session token for that admin."""
    access_token: str = Field(..., alias="accessToken")


class TenantLookupOut(BaseModel):
    found: bool
