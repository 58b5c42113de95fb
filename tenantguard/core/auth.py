"""
Session token issuance and verification.

Rules:
- Sign tokens with the private key from settings.JWT_SECRET (never hardcoded)
- Claims are exactly: userId, email, name, role, tenantId
- Tokens expire only when settings.JWT_EXP_MIN is configured
- Every verification failure (bad signature, corruption, expiry, missing claims)
  collapses to one outcome: None at the function level, one fixed 401 at the boundary
- Only accept tokens via secure headers (Authorization: Bearer <token>)
"""
from __future__ import annotations
import datetime
from typing import Any, Literal, Optional

import jwt
from fastapi import Request
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from tenantguard.core.config import settings
from tenantguard.core.errors import http_error, ErrorCode

CLAIM_KEYS = ("userId", "email", "name", "role", "tenantId")


class TokenClaims(BaseModel):
    """Claim set carried by a session token."""
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    user_id: str = Field(..., alias="userId", min_length=1)
    email: str
    name: str
    role: Literal["ADMIN", "USER"]
    tenant_id: str = Field(..., alias="tenantId", min_length=1)

    def to_payload(self) -> dict[str, str]:
        return self.model_dump(by_alias=True)


def claims_for(user: Any) -> TokenClaims:
    """Build token claims from a User row (or anything with the same attributes)."""
    role = user.role.value if hasattr(user.role, "value") else str(user.role)
    return TokenClaims(
        user_id=str(user.id),
        email=user.email,
        name=user.name,
        role=role,
        tenant_id=str(user.tenant_id),
    )


def issue_token(claims: TokenClaims) -> str:
    """
    Sign a compact JWT binding the claim set.

    Args:
        claims: Claims to embed

    Returns:
        Encoded JWT token string
    """
    payload: dict[str, Any] = claims.to_payload()
    if settings.JWT_EXP_MIN:
        now = datetime.datetime.now(datetime.timezone.utc)
        payload["iat"] = now
        payload["exp"] = now + datetime.timedelta(minutes=settings.JWT_EXP_MIN)
    return jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def verify_token(token: str) -> Optional[TokenClaims]:
    """
    Verify a token and return its claims, or None when it is invalid for any reason.
    """
    options = {"require": ["exp"]} if settings.JWT_EXP_MIN else {}
    try:
        payload = jwt.decode(
            token,
            settings.JWT_SECRET,
            algorithms=[settings.JWT_ALGORITHM],
            options=options,
        )
        return TokenClaims.model_validate({k: payload.get(k) for k in CLAIM_KEYS})
    except (jwt.InvalidTokenError, ValidationError):
        return None


def auth_required(req: Request) -> TokenClaims:
    """
    FastAPI dependency that validates the bearer token from the Authorization header.

    Raises:
        HTTPException: 401 if the token is missing or invalid (single message for every reason)
    """
    auth = req.headers.get("authorization") or ""
    claims = None
    if auth.lower().startswith("bearer "):
        claims = verify_token(auth.split(" ", 1)[1].strip())
    if claims is None:
        raise http_error(
            status_code=401,
            code=ErrorCode.UNAUTHORIZED,
            message="Missing or invalid token",
        )
    return claims
