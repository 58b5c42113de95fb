"""
Authentication service for user login.

Rules:
- Validates credentials securely
- Returns one failure shape for every failure (no "user not found vs wrong password" distinction)
- Logs security events (login attempts); the failure reason lives only in the logs
- NEVER logs plaintext passwords, hashes or tokens
"""
from __future__ import annotations

from tenantguard.core.auth import claims_for, issue_token
from tenantguard.core.db import transaction
from tenantguard.core.errors import InvalidCredentials
from tenantguard.core.logger import log_security_event
from tenantguard.core.security import hash_password, verify_password
from tenantguard.repositories.user_repo import find_user_by_email
from tenantguard.schemas.identity import LoginResult

# Checked against for unknown emails; both failure paths cost one bcrypt verify.
_DUMMY_HASH = hash_password("tenantguard-dummy-password")


def login(email: str, password: str) -> LoginResult:
    """
    Authenticate a user and issue a session token.

    Args:
        email: User email address
        password: Plaintext password

    Returns:
        LoginResult with success, userId and accessToken, or the generic failure
    """
    with transaction() as session:
        user = find_user_by_email(session, email)
        if user is None:
            verify_password(password, _DUMMY_HASH)
            log_security_event(
                action="login",
                result="failure",
                meta={"reason": "user_not_found"},
            )
            return LoginResult(success=False, message=InvalidCredentials.message)

        if not verify_password(password, user.password_hash):
            log_security_event(
                action="login",
                result="failure",
                user_id=str(user.id),
                tenant_id=str(user.tenant_id),
                meta={"reason": "invalid_password"},
            )
            return LoginResult(success=False, message=InvalidCredentials.message)

        claims = claims_for(user)

    token = issue_token(claims)
    log_security_event(
        action="login",
        result="success",
        user_id=claims.user_id,
        tenant_id=claims.tenant_id,
        meta={"role": claims.role},
    )
    return LoginResult(
        success=True,
        message="Login successful",
        user_id=claims.user_id,
        access_token=token,
    )
