"""
Password hashing and verification utilities.

Rules:
- Always use a strong, salted hashing algorithm (bcrypt)
- Work factor comes from settings.BCRYPT_ROUNDS
- bcrypt reads at most 72 bytes; longer passwords are refused, never truncated
- NEVER log plaintext passwords or hashes
- A malformed stored hash verifies as False, exactly like a mismatch
"""
from __future__ import annotations
from typing import Optional
import bcrypt

from tenantguard.core.config import settings

MAX_PASSWORD_BYTES = 72


def password_fits(plain: str) -> bool:
    """Whether the UTF-8 encoding of `plain` is within bcrypt's input limit."""
    return len(plain.encode()) <= MAX_PASSWORD_BYTES


def hash_password(plain: str, rounds: Optional[int] = None) -> str:
    """
    Hash a plaintext password using bcrypt.

    Args:
        plain: Plaintext password
        rounds: Work factor override (defaults to settings.BCRYPT_ROUNDS)

    Returns:
        Hashed password string

    Raises:
        ValueError: password is longer than MAX_PASSWORD_BYTES once encoded
    """
    if not password_fits(plain):
        raise ValueError(f"Password cannot be longer than {MAX_PASSWORD_BYTES} bytes")
    salt = bcrypt.gensalt(rounds=rounds or settings.BCRYPT_ROUNDS)
    return bcrypt.hashpw(plain.encode(), salt).decode()


def verify_password(plain: str, hashed: Optional[str]) -> bool:
    """
    Verify a plaintext password against a hash.

    Args:
        plain: Plaintext password to verify
        hashed: Hashed password to compare against

    Returns:
        True if password matches, False otherwise (including unreadable hashes
        and passwords too long to have been hashed)
    """
    if not hashed or not password_fits(plain):
        return False
    try:
        return bcrypt.checkpw(plain.encode(), hashed.encode())
    except (ValueError, TypeError):
        return False
