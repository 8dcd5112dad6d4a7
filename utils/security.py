"""
security helpers:
- Argon2 password hashing via argon2-cffi
- SHA-256 digests for stored refresh tokens
- JTI generation for token identifiers
"""
from __future__ import annotations

import hashlib
import hmac
import uuid

from argon2 import PasswordHasher
from argon2.exceptions import InvalidHashError, VerificationError

ph = PasswordHasher()

# verified against when the identity is unknown, to keep login timing uniform
DUMMY_PASSWORD_HASH = ph.hash("dummy-credential-never-matches")


def hash_password(password: str) -> str:
    """Hash a plaintext password using Argon2
    """
    return ph.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    """ Verify a plaintext password using argon2
    """
    try:
        return ph.verify(password_hash, password)
    except (VerificationError, InvalidHashError):
        return False


def needs_rehash(password_hash: str) -> bool:
    return ph.check_needs_rehash(password_hash)


def generate_jti() -> str:
    """Generate a unique JTI (JWT ID).
    """
    return str(uuid.uuid4())


def hash_refresh_token(token: str) -> str:
    return hashlib.sha256(token.encode("utf-8")).hexdigest()


def digests_match(left: str | None, right: str | None) -> bool:
    """Constant-time comparison; a missing side never matches."""
    if left is None or right is None:
        return False
    return hmac.compare_digest(left, right)
