"""
Token codec: signed, expiring JWTs carrying an account id.

- JWT creation/verification via PyJWT (HS256 by default)
- Access and refresh tokens use distinct secrets and a ``type`` claim, so
  one class can never be accepted in place of the other
- Expiry is checked against the injected clock with no leeway
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Any, Dict

import jwt

from auth.outcomes import AuthError, Result
from auth.settings import TokenSettings
from utils.security import generate_jti

logger = logging.getLogger(__name__)

REQUIRED_CLAIMS = ["sub", "iat", "exp", "jti", "type"]


class TokenClass(str, Enum):
    ACCESS = "access"
    REFRESH = "refresh"


@dataclass(frozen=True)
class TokenClaims:
    account_id: str
    issued_at: datetime
    expires_at: datetime
    jti: str
    token_type: str


def encode(
    account_id: str,
    secret: str,
    lifetime: timedelta,
    *,
    token_type: str,
    now: datetime,
    algorithm: str = "HS256",
    issuer: str | None = None,
) -> str:
    """Return a signed token for ``account_id`` expiring at ``now + lifetime``."""
    # NumericDate may be fractional; keep sub-second precision so expiry is exact
    iat = now.timestamp()
    payload: Dict[str, Any] = {
        "sub": str(account_id),
        "iat": iat,
        "exp": iat + lifetime.total_seconds(),
        "jti": generate_jti(),
        "type": token_type,
    }
    if issuer:
        payload["iss"] = issuer
    return jwt.encode(payload, secret, algorithm=algorithm)


def decode(
    token: str,
    secret: str,
    *,
    token_type: str,
    now: datetime,
    algorithm: str = "HS256",
    issuer: str | None = None,
) -> Result[TokenClaims]:
    """
    Verify ``token`` and return its claims.

    Fails with INVALID_SIGNATURE for a bad signature, a malformed token,
    missing claims or the wrong token type; with EXPIRED once ``now`` has
    reached the embedded expiry.
    """
    try:
        decoded = jwt.decode(
            token,
            secret,
            algorithms=[algorithm],
            issuer=issuer,
            options={
                "require": REQUIRED_CLAIMS,
                # expiry is judged below against the injected clock
                "verify_exp": False,
                "verify_iat": False,
                "verify_nbf": False,
            },
        )
    except jwt.InvalidTokenError as exc:
        logger.debug("Token rejected: %s", exc.__class__.__name__)
        return Result.failure(AuthError.INVALID_SIGNATURE)

    if decoded.get("type") != token_type:
        return Result.failure(AuthError.INVALID_SIGNATURE)

    try:
        exp = float(decoded["exp"])
        iat = float(decoded["iat"])
    except (TypeError, ValueError):
        return Result.failure(AuthError.INVALID_SIGNATURE)

    if now.timestamp() >= exp:
        return Result.failure(AuthError.EXPIRED)

    return Result.success(
        TokenClaims(
            account_id=str(decoded["sub"]),
            issued_at=datetime.fromtimestamp(iat, tz=timezone.utc),
            expires_at=datetime.fromtimestamp(exp, tz=timezone.utc),
            jti=str(decoded["jti"]),
            token_type=decoded["type"],
        )
    )


class TokenCodec:
    """Binds signing material and lifetimes to each token class."""

    def __init__(self, settings: TokenSettings):
        self.settings = settings

    def secret_for(self, token_class: TokenClass) -> str:
        if token_class is TokenClass.ACCESS:
            return self.settings.access_secret
        return self.settings.refresh_secret

    def lifetime_for(self, token_class: TokenClass) -> timedelta:
        if token_class is TokenClass.ACCESS:
            return self.settings.access_lifetime
        return self.settings.refresh_lifetime

    def encode(self, account_id: str, token_class: TokenClass) -> str:
        return encode(
            account_id,
            self.secret_for(token_class),
            self.lifetime_for(token_class),
            token_type=token_class.value,
            now=self.settings.clock(),
            algorithm=self.settings.algorithm,
            issuer=self.settings.issuer,
        )

    def decode(self, token: str, token_class: TokenClass) -> Result[TokenClaims]:
        return decode(
            token,
            self.secret_for(token_class),
            token_type=token_class.value,
            now=self.settings.clock(),
            algorithm=self.settings.algorithm,
            issuer=self.settings.issuer,
        )
