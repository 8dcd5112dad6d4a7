"""Dual-token (access + refresh) authentication core."""
from auth.accounts import AccountService, normalize_identity
from auth.codec import TokenClaims, TokenClass, TokenCodec
from auth.context import AuthContext
from auth.guard import AccessGuard, extract_bearer_token
from auth.issuer import TokenIssuer, TokenPair
from auth.outcomes import AuthError, Result
from auth.rotator import SessionRotator
from auth.settings import TokenSettings

__all__ = [
    "AccessGuard",
    "AccountService",
    "AuthContext",
    "AuthError",
    "Result",
    "SessionRotator",
    "TokenClaims",
    "TokenClass",
    "TokenCodec",
    "TokenIssuer",
    "TokenPair",
    "TokenSettings",
    "extract_bearer_token",
    "normalize_identity",
]
