"""
Access guard: bearer-token authentication for protected requests.

Stateless by design; a validly signed, unexpired access token is enough and
no store lookup happens on this path.
"""
from __future__ import annotations

from typing import Any, Mapping, Optional

from auth.codec import TokenClass, TokenCodec
from auth.outcomes import AuthError, Result

BEARER = "bearer"


def extract_bearer_token(headers: Mapping[str, Any]) -> Optional[str]:
    """Return the token from ``Authorization: Bearer <token>``, or None."""
    auth = headers.get("Authorization") or ""
    scheme, _, token = auth.strip().partition(" ")
    if scheme.lower() != BEARER:
        return None
    return token.strip() or None


class AccessGuard:

    def __init__(self, codec: TokenCodec):
        self.codec = codec

    def verify(self, token: Optional[str]) -> Result[str]:
        if not token:
            return Result.failure(AuthError.MISSING_TOKEN)
        decoded = self.codec.decode(token, TokenClass.ACCESS)
        if not decoded.ok:
            # expired or forged: either way the client must refresh
            return Result.failure(AuthError.INVALID_TOKEN)
        return Result.success(decoded.value.account_id)

    def authenticate(self, request) -> Result[str]:
        """Authenticate any object exposing a ``headers`` mapping (e.g. flask.Request)."""
        return self.verify(extract_bearer_token(request.headers))
