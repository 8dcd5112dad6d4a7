from __future__ import annotations

from typing import NamedTuple

from auth.codec import TokenClass, TokenCodec


class TokenPair(NamedTuple):
    access_token: str
    refresh_token: str


class TokenIssuer:
    """Mints (access, refresh) pairs. Persisting the refresh token is up to the caller."""

    def __init__(self, codec: TokenCodec):
        self.codec = codec

    def issue(self, account_id: str) -> TokenPair:
        return TokenPair(
            access_token=self.codec.encode(account_id, TokenClass.ACCESS),
            refresh_token=self.codec.encode(account_id, TokenClass.REFRESH),
        )
