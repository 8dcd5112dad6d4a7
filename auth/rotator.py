"""
Session rotator: the refresh-token state machine.

    received -> signature checked -> account resolved -> live match checked -> rotated

Any step may end in a rejection. Rejections are returned as values with a
specific ``AuthError`` kind; the HTTP layer flattens them to one outcome.
"""
from __future__ import annotations

import logging
from typing import Optional

from auth.codec import TokenClass, TokenCodec
from auth.issuer import TokenIssuer, TokenPair
from auth.outcomes import AuthError, Result
from models.credential_store import CredentialStore

logger = logging.getLogger(__name__)


class SessionRotator:

    def __init__(self, store: CredentialStore, codec: TokenCodec, issuer: TokenIssuer):
        self.store = store
        self.codec = codec
        self.issuer = issuer

    def _reject(self, error: AuthError, account_id: Optional[str] = None) -> Result[TokenPair]:
        logger.info("Refresh rejected: %s (account=%s)", error.value, account_id or "-")
        return Result.failure(error)

    def start_session(self, account_id: str) -> TokenPair:
        """Issue a pair at login; the new refresh token supersedes any previous one."""
        pair = self.issuer.issue(account_id)
        self.store.set_refresh_token(account_id, pair.refresh_token)
        logger.info("Session started for account=%s", account_id)
        return pair

    def rotate(self, presented: Optional[str]) -> Result[TokenPair]:
        """Exchange the live refresh token for a new pair, invalidating it."""
        if not presented:
            return self._reject(AuthError.NO_TOKEN)

        decoded = self.codec.decode(presented, TokenClass.REFRESH)
        if not decoded.ok:
            logger.debug("Refresh token failed to decode: %s", decoded.error.value)
            return self._reject(AuthError.INVALID_TOKEN)
        account_id = decoded.value.account_id

        account = self.store.get(account_id)
        if account is None:
            return self._reject(AuthError.UNKNOWN_ACCOUNT, account_id)

        if not account.holds_refresh_token(presented):
            return self._reject(AuthError.STALE_TOKEN, account_id)

        pair = self.issuer.issue(account_id)
        # a concurrent rotation may have won since the match above
        if not self.store.compare_and_set_refresh_token(
            account_id, expected=presented, new=pair.refresh_token
        ):
            return self._reject(AuthError.STALE_TOKEN, account_id)

        logger.info("Refresh token rotated for account=%s", account_id)
        return Result.success(pair)

    def end_session(self, presented: Optional[str]) -> Result[None]:
        """Revoke the live refresh token if ``presented`` is still it."""
        if not presented:
            return Result.failure(AuthError.NO_TOKEN)

        decoded = self.codec.decode(presented, TokenClass.REFRESH)
        if not decoded.ok:
            return Result.failure(AuthError.INVALID_TOKEN)
        account_id = decoded.value.account_id

        if not self.store.compare_and_set_refresh_token(account_id, expected=presented, new=None):
            return Result.failure(AuthError.STALE_TOKEN)

        logger.info("Refresh token revoked for account=%s", account_id)
        return Result.success(None)

    def end_account_session(self, account_id: str) -> None:
        """Revoke whatever refresh token is live for ``account_id``."""
        self.store.set_refresh_token(account_id, None)
        logger.info("Refresh token revoked for account=%s", account_id)
