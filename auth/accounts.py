"""
Account operations around the token lifecycle:
- register: argon2-hash the credential and create the account
- login: verify the credential and start a session through the rotator
- logout: revoke the live refresh token through the rotator
"""
from __future__ import annotations

import logging
from typing import Optional

from auth.issuer import TokenPair
from auth.outcomes import AuthError, Result
from auth.rotator import SessionRotator
from models.account import Account
from models.credential_store import CredentialStore
from utils.security import DUMMY_PASSWORD_HASH, hash_password, needs_rehash, verify_password

logger = logging.getLogger(__name__)


def normalize_identity(value: str) -> str:
    return value.strip().lower()


class AccountService:

    def __init__(self, store: CredentialStore, rotator: SessionRotator):
        self.store = store
        self.rotator = rotator

    def register(self, identity: str, credential: str) -> Result[Account]:
        identity = normalize_identity(identity)
        if self.store.get_by_identity(identity) is not None:
            return Result.failure(AuthError.ALREADY_REGISTERED)
        account = self.store.create(identity, hash_password(credential))
        if account is None:
            # lost a race with a concurrent registration
            return Result.failure(AuthError.ALREADY_REGISTERED)
        logger.info("Account registered: %s", account.id)
        return Result.success(account)

    def login(self, identity: str, credential: str) -> Result[TokenPair]:
        account = self.store.get_by_identity(normalize_identity(identity))
        if account is None:
            # same argon2 cost as a wrong credential, so timing does not reveal the identity
            verify_password(credential, DUMMY_PASSWORD_HASH)
            logger.info("Login failed")
            return Result.failure(AuthError.AUTHENTICATION_FAILED)
        if not verify_password(credential, account.credential_hash):
            logger.info("Login failed")
            return Result.failure(AuthError.AUTHENTICATION_FAILED)

        if needs_rehash(account.credential_hash):
            self.store.update_credential_hash(account.id, hash_password(credential))

        return Result.success(self.rotator.start_session(account.id))

    def logout(
        self, refresh_token: Optional[str], account_id: Optional[str] = None
    ) -> Result[None]:
        """
        Revoke the server-side refresh token.

        The refresh cookie is only sent to the refresh path, so a logout
        request may instead identify the account through its access token.
        """
        if refresh_token:
            ended = self.rotator.end_session(refresh_token)
            # a stale cookie must not leave someone else's rotated token live
            if ended.ok or not account_id:
                return ended
        if account_id and self.store.get(account_id) is not None:
            self.rotator.end_account_session(account_id)
            return Result.success(None)
        return Result.failure(AuthError.NO_TOKEN)
