"""In-process credential store, mostly for development and tests."""
from __future__ import annotations

import threading
from datetime import datetime, timezone
from typing import Dict, Optional

from models.account import Account
from models.credential_store import CredentialStore
from utils.security import digests_match, hash_refresh_token


class MemoryCredentialStore(CredentialStore):
    """Accounts live in dicts; a single lock makes compare-and-set atomic."""

    def __init__(self) -> None:
        self._accounts: Dict[str, Account] = {}
        self._by_identity: Dict[str, str] = {}
        self._lock = threading.Lock()

    def get(self, account_id: str) -> Optional[Account]:
        return self._accounts.get(account_id)

    def get_by_identity(self, identity: str) -> Optional[Account]:
        account_id = self._by_identity.get(identity)
        return self._accounts.get(account_id) if account_id else None

    def create(self, identity: str, credential_hash: str) -> Optional[Account]:
        now = datetime.now(timezone.utc)
        with self._lock:
            if identity in self._by_identity:
                return None
            account = Account(
                identity=identity,
                credential_hash=credential_hash,
                refresh_token_hash=None,
                created_at=now,
                updated_at=now,
            )
            self._accounts[account.id] = account
            self._by_identity[identity] = account.id
        return account

    def update_credential_hash(self, account_id: str, credential_hash: str) -> None:
        with self._lock:
            account = self._accounts.get(account_id)
            if account is not None:
                account.credential_hash = credential_hash

    def set_refresh_token(self, account_id: str, token: Optional[str]) -> None:
        with self._lock:
            account = self._accounts.get(account_id)
            if account is not None:
                account.refresh_token_hash = hash_refresh_token(token) if token else None

    def compare_and_set_refresh_token(
        self, account_id: str, expected: Optional[str], new: Optional[str]
    ) -> bool:
        with self._lock:
            account = self._accounts.get(account_id)
            if account is None:
                return False
            if expected is None:
                matches = account.refresh_token_hash is None
            else:
                matches = digests_match(account.refresh_token_hash, hash_refresh_token(expected))
            if not matches:
                return False
            account.refresh_token_hash = hash_refresh_token(new) if new else None
            return True
