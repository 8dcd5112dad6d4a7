"""
Credential store interface.

The token lifecycle only needs lookups by id and by identity, account
creation, and an atomic compare-and-set of the live refresh token. Stores
accept refresh token *values* and are free to persist a digest instead.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional

from models.account import Account


class CredentialStore(ABC):

    @abstractmethod
    def get(self, account_id: str) -> Optional[Account]:
        """Fetch one account by id."""

    @abstractmethod
    def get_by_identity(self, identity: str) -> Optional[Account]:
        """Fetch one account by its (normalized) identity."""

    @abstractmethod
    def create(self, identity: str, credential_hash: str) -> Optional[Account]:
        """Insert an account; return None when the identity is already taken."""

    @abstractmethod
    def update_credential_hash(self, account_id: str, credential_hash: str) -> None:
        """Replace the stored credential hash (used for argon2 re-hashing)."""

    @abstractmethod
    def set_refresh_token(self, account_id: str, token: Optional[str]) -> None:
        """Unconditionally set (or clear) the live refresh token."""

    @abstractmethod
    def compare_and_set_refresh_token(
        self, account_id: str, expected: Optional[str], new: Optional[str]
    ) -> bool:
        """
        Atomically replace the live refresh token with ``new`` only if it
        currently equals ``expected``. Return True when the swap happened.
        """

    def close(self) -> None:
        """Release per-request resources. No-op by default."""
