"""
Account model: one row per registered identity.
Fields:
- identity (unique, normalized e-mail)
- credential_hash (argon2)
- refresh_token_hash (sha256 of the single live refresh token, or NULL)
"""
from sqlalchemy import Column, String

from models.base_model import BaseModel, Base
from utils.security import digests_match, hash_refresh_token


class Account(BaseModel, Base):
    __tablename__ = "accounts"

    identity = Column(String(255), nullable=False, unique=True, index=True)
    credential_hash = Column(String(255), nullable=False)
    refresh_token_hash = Column(String(64), nullable=True)

    @property
    def has_live_refresh_token(self) -> bool:
        return self.refresh_token_hash is not None

    def holds_refresh_token(self, token: str) -> bool:
        """True when ``token`` is this account's live refresh token."""
        return digests_match(self.refresh_token_hash, hash_refresh_token(token))

    def __repr__(self):
        return f"<Account identity={self.identity}>"
