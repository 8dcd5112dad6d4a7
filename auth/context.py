from __future__ import annotations

from dataclasses import dataclass

from auth.accounts import AccountService
from auth.codec import TokenCodec
from auth.guard import AccessGuard
from auth.issuer import TokenIssuer
from auth.rotator import SessionRotator
from auth.settings import TokenSettings
from models.credential_store import CredentialStore


@dataclass
class AuthContext:
    """Everything the HTTP layer needs, built once per application."""

    settings: TokenSettings
    store: CredentialStore
    codec: TokenCodec
    issuer: TokenIssuer
    rotator: SessionRotator
    guard: AccessGuard
    accounts: AccountService

    @classmethod
    def build(cls, settings: TokenSettings, store: CredentialStore) -> "AuthContext":
        codec = TokenCodec(settings)
        issuer = TokenIssuer(codec)
        rotator = SessionRotator(store, codec, issuer)
        return cls(
            settings=settings,
            store=store,
            codec=codec,
            issuer=issuer,
            rotator=rotator,
            guard=AccessGuard(codec),
            accounts=AccountService(store, rotator),
        )
