"""Pytest fixtures for the refresh auth service."""

from collections.abc import Iterator
from datetime import datetime, timedelta, timezone

import pytest
from flask import Flask

from api import create_app
from auth import AuthContext, TokenSettings
from models import DBStorage, MemoryCredentialStore
from models.credential_store import CredentialStore
from utils.security import hash_password

ACCESS_SECRET = "test-access-secret-0123456789abcdef"
REFRESH_SECRET = "test-refresh-secret-0123456789abcdef"


class FrozenClock:
    """Callable clock that only moves when told to."""

    def __init__(self, start: datetime) -> None:
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


@pytest.fixture()
def clock() -> FrozenClock:
    return FrozenClock(datetime(2030, 1, 1, 12, 0, 0, tzinfo=timezone.utc))


@pytest.fixture()
def settings(clock: FrozenClock) -> TokenSettings:
    return TokenSettings(
        access_secret=ACCESS_SECRET,
        refresh_secret=REFRESH_SECRET,
        access_lifetime=timedelta(minutes=15),
        refresh_lifetime=timedelta(days=7),
        clock=clock,
    )


def _make_store(kind: str, tmp_path) -> CredentialStore:
    if kind == "memory":
        return MemoryCredentialStore()
    storage = DBStorage(f"sqlite:///{tmp_path / 'auth-test.db'}")
    storage.reload()
    return storage


@pytest.fixture(params=["memory", "sql"])
def store(request, tmp_path) -> Iterator[CredentialStore]:
    """Every store-backed test runs against both credential stores."""
    credential_store = _make_store(request.param, tmp_path)
    yield credential_store
    if isinstance(credential_store, DBStorage):
        credential_store.drop_all()


@pytest.fixture()
def auth(settings: TokenSettings, store: CredentialStore) -> AuthContext:
    return AuthContext.build(settings, store)


@pytest.fixture()
def account(store: CredentialStore):
    return store.create("a@x.com", hash_password("p1"))


@pytest.fixture(params=["memory", "sql"])
def app(request, tmp_path, clock: FrozenClock) -> Iterator[Flask]:
    """Create the Flask app on either store with a frozen clock."""
    application = create_app(
        "testing",
        config_overrides={
            "CREDENTIAL_STORE": request.param,
            "DATABASE_URL": f"sqlite:///{tmp_path / 'api-test.db'}",
        },
        clock=clock,
    )
    yield application
    credential_store = application.extensions["auth"].store
    if isinstance(credential_store, DBStorage):
        credential_store.drop_all()


@pytest.fixture()
def client(app: Flask):
    """Test client without a cookie jar; tests send cookies explicitly."""
    return app.test_client(use_cookies=False)
