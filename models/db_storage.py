from typing import Optional

from sqlalchemy import create_engine, event, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import scoped_session, sessionmaker

from models.account import Account
from models.base_model import Base
from models.credential_store import CredentialStore
from utils.security import hash_refresh_token

DEFAULT_DATABASE_URL = "sqlite:///auth.db"


def is_unique_violation(error: IntegrityError) -> bool:
    """Return True when the IntegrityError indicates a unique-constraint conflict."""
    original = getattr(error, "orig", None)
    sqlstate = getattr(original, "sqlstate", None) or getattr(original, "pgcode", None)
    if sqlstate == "23505":
        return True
    message = str(original or error).lower()
    return "duplicate key" in message or "unique constraint" in message


def _token_hash(token: Optional[str]) -> Optional[str]:
    return hash_refresh_token(token) if token is not None else None


class DBStorage(CredentialStore):
    __engine = None
    __session = None

    def __init__(self, database_url: Optional[str] = None, echo: bool = False):
        """Initialize engine for the given URL (SQLite by default)"""
        self.__engine = create_engine(
            database_url or DEFAULT_DATABASE_URL, echo=echo, pool_pre_ping=True
        )
        if self.__engine.url.get_backend_name() == "sqlite":
            # Enable SQLite foreign keys
            @event.listens_for(self.__engine, "connect")
            def _set_sqlite_pragma(dbapi_connection, connection_record):
                cursor = dbapi_connection.cursor()
                cursor.execute("PRAGMA foreign_keys=ON")
                cursor.close()

    def reload(self):
        """Create tables and start session"""
        Base.metadata.create_all(self.__engine)
        session_factory = sessionmaker(bind=self.__engine, expire_on_commit=False)
        self.__session = scoped_session(session_factory)

    def save(self):
        """Commit session"""
        try:
            self.__session.commit()
        except SQLAlchemyError:
            self.__session.rollback()
            raise

    def close(self):
        """Remove session (for API teardown)"""
        self.__session.remove()

    def drop_all(self):
        """Drop every table (test teardown)"""
        self.__session.remove()
        Base.metadata.drop_all(self.__engine)
        self.__engine.dispose()

    # expose the SQLAlchemy session for advanced querying
    def get_session(self):
        return self.__session

    def get(self, account_id):
        """Fetch one account by id, refreshed from the database"""
        return self.__session.get(Account, account_id, populate_existing=True)

    def get_by_identity(self, identity):
        stmt = (
            select(Account)
            .where(Account.identity == identity)
            .execution_options(populate_existing=True)
        )
        return self.__session.execute(stmt).scalar_one_or_none()

    def create(self, identity, credential_hash):
        account = Account(identity=identity, credential_hash=credential_hash)
        self.__session.add(account)
        try:
            self.__session.commit()
        except IntegrityError as exc:
            self.__session.rollback()
            if is_unique_violation(exc):
                return None
            raise
        return account

    def update_credential_hash(self, account_id, credential_hash):
        self.__session.execute(
            update(Account)
            .where(Account.id == account_id)
            .values(credential_hash=credential_hash)
        )
        self.save()

    def set_refresh_token(self, account_id, token):
        self.__session.execute(
            update(Account)
            .where(Account.id == account_id)
            .values(refresh_token_hash=_token_hash(token))
        )
        self.save()

    def compare_and_set_refresh_token(self, account_id, expected, new):
        """
        Single UPDATE gated on the currently stored digest; the row count
        tells whether this caller won.
        """
        expected_hash = _token_hash(expected)
        if expected_hash is None:
            gate = Account.refresh_token_hash.is_(None)
        else:
            gate = Account.refresh_token_hash == expected_hash
        result = self.__session.execute(
            update(Account)
            .where(Account.id == account_id, gate)
            .values(refresh_token_hash=_token_hash(new))
        )
        self.save()
        return result.rowcount == 1
