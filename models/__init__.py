"""Persistence layer: account model and credential stores."""
from models.account import Account
from models.credential_store import CredentialStore
from models.db_storage import DBStorage
from models.memory_storage import MemoryCredentialStore


def build_store(kind: str = "sql", database_url: str | None = None) -> CredentialStore:
    """Create and initialise a credential store by name ("sql" or "memory")."""
    kind = (kind or "sql").lower()
    if kind == "memory":
        return MemoryCredentialStore()
    if kind == "sql":
        storage = DBStorage(database_url)
        storage.reload()
        return storage
    raise ValueError(f"Unknown credential store: {kind}")


__all__ = [
    "Account",
    "CredentialStore",
    "DBStorage",
    "MemoryCredentialStore",
    "build_store",
]
