"""Persistence adapters.

- Database: async SQLAlchemy engine and transactions
- SqlAlchemyUserRepository / SqlAlchemyTokenStore: PostgreSQL store
- InMemoryUserRepository / InMemoryTokenStore: dict-backed store
"""

from authcycle.infrastructure.persistence.database import Database
from authcycle.infrastructure.persistence.memory_store import (
    InMemoryTokenStore,
    InMemoryUserRepository,
)
from authcycle.infrastructure.persistence.repositories import (
    SqlAlchemyTokenStore,
    SqlAlchemyUserRepository,
)

__all__ = [
    "Database",
    "InMemoryTokenStore",
    "InMemoryUserRepository",
    "SqlAlchemyTokenStore",
    "SqlAlchemyUserRepository",
]
