"""SQLAlchemy store adapters."""

from authcycle.infrastructure.persistence.repositories.token_store import (
    SqlAlchemyTokenStore,
)
from authcycle.infrastructure.persistence.repositories.user_repository import (
    SqlAlchemyUserRepository,
)

__all__ = ["SqlAlchemyTokenStore", "SqlAlchemyUserRepository"]
