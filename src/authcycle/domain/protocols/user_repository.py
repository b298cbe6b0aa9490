"""UserRepository protocol (port) for domain layer.

Following hexagonal architecture:
- Domain defines what it needs (protocol/port)
- Infrastructure provides implementation (adapter)

Implementations:
    - SqlAlchemyUserRepository: src/authcycle/infrastructure/persistence/repositories/
    - InMemoryUserRepository: src/authcycle/infrastructure/persistence/memory_store.py
"""

from typing import Protocol
from uuid import UUID

from authcycle.domain.entities import User


class UserRepository(Protocol):
    """Protocol for user persistence operations."""

    async def find_by_id(self, user_id: UUID) -> User | None:
        """Find user by ID.

        Args:
            user_id: User's unique identifier.

        Returns:
            User if found, None otherwise.
        """
        ...

    async def find_by_email(self, email: str) -> User | None:
        """Find user by email (case-insensitive).

        Args:
            email: Email address.

        Returns:
            User if found, None otherwise.
        """
        ...

    async def save(self, user: User) -> None:
        """Create a new user.

        Args:
            user: User entity to persist.
        """
        ...

    async def mark_verified(self, user_id: UUID) -> None:
        """Set the verified flag and updated_at of one user.

        Other columns keep their stored values, so a concurrent password
        change is never overwritten. No-op for an unknown user_id.
        """
        ...

    async def set_password_hash(self, user_id: UUID, password_hash: str) -> None:
        """Replace the password hash and updated_at of one user.

        Other columns keep their stored values. No-op for an unknown user_id.
        """
        ...
