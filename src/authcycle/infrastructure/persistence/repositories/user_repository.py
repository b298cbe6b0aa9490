"""SqlAlchemyUserRepository - SQLAlchemy implementation of UserRepository.

Maps UserModel rows to User domain entities. Every method runs in its own
transaction and wraps SQLAlchemyError as StoreError.
"""

from datetime import UTC, datetime
from uuid import UUID

from sqlalchemy import select, update
from sqlalchemy.exc import SQLAlchemyError

from authcycle.domain.entities import User, normalize_email
from authcycle.domain.enums import UserRole
from authcycle.infrastructure.errors import StoreError
from authcycle.infrastructure.persistence.database import Database
from authcycle.infrastructure.persistence.models import UserModel


def to_user_entity(model: UserModel) -> User:
    """Convert database model to domain entity."""
    return User(
        id=model.id,
        email=model.email,
        name=model.name,
        password_hash=model.password_hash,
        role=UserRole(model.role),
        is_active=model.is_active,
        is_verified=model.is_verified,
        created_at=model.created_at,
        updated_at=model.updated_at,
    )


class SqlAlchemyUserRepository:
    """SQLAlchemy implementation of UserRepository.

    Example:
        >>> repo = SqlAlchemyUserRepository(database)
        >>> user = await repo.find_by_email("User@Example.com")
    """

    def __init__(self, database: Database) -> None:
        """Initialize repository.

        Args:
            database: Database providing transactional sessions.
        """
        self._database = database

    async def find_by_id(self, user_id: UUID) -> User | None:
        """Find user by ID."""
        try:
            async with self._database.transaction() as session:
                model = await session.get(UserModel, user_id)
                return to_user_entity(model) if model else None
        except SQLAlchemyError as e:
            raise StoreError(str(e), operation="find_user_by_id") from e

    async def find_by_email(self, email: str) -> User | None:
        """Find user by email (normalized to lowercase)."""
        stmt = select(UserModel).where(UserModel.email == normalize_email(email))
        try:
            async with self._database.transaction() as session:
                result = await session.execute(stmt)
                model = result.scalar_one_or_none()
                return to_user_entity(model) if model else None
        except SQLAlchemyError as e:
            raise StoreError(str(e), operation="find_user_by_email") from e

    async def save(self, user: User) -> None:
        """Insert a new user row.

        Raises:
            StoreError: On any database error, including a duplicate email.
        """
        model = UserModel(
            id=user.id,
            email=normalize_email(user.email),
            name=user.name,
            password_hash=user.password_hash,
            role=user.role.value,
            is_active=user.is_active,
            is_verified=user.is_verified,
            created_at=user.created_at,
            updated_at=user.updated_at,
        )
        try:
            async with self._database.transaction() as session:
                session.add(model)
        except SQLAlchemyError as e:
            raise StoreError(str(e), operation="save_user") from e

    async def mark_verified(self, user_id: UUID) -> None:
        """Set is_verified on one user, leaving every other column as stored."""
        await self._update_columns(user_id, "mark_user_verified", is_verified=True)

    async def set_password_hash(self, user_id: UUID, password_hash: str) -> None:
        """Replace one user's password hash, leaving every other column as stored."""
        await self._update_columns(
            user_id, "set_user_password_hash", password_hash=password_hash
        )

    async def _update_columns(
        self, user_id: UUID, operation: str, **values: object
    ) -> None:
        stmt = (
            update(UserModel)
            .where(UserModel.id == user_id)
            .values(**values, updated_at=datetime.now(UTC))
        )
        try:
            async with self._database.transaction() as session:
                await session.execute(stmt)
        except SQLAlchemyError as e:
            raise StoreError(str(e), operation=operation) from e
