"""SqlAlchemyTokenStore - SQLAlchemy implementation of TokenStore.

Every multi-statement operation runs inside one Database.transaction(),
so it commits as a whole or not at all.

Rotation:
    DELETE FROM refresh_tokens WHERE token = :old
    -> rowcount must be exactly 1, otherwise the transaction is rolled back
       and rotation reports False (a concurrent rotation already consumed
       the row; PostgreSQL row locks make the losing DELETE wait for the
       winner's commit and then match nothing)
    INSERT INTO refresh_tokens (...) VALUES (...)
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import datetime
from uuid import UUID

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from authcycle.domain.entities import (
    SessionCredentialRecord,
    SessionCredentialWithUser,
    SingleUseTokenRecord,
    SingleUseTokenWithUser,
)
from authcycle.domain.enums import SingleUseTokenType
from authcycle.infrastructure.errors import StoreError
from authcycle.infrastructure.persistence.database import Database
from authcycle.infrastructure.persistence.models import (
    SINGLE_USE_TOKEN_MODELS,
    RefreshTokenModel,
    UserModel,
)
from authcycle.infrastructure.persistence.repositories.user_repository import (
    to_user_entity,
)


class _RotationLost(Exception):
    """Raised inside the rotation transaction to force a rollback."""


def _session_record(model: RefreshTokenModel) -> SessionCredentialRecord:
    return SessionCredentialRecord(
        token=model.token,
        user_id=model.user_id,
        expires_at=model.expires_at,
        created_at=model.created_at,
    )


class SqlAlchemyTokenStore:
    """SQLAlchemy implementation of TokenStore.

    Example:
        >>> store = SqlAlchemyTokenStore(database)
        >>> rotated = await store.rotate_session_credential(old, new_record)
    """

    def __init__(self, database: Database) -> None:
        """Initialize store.

        Args:
            database: Database providing transactional sessions.
        """
        self._database = database

    @asynccontextmanager
    async def _transaction(self, operation: str) -> AsyncIterator[AsyncSession]:
        try:
            async with self._database.transaction() as session:
                yield session
        except SQLAlchemyError as e:
            raise StoreError(
                str(e),
                operation=operation,
                details={"error_type": type(e).__name__},
            ) from e

    # ------------------------------------------------------------------
    # Session credentials
    # ------------------------------------------------------------------

    async def save_session_credential(self, record: SessionCredentialRecord) -> None:
        """Insert a session credential row."""
        async with self._transaction("save_session_credential") as session:
            session.add(
                RefreshTokenModel(
                    token=record.token,
                    user_id=record.user_id,
                    expires_at=record.expires_at,
                    created_at=record.created_at,
                )
            )

    async def find_session_credential(
        self, token: str
    ) -> SessionCredentialWithUser | None:
        """Look up a session credential joined with its owning user."""
        stmt = (
            select(RefreshTokenModel, UserModel)
            .join(UserModel, UserModel.id == RefreshTokenModel.user_id)
            .where(RefreshTokenModel.token == token)
        )
        async with self._transaction("find_session_credential") as session:
            row = (await session.execute(stmt)).one_or_none()
            if row is None:
                return None
            token_model, user_model = row
            return SessionCredentialWithUser(
                record=_session_record(token_model),
                user=to_user_entity(user_model),
            )

    async def delete_session_credential(self, token: str) -> bool:
        """Delete one session credential row."""
        stmt = delete(RefreshTokenModel).where(RefreshTokenModel.token == token)
        async with self._transaction("delete_session_credential") as session:
            result = await session.execute(stmt)
            return result.rowcount == 1

    async def rotate_session_credential(
        self,
        old_token: str,
        new_record: SessionCredentialRecord,
    ) -> bool:
        """Atomically replace old_token's row with new_record."""
        stmt = delete(RefreshTokenModel).where(RefreshTokenModel.token == old_token)
        try:
            async with self._transaction("rotate_session_credential") as session:
                result = await session.execute(stmt)
                if result.rowcount != 1:
                    raise _RotationLost
                session.add(
                    RefreshTokenModel(
                        token=new_record.token,
                        user_id=new_record.user_id,
                        expires_at=new_record.expires_at,
                        created_at=new_record.created_at,
                    )
                )
        except _RotationLost:
            return False
        return True

    async def delete_session_credentials_for_user(self, user_id: UUID) -> int:
        """Delete every session credential owned by a user."""
        stmt = delete(RefreshTokenModel).where(RefreshTokenModel.user_id == user_id)
        async with self._transaction("delete_session_credentials_for_user") as session:
            result = await session.execute(stmt)
            return result.rowcount

    async def delete_expired_session_credentials(self, now: datetime) -> int:
        """Delete session credentials with expires_at <= now."""
        stmt = delete(RefreshTokenModel).where(RefreshTokenModel.expires_at <= now)
        async with self._transaction("delete_expired_session_credentials") as session:
            result = await session.execute(stmt)
            return result.rowcount

    # ------------------------------------------------------------------
    # Single-use tokens
    # ------------------------------------------------------------------

    async def replace_single_use_token(self, record: SingleUseTokenRecord) -> int:
        """Delete the user's tokens of this type and insert record, atomically."""
        model_cls = SINGLE_USE_TOKEN_MODELS[record.token_type]
        stmt = delete(model_cls).where(model_cls.user_id == record.user_id)
        async with self._transaction("replace_single_use_token") as session:
            result = await session.execute(stmt)
            session.add(
                model_cls(
                    token=record.token,
                    user_id=record.user_id,
                    expires_at=record.expires_at,
                    created_at=record.created_at,
                )
            )
            return result.rowcount

    async def find_single_use_token(
        self,
        token_type: SingleUseTokenType,
        token: str,
    ) -> SingleUseTokenWithUser | None:
        """Look up a single-use token joined with its owning user."""
        model_cls = SINGLE_USE_TOKEN_MODELS[token_type]
        stmt = (
            select(model_cls, UserModel)
            .join(UserModel, UserModel.id == model_cls.user_id)
            .where(model_cls.token == token)
        )
        async with self._transaction("find_single_use_token") as session:
            row = (await session.execute(stmt)).one_or_none()
            if row is None:
                return None
            token_model, user_model = row
            return SingleUseTokenWithUser(
                record=SingleUseTokenRecord(
                    token=token_model.token,
                    user_id=token_model.user_id,
                    token_type=token_type,
                    expires_at=token_model.expires_at,
                    created_at=token_model.created_at,
                ),
                user=to_user_entity(user_model),
            )

    async def delete_single_use_token(
        self,
        token_type: SingleUseTokenType,
        token: str,
    ) -> bool:
        """Delete one single-use token."""
        model_cls = SINGLE_USE_TOKEN_MODELS[token_type]
        stmt = delete(model_cls).where(model_cls.token == token)
        async with self._transaction("delete_single_use_token") as session:
            result = await session.execute(stmt)
            return result.rowcount == 1

    async def delete_expired_single_use_tokens(
        self,
        token_type: SingleUseTokenType,
        now: datetime,
    ) -> int:
        """Delete tokens of a type with expires_at <= now."""
        model_cls = SINGLE_USE_TOKEN_MODELS[token_type]
        stmt = delete(model_cls).where(model_cls.expires_at <= now)
        async with self._transaction("delete_expired_single_use_tokens") as session:
            result = await session.execute(stmt)
            return result.rowcount
