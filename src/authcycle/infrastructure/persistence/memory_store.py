"""In-memory UserRepository and TokenStore implementations.

Dict-backed adapters with the same semantics as the SQL store, for
development and tests. One asyncio.Lock guards every mutation, so each
method is indivisible with respect to any other call on the same store.

Returned User entities are copies: mutating one changes nothing stored, the
same as rows loaded from the database. Writes touch only the named field.
"""

import asyncio
from dataclasses import replace
from datetime import UTC, datetime
from uuid import UUID

from authcycle.domain.entities import (
    SessionCredentialRecord,
    SessionCredentialWithUser,
    SingleUseTokenRecord,
    SingleUseTokenWithUser,
    User,
    normalize_email,
)
from authcycle.domain.enums import SingleUseTokenType


class InMemoryUserRepository:
    """Dict-backed UserRepository."""

    def __init__(self) -> None:
        self._users: dict[UUID, User] = {}
        self._lock = asyncio.Lock()

    async def find_by_id(self, user_id: UUID) -> User | None:
        user = self._users.get(user_id)
        return replace(user) if user else None

    async def find_by_email(self, email: str) -> User | None:
        normalized = normalize_email(email)
        for user in self._users.values():
            if user.email == normalized:
                return replace(user)
        return None

    async def save(self, user: User) -> None:
        """Insert a new user.

        Raises:
            ValueError: If the id or email is already taken (unique constraint).
        """
        async with self._lock:
            email = normalize_email(user.email)
            if user.id in self._users or any(
                u.email == email for u in self._users.values()
            ):
                raise ValueError(f"duplicate user: {email}")
            self._users[user.id] = replace(user, email=email)

    async def mark_verified(self, user_id: UUID) -> None:
        async with self._lock:
            if user_id in self._users:
                self._users[user_id] = replace(
                    self._users[user_id],
                    is_verified=True,
                    updated_at=datetime.now(UTC),
                )

    async def set_password_hash(self, user_id: UUID, password_hash: str) -> None:
        async with self._lock:
            if user_id in self._users:
                self._users[user_id] = replace(
                    self._users[user_id],
                    password_hash=password_hash,
                    updated_at=datetime.now(UTC),
                )


class InMemoryTokenStore:
    """Dict-backed TokenStore.

    Joins against the given InMemoryUserRepository the way the SQL store
    joins against the users table.
    """

    def __init__(self, users: InMemoryUserRepository) -> None:
        self._users = users
        self._sessions: dict[str, SessionCredentialRecord] = {}
        self._single_use: dict[SingleUseTokenType, dict[str, SingleUseTokenRecord]] = {
            token_type: {} for token_type in SingleUseTokenType
        }
        self._lock = asyncio.Lock()

    # Session credentials

    async def save_session_credential(self, record: SessionCredentialRecord) -> None:
        async with self._lock:
            if record.token in self._sessions:
                raise ValueError("duplicate session credential")
            self._sessions[record.token] = record

    async def find_session_credential(
        self, token: str
    ) -> SessionCredentialWithUser | None:
        record = self._sessions.get(token)
        if record is None:
            return None
        user = await self._users.find_by_id(record.user_id)
        if user is None:
            return None
        return SessionCredentialWithUser(record=record, user=user)

    async def delete_session_credential(self, token: str) -> bool:
        async with self._lock:
            return self._sessions.pop(token, None) is not None

    async def rotate_session_credential(
        self,
        old_token: str,
        new_record: SessionCredentialRecord,
    ) -> bool:
        async with self._lock:
            if self._sessions.pop(old_token, None) is None:
                return False
            self._sessions[new_record.token] = new_record
            return True

    async def delete_session_credentials_for_user(self, user_id: UUID) -> int:
        async with self._lock:
            doomed = [t for t, r in self._sessions.items() if r.user_id == user_id]
            for token in doomed:
                del self._sessions[token]
            return len(doomed)

    async def delete_expired_session_credentials(self, now: datetime) -> int:
        async with self._lock:
            doomed = [t for t, r in self._sessions.items() if r.is_expired(now)]
            for token in doomed:
                del self._sessions[token]
            return len(doomed)

    # Single-use tokens

    async def replace_single_use_token(self, record: SingleUseTokenRecord) -> int:
        async with self._lock:
            bucket = self._single_use[record.token_type]
            doomed = [t for t, r in bucket.items() if r.user_id == record.user_id]
            for token in doomed:
                del bucket[token]
            bucket[record.token] = record
            return len(doomed)

    async def find_single_use_token(
        self,
        token_type: SingleUseTokenType,
        token: str,
    ) -> SingleUseTokenWithUser | None:
        record = self._single_use[token_type].get(token)
        if record is None:
            return None
        user = await self._users.find_by_id(record.user_id)
        if user is None:
            return None
        return SingleUseTokenWithUser(record=record, user=user)

    async def delete_single_use_token(
        self,
        token_type: SingleUseTokenType,
        token: str,
    ) -> bool:
        async with self._lock:
            return self._single_use[token_type].pop(token, None) is not None

    async def delete_expired_single_use_tokens(
        self,
        token_type: SingleUseTokenType,
        now: datetime,
    ) -> int:
        async with self._lock:
            bucket = self._single_use[token_type]
            doomed = [t for t, r in bucket.items() if r.is_expired(now)]
            for token in doomed:
                del bucket[token]
            return len(doomed)
