"""TokenStore protocol (port) for session credentials and single-use tokens.

Row presence is the liveness state. Every method that removes rows reports
how many it removed, and the managers use that report to decide races:
the caller whose delete removed the row owns the transition; a caller
whose delete removed nothing lost it.

Atomicity requirements:
    - rotate_session_credential: delete old + insert new is all-or-nothing
    - delete_session_credentials_for_user: one indivisible delete-many
    - replace_single_use_token: delete prior tokens of the same type for the
      user + insert new is all-or-nothing

Implementations:
    - SqlAlchemyTokenStore: src/authcycle/infrastructure/persistence/repositories/
    - InMemoryTokenStore: src/authcycle/infrastructure/persistence/memory_store.py
"""

from datetime import datetime
from typing import Protocol
from uuid import UUID

from authcycle.domain.entities import (
    SessionCredentialRecord,
    SessionCredentialWithUser,
    SingleUseTokenRecord,
    SingleUseTokenWithUser,
)
from authcycle.domain.enums import SingleUseTokenType


class TokenStore(Protocol):
    """Protocol for token persistence operations.

    Token Lifecycle (session credentials):
        1. Created on login (7-day expiration)
        2. Rotated on every refresh (old row deleted, new row inserted)
        3. Deleted on logout, logout-all, replay detection or sweep

    Token Lifecycle (single-use tokens):
        1. Created on registration / resend / forgot-password
        2. Superseded by a newer token of the same type
        3. Deleted on consumption, expiry or sweep
    """

    # ------------------------------------------------------------------
    # Session credentials
    # ------------------------------------------------------------------

    async def save_session_credential(self, record: SessionCredentialRecord) -> None:
        """Insert a session credential row."""
        ...

    async def find_session_credential(
        self, token: str
    ) -> SessionCredentialWithUser | None:
        """Look up a session credential joined with its owning user.

        Does NOT check expiration - caller must verify expires_at.
        """
        ...

    async def delete_session_credential(self, token: str) -> bool:
        """Delete one session credential row.

        Returns:
            True if a row was removed, False if none matched.
        """
        ...

    async def rotate_session_credential(
        self,
        old_token: str,
        new_record: SessionCredentialRecord,
    ) -> bool:
        """Atomically replace a session credential.

        Deletes the row for old_token and inserts new_record as one
        all-or-nothing operation.

        Returns:
            True if rotation committed. False if the old row was already gone
            (a concurrent rotation won); nothing is inserted in that case.
        """
        ...

    async def delete_session_credentials_for_user(self, user_id: UUID) -> int:
        """Delete every session credential owned by a user.

        Returns:
            Number of rows deleted (0 is not an error).
        """
        ...

    async def delete_expired_session_credentials(self, now: datetime) -> int:
        """Delete session credentials with expires_at <= now.

        Returns:
            Number of rows deleted.
        """
        ...

    # ------------------------------------------------------------------
    # Single-use tokens
    # ------------------------------------------------------------------

    async def replace_single_use_token(self, record: SingleUseTokenRecord) -> int:
        """Supersede the user's tokens of record.token_type with record.

        Returns:
            Number of prior tokens deleted.
        """
        ...

    async def find_single_use_token(
        self,
        token_type: SingleUseTokenType,
        token: str,
    ) -> SingleUseTokenWithUser | None:
        """Look up a single-use token joined with its owning user.

        Does NOT check expiration - caller must verify expires_at.
        """
        ...

    async def delete_single_use_token(
        self,
        token_type: SingleUseTokenType,
        token: str,
    ) -> bool:
        """Delete one single-use token.

        Returns:
            True if a row was removed, False if none matched.
        """
        ...

    async def delete_expired_single_use_tokens(
        self,
        token_type: SingleUseTokenType,
        now: datetime,
    ) -> int:
        """Delete tokens of a type with expires_at <= now."""
        ...
