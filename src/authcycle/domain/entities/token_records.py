"""Stored token records.

Row presence is the liveness state: a record that exists in the store is
live, and consuming, rotating, revoking or sweeping a token deletes its
row. Records carry no status flag. A signature-valid session credential
with no row has already been rotated away.

Expiry is absolute: `expires_at` is fixed at creation and never extended.
The boundary is exclusive, so a record whose `expires_at` equals "now" is
already expired.
"""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from uuid import UUID

from authcycle.domain.entities.user import User
from authcycle.domain.enums import SingleUseTokenType


def _is_expired(expires_at: datetime, now: datetime | None) -> bool:
    return expires_at <= (now or datetime.now(UTC))


@dataclass(frozen=True, slots=True, kw_only=True)
class SessionCredentialRecord:
    """Stored session (refresh) credential.

    Attributes:
        token: Signed session credential value (lookup key, unique).
        user_id: Owning user.
        expires_at: Absolute expiry (UTC).
        created_at: Issuance time (UTC).
    """

    token: str
    user_id: UUID
    expires_at: datetime
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))

    def is_expired(self, now: datetime | None = None) -> bool:
        """Check expiry (exclusive boundary: expires_at == now is expired)."""
        return _is_expired(self.expires_at, now)


@dataclass(frozen=True, slots=True, kw_only=True)
class SingleUseTokenRecord:
    """Stored verification or password reset token.

    Attributes:
        token: Opaque random value (lookup key, unique per type).
        user_id: Owning user.
        token_type: Which store the record lives in.
        expires_at: Absolute expiry (UTC).
        created_at: Issuance time (UTC).
    """

    token: str
    user_id: UUID
    token_type: SingleUseTokenType
    expires_at: datetime
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))

    def is_expired(self, now: datetime | None = None) -> bool:
        """Check expiry (exclusive boundary: expires_at == now is expired)."""
        return _is_expired(self.expires_at, now)


@dataclass(frozen=True, slots=True, kw_only=True)
class SessionCredentialWithUser:
    """Session credential row joined with its owning user."""

    record: SessionCredentialRecord
    user: User


@dataclass(frozen=True, slots=True, kw_only=True)
class SingleUseTokenWithUser:
    """Single-use token row joined with its owning user."""

    record: SingleUseTokenRecord
    user: User
