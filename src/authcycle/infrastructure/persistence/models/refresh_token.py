"""Refresh token (session credential) database model.

Row presence is the liveness state. There is no revoked_at column:
rotation, logout, revocation and sweeping all delete the row, and a
signature-valid credential without a row is a replay.
"""

from datetime import datetime
from uuid import UUID

from sqlalchemy import ForeignKey, Text
from sqlalchemy.orm import Mapped, mapped_column

from authcycle.infrastructure.persistence.base import BaseModel


class RefreshTokenModel(BaseModel):
    """Session credential row.

    Token Lifecycle:
        1. Inserted on login (7-day expiration)
        2. Deleted and replaced on every refresh (same transaction)
        3. Deleted on logout, logout-all, replay detection or sweep

    Fields:
        id: UUID primary key (from BaseModel)
        created_at: Issuance time (from BaseModel)
        token: Signed session credential (unique lookup key)
        user_id: Owning user (cascade delete)
        expires_at: Absolute expiry (indexed for sweeps)
    """

    __tablename__ = "refresh_tokens"

    token: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        unique=True,
        comment="Signed session credential",
    )

    user_id: Mapped[UUID] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
        comment="User who owns this session credential",
    )

    expires_at: Mapped[datetime] = mapped_column(
        nullable=False,
        index=True,
        comment="Absolute expiry (never extended)",
    )

    def __repr__(self) -> str:
        return (
            f"<RefreshTokenModel("
            f"id={self.id}, "
            f"user_id={self.user_id}, "
            f"expires_at={self.expires_at}"
            f")>"
        )
