"""Verification and password reset token database models.

Both tables share one shape; the table a row lives in is its type.
Tokens are opaque random hex values stored as-is.
"""

from datetime import datetime
from uuid import UUID

from sqlalchemy import ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column

from authcycle.domain.enums import SingleUseTokenType
from authcycle.infrastructure.persistence.base import BaseModel


class SingleUseTokenColumns:
    """Columns shared by the single-use token tables."""

    token: Mapped[str] = mapped_column(
        String(64),
        nullable=False,
        unique=True,
        comment="Opaque random token (64 hex chars)",
    )

    user_id: Mapped[UUID] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
        comment="User who owns this token",
    )

    expires_at: Mapped[datetime] = mapped_column(
        nullable=False,
        index=True,
        comment="Absolute expiry (never extended)",
    )


class VerificationTokenModel(SingleUseTokenColumns, BaseModel):
    """Email verification token row (24-hour lifetime)."""

    __tablename__ = "verification_tokens"


class PasswordResetTokenModel(SingleUseTokenColumns, BaseModel):
    """Password reset token row (1-hour lifetime)."""

    __tablename__ = "password_reset_tokens"


SINGLE_USE_TOKEN_MODELS: dict[
    SingleUseTokenType, type[VerificationTokenModel] | type[PasswordResetTokenModel]
] = {
    SingleUseTokenType.VERIFICATION: VerificationTokenModel,
    SingleUseTokenType.PASSWORD_RESET: PasswordResetTokenModel,
}
