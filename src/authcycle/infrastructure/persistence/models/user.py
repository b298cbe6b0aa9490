"""User database model.

Security:
    - password_hash: NEVER stores plaintext passwords (bcrypt hashed)
    - email: stored lowercase, unique
"""

from sqlalchemy import Boolean, String
from sqlalchemy.orm import Mapped, mapped_column

from authcycle.infrastructure.persistence.base import BaseMutableModel


class UserModel(BaseMutableModel):
    """User account row.

    Fields:
        id: UUID primary key (from BaseMutableModel)
        created_at / updated_at: Timestamps (from BaseMutableModel)
        email: Unique email address (lowercase, indexed)
        name: Display name
        password_hash: Bcrypt hashed password
        role: Authorization role (admin, user)
        is_active: Deactivated users cannot log in, refresh or reset
        is_verified: Email verification status (login does not require it)

    Relationships:
        refresh_tokens, verification_tokens, password_reset_tokens reference
        users(id) ON DELETE CASCADE.
    """

    __tablename__ = "users"

    email: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        unique=True,
        index=True,
        comment="User email address (unique, lowercase)",
    )

    name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Display name",
    )

    password_hash: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Bcrypt hashed password",
    )

    role: Mapped[str] = mapped_column(
        String(50),
        nullable=False,
        default="user",
        comment="Authorization role (admin, user)",
    )

    is_active: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=True,
        comment="Account active status",
    )

    is_verified: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
        comment="Email verification status",
    )

    def __repr__(self) -> str:
        return (
            f"<UserModel("
            f"id={self.id}, "
            f"email={self.email!r}, "
            f"is_verified={self.is_verified}, "
            f"is_active={self.is_active}"
            f")>"
        )
