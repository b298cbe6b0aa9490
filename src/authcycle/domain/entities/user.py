"""User domain entity for authentication.

Pure business logic, no framework dependencies. The core mutates a user
only through password changes and verification completion; it never
deletes users.
"""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from uuid import UUID

from authcycle.domain.enums import UserRole


@dataclass(frozen=True, slots=True, kw_only=True)
class PublicUserView:
    """User fields safe to return to callers (never the password hash).

    Attributes:
        id: User identifier.
        email: Normalized email address.
        name: Display name.
        role: Authorization role.
        is_verified: Email verification status.
    """

    id: UUID
    email: str
    name: str
    role: UserRole
    is_verified: bool


@dataclass
class User:
    """User domain entity with authentication business rules.

    Business Rules:
        - Login does not require verification (enforced by a separate gate)
        - Inactive users cannot log in, refresh, or reset their password
        - Emails are stored lowercase and compared case-insensitively

    Attributes:
        id: Unique user identifier.
        email: Normalized email address.
        name: Display name.
        password_hash: Bcrypt hash (never plaintext).
        role: Authorization role.
        is_active: Account enabled flag.
        is_verified: Email verification flag.
        created_at: Creation timestamp (UTC).
        updated_at: Last modification timestamp (UTC).

    Example:
        >>> user = User(id=uuid7(), email="a@example.com", name="A", password_hash="$2b$10$...")
        >>> user.mark_verified()
        >>> user.to_public_view().is_verified
        True
    """

    id: UUID
    email: str
    name: str
    password_hash: str
    role: UserRole = UserRole.USER
    is_active: bool = True
    is_verified: bool = False
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))
    updated_at: datetime = field(default_factory=lambda: datetime.now(UTC))

    def mark_verified(self) -> None:
        """Mark the email address as verified."""
        self.is_verified = True
        self.updated_at = datetime.now(UTC)

    def to_public_view(self) -> PublicUserView:
        """Project the entity onto its public representation."""
        return PublicUserView(
            id=self.id,
            email=self.email,
            name=self.name,
            role=self.role,
            is_verified=self.is_verified,
        )

    def token_claims(self) -> dict[str, str]:
        """Claims embedded in every credential issued for this user."""
        return {
            "sub": str(self.id),
            "email": self.email,
            "role": self.role.value,
        }


def normalize_email(email: str) -> str:
    """Normalize an email address for storage and lookup."""
    return email.strip().lower()
