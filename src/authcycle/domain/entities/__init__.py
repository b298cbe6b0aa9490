"""Domain entities package."""

from authcycle.domain.entities.token_records import (
    SessionCredentialRecord,
    SessionCredentialWithUser,
    SingleUseTokenRecord,
    SingleUseTokenWithUser,
)
from authcycle.domain.entities.user import PublicUserView, User, normalize_email

__all__ = [
    "PublicUserView",
    "SessionCredentialRecord",
    "SessionCredentialWithUser",
    "SingleUseTokenRecord",
    "SingleUseTokenWithUser",
    "User",
    "normalize_email",
]
