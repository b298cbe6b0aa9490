"""Application DTOs."""

from authcycle.application.dtos.auth_dtos import (
    LOGGED_OUT_MESSAGE,
    PASSWORD_RESET_COMPLETED_MESSAGE,
    PASSWORD_RESET_REQUESTED_MESSAGE,
    VERIFICATION_RESENT_MESSAGE,
    CredentialPair,
    LogoutAllResponse,
    MessageResponse,
    SweepResult,
)

__all__ = [
    "CredentialPair",
    "LOGGED_OUT_MESSAGE",
    "LogoutAllResponse",
    "MessageResponse",
    "PASSWORD_RESET_COMPLETED_MESSAGE",
    "PASSWORD_RESET_REQUESTED_MESSAGE",
    "SweepResult",
    "VERIFICATION_RESENT_MESSAGE",
]
