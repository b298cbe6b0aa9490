"""Response DTOs returned inside Success values by the auth services.

All DTOs are immutable (frozen=True) and keyword-only.
"""

from dataclasses import dataclass

from authcycle.domain.entities import PublicUserView

PASSWORD_RESET_REQUESTED_MESSAGE = (
    "If an account with that email exists, a password reset link has been sent."
)
PASSWORD_RESET_COMPLETED_MESSAGE = "Password has been reset successfully."
VERIFICATION_RESENT_MESSAGE = "Verification email sent."
LOGGED_OUT_MESSAGE = "Logged out successfully."


@dataclass(frozen=True, kw_only=True)
class CredentialPair:
    """Access + session credentials returned by login and refresh.

    Attributes:
        access_token: Short-lived signed access credential.
        session_token: Long-lived signed session (refresh) credential.
        user: Public view of the authenticated user.
        token_type: Always "bearer".
        expires_in: Access credential lifetime in seconds.
    """

    access_token: str
    session_token: str
    user: PublicUserView
    token_type: str = "bearer"
    expires_in: int = 900


@dataclass(frozen=True, kw_only=True)
class LogoutAllResponse:
    """Result of revoking every session of a user.

    Attributes:
        count: Session credentials deleted (0 is a success).
    """

    count: int


@dataclass(frozen=True, kw_only=True)
class MessageResponse:
    """Generic confirmation message."""

    message: str


@dataclass(frozen=True, kw_only=True)
class SweepResult:
    """Rows deleted by one expired-token sweep, per kind."""

    sessions: int = 0
    verification: int = 0
    password_reset: int = 0

    @property
    def total(self) -> int:
        return self.sessions + self.verification + self.password_reset
