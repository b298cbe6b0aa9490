"""Single-use token generation service.

Generates the opaque values used for email verification and password
reset links.

Token Strategy:
    - 32-byte random hex string (64 characters, 256 bits of entropy)
    - Not signed: validity is store membership plus expiry
    - Stored as-is (already unguessable)
"""

import secrets
from datetime import UTC, datetime, timedelta

TOKEN_BYTES = 32


class SingleUseTokenService:
    """Random token generation and expiry calculation.

    Usage:
        service = SingleUseTokenService()
        token = service.generate_token()
        expires_at = service.calculate_expiration(timedelta(hours=24))
    """

    def generate_token(self) -> str:
        """Generate an opaque single-use token.

        Returns:
            64-character hex string.

        Example:
            >>> len(SingleUseTokenService().generate_token())
            64
        """
        return secrets.token_hex(TOKEN_BYTES)

    def calculate_expiration(
        self, ttl: timedelta, now: datetime | None = None
    ) -> datetime:
        """Absolute expiry for a token issued now.

        Args:
            ttl: Token lifetime.
            now: Issuance time (defaults to current UTC time).

        Returns:
            Expiration datetime (UTC).
        """
        return (now or datetime.now(UTC)) + ttl
