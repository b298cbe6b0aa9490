"""Credential codec protocol (port).

Signs and verifies the two classes of bearer credential. Each class has
its own signing secret, so a credential signed for one purpose fails
verification for the other; the embedded `type` claim is a second check.

Implementations:
    - JWTCredentialCodec: PyJWT HMAC-SHA256 (src/authcycle/infrastructure/security/)
"""

from typing import Any, Protocol

from authcycle.core.result import Result


class CredentialCodecProtocol(Protocol):
    """Signing and verification of access and session credentials."""

    def issue_access(self, claims: dict[str, Any]) -> str:
        """Sign a short-lived access credential (type=access, fresh jti)."""
        ...

    def issue_session(self, claims: dict[str, Any]) -> str:
        """Sign a long-lived session credential (type=refresh, fresh jti)."""
        ...

    def verify_access(self, token: str) -> Result[dict[str, Any], str]:
        """Verify an access credential.

        Returns:
            Success(claims) or Failure(CredentialError.INVALID_SIGNATURE |
            CredentialError.EXPIRED).
        """
        ...

    def verify_session(self, token: str) -> Result[dict[str, Any], str]:
        """Verify a session credential.

        Returns:
            Success(claims) or Failure(CredentialError.INVALID_SIGNATURE |
            CredentialError.EXPIRED).
        """
        ...
