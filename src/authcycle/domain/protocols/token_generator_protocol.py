"""Token generator protocol (port) for single-use token values.

Implementations:
    - SingleUseTokenService: secrets.token_hex(32) (src/authcycle/infrastructure/security/)
"""

from typing import Protocol


class TokenGeneratorProtocol(Protocol):
    """Source of opaque, high-entropy single-use token values."""

    def generate_token(self) -> str:
        """Return a new unguessable token value."""
        ...
