"""Domain errors package.

Usage:
    from authcycle.domain.errors import AuthenticationError, CredentialError
"""

from authcycle.domain.errors.authentication_error import AuthenticationError
from authcycle.domain.errors.credential_error import CredentialError

__all__ = [
    "AuthenticationError",
    "CredentialError",
]
