"""Credential codec errors.

Returned by the codec's verify operations. The managers translate them
into authentication errors; they never reach the boundary layer directly.
"""


class CredentialError:
    """Credential verification error constants."""

    INVALID_SIGNATURE = "invalid_signature"
    EXPIRED = "expired"
