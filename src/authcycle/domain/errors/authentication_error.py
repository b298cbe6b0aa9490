"""Authentication domain errors.

Defines the named failure kinds returned by the session and single-use
token managers.

Architecture:
    - Domain layer errors (no infrastructure dependencies)
    - Used in Result types (railway-oriented programming)
    - Never raised as exceptions (return Failure(error) instead)

Usage:
    from authcycle.domain.errors import AuthenticationError
    from authcycle.core.result import Failure

    result = await session_manager.refresh(token)
    match result:
        case Failure(error=AuthenticationError.TOKEN_REUSE_DETECTED):
            # Every session of the user has already been revoked
            ...
"""


class AuthenticationError:
    """Authentication error constants.

    These are NOT exceptions - they are error value constants used in the
    railway-oriented programming pattern. The boundary layer maps them to
    transport-specific codes.

    Error Categories:
        - Login: INVALID_CREDENTIALS, USER_INACTIVE, EMAIL_NOT_VERIFIED
        - Session credentials: INVALID_REFRESH_TOKEN, REFRESH_TOKEN_EXPIRED,
          TOKEN_REUSE_DETECTED, TOKEN_NOT_FOUND, UNAUTHORIZED
        - Verification: INVALID_TOKEN, TOKEN_EXPIRED, ALREADY_VERIFIED
        - Password reset: INVALID_RESET_TOKEN, RESET_TOKEN_EXPIRED
        - Registration: EMAIL_ALREADY_EXISTS, USER_NOT_FOUND
        - Generic: INTERNAL_ERROR (unexpected store/codec failure)
    """

    # Login
    INVALID_CREDENTIALS = "invalid_credentials"
    USER_INACTIVE = "user_inactive"
    EMAIL_NOT_VERIFIED = "email_not_verified"

    # Session credentials
    INVALID_REFRESH_TOKEN = "invalid_refresh_token"
    REFRESH_TOKEN_EXPIRED = "refresh_token_expired"
    TOKEN_REUSE_DETECTED = "token_reuse_detected"
    TOKEN_NOT_FOUND = "token_not_found"
    UNAUTHORIZED = "unauthorized"

    # Verification tokens
    INVALID_TOKEN = "invalid_token"
    TOKEN_EXPIRED = "token_expired"
    ALREADY_VERIFIED = "already_verified"

    # Password reset tokens
    INVALID_RESET_TOKEN = "invalid_reset_token"
    RESET_TOKEN_EXPIRED = "reset_token_expired"

    # Registration
    EMAIL_ALREADY_EXISTS = "email_already_exists"
    USER_NOT_FOUND = "user_not_found"

    # Unexpected failure (always logged with context)
    INTERNAL_ERROR = "internal_error"
