"""Security audit actions.

Every security event recorded by the audit sink carries one of these
actions. Values are stable strings because they are persisted in the
append-only audit table.

Categories:
    - Authentication: LOGIN_ATTEMPT, LOGIN_SUCCESS
    - Session credentials: TOKEN_REFRESHED, REFRESH_FAILED,
      TOKEN_REUSE_DETECTED, INACTIVE_USER_REFRESH_ATTEMPT, LOGOUT, LOGOUT_ALL
    - Registration / verification: USER_REGISTERED, VERIFICATION_ISSUED,
      EMAIL_VERIFIED, EMAIL_VERIFICATION_FAILED
    - Password recovery: PASSWORD_RESET_REQUEST, PASSWORD_RESET_ATTEMPT,
      PASSWORD_RESET_SUCCESS
    - Operations: NOTIFICATION_FAILED, EXPIRED_TOKENS_SWEPT
"""

from enum import Enum


class SecurityAction(str, Enum):
    """Security-relevant actions recorded in the audit trail."""

    # Authentication
    LOGIN_ATTEMPT = "login_attempt"
    LOGIN_SUCCESS = "login_success"

    # Session credentials
    TOKEN_REFRESHED = "token_refreshed"
    REFRESH_FAILED = "refresh_failed"
    TOKEN_REUSE_DETECTED = "token_reuse_detected"
    INACTIVE_USER_REFRESH_ATTEMPT = "inactive_user_refresh_attempt"
    LOGOUT = "logout"
    LOGOUT_ALL = "logout_all"

    # Registration and verification
    USER_REGISTERED = "user_registered"
    VERIFICATION_ISSUED = "verification_issued"
    EMAIL_VERIFIED = "email_verified"
    EMAIL_VERIFICATION_FAILED = "email_verification_failed"

    # Password recovery
    PASSWORD_RESET_REQUEST = "password_reset_request"
    PASSWORD_RESET_ATTEMPT = "password_reset_attempt"
    PASSWORD_RESET_SUCCESS = "password_reset_success"

    # Operations
    NOTIFICATION_FAILED = "notification_failed"
    EXPIRED_TOKENS_SWEPT = "expired_tokens_swept"
