"""Application services.

- SessionManager: login, rotation, revocation, expired-token sweep
- SingleUseTokenManager: verification and password reset tokens
- AuthenticationGate: registration, login and access checks
"""

from authcycle.application.services.authentication_gate import AuthenticationGate
from authcycle.application.services.session_manager import SessionManager
from authcycle.application.services.single_use_token_manager import (
    SingleUseTokenManager,
)

__all__ = ["AuthenticationGate", "SessionManager", "SingleUseTokenManager"]
