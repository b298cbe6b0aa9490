"""Authentication gate: the entry point above the two token managers.

Orchestrates registration and login, passes refresh/logout through to the
SessionManager, and provides the request-time checks used by downstream
code:

- verify_access: decode an access credential into its claims
- require_verified: the separate verification gate (login itself does
  not require a verified email)
"""

from typing import Any
from uuid import UUID

from uuid_extensions import uuid7

from authcycle.application.dtos import CredentialPair, LogoutAllResponse, MessageResponse
from authcycle.application.services.session_manager import SessionManager
from authcycle.application.services.single_use_token_manager import (
    SingleUseTokenManager,
)
from authcycle.application.services.support import (
    guard_internal_errors,
    record_event,
    run_blocking,
)
from authcycle.core.result import Failure, Result, Success
from authcycle.domain.entities import PublicUserView, User, normalize_email
from authcycle.domain.enums import SecurityAction, UserRole
from authcycle.domain.errors import AuthenticationError, CredentialError
from authcycle.domain.events import RequestContext
from authcycle.domain.protocols import (
    AuditSinkProtocol,
    CredentialCodecProtocol,
    LoggerProtocol,
    PasswordHashingProtocol,
    UserRepository,
)


class AuthenticationGate:
    """Registration, login and access checks.

    Usage:
        gate = get_authentication_gate()

        await gate.register("a@example.com", "SecurePass123!", "Alice")
        match await gate.login("a@example.com", "SecurePass123!"):
            case Success(value=pair):
                claims = (await gate.verify_access(pair.access_token)).value
    """

    def __init__(
        self,
        *,
        users: UserRepository,
        hasher: PasswordHashingProtocol,
        codec: CredentialCodecProtocol,
        sessions: SessionManager,
        single_use: SingleUseTokenManager,
        audit: AuditSinkProtocol,
        logger: LoggerProtocol,
    ) -> None:
        self._users = users
        self._hasher = hasher
        self._codec = codec
        self._sessions = sessions
        self._single_use = single_use
        self._audit = audit
        self._logger = logger

    @guard_internal_errors("register")
    async def register(
        self,
        email: str,
        password: str,
        name: str,
        context: RequestContext | None = None,
    ) -> Result[PublicUserView, str]:
        """Create an active, unverified account and send its verification token.

        Returns:
            Success(PublicUserView) or Failure(EMAIL_ALREADY_EXISTS).
        """
        email = normalize_email(email)
        if await self._users.find_by_email(email) is not None:
            return Failure(error=AuthenticationError.EMAIL_ALREADY_EXISTS)

        password_hash = await run_blocking(self._hasher.hash_password, password)
        user = User(
            id=uuid7(),
            email=email,
            name=name.strip(),
            password_hash=password_hash,
            role=UserRole.USER,
        )
        await self._users.save(user)

        await record_event(
            self._audit,
            self._logger,
            action=SecurityAction.USER_REGISTERED,
            success=True,
            context=context,
            user_id=user.id,
            email=email,
        )
        self._logger.info("user_registered", user_id=str(user.id))

        match await self._single_use.issue_verification(user.id):
            case Success(value=token):
                await self._single_use.send_verification(user, token)
            case Failure(error=error):
                # The account exists; resend_verification recovers
                self._logger.warning(
                    "verification_issue_failed", user_id=str(user.id), reason=error
                )

        return Success(value=user.to_public_view())

    async def login(
        self,
        email: str,
        password: str,
        context: RequestContext | None = None,
    ) -> Result[CredentialPair, str]:
        """Password login (see SessionManager.login)."""
        return await self._sessions.login(email, password, context)

    async def refresh(
        self,
        session_token: str,
        context: RequestContext | None = None,
    ) -> Result[CredentialPair, str]:
        """Rotate a session credential (see SessionManager.refresh)."""
        return await self._sessions.refresh(session_token, context)

    async def logout(
        self,
        session_token: str,
        requesting_user_id: UUID | None = None,
        context: RequestContext | None = None,
    ) -> Result[MessageResponse, str]:
        return await self._sessions.logout(session_token, requesting_user_id, context)

    async def logout_all(
        self,
        user_id: UUID,
        context: RequestContext | None = None,
    ) -> Result[LogoutAllResponse, str]:
        return await self._sessions.logout_all(user_id, context)

    @guard_internal_errors("verify_access")
    async def verify_access(self, access_token: str) -> Result[dict[str, Any], str]:
        """Decode an access credential for request authentication.

        Returns:
            Success(claims) or Failure(INVALID_TOKEN | TOKEN_EXPIRED).
        """
        match await run_blocking(self._codec.verify_access, access_token):
            case Success(value=claims):
                return Success(value=claims)
            case Failure(error=CredentialError.EXPIRED):
                return Failure(error=AuthenticationError.TOKEN_EXPIRED)
            case _:
                return Failure(error=AuthenticationError.INVALID_TOKEN)

    @guard_internal_errors("require_verified")
    async def require_verified(self, user_id: UUID) -> Result[PublicUserView, str]:
        """Gate for operations that need a verified email.

        Returns:
            Success(PublicUserView) or Failure(USER_NOT_FOUND |
            USER_INACTIVE | EMAIL_NOT_VERIFIED).
        """
        user = await self._users.find_by_id(user_id)
        if user is None:
            return Failure(error=AuthenticationError.USER_NOT_FOUND)
        if not user.is_active:
            return Failure(error=AuthenticationError.USER_INACTIVE)
        if not user.is_verified:
            return Failure(error=AuthenticationError.EMAIL_NOT_VERIFIED)
        return Success(value=user.to_public_view())
