"""Single-use token manager: email verification and password reset tokens.

States per token:
    issued -> consumed | expired | superseded

Every terminal state deletes the row. Consumption claims the token by
deleting its row first; the caller whose delete removed the row owns the
state change, so two concurrent consumers never both succeed.

Consumption outcomes (verification):
- No row -> INVALID_TOKEN (row untouched; nothing to delete)
- Expired -> row deleted, TOKEN_EXPIRED
- User already verified -> row deleted, ALREADY_VERIFIED
- Otherwise -> row deleted, user marked verified, WELCOME sent

Consumption outcomes (password reset):
- No row -> INVALID_RESET_TOKEN
- Expired -> row deleted, RESET_TOKEN_EXPIRED
- User inactive -> USER_INACTIVE (row kept)
- Otherwise -> row deleted, password replaced, every session revoked,
  PASSWORD_CHANGED sent

Architecture:
- Application layer ONLY imports from domain layer (entities, protocols, events)
- Delegates session revocation to SessionManager.logout_all
"""

import asyncio
from datetime import UTC, datetime, timedelta
from uuid import UUID

from authcycle.application.dtos import (
    PASSWORD_RESET_COMPLETED_MESSAGE,
    PASSWORD_RESET_REQUESTED_MESSAGE,
    VERIFICATION_RESENT_MESSAGE,
    MessageResponse,
)
from authcycle.application.services.session_manager import SessionManager
from authcycle.application.services.support import (
    guard_internal_errors,
    notify_best_effort,
    record_event,
    run_blocking,
    token_prefix,
)
from authcycle.core.config import AuthConfig
from authcycle.core.result import Failure, Result, Success
from authcycle.domain.entities import (
    PublicUserView,
    SingleUseTokenRecord,
    User,
    normalize_email,
)
from authcycle.domain.enums import NotificationKind, SecurityAction, SingleUseTokenType
from authcycle.domain.errors import AuthenticationError
from authcycle.domain.events import RequestContext
from authcycle.domain.protocols import (
    AuditSinkProtocol,
    LoggerProtocol,
    NotifierProtocol,
    PasswordHashingProtocol,
    TokenGeneratorProtocol,
    TokenStore,
    UserRepository,
)


class SingleUseTokenManager:
    """Owns issuance, one-shot consumption and expiry of single-use tokens.

    Usage:
        manager = SingleUseTokenManager(
            users=user_repo,
            tokens=token_store,
            generator=SingleUseTokenService(),
            hasher=password_service,
            sessions=session_manager,
            notifier=notifier,
            audit=audit_sink,
            logger=logger,
            config=auth_config,
        )

        result = await manager.consume_password_reset(token, "NewPass123!")
    """

    def __init__(
        self,
        *,
        users: UserRepository,
        tokens: TokenStore,
        generator: TokenGeneratorProtocol,
        hasher: PasswordHashingProtocol,
        sessions: SessionManager,
        notifier: NotifierProtocol,
        audit: AuditSinkProtocol,
        logger: LoggerProtocol,
        config: AuthConfig,
    ) -> None:
        self._users = users
        self._tokens = tokens
        self._generator = generator
        self._hasher = hasher
        self._sessions = sessions
        self._notifier = notifier
        self._audit = audit
        self._logger = logger
        self._config = config

    def verification_link(self, token: str) -> str:
        return f"{self._config.app_base_url}/verify-email/{token}"

    def password_reset_link(self, token: str) -> str:
        return f"{self._config.app_base_url}/reset-password?token={token}"

    # ------------------------------------------------------------------
    # Verification
    # ------------------------------------------------------------------

    @guard_internal_errors("issue_verification")
    async def issue_verification(self, user_id: UUID) -> Result[str, str]:
        """Supersede the user's verification token with a fresh one.

        The caller delivers the returned value (see resend_verification and
        AuthenticationGate.register).

        Args:
            user_id: Owning user.

        Returns:
            Success(raw token) or Failure(USER_NOT_FOUND).
        """
        if await self._users.find_by_id(user_id) is None:
            return Failure(error=AuthenticationError.USER_NOT_FOUND)

        token = await self._issue(
            SingleUseTokenType.VERIFICATION,
            user_id,
            self._config.verification_token_ttl,
        )
        await record_event(
            self._audit,
            self._logger,
            action=SecurityAction.VERIFICATION_ISSUED,
            success=True,
            user_id=user_id,
            token_prefix=token_prefix(token),
        )
        return Success(value=token)

    @guard_internal_errors("consume_verification")
    async def consume_verification(
        self,
        token: str,
        context: RequestContext | None = None,
    ) -> Result[PublicUserView, str]:
        """Complete email verification with a single-use token.

        Returns:
            Success(PublicUserView) with is_verified=True, or
            Failure(INVALID_TOKEN | TOKEN_EXPIRED | ALREADY_VERIFIED).
        """
        token_type = SingleUseTokenType.VERIFICATION
        found = await self._tokens.find_single_use_token(token_type, token)
        if found is None:
            return await self._verification_failed(
                AuthenticationError.INVALID_TOKEN, context
            )

        user = found.user
        if found.record.is_expired():
            await self._tokens.delete_single_use_token(token_type, token)
            return await self._verification_failed(
                AuthenticationError.TOKEN_EXPIRED, context, user_id=user.id
            )

        if user.is_verified:
            await self._tokens.delete_single_use_token(token_type, token)
            return await self._verification_failed(
                AuthenticationError.ALREADY_VERIFIED, context, user_id=user.id
            )

        # Claim: only the caller whose delete removed the row proceeds
        if not await self._tokens.delete_single_use_token(token_type, token):
            return await self._verification_failed(
                AuthenticationError.INVALID_TOKEN, context, user_id=user.id
            )

        await self._users.mark_verified(user.id)
        user.mark_verified()

        await record_event(
            self._audit,
            self._logger,
            action=SecurityAction.EMAIL_VERIFIED,
            success=True,
            context=context,
            user_id=user.id,
            email=user.email,
        )
        self._logger.info("email_verified", user_id=str(user.id))

        await notify_best_effort(
            self._notifier,
            self._audit,
            self._logger,
            kind=NotificationKind.WELCOME,
            address=user.email,
            payload={"name": user.name},
            user_id=user.id,
        )
        return Success(value=user.to_public_view())

    @guard_internal_errors("resend_verification")
    async def resend_verification(self, email: str) -> Result[MessageResponse, str]:
        """Issue and send a new verification token, superseding the old one.

        Returns:
            Success(MessageResponse) or Failure(USER_NOT_FOUND | ALREADY_VERIFIED).
        """
        user = await self._users.find_by_email(normalize_email(email))
        if user is None:
            return Failure(error=AuthenticationError.USER_NOT_FOUND)
        if user.is_verified:
            return Failure(error=AuthenticationError.ALREADY_VERIFIED)

        match await self.issue_verification(user.id):
            case Failure() as failure:
                return failure
            case Success(value=token):
                pass

        await self.send_verification(user, token)
        return Success(value=MessageResponse(message=VERIFICATION_RESENT_MESSAGE))

    async def send_verification(self, user: User, token: str) -> bool:
        """Deliver a verification token (best effort)."""
        return await notify_best_effort(
            self._notifier,
            self._audit,
            self._logger,
            kind=NotificationKind.VERIFICATION,
            address=user.email,
            payload={
                "name": user.name,
                "token": token,
                "link": self.verification_link(token),
            },
            user_id=user.id,
        )

    async def _verification_failed(
        self,
        reason: str,
        context: RequestContext | None,
        *,
        user_id: UUID | None = None,
    ) -> Failure[str]:
        await record_event(
            self._audit,
            self._logger,
            action=SecurityAction.EMAIL_VERIFICATION_FAILED,
            success=False,
            context=context,
            user_id=user_id,
            reason=reason,
        )
        self._logger.info("email_verification_failed", reason=reason)
        return Failure(error=reason)

    # ------------------------------------------------------------------
    # Password reset
    # ------------------------------------------------------------------

    @guard_internal_errors("issue_password_reset")
    async def issue_password_reset(
        self,
        email: str,
        context: RequestContext | None = None,
    ) -> Result[MessageResponse, str]:
        """Start password recovery.

        Always returns the same generic message. When no active account
        matches, the fixed no-op delay runs instead of token issuance so
        latency does not reveal whether the account exists.

        Returns:
            Success(MessageResponse) with the generic message.
        """
        email = normalize_email(email)
        response = MessageResponse(message=PASSWORD_RESET_REQUESTED_MESSAGE)
        user = await self._users.find_by_email(email)

        if user is None or not user.is_active:
            reason = (
                AuthenticationError.USER_NOT_FOUND
                if user is None
                else AuthenticationError.USER_INACTIVE
            )
            await record_event(
                self._audit,
                self._logger,
                action=SecurityAction.PASSWORD_RESET_REQUEST,
                success=False,
                context=context,
                user_id=user.id if user else None,
                email=email,
                reason=reason,
            )
            await asyncio.sleep(self._config.password_reset_noop_delay.total_seconds())
            return Success(value=response)

        token = await self._issue(
            SingleUseTokenType.PASSWORD_RESET,
            user.id,
            self._config.password_reset_token_ttl,
        )
        await record_event(
            self._audit,
            self._logger,
            action=SecurityAction.PASSWORD_RESET_REQUEST,
            success=True,
            context=context,
            user_id=user.id,
            email=email,
            token_prefix=token_prefix(token),
        )
        await notify_best_effort(
            self._notifier,
            self._audit,
            self._logger,
            kind=NotificationKind.PASSWORD_RESET,
            address=user.email,
            payload={
                "name": user.name,
                "token": token,
                "link": self.password_reset_link(token),
            },
            user_id=user.id,
        )
        return Success(value=response)

    @guard_internal_errors("consume_password_reset")
    async def consume_password_reset(
        self,
        token: str,
        new_password: str,
        context: RequestContext | None = None,
    ) -> Result[MessageResponse, str]:
        """Set a new password with a reset token and revoke every session.

        Returns:
            Success(MessageResponse) or Failure(INVALID_RESET_TOKEN |
            RESET_TOKEN_EXPIRED | USER_INACTIVE).
        """
        token_type = SingleUseTokenType.PASSWORD_RESET
        found = await self._tokens.find_single_use_token(token_type, token)
        if found is None:
            return await self._reset_failed(
                AuthenticationError.INVALID_RESET_TOKEN, context
            )

        user = found.user
        if found.record.is_expired():
            await self._tokens.delete_single_use_token(token_type, token)
            return await self._reset_failed(
                AuthenticationError.RESET_TOKEN_EXPIRED, context, user_id=user.id
            )

        if not user.is_active:
            return await self._reset_failed(
                AuthenticationError.USER_INACTIVE, context, user_id=user.id
            )

        password_hash = await run_blocking(self._hasher.hash_password, new_password)

        # Claim: only the caller whose delete removed the row proceeds
        if not await self._tokens.delete_single_use_token(token_type, token):
            return await self._reset_failed(
                AuthenticationError.INVALID_RESET_TOKEN, context, user_id=user.id
            )

        await self._users.set_password_hash(user.id, password_hash)

        # A password change invalidates every existing session credential
        match await self._sessions.logout_all(user.id, context):
            case Failure() as failure:
                return failure
            case Success(value=revoked):
                pass

        await record_event(
            self._audit,
            self._logger,
            action=SecurityAction.PASSWORD_RESET_SUCCESS,
            success=True,
            context=context,
            user_id=user.id,
            email=user.email,
            sessions_revoked=revoked.count,
        )
        self._logger.info(
            "password_reset_completed",
            user_id=str(user.id),
            sessions_revoked=revoked.count,
        )

        await notify_best_effort(
            self._notifier,
            self._audit,
            self._logger,
            kind=NotificationKind.PASSWORD_CHANGED,
            address=user.email,
            payload={"name": user.name},
            user_id=user.id,
        )
        return Success(value=MessageResponse(message=PASSWORD_RESET_COMPLETED_MESSAGE))

    async def _reset_failed(
        self,
        reason: str,
        context: RequestContext | None,
        *,
        user_id: UUID | None = None,
    ) -> Failure[str]:
        await record_event(
            self._audit,
            self._logger,
            action=SecurityAction.PASSWORD_RESET_ATTEMPT,
            success=False,
            context=context,
            user_id=user_id,
            reason=reason,
        )
        self._logger.info("password_reset_failed", reason=reason)
        return Failure(error=reason)

    # ------------------------------------------------------------------
    # Issuance
    # ------------------------------------------------------------------

    async def _issue(
        self,
        token_type: SingleUseTokenType,
        user_id: UUID,
        ttl: timedelta,
    ) -> str:
        now = datetime.now(UTC)
        record = SingleUseTokenRecord(
            token=self._generator.generate_token(),
            user_id=user_id,
            token_type=token_type,
            expires_at=now + ttl,
            created_at=now,
        )
        superseded = await self._tokens.replace_single_use_token(record)
        self._logger.debug(
            "single_use_token_issued",
            token_type=token_type.value,
            user_id=str(user_id),
            superseded=superseded,
        )
        return record.token
