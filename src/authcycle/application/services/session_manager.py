"""Session manager: issuance, rotation and revocation of session credentials.

State per session credential:
    issued -> rotated-out | expired-swept | revoked

Every terminal state deletes the row; the presence of the row is the only
"active" marker. A signature-valid, unexpired session credential with no
row has already been rotated away, so presenting it again is treated as
theft: every session of the claimed user is revoked.

Refresh flow:
1. Verify signature/expiry via the codec (no store access on failure)
2. Look up the row joined with its user
3. No row -> record TOKEN_REUSE_DETECTED, revoke all, fail
4. Row expired -> delete row, fail REFRESH_TOKEN_EXPIRED
5. User inactive -> fail USER_INACTIVE (row kept)
6. Atomically delete old row + insert new row; a lost race is step 3

Architecture:
- Application layer ONLY imports from domain layer (entities, protocols, events)
- Store, codec, hasher, audit sink and logger are injected via protocols
"""

import secrets
from dataclasses import dataclass
from datetime import UTC, datetime
from uuid import UUID

from authcycle.application.dtos import (
    LOGGED_OUT_MESSAGE,
    CredentialPair,
    LogoutAllResponse,
    MessageResponse,
    SweepResult,
)
from authcycle.application.services.support import (
    guard_internal_errors,
    record_event,
    run_blocking,
    token_prefix,
)
from authcycle.core.config import AuthConfig
from authcycle.core.result import Failure, Result, Success
from authcycle.domain.entities import SessionCredentialRecord, User, normalize_email
from authcycle.domain.enums import SecurityAction, SingleUseTokenType
from authcycle.domain.errors import AuthenticationError, CredentialError
from authcycle.domain.events import RequestContext
from authcycle.domain.protocols import (
    AuditSinkProtocol,
    CredentialCodecProtocol,
    LoggerProtocol,
    PasswordHashingProtocol,
    TokenStore,
    UserRepository,
)


@dataclass(frozen=True, slots=True, kw_only=True)
class _IssuedPair:
    """Freshly signed credentials plus the row to persist for them."""

    record: SessionCredentialRecord
    credentials: CredentialPair


class SessionManager:
    """Owns session credential issuance, rotation and bulk revocation.

    Usage:
        manager = SessionManager(
            users=user_repo,
            tokens=token_store,
            codec=codec,
            hasher=password_service,
            audit=audit_sink,
            logger=logger,
            config=auth_config,
        )

        match await manager.refresh(session_token):
            case Success(value=pair):
                ...
            case Failure(error=AuthenticationError.TOKEN_REUSE_DETECTED):
                ...
    """

    def __init__(
        self,
        *,
        users: UserRepository,
        tokens: TokenStore,
        codec: CredentialCodecProtocol,
        hasher: PasswordHashingProtocol,
        audit: AuditSinkProtocol,
        logger: LoggerProtocol,
        config: AuthConfig,
    ) -> None:
        self._users = users
        self._tokens = tokens
        self._codec = codec
        self._hasher = hasher
        self._audit = audit
        self._logger = logger
        self._config = config
        self._placeholder_hash: str | None = None

    # ------------------------------------------------------------------
    # Login
    # ------------------------------------------------------------------

    @guard_internal_errors("login")
    async def login(
        self,
        email: str,
        password: str,
        context: RequestContext | None = None,
    ) -> Result[CredentialPair, str]:
        """Authenticate by password and issue a credential pair.

        Unknown email and wrong password both fail INVALID_CREDENTIALS.
        The active check runs only after the password matched, so the
        account status is never revealed to a caller without the password.
        Verification is not required here (see AuthenticationGate).

        Args:
            email: Email address (case-insensitive).
            password: Plaintext password.
            context: Caller metadata for the audit trail.

        Returns:
            Success(CredentialPair) or Failure(INVALID_CREDENTIALS | USER_INACTIVE).
        """
        email = normalize_email(email)
        user = await self._users.find_by_email(email)

        if user is None:
            await self._verify_against_placeholder(password)
            await self._login_failed(
                email, AuthenticationError.INVALID_CREDENTIALS, context, user_id=None
            )
            return Failure(error=AuthenticationError.INVALID_CREDENTIALS)

        if not await run_blocking(
            self._hasher.verify_password, password, user.password_hash
        ):
            await self._login_failed(
                email,
                AuthenticationError.INVALID_CREDENTIALS,
                context,
                user_id=user.id,
            )
            return Failure(error=AuthenticationError.INVALID_CREDENTIALS)

        if not user.is_active:
            await self._login_failed(
                email, AuthenticationError.USER_INACTIVE, context, user_id=user.id
            )
            return Failure(error=AuthenticationError.USER_INACTIVE)

        pair = await self._issue_pair(user)
        await self._tokens.save_session_credential(pair.record)

        await record_event(
            self._audit,
            self._logger,
            action=SecurityAction.LOGIN_SUCCESS,
            success=True,
            context=context,
            user_id=user.id,
            email=email,
        )
        self._logger.info("login_succeeded", user_id=str(user.id))
        return Success(value=pair.credentials)

    async def _verify_against_placeholder(self, password: str) -> None:
        """Run one hash verification for an unknown email.

        Unknown and known emails then cost the same bcrypt work. The
        placeholder hash is created on first use with the configured hasher.
        """
        if self._placeholder_hash is None:
            self._placeholder_hash = await run_blocking(
                self._hasher.hash_password, secrets.token_hex(16)
            )
        await run_blocking(
            self._hasher.verify_password, password, self._placeholder_hash
        )

    async def _login_failed(
        self,
        email: str,
        reason: str,
        context: RequestContext | None,
        *,
        user_id: UUID | None,
    ) -> None:
        await record_event(
            self._audit,
            self._logger,
            action=SecurityAction.LOGIN_ATTEMPT,
            success=False,
            context=context,
            user_id=user_id,
            email=email,
            reason=reason,
        )
        self._logger.info("login_failed", reason=reason)

    # ------------------------------------------------------------------
    # Refresh (rotation)
    # ------------------------------------------------------------------

    @guard_internal_errors("refresh")
    async def refresh(
        self,
        session_token: str,
        context: RequestContext | None = None,
    ) -> Result[CredentialPair, str]:
        """Rotate a session credential.

        Args:
            session_token: Session credential presented by the client.
            context: Caller metadata for the audit trail.

        Returns:
            Success(CredentialPair) with a new session credential, or
            Failure(INVALID_REFRESH_TOKEN | REFRESH_TOKEN_EXPIRED |
            TOKEN_REUSE_DETECTED | USER_INACTIVE).
        """
        # Step 1: Signature and expiry (pure; no store lookup on failure)
        match await run_blocking(self._codec.verify_session, session_token):
            case Failure(error=CredentialError.EXPIRED):
                # The row (if any) expires with the credential; the sweep removes it
                await self._refresh_failed(
                    AuthenticationError.REFRESH_TOKEN_EXPIRED, context
                )
                return Failure(error=AuthenticationError.REFRESH_TOKEN_EXPIRED)
            case Failure():
                await self._refresh_failed(
                    AuthenticationError.INVALID_REFRESH_TOKEN, context
                )
                return Failure(error=AuthenticationError.INVALID_REFRESH_TOKEN)
            case Success(value=claims):
                pass

        try:
            claimed_user_id = UUID(str(claims["sub"]))
        except ValueError:
            await self._refresh_failed(
                AuthenticationError.INVALID_REFRESH_TOKEN, context
            )
            return Failure(error=AuthenticationError.INVALID_REFRESH_TOKEN)

        # Step 2: Row lookup joined with the owning user
        found = await self._tokens.find_session_credential(session_token)

        # Step 3: Valid signature, no row -> replay of a consumed credential
        if found is None:
            return await self._handle_reuse(
                claimed_user_id, session_token, context, stage="lookup"
            )

        # Step 4: Stored expiry (exclusive boundary)
        if found.record.is_expired():
            await self._tokens.delete_session_credential(session_token)
            await self._refresh_failed(
                AuthenticationError.REFRESH_TOKEN_EXPIRED,
                context,
                user_id=found.user.id,
            )
            return Failure(error=AuthenticationError.REFRESH_TOKEN_EXPIRED)

        # Step 5: Inactive user (row left intact; not a theft signal)
        user = found.user
        if not user.is_active:
            await record_event(
                self._audit,
                self._logger,
                action=SecurityAction.INACTIVE_USER_REFRESH_ATTEMPT,
                success=False,
                context=context,
                user_id=user.id,
                reason=AuthenticationError.USER_INACTIVE,
            )
            return Failure(error=AuthenticationError.USER_INACTIVE)

        # Step 6: Atomic delete-old + insert-new
        pair = await self._issue_pair(user)
        rotated = await self._tokens.rotate_session_credential(
            session_token, pair.record
        )
        if not rotated:
            # A concurrent refresh consumed the row first
            return await self._handle_reuse(
                user.id, session_token, context, stage="rotation"
            )

        await record_event(
            self._audit,
            self._logger,
            action=SecurityAction.TOKEN_REFRESHED,
            success=True,
            context=context,
            user_id=user.id,
        )
        self._logger.info("session_rotated", user_id=str(user.id))
        return Success(value=pair.credentials)

    async def _handle_reuse(
        self,
        user_id: UUID,
        session_token: str,
        context: RequestContext | None,
        *,
        stage: str,
    ) -> Result[CredentialPair, str]:
        self._logger.critical(
            "session_credential_reuse_detected",
            user_id=str(user_id),
            token_prefix=token_prefix(session_token),
            stage=stage,
        )
        await record_event(
            self._audit,
            self._logger,
            action=SecurityAction.TOKEN_REUSE_DETECTED,
            success=False,
            context=context,
            user_id=user_id,
            reason="valid session credential without stored row",
            stage=stage,
        )
        try:
            revoked = await self._tokens.delete_session_credentials_for_user(user_id)
        except Exception as e:
            # The reuse verdict stands even if revocation failed
            self._logger.critical(
                "reuse_revocation_failed", error=e, user_id=str(user_id)
            )
        else:
            self._logger.warning(
                "all_sessions_revoked", user_id=str(user_id), count=revoked
            )
        return Failure(error=AuthenticationError.TOKEN_REUSE_DETECTED)

    async def _refresh_failed(
        self,
        reason: str,
        context: RequestContext | None,
        *,
        user_id: UUID | None = None,
    ) -> None:
        await record_event(
            self._audit,
            self._logger,
            action=SecurityAction.REFRESH_FAILED,
            success=False,
            context=context,
            user_id=user_id,
            reason=reason,
        )
        self._logger.info("refresh_failed", reason=reason)

    # ------------------------------------------------------------------
    # Revocation
    # ------------------------------------------------------------------

    @guard_internal_errors("logout")
    async def logout(
        self,
        session_token: str,
        requesting_user_id: UUID | None = None,
        context: RequestContext | None = None,
    ) -> Result[MessageResponse, str]:
        """Delete one session credential.

        Args:
            session_token: Session credential to revoke.
            requesting_user_id: When given, must own the credential.
            context: Caller metadata for the audit trail.

        Returns:
            Success(MessageResponse) or Failure(TOKEN_NOT_FOUND | UNAUTHORIZED).
        """
        found = await self._tokens.find_session_credential(session_token)
        if found is None:
            return Failure(error=AuthenticationError.TOKEN_NOT_FOUND)

        if requesting_user_id is not None and found.record.user_id != requesting_user_id:
            await record_event(
                self._audit,
                self._logger,
                action=SecurityAction.LOGOUT,
                success=False,
                context=context,
                user_id=requesting_user_id,
                reason=AuthenticationError.UNAUTHORIZED,
            )
            return Failure(error=AuthenticationError.UNAUTHORIZED)

        if not await self._tokens.delete_session_credential(session_token):
            return Failure(error=AuthenticationError.TOKEN_NOT_FOUND)

        await record_event(
            self._audit,
            self._logger,
            action=SecurityAction.LOGOUT,
            success=True,
            context=context,
            user_id=found.record.user_id,
        )
        return Success(value=MessageResponse(message=LOGGED_OUT_MESSAGE))

    @guard_internal_errors("logout_all")
    async def logout_all(
        self,
        user_id: UUID,
        context: RequestContext | None = None,
    ) -> Result[LogoutAllResponse, str]:
        """Delete every session credential of a user (idempotent).

        Returns:
            Success(LogoutAllResponse) carrying the deleted count; 0 is success.
        """
        count = await self._tokens.delete_session_credentials_for_user(user_id)
        await record_event(
            self._audit,
            self._logger,
            action=SecurityAction.LOGOUT_ALL,
            success=True,
            context=context,
            user_id=user_id,
            count=count,
        )
        self._logger.info("all_sessions_revoked", user_id=str(user_id), count=count)
        return Success(value=LogoutAllResponse(count=count))

    @guard_internal_errors("sweep_expired")
    async def sweep_expired(
        self, now: datetime | None = None
    ) -> Result[SweepResult, str]:
        """Delete every expired row of both token kinds.

        Safe to run concurrently and repeatedly; each deletion is atomic on
        its own and a row already removed is simply not counted.

        Args:
            now: Cut-off (defaults to current UTC time); rows with
                expires_at <= now are deleted.
        """
        now = now or datetime.now(UTC)
        result = SweepResult(
            sessions=await self._tokens.delete_expired_session_credentials(now),
            verification=await self._tokens.delete_expired_single_use_tokens(
                SingleUseTokenType.VERIFICATION, now
            ),
            password_reset=await self._tokens.delete_expired_single_use_tokens(
                SingleUseTokenType.PASSWORD_RESET, now
            ),
        )
        await record_event(
            self._audit,
            self._logger,
            action=SecurityAction.EXPIRED_TOKENS_SWEPT,
            success=True,
            sessions=result.sessions,
            verification=result.verification,
            password_reset=result.password_reset,
        )
        return Success(value=result)

    # ------------------------------------------------------------------
    # Issuance
    # ------------------------------------------------------------------

    async def _issue_pair(self, user: User) -> _IssuedPair:
        claims = user.token_claims()
        access_token = await run_blocking(self._codec.issue_access, claims)
        session_token = await run_blocking(self._codec.issue_session, claims)
        now = datetime.now(UTC)
        record = SessionCredentialRecord(
            token=session_token,
            user_id=user.id,
            expires_at=now + self._config.session_token_ttl,
            created_at=now,
        )
        credentials = CredentialPair(
            access_token=access_token,
            session_token=session_token,
            user=user.to_public_view(),
            expires_in=int(self._config.access_token_ttl.total_seconds()),
        )
        return _IssuedPair(record=record, credentials=credentials)

