"""Unit tests for SingleUseTokenManager.

Tests cover:
- Verification issuance (supersede, TTL, unknown user)
- Verification consumption outcomes (invalid, expired, already verified, claimed)
- Resend verification
- Password reset request (generic response, no-op delay, notification link)
- Password reset consumption (inactive user keeps token, sessions revoked)
- Best-effort notifications

Architecture:
- Unit tests for application service (mocked ports)
- SessionManager replaced by a Mock exposing logout_all
"""

import time
from dataclasses import replace
from datetime import UTC, datetime, timedelta
from unittest.mock import AsyncMock, Mock

import pytest
from uuid_extensions import uuid7

from authcycle.application.dtos import (
    PASSWORD_RESET_COMPLETED_MESSAGE,
    PASSWORD_RESET_REQUESTED_MESSAGE,
    VERIFICATION_RESENT_MESSAGE,
    LogoutAllResponse,
)
from authcycle.application.services import SingleUseTokenManager
from authcycle.core.result import Failure, Success
from authcycle.domain.entities import SingleUseTokenRecord, SingleUseTokenWithUser
from authcycle.domain.enums import NotificationKind, SecurityAction, SingleUseTokenType
from authcycle.domain.errors import AuthenticationError
from tests.conftest import create_test_user, recorded_actions, recorded_events

GENERATED_TOKEN = "ab" * 32


def create_manager(
    auth_config,
    mock_audit,
    mock_logger,
    users=None,
    tokens=None,
    hasher=None,
    sessions=None,
    notifier=None,
) -> SingleUseTokenManager:
    generator = Mock()
    generator.generate_token.return_value = GENERATED_TOKEN
    if hasher is None:
        hasher = Mock()
        hasher.hash_password.return_value = "new_hash"
    if sessions is None:
        sessions = Mock()
        sessions.logout_all = AsyncMock(
            return_value=Success(value=LogoutAllResponse(count=2))
        )
    return SingleUseTokenManager(
        users=users or AsyncMock(),
        tokens=tokens or AsyncMock(),
        generator=generator,
        hasher=hasher,
        sessions=sessions,
        notifier=notifier or AsyncMock(),
        audit=mock_audit,
        logger=mock_logger,
        config=auth_config,
    )


def stored_token(user, token_type, token="stored_token", expires_at=None):
    return SingleUseTokenWithUser(
        record=SingleUseTokenRecord(
            token=token,
            user_id=user.id,
            token_type=token_type,
            expires_at=expires_at or datetime.now(UTC) + timedelta(hours=1),
        ),
        user=user,
    )


@pytest.mark.unit
class TestIssueVerification:
    """Test verification token issuance."""

    async def test_issue_verification_supersedes_existing_token(
        self, auth_config, mock_audit, mock_logger
    ):
        user = create_test_user()
        users = AsyncMock()
        users.find_by_id.return_value = user
        tokens = AsyncMock()
        tokens.replace_single_use_token.return_value = 1
        manager = create_manager(
            auth_config, mock_audit, mock_logger, users=users, tokens=tokens
        )

        before = datetime.now(UTC)
        result = await manager.issue_verification(user.id)

        assert result == Success(value=GENERATED_TOKEN)
        record = tokens.replace_single_use_token.await_args.args[0]
        assert record.token == GENERATED_TOKEN
        assert record.user_id == user.id
        assert record.token_type == SingleUseTokenType.VERIFICATION
        assert record.expires_at >= before + timedelta(hours=24)
        assert record.expires_at - record.created_at == timedelta(hours=24)
        assert recorded_actions(mock_audit) == [SecurityAction.VERIFICATION_ISSUED]

    async def test_issue_verification_logs_only_token_prefix(
        self, auth_config, mock_audit, mock_logger
    ):
        users = AsyncMock()
        users.find_by_id.return_value = create_test_user()
        manager = create_manager(auth_config, mock_audit, mock_logger, users=users)

        await manager.issue_verification(uuid7())

        [event] = recorded_events(mock_audit)
        assert event.context["token_prefix"] == GENERATED_TOKEN[:8] + "..."
        assert GENERATED_TOKEN not in str(event.to_log_context())

    async def test_issue_verification_unknown_user(
        self, auth_config, mock_audit, mock_logger
    ):
        users = AsyncMock()
        users.find_by_id.return_value = None
        tokens = AsyncMock()
        manager = create_manager(
            auth_config, mock_audit, mock_logger, users=users, tokens=tokens
        )

        result = await manager.issue_verification(uuid7())

        assert result == Failure(error=AuthenticationError.USER_NOT_FOUND)
        tokens.replace_single_use_token.assert_not_awaited()


@pytest.mark.unit
class TestConsumeVerification:
    """Test verification token consumption."""

    async def test_consume_verification_marks_user_verified(
        self, auth_config, mock_audit, mock_logger
    ):
        user = create_test_user(is_verified=False)
        users = AsyncMock()
        tokens = AsyncMock()
        tokens.find_single_use_token.return_value = stored_token(
            user, SingleUseTokenType.VERIFICATION
        )
        tokens.delete_single_use_token.return_value = True
        notifier = AsyncMock()
        manager = create_manager(
            auth_config,
            mock_audit,
            mock_logger,
            users=users,
            tokens=tokens,
            notifier=notifier,
        )

        result = await manager.consume_verification("stored_token")

        assert isinstance(result, Success)
        assert result.value.is_verified is True
        tokens.delete_single_use_token.assert_awaited_once_with(
            SingleUseTokenType.VERIFICATION, "stored_token"
        )
        users.mark_verified.assert_awaited_once_with(user.id)
        users.set_password_hash.assert_not_awaited()
        notifier.send.assert_awaited_once()
        assert notifier.send.await_args.args[0] == NotificationKind.WELCOME
        assert recorded_actions(mock_audit) == [SecurityAction.EMAIL_VERIFIED]

    async def test_consume_verification_unknown_token(
        self, auth_config, mock_audit, mock_logger
    ):
        tokens = AsyncMock()
        tokens.find_single_use_token.return_value = None
        users = AsyncMock()
        manager = create_manager(
            auth_config, mock_audit, mock_logger, users=users, tokens=tokens
        )

        result = await manager.consume_verification("unknown")

        assert result == Failure(error=AuthenticationError.INVALID_TOKEN)
        tokens.delete_single_use_token.assert_not_awaited()
        users.mark_verified.assert_not_awaited()
        assert recorded_actions(mock_audit) == [
            SecurityAction.EMAIL_VERIFICATION_FAILED
        ]

    async def test_consume_verification_expired_token_is_deleted(
        self, auth_config, mock_audit, mock_logger
    ):
        user = create_test_user()
        tokens = AsyncMock()
        tokens.find_single_use_token.return_value = stored_token(
            user,
            SingleUseTokenType.VERIFICATION,
            expires_at=datetime.now(UTC) - timedelta(minutes=1),
        )
        users = AsyncMock()
        manager = create_manager(
            auth_config, mock_audit, mock_logger, users=users, tokens=tokens
        )

        result = await manager.consume_verification("stored_token")

        assert result == Failure(error=AuthenticationError.TOKEN_EXPIRED)
        tokens.delete_single_use_token.assert_awaited_once_with(
            SingleUseTokenType.VERIFICATION, "stored_token"
        )
        users.mark_verified.assert_not_awaited()

    async def test_consume_verification_already_verified_deletes_token(
        self, auth_config, mock_audit, mock_logger
    ):
        user = create_test_user(is_verified=True)
        tokens = AsyncMock()
        tokens.find_single_use_token.return_value = stored_token(
            user, SingleUseTokenType.VERIFICATION
        )
        users = AsyncMock()
        manager = create_manager(
            auth_config, mock_audit, mock_logger, users=users, tokens=tokens
        )

        result = await manager.consume_verification("stored_token")

        assert result == Failure(error=AuthenticationError.ALREADY_VERIFIED)
        tokens.delete_single_use_token.assert_awaited_once()
        users.mark_verified.assert_not_awaited()

    async def test_consume_verification_lost_claim_is_invalid(
        self, auth_config, mock_audit, mock_logger
    ):
        user = create_test_user()
        tokens = AsyncMock()
        tokens.find_single_use_token.return_value = stored_token(
            user, SingleUseTokenType.VERIFICATION
        )
        tokens.delete_single_use_token.return_value = False
        users = AsyncMock()
        manager = create_manager(
            auth_config, mock_audit, mock_logger, users=users, tokens=tokens
        )

        result = await manager.consume_verification("stored_token")

        assert result == Failure(error=AuthenticationError.INVALID_TOKEN)
        users.mark_verified.assert_not_awaited()

    async def test_consume_verification_notifier_failure_is_best_effort(
        self, auth_config, mock_audit, mock_logger
    ):
        user = create_test_user()
        tokens = AsyncMock()
        tokens.find_single_use_token.return_value = stored_token(
            user, SingleUseTokenType.VERIFICATION
        )
        tokens.delete_single_use_token.return_value = True
        notifier = AsyncMock()
        notifier.send.side_effect = ConnectionError("smtp unavailable")
        manager = create_manager(
            auth_config, mock_audit, mock_logger, tokens=tokens, notifier=notifier
        )

        result = await manager.consume_verification("stored_token")

        assert isinstance(result, Success)
        assert recorded_actions(mock_audit) == [
            SecurityAction.EMAIL_VERIFIED,
            SecurityAction.NOTIFICATION_FAILED,
        ]
        failed = recorded_events(mock_audit)[-1]
        assert failed.reason == "ConnectionError"
        assert failed.context["kind"] == NotificationKind.WELCOME.value


@pytest.mark.unit
class TestResendVerification:
    """Test resending a verification token."""

    async def test_resend_verification_sends_new_link(
        self, auth_config, mock_audit, mock_logger
    ):
        user = create_test_user()
        users = AsyncMock()
        users.find_by_email.return_value = user
        users.find_by_id.return_value = user
        notifier = AsyncMock()
        manager = create_manager(
            auth_config, mock_audit, mock_logger, users=users, notifier=notifier
        )

        result = await manager.resend_verification("Test@Example.com")

        assert isinstance(result, Success)
        assert result.value.message == VERIFICATION_RESENT_MESSAGE
        users.find_by_email.assert_awaited_once_with("test@example.com")
        kind, address, payload = notifier.send.await_args.args
        assert kind == NotificationKind.VERIFICATION
        assert address == user.email
        assert payload["token"] == GENERATED_TOKEN
        assert payload["link"] == (
            f"https://auth.example.com/verify-email/{GENERATED_TOKEN}"
        )

    async def test_resend_verification_unknown_email(
        self, auth_config, mock_audit, mock_logger
    ):
        users = AsyncMock()
        users.find_by_email.return_value = None
        manager = create_manager(auth_config, mock_audit, mock_logger, users=users)

        result = await manager.resend_verification("nobody@example.com")

        assert result == Failure(error=AuthenticationError.USER_NOT_FOUND)

    async def test_resend_verification_already_verified(
        self, auth_config, mock_audit, mock_logger
    ):
        users = AsyncMock()
        users.find_by_email.return_value = create_test_user(is_verified=True)
        tokens = AsyncMock()
        manager = create_manager(
            auth_config, mock_audit, mock_logger, users=users, tokens=tokens
        )

        result = await manager.resend_verification("test@example.com")

        assert result == Failure(error=AuthenticationError.ALREADY_VERIFIED)
        tokens.replace_single_use_token.assert_not_awaited()


@pytest.mark.unit
class TestIssuePasswordReset:
    """Test password reset requests."""

    async def test_issue_password_reset_active_user_sends_link(
        self, auth_config, mock_audit, mock_logger
    ):
        user = create_test_user()
        users = AsyncMock()
        users.find_by_email.return_value = user
        tokens = AsyncMock()
        notifier = AsyncMock()
        manager = create_manager(
            auth_config,
            mock_audit,
            mock_logger,
            users=users,
            tokens=tokens,
            notifier=notifier,
        )

        result = await manager.issue_password_reset("test@example.com")

        assert isinstance(result, Success)
        assert result.value.message == PASSWORD_RESET_REQUESTED_MESSAGE
        record = tokens.replace_single_use_token.await_args.args[0]
        assert record.token_type == SingleUseTokenType.PASSWORD_RESET
        assert record.expires_at - record.created_at == timedelta(hours=1)
        kind, _, payload = notifier.send.await_args.args
        assert kind == NotificationKind.PASSWORD_RESET
        assert payload["link"] == (
            f"https://auth.example.com/reset-password?token={GENERATED_TOKEN}"
        )

    async def test_issue_password_reset_unknown_email_same_message(
        self, auth_config, mock_audit, mock_logger
    ):
        users = AsyncMock()
        users.find_by_email.return_value = None
        tokens = AsyncMock()
        notifier = AsyncMock()
        manager = create_manager(
            auth_config,
            mock_audit,
            mock_logger,
            users=users,
            tokens=tokens,
            notifier=notifier,
        )

        result = await manager.issue_password_reset("nobody@example.com")

        assert isinstance(result, Success)
        assert result.value.message == PASSWORD_RESET_REQUESTED_MESSAGE
        tokens.replace_single_use_token.assert_not_awaited()
        notifier.send.assert_not_awaited()
        [event] = recorded_events(mock_audit)
        assert event.action == SecurityAction.PASSWORD_RESET_REQUEST
        assert event.success is False
        assert event.reason == AuthenticationError.USER_NOT_FOUND

    async def test_issue_password_reset_inactive_user_same_message(
        self, auth_config, mock_audit, mock_logger
    ):
        users = AsyncMock()
        users.find_by_email.return_value = create_test_user(is_active=False)
        tokens = AsyncMock()
        manager = create_manager(
            auth_config, mock_audit, mock_logger, users=users, tokens=tokens
        )

        result = await manager.issue_password_reset("test@example.com")

        assert result.value.message == PASSWORD_RESET_REQUESTED_MESSAGE
        tokens.replace_single_use_token.assert_not_awaited()
        assert recorded_events(mock_audit)[0].reason == AuthenticationError.USER_INACTIVE

    async def test_issue_password_reset_unknown_email_waits_noop_delay(
        self, auth_config, mock_audit, mock_logger
    ):
        config = replace(auth_config, password_reset_noop_delay=timedelta(milliseconds=50))
        users = AsyncMock()
        users.find_by_email.return_value = None
        manager = create_manager(config, mock_audit, mock_logger, users=users)

        started = time.monotonic()
        await manager.issue_password_reset("nobody@example.com")

        assert time.monotonic() - started >= 0.04


@pytest.mark.unit
class TestConsumePasswordReset:
    """Test password reset consumption."""

    async def test_consume_password_reset_replaces_hash_and_revokes_sessions(
        self, auth_config, mock_audit, mock_logger
    ):
        user = create_test_user(password_hash="old_hash")
        users = AsyncMock()
        tokens = AsyncMock()
        tokens.find_single_use_token.return_value = stored_token(
            user, SingleUseTokenType.PASSWORD_RESET
        )
        tokens.delete_single_use_token.return_value = True
        hasher = Mock()
        hasher.hash_password.return_value = "new_hash"
        sessions = Mock()
        sessions.logout_all = AsyncMock(
            return_value=Success(value=LogoutAllResponse(count=3))
        )
        notifier = AsyncMock()
        manager = create_manager(
            auth_config,
            mock_audit,
            mock_logger,
            users=users,
            tokens=tokens,
            hasher=hasher,
            sessions=sessions,
            notifier=notifier,
        )

        result = await manager.consume_password_reset("stored_token", "NewPass123!")

        assert isinstance(result, Success)
        assert result.value.message == PASSWORD_RESET_COMPLETED_MESSAGE
        hasher.hash_password.assert_called_once_with("NewPass123!")
        tokens.delete_single_use_token.assert_awaited_once_with(
            SingleUseTokenType.PASSWORD_RESET, "stored_token"
        )
        users.set_password_hash.assert_awaited_once_with(user.id, "new_hash")
        users.mark_verified.assert_not_awaited()
        sessions.logout_all.assert_awaited_once()
        assert sessions.logout_all.await_args.args[0] == user.id
        assert notifier.send.await_args.args[0] == NotificationKind.PASSWORD_CHANGED
        success = recorded_events(mock_audit)[0]
        assert success.action == SecurityAction.PASSWORD_RESET_SUCCESS
        assert success.context["sessions_revoked"] == 3

    async def test_consume_password_reset_unknown_token(
        self, auth_config, mock_audit, mock_logger
    ):
        tokens = AsyncMock()
        tokens.find_single_use_token.return_value = None
        manager = create_manager(auth_config, mock_audit, mock_logger, tokens=tokens)

        result = await manager.consume_password_reset("unknown", "NewPass123!")

        assert result == Failure(error=AuthenticationError.INVALID_RESET_TOKEN)
        assert recorded_actions(mock_audit) == [SecurityAction.PASSWORD_RESET_ATTEMPT]

    async def test_consume_password_reset_expired_token_is_deleted(
        self, auth_config, mock_audit, mock_logger
    ):
        user = create_test_user()
        tokens = AsyncMock()
        tokens.find_single_use_token.return_value = stored_token(
            user,
            SingleUseTokenType.PASSWORD_RESET,
            expires_at=datetime.now(UTC) - timedelta(seconds=1),
        )
        users = AsyncMock()
        manager = create_manager(
            auth_config, mock_audit, mock_logger, users=users, tokens=tokens
        )

        result = await manager.consume_password_reset("stored_token", "NewPass123!")

        assert result == Failure(error=AuthenticationError.RESET_TOKEN_EXPIRED)
        tokens.delete_single_use_token.assert_awaited_once()
        users.set_password_hash.assert_not_awaited()

    async def test_consume_password_reset_inactive_user_keeps_token(
        self, auth_config, mock_audit, mock_logger
    ):
        user = create_test_user(is_active=False)
        tokens = AsyncMock()
        tokens.find_single_use_token.return_value = stored_token(
            user, SingleUseTokenType.PASSWORD_RESET
        )
        users = AsyncMock()
        manager = create_manager(
            auth_config, mock_audit, mock_logger, users=users, tokens=tokens
        )

        result = await manager.consume_password_reset("stored_token", "NewPass123!")

        assert result == Failure(error=AuthenticationError.USER_INACTIVE)
        tokens.delete_single_use_token.assert_not_awaited()
        users.set_password_hash.assert_not_awaited()

    async def test_consume_password_reset_lost_claim_changes_nothing(
        self, auth_config, mock_audit, mock_logger
    ):
        user = create_test_user()
        tokens = AsyncMock()
        tokens.find_single_use_token.return_value = stored_token(
            user, SingleUseTokenType.PASSWORD_RESET
        )
        tokens.delete_single_use_token.return_value = False
        users = AsyncMock()
        sessions = Mock()
        sessions.logout_all = AsyncMock()
        manager = create_manager(
            auth_config,
            mock_audit,
            mock_logger,
            users=users,
            tokens=tokens,
            sessions=sessions,
        )

        result = await manager.consume_password_reset("stored_token", "NewPass123!")

        assert result == Failure(error=AuthenticationError.INVALID_RESET_TOKEN)
        users.set_password_hash.assert_not_awaited()
        sessions.logout_all.assert_not_awaited()

    async def test_consume_password_reset_propagates_revocation_failure(
        self, auth_config, mock_audit, mock_logger
    ):
        user = create_test_user()
        tokens = AsyncMock()
        tokens.find_single_use_token.return_value = stored_token(
            user, SingleUseTokenType.PASSWORD_RESET
        )
        tokens.delete_single_use_token.return_value = True
        sessions = Mock()
        sessions.logout_all = AsyncMock(
            return_value=Failure(error=AuthenticationError.INTERNAL_ERROR)
        )
        notifier = AsyncMock()
        manager = create_manager(
            auth_config,
            mock_audit,
            mock_logger,
            tokens=tokens,
            sessions=sessions,
            notifier=notifier,
        )

        result = await manager.consume_password_reset("stored_token", "NewPass123!")

        assert result == Failure(error=AuthenticationError.INTERNAL_ERROR)
        notifier.send.assert_not_awaited()
