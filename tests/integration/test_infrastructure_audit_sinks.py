"""Integration tests for audit sinks and the stub notifier.

Tests cover:
- LoggingAuditSink levels (critical for replay, warning for failures)
- CompositeAuditSink fan-out with a failing sink
- DatabaseAuditSink insert (PostgreSQL) and fail-open behavior
- StubNotifier never logs the raw token
"""

import json
import sys
from contextlib import asynccontextmanager
from io import StringIO
from unittest.mock import AsyncMock, patch

import pytest
from sqlalchemy import select
from sqlalchemy.exc import OperationalError
from uuid_extensions import uuid7

from authcycle.domain.enums import NotificationKind, SecurityAction
from authcycle.domain.events import SecurityEvent
from authcycle.infrastructure.audit import (
    CompositeAuditSink,
    DatabaseAuditSink,
    LoggingAuditSink,
)
from authcycle.infrastructure.email import StubNotifier
from authcycle.infrastructure.logging import ConsoleAdapter
from authcycle.infrastructure.persistence.models import AuditLogModel


@pytest.mark.integration
class TestLoggingAuditSink:
    @pytest.mark.parametrize(
        ("action", "success", "level"),
        [
            (SecurityAction.TOKEN_REUSE_DETECTED, False, "critical"),
            (SecurityAction.LOGIN_ATTEMPT, False, "warning"),
            (SecurityAction.LOGIN_SUCCESS, True, "info"),
        ],
    )
    async def test_level_by_event(self, action, success, level):
        captured_output = StringIO()

        with patch.object(sys, "stdout", captured_output):
            sink = LoggingAuditSink(logger=ConsoleAdapter(use_json=True))
            await sink.record(
                SecurityEvent(action=action, success=success, context={"stage": "x"})
            )

        log_data = json.loads(captured_output.getvalue().strip())
        assert log_data["event"] == action.value
        assert log_data["level"] == level
        assert log_data["component"] == "audit"
        assert log_data["stage"] == "x"


@pytest.mark.integration
class TestCompositeAuditSink:
    async def test_failing_sink_does_not_block_others(self, mock_logger):
        failing = AsyncMock()
        failing.record.side_effect = RuntimeError("sink down")
        healthy = AsyncMock()
        sink = CompositeAuditSink([failing, healthy], logger=mock_logger)
        event = SecurityEvent(action=SecurityAction.LOGOUT, success=True)

        await sink.record(event)

        healthy.record.assert_awaited_once_with(event)
        mock_logger.error.assert_called_once()


class _BrokenDatabase:
    @asynccontextmanager
    async def transaction(self):
        raise OperationalError("INSERT", {}, Exception("connection refused"))
        yield  # pragma: no cover


@pytest.mark.integration
class TestDatabaseAuditSink:
    async def test_database_failure_is_logged_not_raised(self, mock_logger):
        sink = DatabaseAuditSink(database=_BrokenDatabase(), logger=mock_logger)

        await sink.record(SecurityEvent(action=SecurityAction.LOGOUT, success=True))

        assert mock_logger.error.call_args.args[0] == "audit_record_failed"

    async def test_event_persisted_as_audit_row(self, test_database, mock_logger):
        sink = DatabaseAuditSink(database=test_database, logger=mock_logger)
        user_id = uuid7()
        event = SecurityEvent(
            action=SecurityAction.TOKEN_REUSE_DETECTED,
            success=False,
            user_id=user_id,
            ip_address="203.0.113.7",
            context={"stage": "lookup"},
        )

        await sink.record(event)

        async with test_database.transaction() as session:
            row = (
                await session.execute(
                    select(AuditLogModel).where(AuditLogModel.id == event.event_id)
                )
            ).scalar_one()
        assert row.action == "token_reuse_detected"
        assert row.success is False
        assert row.user_id == user_id
        assert row.ip_address == "203.0.113.7"
        assert row.context == {"stage": "lookup"}


@pytest.mark.integration
class TestStubNotifier:
    async def test_records_message_and_logs_token_prefix_only(self, mock_logger):
        notifier = StubNotifier(logger=mock_logger)
        token = "f" * 64

        await notifier.send(
            NotificationKind.PASSWORD_RESET,
            "a@example.com",
            {"name": "A", "token": token, "link": f"https://x/reset?token={token}"},
        )

        assert notifier.sent[0][0] == NotificationKind.PASSWORD_RESET
        assert notifier.sent[0][2]["token"] == token
        _, kwargs = mock_logger.info.call_args
        assert kwargs["token_prefix"] == "ffffffff"
        assert token not in str(kwargs)
