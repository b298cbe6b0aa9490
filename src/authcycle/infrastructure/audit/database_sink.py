"""Append-only audit sink backed by the audit_logs table.

Follows the fail-open audit pattern: each event is inserted in its own
short transaction, separate from any business transaction, and a database
failure is logged and swallowed so it can never fail the operation being
audited.

Usage:
    sink = DatabaseAuditSink(database=get_database(), logger=get_logger())
    await sink.record(SecurityEvent(action=SecurityAction.LOGOUT, success=True))
"""

from sqlalchemy.exc import SQLAlchemyError

from authcycle.domain.events import SecurityEvent
from authcycle.domain.protocols import LoggerProtocol
from authcycle.infrastructure.persistence.database import Database
from authcycle.infrastructure.persistence.models import AuditLogModel


class DatabaseAuditSink:
    """AuditSinkProtocol implementation writing to PostgreSQL."""

    def __init__(self, database: Database, logger: LoggerProtocol) -> None:
        """Initialize sink.

        Args:
            database: Database providing transactional sessions.
            logger: Logger for swallowed write failures.
        """
        self._database = database
        self._logger = logger

    async def record(self, event: SecurityEvent) -> None:
        """Insert one immutable audit row.

        Args:
            event: Security event to persist.
        """
        model = AuditLogModel(
            id=event.event_id,
            created_at=event.occurred_at,
            action=event.action.value,
            success=event.success,
            user_id=event.user_id,
            email=event.email,
            reason=event.reason,
            ip_address=event.ip_address,
            user_agent=event.user_agent,
            context=event.context or None,
        )
        try:
            async with self._database.transaction() as session:
                session.add(model)
        except SQLAlchemyError as e:
            self._logger.error(
                "audit_record_failed",
                error=e,
                action=event.action.value,
                event_id=str(event.event_id),
            )
