"""Audit sink protocol (port) for security events.

The audit trail is append-only. Recording is fire-and-forget: an audit
failure must never fail or block the operation that produced the event.

Implementations:
    - LoggingAuditSink: structured log line per event
    - DatabaseAuditSink: append-only audit_logs table (SQLAlchemy)
    - CompositeAuditSink: fans out to several sinks
"""

from typing import Protocol

from authcycle.domain.events import SecurityEvent


class AuditSinkProtocol(Protocol):
    """Append-only security event recorder."""

    async def record(self, event: SecurityEvent) -> None:
        """Record a security event.

        Args:
            event: Immutable security event.

        Note:
            Implementations swallow and log their own failures (fail-open).
        """
        ...
