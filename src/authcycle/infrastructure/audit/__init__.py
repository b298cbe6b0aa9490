"""Audit sink adapters.

- LoggingAuditSink: structured log line per event
- DatabaseAuditSink: append-only audit_logs table
- CompositeAuditSink: fan-out to several sinks
"""

from authcycle.infrastructure.audit.composite_sink import CompositeAuditSink
from authcycle.infrastructure.audit.database_sink import DatabaseAuditSink
from authcycle.infrastructure.audit.logging_sink import LoggingAuditSink

__all__ = ["CompositeAuditSink", "DatabaseAuditSink", "LoggingAuditSink"]
