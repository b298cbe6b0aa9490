"""Audit sink that fans an event out to several sinks.

A failure in one sink does not stop delivery to the rest.
"""

from collections.abc import Sequence

from authcycle.domain.events import SecurityEvent
from authcycle.domain.protocols import AuditSinkProtocol, LoggerProtocol


class CompositeAuditSink:
    """Records every event in each wrapped sink, in order."""

    def __init__(
        self,
        sinks: Sequence[AuditSinkProtocol],
        logger: LoggerProtocol,
    ) -> None:
        self._sinks = tuple(sinks)
        self._logger = logger

    async def record(self, event: SecurityEvent) -> None:
        for sink in self._sinks:
            try:
                await sink.record(event)
            except Exception as e:
                # Audit is fail-open
                self._logger.error(
                    "audit_sink_failed",
                    error=e,
                    sink=type(sink).__name__,
                    action=event.action.value,
                )
