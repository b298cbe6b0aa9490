"""Audit sink that writes each security event as a structured log line.

Replay detection is logged at critical level, failed operations at
warning, everything else at info.
"""

from authcycle.domain.enums import SecurityAction
from authcycle.domain.events import SecurityEvent
from authcycle.domain.protocols import LoggerProtocol


class LoggingAuditSink:
    """AuditSinkProtocol implementation backed by the structured logger."""

    def __init__(self, logger: LoggerProtocol) -> None:
        self._logger = logger.bind(component="audit")

    async def record(self, event: SecurityEvent) -> None:
        context = event.to_log_context()
        context.pop("action")
        if event.action is SecurityAction.TOKEN_REUSE_DETECTED:
            self._logger.critical(event.action.value, **context)
        elif not event.success:
            self._logger.warning(event.action.value, **context)
        else:
            self._logger.info(event.action.value, **context)
