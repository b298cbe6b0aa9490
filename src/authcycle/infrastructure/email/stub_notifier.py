"""Stub notifier for development and testing.

Logs each notification instead of delivering it. The raw token in the
payload is reduced to an 8-character prefix before logging.
"""

from typing import Any

from authcycle.domain.enums import NotificationKind
from authcycle.domain.protocols import LoggerProtocol


class StubNotifier:
    """NotifierProtocol implementation that logs messages.

    Attributes:
        sent: Every (kind, address, payload) sent, oldest first.
    """

    def __init__(self, logger: LoggerProtocol) -> None:
        self._logger = logger.bind(component="notifier")
        self.sent: list[tuple[NotificationKind, str, dict[str, Any]]] = []

    async def send(
        self,
        kind: NotificationKind,
        address: str,
        payload: dict[str, Any],
    ) -> None:
        self.sent.append((kind, address, dict(payload)))
        safe_payload = {k: v for k, v in payload.items() if k not in {"token", "link"}}
        if "token" in payload:
            safe_payload["token_prefix"] = str(payload["token"])[:8]
        self._logger.info(
            "notification_stub_sent",
            kind=kind.value,
            to=address,
            **safe_payload,
        )
