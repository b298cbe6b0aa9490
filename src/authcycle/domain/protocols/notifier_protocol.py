"""NotifierProtocol - port for transactional message delivery.

Delivery is best-effort. Callers invoke the notifier only after the
authoritative state change has committed and must catch and log any
exception it raises.
"""

from typing import Any, Protocol

from authcycle.domain.enums import NotificationKind


class NotifierProtocol(Protocol):
    """Notification sender protocol (port).

    Implementations:
        - StubNotifier: logs messages (development/testing)
    """

    async def send(
        self,
        kind: NotificationKind,
        address: str,
        payload: dict[str, Any],
    ) -> None:
        """Send a notification.

        Args:
            kind: Message kind (verification, welcome, reset, changed).
            address: Recipient email address.
            payload: Template data (name, link, token).
        """
        ...
