"""Notification kinds sent through the notifier port."""

from enum import Enum


class NotificationKind(str, Enum):
    """Transactional messages the core asks the notifier to deliver.

    All are best-effort: a delivery failure never reverses the state change
    that triggered it.
    """

    VERIFICATION = "verification"
    WELCOME = "welcome"
    PASSWORD_RESET = "password_reset"
    PASSWORD_CHANGED = "password_changed"
