"""Domain enums package.

Usage:
    from authcycle.domain.enums import SecurityAction, UserRole
"""

from authcycle.domain.enums.notification_kind import NotificationKind
from authcycle.domain.enums.security_action import SecurityAction
from authcycle.domain.enums.single_use_token_type import SingleUseTokenType
from authcycle.domain.enums.user_role import UserRole

__all__ = [
    "NotificationKind",
    "SecurityAction",
    "SingleUseTokenType",
    "UserRole",
]
