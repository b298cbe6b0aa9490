"""Security event recorded by the audit sink.

Security events are immutable records of security-relevant facts (logins,
rotations, replay detection, password resets). They are built by the
managers and handed to the audit sink, which records them fire-and-forget.

Usage:
    >>> event = SecurityEvent(
    ...     action=SecurityAction.LOGIN_SUCCESS,
    ...     success=True,
    ...     user_id=user.id,
    ...     email=user.email,
    ...     ip_address=context.ip_address,
    ... )
    >>> await audit_sink.record(event)
"""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any
from uuid import UUID

from uuid_extensions import uuid7

from authcycle.domain.enums import SecurityAction


@dataclass(frozen=True, slots=True, kw_only=True)
class RequestContext:
    """Opaque caller metadata passed through to security events.

    Attributes:
        ip_address: Originating client address.
        user_agent: Client identity string.
    """

    ip_address: str | None = None
    user_agent: str | None = None


@dataclass(frozen=True, kw_only=True, slots=True)
class SecurityEvent:
    """Immutable security audit record.

    Attributes:
        action: What happened.
        success: Whether the attempted operation succeeded.
        user_id: Affected user, when known.
        email: Email involved, when known (login and reset attempts).
        reason: Failure reason (an AuthenticationError constant or free text).
        ip_address: Originating client address (pass-through).
        user_agent: Client identity (pass-through).
        context: Extra structured data (counts, token prefixes).
        event_id: Unique event identifier (UUIDv7, time-ordered).
        occurred_at: When the event happened (UTC).
    """

    action: SecurityAction
    success: bool
    user_id: UUID | None = None
    email: str | None = None
    reason: str | None = None
    ip_address: str | None = None
    user_agent: str | None = None
    context: dict[str, Any] = field(default_factory=dict)
    event_id: UUID = field(default_factory=uuid7)
    occurred_at: datetime = field(default_factory=lambda: datetime.now(UTC))

    def to_log_context(self) -> dict[str, Any]:
        """Flatten the event into structured logging key/values."""
        data: dict[str, Any] = {
            "event_id": str(self.event_id),
            "action": self.action.value,
            "success": self.success,
            "occurred_at": self.occurred_at.isoformat(),
        }
        if self.user_id is not None:
            data["user_id"] = str(self.user_id)
        for key in ("email", "reason", "ip_address", "user_agent"):
            value = getattr(self, key)
            if value is not None:
                data[key] = value
        data.update(self.context)
        return data
