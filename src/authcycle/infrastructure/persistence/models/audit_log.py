"""Audit log database model.

Append-only: the DatabaseAuditSink only inserts. The migration adds
PostgreSQL rules that turn UPDATE and DELETE into no-ops.
"""

from typing import Any
from uuid import UUID

from sqlalchemy import JSON, Boolean, Index, String
from sqlalchemy.orm import Mapped, mapped_column

from authcycle.infrastructure.persistence.base import BaseModel


class AuditLogModel(BaseModel):
    """Security event row.

    Fields:
        id: Event ID (SecurityEvent.event_id, UUIDv7)
        created_at: When the event occurred (SecurityEvent.occurred_at)
        action: SecurityAction value
        success: Outcome of the attempted operation
        user_id: Affected user (nullable; no FK so events outlive users)
        email: Email involved (login and reset attempts)
        reason: Failure reason
        ip_address / user_agent: Caller context
        context: Additional event data (JSON)
    """

    __tablename__ = "audit_logs"

    action: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
        index=True,
        comment="Security action (e.g., login_success, token_reuse_detected)",
    )

    success: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        comment="Whether the attempted operation succeeded",
    )

    user_id: Mapped[UUID | None] = mapped_column(
        index=True,
        nullable=True,
        comment="Affected user (None when unknown)",
    )

    email: Mapped[str | None] = mapped_column(
        String(255),
        nullable=True,
        comment="Email involved in the attempt",
    )

    reason: Mapped[str | None] = mapped_column(
        String(255),
        nullable=True,
        comment="Failure reason",
    )

    ip_address: Mapped[str | None] = mapped_column(
        String(45),  # IPv6 max length
        nullable=True,
        comment="Client IP address",
    )

    user_agent: Mapped[str | None] = mapped_column(
        String(500),
        nullable=True,
        comment="Client user agent string",
    )

    context: Mapped[dict[str, Any] | None] = mapped_column(
        JSON,
        nullable=True,
        default=None,
        comment="Additional event context",
    )

    __table_args__ = (Index("idx_audit_user_action", "user_id", "action"),)

    def __repr__(self) -> str:
        return (
            f"<AuditLogModel("
            f"id={self.id}, "
            f"action={self.action!r}, "
            f"user_id={self.user_id}, "
            f"created_at={self.created_at}"
            f")>"
        )
