"""Helpers shared by the auth services.

- run_blocking: run CPU-bound hashing/signing in the default executor
- guard_internal_errors: turn unexpected exceptions into INTERNAL_ERROR
- record_event / notify_best_effort: fire-and-forget side effects
"""

import asyncio
from collections.abc import Awaitable, Callable
from functools import partial, wraps
from typing import Any, ParamSpec, TypeVar
from uuid import UUID

from authcycle.core.result import Failure, Result
from authcycle.domain.enums import NotificationKind, SecurityAction
from authcycle.domain.errors import AuthenticationError
from authcycle.domain.events import RequestContext, SecurityEvent
from authcycle.domain.protocols import (
    AuditSinkProtocol,
    LoggerProtocol,
    NotifierProtocol,
)

P = ParamSpec("P")
T = TypeVar("T")

EMPTY_CONTEXT = RequestContext()


async def run_blocking(func: Callable[..., T], /, *args: Any) -> T:
    """Run a synchronous CPU-bound callable without blocking the event loop."""
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(None, partial(func, *args))


def token_prefix(token: str) -> str:
    """First 8 characters of a token, the only part ever logged."""
    return f"{token[:8]}..."


def guard_internal_errors(
    operation: str,
) -> Callable[
    [Callable[P, Awaitable[Result[T, str]]]],
    Callable[P, Awaitable[Result[T, str]]],
]:
    """Wrap a service method so unexpected exceptions become INTERNAL_ERROR.

    The wrapped method's instance must expose `_logger`. Business failures
    are returned by the method itself and pass through untouched.
    """

    def decorator(
        method: Callable[P, Awaitable[Result[T, str]]],
    ) -> Callable[P, Awaitable[Result[T, str]]]:
        @wraps(method)
        async def wrapper(*args: P.args, **kwargs: P.kwargs) -> Result[T, str]:
            try:
                return await method(*args, **kwargs)
            except Exception as e:
                logger: LoggerProtocol = args[0]._logger  # type: ignore[attr-defined]
                logger.error("unexpected_error", error=e, operation=operation)
                return Failure(error=AuthenticationError.INTERNAL_ERROR)

        return wrapper

    return decorator


async def record_event(
    audit: AuditSinkProtocol,
    logger: LoggerProtocol,
    *,
    action: SecurityAction,
    success: bool,
    context: RequestContext | None = None,
    user_id: UUID | None = None,
    email: str | None = None,
    reason: str | None = None,
    **extra: Any,
) -> None:
    """Record a security event; audit failures are logged, never raised."""
    context = context or EMPTY_CONTEXT
    event = SecurityEvent(
        action=action,
        success=success,
        user_id=user_id,
        email=email,
        reason=reason,
        ip_address=context.ip_address,
        user_agent=context.user_agent,
        context=extra,
    )
    try:
        await audit.record(event)
    except Exception as e:
        logger.error("audit_record_failed", error=e, action=action.value)


async def notify_best_effort(
    notifier: NotifierProtocol,
    audit: AuditSinkProtocol,
    logger: LoggerProtocol,
    *,
    kind: NotificationKind,
    address: str,
    payload: dict[str, Any],
    user_id: UUID | None = None,
) -> bool:
    """Send a notification after the state change has committed.

    Returns:
        True if the notifier accepted the message, False if it raised. A
        failure is logged and recorded as NOTIFICATION_FAILED; it never
        reaches the caller's result.
    """
    try:
        await notifier.send(kind, address, payload)
    except Exception as e:
        logger.error(
            "notification_failed",
            error=e,
            kind=kind.value,
            user_id=str(user_id) if user_id else None,
        )
        await record_event(
            audit,
            logger,
            action=SecurityAction.NOTIFICATION_FAILED,
            success=False,
            user_id=user_id,
            email=address,
            reason=type(e).__name__,
            kind=kind.value,
        )
        return False
    return True
