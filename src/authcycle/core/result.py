"""Result types for railway-oriented programming.

Every manager operation returns a Result instead of raising for business
failures. Named failure kinds travel as `Failure(error=...)` values, so the
caller decides how to map them to a transport.

Usage:
    result = await session_manager.refresh(session_token)
    match result:
        case Success(value=pair):
            send(pair.access_token, pair.session_token)
        case Failure(error=AuthenticationError.TOKEN_REUSE_DETECTED):
            alert_user()
        case Failure(error=error):
            reject(error)
"""

from dataclasses import dataclass
from typing import Generic, TypeAlias, TypeVar

T = TypeVar("T")  # Success type
E = TypeVar("E")  # Error type


@dataclass(frozen=True, slots=True, kw_only=True)
class Success(Generic[T]):
    """Represents a successful operation result.

    Attributes:
        value: The successful result value.
    """

    value: T


@dataclass(frozen=True, slots=True, kw_only=True)
class Failure(Generic[E]):
    """Represents a failed operation result.

    Attributes:
        error: The error that occurred.
    """

    error: E


Result: TypeAlias = Success[T] | Failure[E]
