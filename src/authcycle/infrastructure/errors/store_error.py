"""Infrastructure error raised by the SQL store adapters.

Store adapters catch SQLAlchemyError and re-raise it as StoreError so the
managers see one infrastructure exception type. Managers never branch on
it: they log it with operation context and return INTERNAL_ERROR.
"""

from typing import Any


class StoreError(Exception):
    """Persistence operation failed.

    Attributes:
        operation: Store method that failed.
        details: Additional context (table, error type).
    """

    def __init__(
        self,
        message: str,
        *,
        operation: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.operation = operation
        self.details = details or {}
