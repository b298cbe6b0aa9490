"""Infrastructure errors."""

from authcycle.infrastructure.errors.store_error import StoreError

__all__ = ["StoreError"]
