"""SQLAlchemy models.

Importing this package registers every table on BaseModel.metadata
(used by Alembic autogenerate and Database.create_all).
"""

from authcycle.infrastructure.persistence.base import BaseModel, BaseMutableModel
from authcycle.infrastructure.persistence.models.audit_log import AuditLogModel
from authcycle.infrastructure.persistence.models.refresh_token import (
    RefreshTokenModel,
)
from authcycle.infrastructure.persistence.models.single_use_token import (
    SINGLE_USE_TOKEN_MODELS,
    PasswordResetTokenModel,
    VerificationTokenModel,
)
from authcycle.infrastructure.persistence.models.user import UserModel

__all__ = [
    "AuditLogModel",
    "BaseModel",
    "BaseMutableModel",
    "PasswordResetTokenModel",
    "RefreshTokenModel",
    "SINGLE_USE_TOKEN_MODELS",
    "UserModel",
    "VerificationTokenModel",
]
