"""Domain protocols (ports) package.

Usage:
    from authcycle.domain.protocols import TokenStore, UserRepository
"""

from authcycle.domain.protocols.audit_sink_protocol import AuditSinkProtocol
from authcycle.domain.protocols.credential_codec_protocol import (
    CredentialCodecProtocol,
)
from authcycle.domain.protocols.logger_protocol import LoggerProtocol
from authcycle.domain.protocols.notifier_protocol import NotifierProtocol
from authcycle.domain.protocols.password_hashing_protocol import (
    PasswordHashingProtocol,
)
from authcycle.domain.protocols.token_generator_protocol import (
    TokenGeneratorProtocol,
)
from authcycle.domain.protocols.token_store import TokenStore
from authcycle.domain.protocols.user_repository import UserRepository

__all__ = [
    "AuditSinkProtocol",
    "CredentialCodecProtocol",
    "LoggerProtocol",
    "NotifierProtocol",
    "PasswordHashingProtocol",
    "TokenGeneratorProtocol",
    "TokenStore",
    "UserRepository",
]
